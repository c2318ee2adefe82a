# /*
# Copyright 2026 The Grove Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Build the operator images and load them into the kind cluster."""

from __future__ import annotations

from rich.panel import Panel

from kind_deployer import console, logger
from kind_deployer.config import RunConfig
from kind_deployer.errors import ImageBuildError, ImageLoadError
from kind_deployer.tools import DockerBuilder, KindProvisioner, ToolError


def build_images(builder: DockerBuilder, config: RunConfig) -> list[str]:
    """Build every image in order, stopping at the first failure.

    Args:
        builder: Docker adapter.
        config: Resolved run configuration.

    Returns:
        The image references built, in order.

    Raises:
        ImageBuildError: If any build fails. Later images are not attempted.
    """
    console.print(Panel.fit("Build images", style="bold blue"))
    built: list[str] = []
    for image in config.images:
        ref = image.ref(config.tag)
        logger.info("building %s image %s", image.role, ref)
        try:
            builder.build(config.operator_dir, image.dockerfile, config.build_args, ref)
        except ToolError as err:
            raise ImageBuildError(
                image.role, f"could not build {image.role} image: {err}", context=config.kind_context,
            ) from err
        console.print(f"[green]✅ {image.role} image built successfully[/green]")
        built.append(ref)
    return built


def load_images(provisioner: KindProvisioner, config: RunConfig) -> list[str]:
    """Load every built image into the cluster's nodes, stopping at the first failure.

    Raises:
        ImageLoadError: If any load fails.
    """
    console.print(Panel.fit("Load images", style="bold blue"))
    loaded: list[str] = []
    for image in config.images:
        ref = image.ref(config.tag)
        logger.info('loading %s image into kind cluster "%s"', image.role, config.kind_context)
        try:
            provisioner.load_image(config.kind_context, ref)
        except ToolError as err:
            raise ImageLoadError(
                image.role,
                f"could not load {image.role} image into kind cluster: {err}",
                context=config.kind_context,
            ) from err
        console.print(f'[green]✅ {image.role} image loaded into kind cluster "{config.kind_context}"[/green]')
        loaded.append(ref)
    return loaded


def build_and_load_images(builder: DockerBuilder, provisioner: KindProvisioner, config: RunConfig) -> None:
    """Build all images, then load all of them."""
    build_images(builder, config)
    load_images(provisioner, config)
