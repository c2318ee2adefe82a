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

"""Adapters for the external tools the pipeline drives: kind, Docker, kubectl, git and go."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import docker
import sh

from kind_deployer import logger
from kind_deployer.utils import error_output


class ToolError(RuntimeError):
    """An external tool call failed. Stages translate this into a DeployError."""


def _run(command: sh.Command, *args: str, **kwargs) -> str:
    try:
        return str(command(*args, **kwargs))
    except sh.ErrorReturnCode as err:
        raise ToolError(error_output(err)) from err


# ============================================================================
# kind
# ============================================================================

class KindProvisioner:
    """kind cluster provisioner, addressed purely by cluster name."""

    def list_clusters(self) -> list[str]:
        output = _run(sh.kind, "get", "clusters")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def create_cluster(self, name: str, config: Path | None = None) -> None:
        args = ["create", "cluster", "-n", name]
        if config is not None:
            args += ["--config", str(config)]
        _run(sh.kind, *args)

    def delete_cluster(self, name: str) -> None:
        _run(sh.kind, "delete", "cluster", "-n", name)

    def load_image(self, name: str, image_ref: str) -> None:
        _run(sh.kind, "load", "docker-image", "-n", name, image_ref)


# ============================================================================
# Docker
# ============================================================================

class DockerBuilder:
    """Builds images through the local Docker engine API."""

    def build(self, context_dir: Path, dockerfile: str | None, build_args: dict[str, str], tag: str) -> None:
        """Build an image and tag it.

        Args:
            context_dir: Build context root.
            dockerfile: Dockerfile path relative to *context_dir*, or None for ``Dockerfile``.
            build_args: Values for the Dockerfile's ``ARG`` instructions.
            tag: Full image reference to tag the result with.

        Raises:
            ToolError: If the engine is unreachable or the build fails.
        """
        try:
            client = docker.from_env()
        except docker.errors.DockerException as e:
            raise ToolError(f"failed to connect to Docker: {e}") from e

        try:
            _, build_logs = client.images.build(
                path=str(context_dir),
                dockerfile=dockerfile,
                buildargs=build_args,
                tag=tag,
                rm=True,
            )
            for chunk in build_logs:
                line = chunk.get("stream", "").rstrip()
                if line:
                    logger.debug(line)
        except docker.errors.BuildError as e:
            raise ToolError(f"build failed: {e.msg}") from e
        except docker.errors.APIError as e:
            raise ToolError(f"Docker API error: {e}") from e
        finally:
            client.close()


# ============================================================================
# kubectl
# ============================================================================

class KubectlClient:
    def use_context(self, name: str) -> None:
        _run(sh.kubectl, "config", "use-context", name)

    def list_workloads(self, label_selector: str) -> list[str]:
        """Return ``kind/name`` references of pods in any namespace matching the selector."""
        output = _run(sh.kubectl, "get", "pods", "-A", "-l", label_selector, "-o", "name")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def create(self, manifest: bytes) -> None:
        """Create the resources in *manifest*, streamed to kubectl on stdin."""
        _run(sh.kubectl, "create", "-f", "-", _in=manifest)


@dataclass
class Toolchain:
    """The external collaborators one pipeline run talks to."""

    kind: KindProvisioner = field(default_factory=KindProvisioner)
    docker: DockerBuilder = field(default_factory=DockerBuilder)
    kubectl: KubectlClient = field(default_factory=KubectlClient)


# ============================================================================
# Source control and Go toolchain lookups
# ============================================================================

def short_head(cwd: Path) -> str:
    """Return the abbreviated commit hash of HEAD in *cwd*.

    Raises:
        ToolError: If git is missing or *cwd* is not a work tree.
    """
    try:
        revision = _run(sh.git, "rev-parse", "--short", "HEAD", _cwd=str(cwd)).strip()
    except sh.CommandNotFound as err:
        raise ToolError("git is not installed") from err
    if not revision:
        raise ToolError("git returned an empty revision")
    return revision


def go_platform() -> tuple[str, str]:
    """Return ``(GOARCH, GOOS)`` as reported by ``go env``.

    Raises:
        ToolError: If go is missing or its output is unexpected.
    """
    try:
        output = _run(sh.go, "env", "GOARCH", "GOOS")
    except sh.CommandNotFound as err:
        raise ToolError("go is not installed") from err
    values = output.split()
    if len(values) != 2:
        raise ToolError(f"unexpected 'go env' output: {output!r}")
    return values[0], values[1]
