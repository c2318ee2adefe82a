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

"""Rewrite the operator bundle to the freshly built tag and create it in the cluster.

The bundle on disk is never modified. The rewritten copy exists only in memory
and is streamed to ``kubectl create -f -``.
"""

from __future__ import annotations

from rich.panel import Panel

from kind_deployer import console, logger
from kind_deployer.config import RunConfig
from kind_deployer.errors import ContextSelectionError, DeploymentApplyError, VersionDiscoveryError
from kind_deployer.tools import KubectlClient, ToolError
from kind_deployer.utils import kubectl_context


def discover_version(bundle: str, version_label: str) -> str:
    """Return the released version declared in the bundle.

    Uses the first line containing *version_label*. Surrounding whitespace and
    quotes are stripped from the value.

    Raises:
        VersionDiscoveryError: If no line carries the label, or its value is empty.
    """
    for line in bundle.splitlines():
        if version_label in line:
            value = line.split(version_label, 1)[1].strip().strip("'\"")
            if value:
                return value
            break
    raise VersionDiscoveryError("could not find the current version of prometheus-operator")


def rewrite_bundle(bundle: str, version: str, tag: str, registry_host: str) -> str:
    """Point the bundle's image references at *tag*.

    Only lines mentioning *registry_host* are touched, and on those only
    occurrences of ``v<version>`` change. Line count and endings are preserved.
    """
    released = f"v{version}"
    return "".join(
        line.replace(released, tag) if registry_host in line else line
        for line in bundle.splitlines(keepends=True)
    )


def deploy_bundle(kubectl: KubectlClient, config: RunConfig) -> None:
    """Create the rewritten bundle in the kind cluster.

    Args:
        kubectl: kubectl adapter.
        config: Resolved run configuration.

    Raises:
        VersionDiscoveryError: If the bundle is unreadable or has no version label.
        ContextSelectionError: If the cluster's kubectl context cannot be selected.
        DeploymentApplyError: If kubectl rejects the manifests.
    """
    console.print(Panel.fit("Deploying the operator bundle", style="bold blue"))
    context = config.kind_context

    try:
        bundle = config.bundle_path.read_text()
    except OSError as err:
        raise VersionDiscoveryError(f"could not read bundle {config.bundle_path}: {err}", context=context) from err

    try:
        version = discover_version(bundle, config.version_label)
    except VersionDiscoveryError as err:
        err.context = context
        raise
    logger.info("bundle version v%s will be replaced with %s", version, config.tag)

    logger.info('deploying prometheus-operator bundle into kind cluster "%s"', context)
    try:
        kubectl.use_context(kubectl_context(context))
    except ToolError as err:
        raise ContextSelectionError(
            f"could not switch kubectl to context {kubectl_context(context)}: {err}", context=context,
        ) from err

    manifest = rewrite_bundle(bundle, version, config.tag, config.registry_host).encode()
    try:
        kubectl.create(manifest)
    except ToolError as err:
        raise DeploymentApplyError(
            f'could not deploy the prometheus-operator bundle to kind cluster "{context}": {err}',
            context=context,
        ) from err

    console.print(f'[green]✅ operator deployed successfully to cluster "{context}"[/green]')
