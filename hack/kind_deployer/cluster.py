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

"""kind cluster lifecycle: recreate for a fresh run, delete on teardown."""

from __future__ import annotations

from pathlib import Path

from rich.panel import Panel

from kind_deployer import console, logger
from kind_deployer.errors import ClusterProvisionError, ClusterTeardownError
from kind_deployer.tools import KindProvisioner, ToolError


def cluster_exists(provisioner: KindProvisioner, name: str) -> bool:
    """Return whether kind lists a cluster with exactly this name.

    Raises:
        ToolError: If the clusters cannot be listed.
    """
    return name in provisioner.list_clusters()


def ensure_cluster(provisioner: KindProvisioner, name: str, kind_config: Path | None = None) -> None:
    """Create a fresh kind cluster, deleting any existing one with the same name.

    There is no in-place upgrade. If the old cluster was removed and creation then
    fails, the run ends with no cluster rather than a stale one.

    Args:
        provisioner: kind adapter.
        name: Cluster name.
        kind_config: Optional kind topology file.

    Raises:
        ClusterProvisionError: If listing, deleting or creating fails.
    """
    console.print(Panel.fit("Set Cluster", style="bold blue"))

    try:
        if cluster_exists(provisioner, name):
            logger.info('kind cluster "%s" already present, deleting it...', name)
            provisioner.delete_cluster(name)
            console.print(f'[green]✅ duplicate kind cluster "{name}" deleted successfully[/green]')
    except ToolError as err:
        raise ClusterProvisionError(f"could not replace existing cluster: {err}", context=name) from err

    logger.info('creating cluster "%s"', name)
    try:
        provisioner.create_cluster(name, kind_config)
    except ToolError as err:
        raise ClusterProvisionError(f"could not create cluster: {err}", context=name) from err

    console.print(f'[green]✅ kind cluster "{name}" initiated successfully[/green]')


def tear_down(provisioner: KindProvisioner, name: str) -> None:
    """Delete the kind cluster.

    Args:
        provisioner: kind adapter.
        name: Cluster name.

    Raises:
        ClusterTeardownError: If the cluster does not exist or cannot be deleted.
    """
    logger.info('tearing down cluster "%s"', name)
    try:
        if not cluster_exists(provisioner, name):
            raise ClusterTeardownError("cluster does not exist", context=name)
        provisioner.delete_cluster(name)
    except ToolError as err:
        raise ClusterTeardownError(f"could not tear down the kind cluster: {err}", context=name) from err
    console.print(f'[green]✅ kind cluster "{name}" removed successfully[/green]')
