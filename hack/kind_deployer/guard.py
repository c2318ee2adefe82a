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

"""Refuse to deploy over an operator that is already running."""

from __future__ import annotations

from rich.panel import Panel

from kind_deployer import console, logger
from kind_deployer.config import RunConfig
from kind_deployer.errors import ClusterQueryError, ConflictError
from kind_deployer.tools import KubectlClient, ToolError


def ensure_operator_not_running(kubectl: KubectlClient, config: RunConfig) -> None:
    """Abort if any pod carrying the operator label exists in the cluster.

    Args:
        kubectl: kubectl adapter.
        config: Resolved run configuration.

    Raises:
        ClusterQueryError: If the API server cannot be queried.
        ConflictError: If a running operator is found.
    """
    console.print(Panel.fit("Ensure no other prometheus-operator is running", style="bold blue"))

    if config.skip_operator_check:
        logger.info("skipping operator run check")
        return

    try:
        pods = kubectl.list_workloads(config.operator_label)
    except ToolError as err:
        raise ClusterQueryError(
            f'could not get response from API server in kind cluster "{config.kind_context}": {err}',
            context=config.kind_context,
        ) from err

    if pods:
        raise ConflictError(
            f'running operator found in the cluster "{config.kind_context}" ({", ".join(pods)}). '
            "If it is safe to continue, rerun with the --skip-operator-check option",
            context=config.kind_context,
        )

    console.print("[green]✅ no operators found, good to go![/green]")
