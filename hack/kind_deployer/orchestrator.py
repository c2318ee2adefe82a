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

"""Orchestration functions that compose the stages into the deploy and teardown workflows."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from rich.panel import Panel

from kind_deployer import console
from kind_deployer.bundle import deploy_bundle
from kind_deployer.cluster import ensure_cluster, tear_down
from kind_deployer.config import RunConfig
from kind_deployer.constants import REQUIRED_COMMANDS
from kind_deployer.errors import ConflictError, DeployError
from kind_deployer.guard import ensure_operator_not_running
from kind_deployer.images import build_and_load_images
from kind_deployer.tools import Toolchain
from kind_deployer.utils import require_command


class OutcomeKind(str, Enum):
    DEPLOYED = "deployed"
    ABORTED_CONFLICT = "aborted-conflict"
    FAILED = "failed"
    TORN_DOWN = "torn-down"


@dataclass(frozen=True)
class RunOutcome:
    """Terminal state of one invocation.

    Attributes:
        kind: Which terminal state was reached.
        error: The failure that ended the run, for ABORTED_CONFLICT and FAILED.
    """

    kind: OutcomeKind
    error: DeployError | None = None

    @property
    def stage(self) -> str | None:
        return self.error.stage if self.error else None

    @property
    def exit_code(self) -> int:
        return self.error.exit_code if self.error else 0

    @classmethod
    def from_error(cls, error: DeployError) -> RunOutcome:
        if isinstance(error, ConflictError):
            return cls(OutcomeKind.ABORTED_CONFLICT, error)
        return cls(OutcomeKind.FAILED, error)


def check_prerequisites(commands: Iterable[str] = REQUIRED_COMMANDS) -> None:
    """Check the required CLI tools are installed.

    Raises:
        DependencyMissingError: For the first missing tool.
    """
    console.print(Panel.fit("Checking prerequisites", style="bold blue"))
    for cmd in commands:
        require_command(cmd)
    console.print("[green]✅ All required tools are available[/green]")


def run_deploy(config: RunConfig, tools: Toolchain | None = None) -> RunOutcome:
    """Recreate the cluster, build and load the images, and deploy the bundle.

    Every stage is fatal on failure; the first error ends the run.

    Args:
        config: Resolved run configuration.
        tools: External tool adapters, or None for the real ones.

    Returns:
        DEPLOYED on success, otherwise ABORTED_CONFLICT or FAILED with the error.
    """
    tools = tools or Toolchain()
    try:
        ensure_cluster(tools.kind, config.kind_context, config.kind_config)
        build_and_load_images(tools.docker, tools.kind, config)
        ensure_operator_not_running(tools.kubectl, config)
        deploy_bundle(tools.kubectl, config)
    except DeployError as err:
        return RunOutcome.from_error(err)
    return RunOutcome(OutcomeKind.DEPLOYED)


def run_teardown(kind_context: str, tools: Toolchain | None = None) -> RunOutcome:
    """Delete the kind cluster. Nothing else runs in a teardown invocation.

    Args:
        kind_context: Cluster name.
        tools: External tool adapters, or None for the real ones.

    Returns:
        TORN_DOWN on success, otherwise FAILED with the error.
    """
    tools = tools or Toolchain()
    try:
        tear_down(tools.kind, kind_context)
    except DeployError as err:
        return RunOutcome.from_error(err)
    return RunOutcome(OutcomeKind.TORN_DOWN)
