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

"""Utility functions for command checks and kubectl naming."""

from __future__ import annotations

import sh

from kind_deployer.constants import KIND_CONTEXT_PREFIX
from kind_deployer.errors import DependencyMissingError


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        DependencyMissingError: If the command is not found.
    """
    try:
        found = sh.which(cmd)
    except (sh.ErrorReturnCode, sh.CommandNotFound) as err:
        raise DependencyMissingError(f"{cmd} is required but not installed") from err
    if not found:
        raise DependencyMissingError(f"{cmd} is required but not installed")


def kubectl_context(kind_context: str) -> str:
    """Return the kubeconfig context name kind registers for a cluster."""
    return f"{KIND_CONTEXT_PREFIX}{kind_context}"


def error_output(err: sh.ErrorReturnCode) -> str:
    """Extract a one-line cause from a failed sh command."""
    stderr = err.stderr.decode(errors="replace").strip() if err.stderr else ""
    if stderr:
        return stderr.splitlines()[-1]
    return f"'{err.full_cmd}' exited with code {err.exit_code}"
