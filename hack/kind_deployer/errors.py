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

"""Error taxonomy for the deploy pipeline.

Every stage failure is a :class:`DeployError` subclass. Each carries the stage
it came from, the kind context that was active, and the process exit code the
CLI reports for it.
"""

from __future__ import annotations


class DeployError(RuntimeError):
    """Base class for fatal pipeline failures."""

    stage = "pipeline"
    exit_code = 1

    def __init__(self, cause: str, *, context: str | None = None) -> None:
        super().__init__(cause)
        self.cause = cause
        self.context = context

    def __str__(self) -> str:
        if self.context:
            return f'kind-context: "{self.context}"; {self.stage}: {self.cause}'
        return f"{self.stage}: {self.cause}"


class ConfigurationError(DeployError):
    """Bad or missing flag value, or an unreachable operator directory."""

    stage = "configuration"
    exit_code = 2


class DependencyMissingError(DeployError):
    """A required external tool is not installed."""

    stage = "prerequisites"
    exit_code = 3


class ClusterProvisionError(DeployError):
    stage = "cluster"
    exit_code = 10


class ClusterTeardownError(DeployError):
    stage = "teardown"
    exit_code = 11


class _ImageError(DeployError):
    def __init__(self, role: str, cause: str, *, context: str | None = None) -> None:
        super().__init__(cause, context=context)
        self.role = role


class ImageBuildError(_ImageError):
    stage = "build"
    exit_code = 20


class ImageLoadError(_ImageError):
    stage = "load"
    exit_code = 21


class ClusterQueryError(DeployError):
    """The API server could not be queried for running operators."""

    stage = "conflict-check"
    exit_code = 30


class ConflictError(DeployError):
    """An operator is already running in the target cluster."""

    stage = "conflict-check"
    exit_code = 31


class VersionDiscoveryError(DeployError):
    stage = "deploy"
    exit_code = 40


class ContextSelectionError(DeployError):
    stage = "deploy"
    exit_code = 41


class DeploymentApplyError(DeployError):
    stage = "deploy"
    exit_code = 42
