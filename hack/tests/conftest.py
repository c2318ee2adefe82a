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

"""Fixtures and in-memory fakes for the external tools."""

from __future__ import annotations

from pathlib import Path

import pytest

from kind_deployer.config import ImageSpec, RunConfig
from kind_deployer.tools import ToolError, Toolchain

TAG = "abc1234"

BUNDLE = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  labels:
    app.kubernetes.io/name: prometheus-operator
    app.kubernetes.io/version: 1.2.3
  name: prometheus-operator
spec:
  template:
    spec:
      containers:
      - image: quay.io/prometheus-operator/prometheus-operator:v1.2.3
        name: prometheus-operator
"""


class FakeKind:
    """kind provisioner backed by a list of cluster names."""

    def __init__(self, events: list, clusters: list[str] | None = None, fail: set[str] | None = None) -> None:
        self.events = events
        self.clusters = list(clusters or [])
        self.fail = fail or set()
        self.loaded: list[str] = []

    def _record(self, *event: str) -> None:
        self.events.append(event)
        if event[0] in self.fail or " ".join(event) in self.fail:
            raise ToolError(f"{event[0]} failed")

    def list_clusters(self) -> list[str]:
        self._record("list")
        return list(self.clusters)

    def create_cluster(self, name: str, config: Path | None = None) -> None:
        self._record("create", name)
        self.clusters.append(name)

    def delete_cluster(self, name: str) -> None:
        self._record("delete", name)
        if name not in self.clusters:
            raise ToolError(f"cluster {name} not found")
        self.clusters.remove(name)

    def load_image(self, name: str, image_ref: str) -> None:
        self._record("load", image_ref)
        self.loaded.append(image_ref)


class FakeDocker:
    def __init__(self, events: list, fail: set[str] | None = None) -> None:
        self.events = events
        self.fail = fail or set()
        self.builds: list[tuple[Path, str | None, dict[str, str], str]] = []

    def build(self, context_dir: Path, dockerfile: str | None, build_args: dict[str, str], tag: str) -> None:
        self.events.append(("build", tag))
        if tag in self.fail:
            raise ToolError("exit status 1")
        self.builds.append((context_dir, dockerfile, build_args, tag))


class FakeKubectl:
    def __init__(self, events: list, workloads: list[str] | None = None, fail: set[str] | None = None) -> None:
        self.events = events
        self.workloads = list(workloads or [])
        self.fail = fail or set()
        self.contexts: list[str] = []
        self.selectors: list[str] = []
        self.created: list[bytes] = []

    def _record(self, event: str) -> None:
        self.events.append((event,))
        if event in self.fail:
            raise ToolError(f"{event} failed")

    def use_context(self, name: str) -> None:
        self._record("use_context")
        self.contexts.append(name)

    def list_workloads(self, label_selector: str) -> list[str]:
        self._record("list_workloads")
        self.selectors.append(label_selector)
        return list(self.workloads)

    def create(self, manifest: bytes) -> None:
        self._record("create_manifest")
        self.created.append(manifest)


@pytest.fixture
def events() -> list:
    """Shared call log across all fakes, in call order."""
    return []


@pytest.fixture
def fake_kind(events: list) -> FakeKind:
    return FakeKind(events)


@pytest.fixture
def fake_docker(events: list) -> FakeDocker:
    return FakeDocker(events)


@pytest.fixture
def fake_kubectl(events: list) -> FakeKubectl:
    return FakeKubectl(events)


@pytest.fixture
def tools(fake_kind: FakeKind, fake_docker: FakeDocker, fake_kubectl: FakeKubectl) -> Toolchain:
    return Toolchain(kind=fake_kind, docker=fake_docker, kubectl=fake_kubectl)


@pytest.fixture
def operator_dir(tmp_path: Path) -> Path:
    (tmp_path / "bundle.yaml").write_text(BUNDLE)
    return tmp_path


@pytest.fixture
def run_config(operator_dir: Path) -> RunConfig:
    return RunConfig(
        operator_dir=operator_dir,
        kind_context="test",
        kind_config=None,
        images=(
            ImageSpec("operator", "quay.io/prometheus-operator/prometheus-operator"),
            ImageSpec(
                "reloader",
                "quay.io/prometheus-operator/prometheus-config-reloader",
                "cmd/prometheus-config-reloader/Dockerfile",
            ),
            ImageSpec(
                "webhook",
                "quay.io/prometheus-operator/admission-webhook",
                "cmd/admission-webhook/Dockerfile",
            ),
        ),
        tag=TAG,
        arch="arm64",
        goarch="arm64",
        goos="linux",
    )
