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

"""Tests for the command line entry point."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from kind_deployer import cli
from kind_deployer.config import RunConfig
from kind_deployer.errors import ConflictError, DependencyMissingError
from kind_deployer.orchestrator import OutcomeKind, RunOutcome

runner = CliRunner()


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch, run_config: RunConfig) -> dict[str, list]:
    """Replace every stage entry point with a recorder."""
    recorded: dict[str, list] = {"prerequisites": [], "teardown": [], "resolve": [], "deploy": []}

    def _resolve(**kwargs) -> RunConfig:
        recorded["resolve"].append(kwargs)
        return run_config

    def _deploy(config: RunConfig) -> RunOutcome:
        recorded["deploy"].append(config)
        return RunOutcome(OutcomeKind.DEPLOYED)

    def _teardown(kind_context: str) -> RunOutcome:
        recorded["teardown"].append(kind_context)
        return RunOutcome(OutcomeKind.TORN_DOWN)

    monkeypatch.setattr(cli, "check_prerequisites", lambda: recorded["prerequisites"].append(True))
    monkeypatch.setattr(cli, "resolve_config", _resolve)
    monkeypatch.setattr(cli, "run_deploy", _deploy)
    monkeypatch.setattr(cli, "run_teardown", _teardown)
    return recorded


@pytest.mark.parametrize(
    "args",
    [
        ["teardown"],
        ["teardown", "-k", "dev"],
        ["--teardown", "--kind-context", "dev"],
    ],
)
def test_teardown_runs_nothing_else(calls: dict[str, list], args: list[str]) -> None:
    """Test the teardown form skips config resolution, builds and deploys."""
    result = runner.invoke(cli.app, args)

    assert result.exit_code == 0
    assert calls["prerequisites"] == [True]
    assert calls["teardown"] == (["dev"] if "dev" in args else ["test"])
    assert calls["resolve"] == []
    assert calls["deploy"] == []


def test_teardown_rejects_flag_as_context(calls: dict[str, list]) -> None:
    result = runner.invoke(cli.app, ["teardown", "--kind-context", "-s"])
    assert result.exit_code == 2
    assert calls["teardown"] == []


def test_deploy(calls: dict[str, list], run_config: RunConfig) -> None:
    result = runner.invoke(
        cli.app, ["-o", "/src/operator", "-k", "dev", "-m", "-s", "-d", "info"],
    )

    assert result.exit_code == 0
    (kwargs,) = calls["resolve"]
    assert kwargs["operator_dir"] == "/src/operator"
    assert kwargs["kind_context"] == "dev"
    assert kwargs["multinode"] is True
    assert kwargs["skip_operator_check"] is True
    assert kwargs["debug_level"] == "info"
    assert calls["deploy"] == [run_config]
    assert calls["teardown"] == []


def test_repeated_option_last_wins(calls: dict[str, list]) -> None:
    runner.invoke(cli.app, ["-k", "first", "--kind-context", "second"])
    assert calls["resolve"][0]["kind_context"] == "second"


def test_unknown_action(calls: dict[str, list]) -> None:
    result = runner.invoke(cli.app, ["deploy-everything"])
    assert result.exit_code == 2
    assert calls["deploy"] == []


def test_conflict_exit_code(monkeypatch: pytest.MonkeyPatch, calls: dict[str, list]) -> None:
    conflict = ConflictError("running operator found", context="test")
    monkeypatch.setattr(cli, "run_deploy", lambda config: RunOutcome(OutcomeKind.ABORTED_CONFLICT, conflict))
    result = runner.invoke(cli.app, [])
    assert result.exit_code == 31


def test_missing_dependency_stops_everything(monkeypatch: pytest.MonkeyPatch, calls: dict[str, list]) -> None:
    def _missing() -> None:
        raise DependencyMissingError("kind is required but not installed")

    monkeypatch.setattr(cli, "check_prerequisites", _missing)
    result = runner.invoke(cli.app, ["teardown"])

    assert result.exit_code == 3
    assert calls["teardown"] == []
    assert calls["resolve"] == []


def test_invalid_environment_exits_with_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "check_prerequisites", lambda: None)
    monkeypatch.setenv("KIND_DEPLOY_KIND_CONTEXT", "")
    result = runner.invoke(cli.app, ["teardown"])
    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)
