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

"""Command line entry point for the kind deploy workflow."""

from __future__ import annotations

import logging
import sys

import typer
from rich.markup import escape

from kind_deployer import console
from kind_deployer.config import display_config, resolve_config, resolve_kind_context
from kind_deployer.constants import DEBUG_LEVEL_DEFAULT, DEBUG_LEVEL_INFO, TEARDOWN_ACTION
from kind_deployer.errors import ConfigurationError, DeployError
from kind_deployer.orchestrator import (
    OutcomeKind,
    RunOutcome,
    check_prerequisites,
    run_deploy,
    run_teardown,
)

app = typer.Typer(
    help="Deploy a locally built prometheus-operator into a throwaway kind cluster.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def _configure_logging(debug_level: str) -> None:
    logging.basicConfig(
        level=logging.INFO if debug_level == DEBUG_LEVEL_INFO else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )


def _report(outcome: RunOutcome) -> None:
    if outcome.error is not None:
        console.print(f"[red]❌ ERROR: {escape(str(outcome.error))}[/red]")
        raise typer.Exit(code=outcome.exit_code)
    if outcome.kind is OutcomeKind.DEPLOYED:
        console.print("[green]✅ Deployment finished[/green]")


@app.command()
def main(
    action: str | None = typer.Argument(
        None, help="Pass 'teardown' to delete the kind cluster and exit", show_default=False),
    operator_dir: str | None = typer.Option(
        None, "--operator-dir", "-o",
        help="Operator source tree to build from (default: current directory)"),
    kind_context: str | None = typer.Option(
        None, "--kind-context", "-k", help="kind cluster name (default: test)"),
    kind_config: str | None = typer.Option(
        None, "--kind-config", "-K", help="kind cluster config file"),
    multinode: bool = typer.Option(
        False, "--multinode-cluster", "-m", help="Create a cluster with one control plane and two workers"),
    skip_operator_check: bool = typer.Option(
        False, "--skip-operator-check", "-s",
        help="Skip the check for a prometheus-operator already running in the cluster"),
    debug_level: str = typer.Option(
        DEBUG_LEVEL_DEFAULT, "--debug-level", "-d", help="Output verbosity: 'default' or 'info'"),
    teardown: bool = typer.Option(
        False, "--teardown", help="Delete the kind cluster and exit"),
) -> None:
    """Recreate a kind cluster, build and load the operator images, and deploy the bundle.

    Examples:

        run-operator.py --operator-dir ~/src/prometheus-operator

        run-operator.py -m -s -d info --kind-context my-cluster

        run-operator.py teardown --kind-context my-cluster
    """
    _configure_logging(debug_level)

    try:
        check_prerequisites()
        if teardown or action == TEARDOWN_ACTION:
            outcome = run_teardown(resolve_kind_context(kind_context))
        else:
            if action is not None:
                raise ConfigurationError(f"unknown action '{action}'; only '{TEARDOWN_ACTION}' is supported")
            config = resolve_config(
                operator_dir=operator_dir,
                kind_context=kind_context,
                kind_config=kind_config,
                multinode=multinode,
                skip_operator_check=skip_operator_check,
                debug_level=debug_level,
                argv=sys.argv[1:],
            )
            display_config(config)
            outcome = run_deploy(config)
    except DeployError as err:
        outcome = RunOutcome.from_error(err)

    _report(outcome)


if __name__ == "__main__":
    app()
