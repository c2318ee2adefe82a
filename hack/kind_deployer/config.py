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

"""Settings, the immutable RunConfig, and config resolution/display."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from kind_deployer import console, logger
from kind_deployer.constants import (
    DEBUG_LEVEL_DEFAULT,
    DEBUG_LEVEL_INFO,
    DEFAULT_BUNDLE_FILE,
    DEFAULT_KIND_CONTEXT,
    DEFAULT_OPERATOR_LABEL,
    DEFAULT_REGISTRY_HOST,
    DEFAULT_VERSION_LABEL,
    FALLBACK_TAG,
    IMAGE_ROLES,
    MULTINODE_KIND_CONFIG,
    ROLE_OPERATOR,
    ROLE_RELOADER,
    ROLE_WEBHOOK,
    dep_value,
)
from kind_deployer.errors import ConfigurationError
from kind_deployer.tools import ToolError, go_platform, short_head

KIND_CONFIG_FLAGS = ("--kind-config", "-K")
MULTINODE_FLAGS = ("--multinode-cluster", "-m")
# Short options that consume a value; the rest of a bundled token is that value.
VALUE_SHORT_OPTIONS = frozenset("okKd")


class DebugLevel(str, Enum):
    DEFAULT = DEBUG_LEVEL_DEFAULT
    INFO = DEBUG_LEVEL_INFO


# ============================================================================
# Configuration classes
# ============================================================================

class DeployerSettings(BaseSettings):
    """Process defaults, auto-loaded from KIND_DEPLOY_* env vars.

    Attributes:
        operator_dir: Operator source tree, or None to use the current directory.
        kind_context: Name of the kind cluster.
        bundle_file: Manifest bundle path, relative to the operator directory.
        version_label: Marker preceding the released version in the bundle.
        registry_host: Registry host whose bundle lines get their tag rewritten.
        operator_label: Label selector identifying a running operator.
        image_operator: Repository of the operator image.
        image_reloader: Repository of the config reloader image.
        image_webhook: Repository of the admission webhook image.
        arch: ARCH build argument override (defaults to GOARCH).
        goarch: GOARCH override, skipping ``go env``.
        goos: GOOS override, skipping ``go env``.
    """

    model_config = SettingsConfigDict(env_prefix="KIND_DEPLOY_", extra="ignore")

    operator_dir: Path | None = None
    kind_context: str = Field(default=DEFAULT_KIND_CONTEXT, min_length=1)
    bundle_file: str = DEFAULT_BUNDLE_FILE
    version_label: str = Field(default=DEFAULT_VERSION_LABEL, min_length=1)
    registry_host: str = Field(default=DEFAULT_REGISTRY_HOST, min_length=1)
    operator_label: str = DEFAULT_OPERATOR_LABEL
    image_operator: str = dep_value(ROLE_OPERATOR, "repository")
    image_reloader: str = dep_value(ROLE_RELOADER, "repository")
    image_webhook: str = dep_value(ROLE_WEBHOOK, "repository")
    arch: str | None = None
    goarch: str | None = None
    goos: str | None = None


@dataclass(frozen=True)
class ImageSpec:
    """One of the images built from the operator tree.

    Attributes:
        role: Image role, used in messages and errors.
        repository: Registry path without a tag.
        dockerfile: Dockerfile relative to the operator directory, or None for the root one.
    """

    role: str
    repository: str
    dockerfile: str | None = None

    def ref(self, tag: str) -> str:
        return f"{self.repository}:{tag}"


@dataclass(frozen=True)
class RunConfig:
    """Everything one deploy run needs, resolved once and never mutated.

    Attributes:
        operator_dir: Operator source tree; builds and the bundle are relative to it.
        kind_context: Name of the kind cluster.
        kind_config: kind topology file, or None for a single node cluster.
        images: The images to build and load, in order.
        tag: Tag applied to every image and substituted into the bundle.
        arch: ARCH build argument.
        goarch: GOARCH build argument.
        goos: OS build argument.
        debug_level: Output verbosity.
        skip_operator_check: Whether to skip the running-operator check.
        bundle_file: Manifest bundle, relative to *operator_dir*.
        version_label: Marker preceding the released version in the bundle.
        registry_host: Registry host whose bundle lines are rewritten.
        operator_label: Label selector identifying a running operator.
    """

    operator_dir: Path
    kind_context: str
    kind_config: Path | None
    images: tuple[ImageSpec, ...]
    tag: str
    arch: str
    goarch: str
    goos: str
    debug_level: DebugLevel = DebugLevel.DEFAULT
    skip_operator_check: bool = False
    bundle_file: str = DEFAULT_BUNDLE_FILE
    version_label: str = DEFAULT_VERSION_LABEL
    registry_host: str = DEFAULT_REGISTRY_HOST
    operator_label: str = DEFAULT_OPERATOR_LABEL

    @property
    def build_args(self) -> dict[str, str]:
        return {"ARCH": self.arch, "GOARCH": self.goarch, "OS": self.goos}

    @property
    def bundle_path(self) -> Path:
        return self.operator_dir / self.bundle_file


# ============================================================================
# Config resolution
# ============================================================================

def require_option_value(flag: str, value: str | None) -> str:
    """Reject option values that are empty or look like another flag.

    Raises:
        ConfigurationError: If *value* is missing, empty or starts with ``-``.
    """
    if not value or value.startswith("-"):
        raise ConfigurationError(f"missing or invalid value for {flag} flag")
    return value


def _short_flags(token: str) -> str:
    """Return the short option letters in a token like ``-sm`` or ``-Kkind.yaml``."""
    if not token.startswith("-") or token.startswith("--") or len(token) < 2:
        return ""
    letters = ""
    for letter in token[1:]:
        letters += letter
        if letter in VALUE_SHORT_OPTIONS:
            break
    return letters


def _last_position(argv: Sequence[str], flags: Sequence[str]) -> int:
    long_flags = [flag for flag in flags if flag.startswith("--")]
    short_letters = {flag[1] for flag in flags if not flag.startswith("--")}
    position = -1
    for idx, token in enumerate(argv):
        if any(token == flag or token.startswith(f"{flag}=") for flag in long_flags):
            position = idx
        elif short_letters & set(_short_flags(token)):
            position = idx
    return position


def load_settings() -> DeployerSettings:
    """Load process defaults from KIND_DEPLOY_* environment variables.

    Raises:
        ConfigurationError: If an environment variable holds an invalid value.
    """
    try:
        return DeployerSettings()
    except ValidationError as err:
        names = ", ".join(
            f"KIND_DEPLOY_{str(error['loc'][0]).upper()}" for error in err.errors() if error["loc"]
        )
        raise ConfigurationError(f"invalid value in environment variable {names or 'KIND_DEPLOY_*'}") from err


def resolve_kind_context(kind_context: str | None, settings: DeployerSettings | None = None) -> str:
    """Resolve only the cluster name, for the teardown path.

    Args:
        kind_context: ``--kind-context`` value, or None.
        settings: Process defaults, or None to load them from the environment.

    Returns:
        The kind cluster name.
    """
    if kind_context is not None:
        return require_option_value("--kind-context", kind_context)
    return (settings or load_settings()).kind_context


def resolve_tag(operator_dir: Path, revision_lookup: Callable[[Path], str] = short_head) -> str:
    """Derive the image tag from the operator tree's HEAD commit.

    Falls back to ``latest`` on any lookup failure. Never raises.
    """
    try:
        return revision_lookup(operator_dir)
    except Exception as e:
        logger.info("could not resolve git revision (%s), tagging images '%s'", e, FALLBACK_TAG)
        return FALLBACK_TAG


def _resolve_operator_dir(operator_dir: str | None, settings: DeployerSettings) -> Path:
    if operator_dir is not None:
        target = Path(require_option_value("--operator-dir", operator_dir)).expanduser()
    elif settings.operator_dir is not None:
        target = settings.operator_dir.expanduser()
    else:
        return Path.cwd()

    try:
        os.chdir(target)
    except OSError as err:
        raise ConfigurationError(f"could not find operating dir {target}") from err
    return Path.cwd()


def _resolve_kind_config(
    kind_config: str | None,
    multinode: bool,
    argv: Sequence[str],
) -> Path | None:
    if kind_config is not None and multinode:
        # Overlapping flags: the one given last wins.
        if _last_position(argv, MULTINODE_FLAGS) > _last_position(argv, KIND_CONFIG_FLAGS):
            kind_config = None
        else:
            multinode = False

    if multinode:
        return MULTINODE_KIND_CONFIG
    if kind_config is None:
        return None

    path = Path(require_option_value("--kind-config", kind_config)).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"kind config file {path} does not exist")
    return path.resolve()


def _resolve_platform(
    settings: DeployerSettings,
    platform_lookup: Callable[[], tuple[str, str]],
) -> tuple[str, str, str]:
    goarch, goos = settings.goarch, settings.goos
    if goarch is None or goos is None:
        try:
            detected_arch, detected_os = platform_lookup()
        except ToolError as err:
            raise ConfigurationError(f"could not determine GOARCH/GOOS: {err}") from err
        goarch = goarch or detected_arch
        goos = goos or detected_os
    return settings.arch or goarch, goarch, goos


def resolve_config(
    *,
    operator_dir: str | None = None,
    kind_context: str | None = None,
    kind_config: str | None = None,
    multinode: bool = False,
    skip_operator_check: bool = False,
    debug_level: str = DEBUG_LEVEL_DEFAULT,
    argv: Sequence[str] = (),
    settings: DeployerSettings | None = None,
    revision_lookup: Callable[[Path], str] = short_head,
    platform_lookup: Callable[[], tuple[str, str]] = go_platform,
) -> RunConfig:
    """Merge CLI overrides, environment variables, and defaults into a RunConfig.

    Resolution priority: CLI arguments > KIND_DEPLOY_* environment variables > defaults.
    Changing the operator directory makes it the process working directory.

    Args:
        operator_dir: ``--operator-dir`` value, or None.
        kind_context: ``--kind-context`` value, or None.
        kind_config: ``--kind-config`` value, or None.
        multinode: Whether ``--multinode-cluster`` was given.
        skip_operator_check: Whether to skip the running-operator check.
        debug_level: ``--debug-level`` value.
        argv: Raw command line, used to order overlapping flags.
        settings: Process defaults, or None to load them from the environment.
        revision_lookup: Returns the short HEAD hash of a directory.
        platform_lookup: Returns ``(GOARCH, GOOS)``.

    Returns:
        The resolved, immutable run configuration.

    Raises:
        ConfigurationError: If a flag value is invalid or a lookup fails.
    """
    settings = settings or load_settings()

    try:
        level = DebugLevel(debug_level)
    except ValueError as err:
        raise ConfigurationError(
            f"invalid value for --debug-level flag: '{debug_level}'. "
            f"Allowed values are '{DEBUG_LEVEL_DEFAULT}' or '{DEBUG_LEVEL_INFO}'."
        ) from err

    context = resolve_kind_context(kind_context, settings)
    resolved_dir = _resolve_operator_dir(operator_dir, settings)
    topology = _resolve_kind_config(kind_config, multinode, argv)
    arch, goarch, goos = _resolve_platform(settings, platform_lookup)

    images = tuple(
        ImageSpec(role, getattr(settings, f"image_{role}"), dep_value(role, "dockerfile"))
        for role in IMAGE_ROLES
    )

    return RunConfig(
        operator_dir=resolved_dir,
        kind_context=context,
        kind_config=topology,
        images=images,
        tag=resolve_tag(resolved_dir, revision_lookup),
        arch=arch,
        goarch=goarch,
        goos=goos,
        debug_level=level,
        skip_operator_check=skip_operator_check,
        bundle_file=settings.bundle_file,
        version_label=settings.version_label,
        registry_host=settings.registry_host,
        operator_label=settings.operator_label,
    )


# ============================================================================
# Display
# ============================================================================

def display_config(config: RunConfig) -> None:
    """Print the resolved configuration."""
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print(f"  operator_dir    : {config.operator_dir}")
    console.print(f"  kind_context    : {config.kind_context}")
    console.print(f"  kind_config     : {config.kind_config or '(single node)'}")
    console.print(f"  tag             : {config.tag}")
    console.print(f"  platform        : {config.goos}/{config.goarch} (ARCH={config.arch})")
    for image in config.images:
        console.print(f"  {image.role:<16}: {image.ref(config.tag)}")
    if config.skip_operator_check:
        console.print("[yellow]  running-operator check is skipped[/yellow]")
