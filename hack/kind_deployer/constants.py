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

"""Constants, image catalogue loading, and dep_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

# -- Resolved paths --
PACKAGE_DIR = Path(__file__).resolve().parent
MULTINODE_KIND_CONFIG = PACKAGE_DIR / "kind-multinode.yaml"


def load_image_catalogue() -> dict:
    """Load image repositories and Dockerfile paths from images.yaml.

    Returns:
        Parsed YAML content as a nested dictionary.
    """
    with open(PACKAGE_DIR / "images.yaml") as f:
        return yaml.safe_load(f)


IMAGE_CATALOGUE = load_image_catalogue()


def dep_value(role: str, key: str, default: Any = None) -> Any:
    """Look up a field of an image entry in the catalogue by role.

    Args:
        role: Image role (``operator``, ``reloader`` or ``webhook``).
        key: Field of the image entry to return.
        default: Value to return if the role or key is missing.

    Returns:
        The field value, or *default* if not found.
    """
    for entry in IMAGE_CATALOGUE.get("images") or []:
        if isinstance(entry, dict) and entry.get("role") == role:
            value = entry.get(key)
            return default if value is None else value
    return default


# -- Image roles, in build and load order --
ROLE_OPERATOR = "operator"
ROLE_RELOADER = "reloader"
ROLE_WEBHOOK = "webhook"
IMAGE_ROLES = (ROLE_OPERATOR, ROLE_RELOADER, ROLE_WEBHOOK)

# -- External tools --
REQUIRED_COMMANDS = ("kubectl", "docker", "kind")

# -- Defaults --
DEFAULT_KIND_CONTEXT = "test"
DEFAULT_BUNDLE_FILE = "bundle.yaml"
DEFAULT_REGISTRY_HOST = "quay.io"
DEFAULT_VERSION_LABEL = "app.kubernetes.io/version: "
DEFAULT_OPERATOR_LABEL = "app.kubernetes.io/name=prometheus-operator"
FALLBACK_TAG = "latest"

# -- kubectl --
KIND_CONTEXT_PREFIX = "kind-"

# -- Debug levels --
DEBUG_LEVEL_DEFAULT = "default"
DEBUG_LEVEL_INFO = "info"

# -- Teardown --
TEARDOWN_ACTION = "teardown"
