#!/usr/bin/env python3
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

"""
run-operator.py - Run a locally built prometheus-operator in a kind cluster.

Recreates the kind cluster, builds the operator, config-reloader and
admission-webhook images from the operator tree, loads them into the cluster,
checks no other operator is running, and creates the bundle with its image
tags pointed at the current commit.

Environment Variables:
    Defaults can be overridden via KIND_DEPLOY_* environment variables:
    - KIND_DEPLOY_KIND_CONTEXT (default: test)
    - KIND_DEPLOY_OPERATOR_DIR (default: current directory)
    - KIND_DEPLOY_BUNDLE_FILE (default: bundle.yaml)
    - KIND_DEPLOY_IMAGE_OPERATOR / _IMAGE_RELOADER / _IMAGE_WEBHOOK
    - KIND_DEPLOY_ARCH / _GOARCH / _GOOS (default: from `go env`)

Examples:
    # Single node cluster, operator checked out in ~/src/prometheus-operator
    ./run-operator.py --operator-dir ~/src/prometheus-operator

    # Multi-node cluster, skip the running-operator check, verbose output
    ./run-operator.py -m -s -d info

    # Delete the cluster
    ./run-operator.py teardown --kind-context my-cluster

For detailed usage information, run: ./run-operator.py --help
"""

from kind_deployer.cli import app

if __name__ == "__main__":
    app()
