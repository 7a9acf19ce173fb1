from __future__ import annotations

import sys
from pathlib import Path

import pytest


# Ensure the repo root is importable (so `import db.*` and `import tests.*` work without an install).
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

DYNAMODB_LOCAL_IMAGE = "amazon/dynamodb-local:2.5.2"


@pytest.fixture(scope="session")
def dynamodb_local_url() -> str:
    import docker
    from docker.errors import DockerException
    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    try:
        docker.from_env().ping()
    except DockerException:
        pytest.skip("Docker is not available")

    with DockerContainer(DYNAMODB_LOCAL_IMAGE).with_exposed_ports(8000) as container:
        wait_for_logs(container, "Initializing DynamoDB Local")
        host = container.get_container_host_ip()
        port = container.get_exposed_port(8000)
        yield f"http://{host}:{port}"
