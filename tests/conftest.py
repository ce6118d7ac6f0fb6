# tests/conftest.py
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from deployer.models import (  # noqa: E402
    ContainerSummary,
    DeploymentPlan,
    HealthCheckConfig,
    HealthEndpoint,
)


# ---------------------------------------------------------------------------
# Keep docker.from_env() from contacting the host
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def patch_docker_client():
    fake_client = MagicMock()
    fake_client.containers.list.return_value = []
    with patch("docker.from_env", return_value=fake_client):
        yield fake_client


@pytest.fixture
def nginx_record():
    return {
        "Id": "sha256:abc",
        "RepoTags": ["nginx:alpine"],
        "Created": "2024-05-01T10:00:00Z",
        "Os": "linux",
        "Config": {"ExposedPorts": {"80/tcp": {}}, "Cmd": ["nginx", "-g", "daemon off;"]},
    }


@pytest.fixture
def runtime(nginx_record):
    """A runtime where every tool exists, ports are free and compose succeeds."""
    rt = MagicMock()
    rt.check_tool_available.return_value = True
    rt.compose_available.return_value = True
    rt.check_port_in_use.return_value = False
    rt.compose_down.return_value = True
    rt.compose_build.return_value = True
    rt.compose_up.return_value = True
    rt.list_containers.return_value = [
        ContainerSummary(id="f00dfacecafe0001", name="proxy", image="nginx:alpine", status="running")
    ]
    rt.inspect_image.return_value = nginx_record
    return rt


@pytest.fixture
def plan(tmp_path):
    return DeploymentPlan(
        compose_candidates=("compose.yaml", "docker-compose.yml"),
        project_dir=tmp_path,
        required_ports=(3000, 5000, 80),
        required_tools=("docker",),
        health_endpoints=(
            HealthEndpoint(name="backend", url="http://localhost:5000"),
            HealthEndpoint(name="frontend", url="http://localhost:3000"),
            HealthEndpoint(name="nginx", url="http://localhost"),
        ),
        health_config=HealthCheckConfig(max_attempts=3, interval=0),
        image_pattern="nginx",
        inspect_image="nginx:alpine",
        report_path=tmp_path / "nginx-logs.txt",
    )
