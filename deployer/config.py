"""Default deployment settings and parsers for their string forms.

Every value here can be overridden from the command line or through the
matching ``DEPLOY_*`` environment variable (a ``.env`` file is loaded first).
"""
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .models import DeploymentPlan, HealthCheckConfig, HealthEndpoint
from .network import parse_ports

DEFAULT_COMPOSE_CANDIDATES: Tuple[str, ...] = (
    "compose.yaml",
    "compose.yml",
    "docker-compose.yaml",
    "docker-compose.yml",
)
DEFAULT_PORTS = "3000,5000,80"
DEFAULT_HEALTH_ENDPOINTS = (
    "backend=http://localhost:5000,"
    "frontend=http://localhost:3000,"
    "nginx=http://localhost"
)
DEFAULT_IMAGE_PATTERN = "nginx"
DEFAULT_INSPECT_IMAGE = "nginx:alpine"
DEFAULT_REPORT_PATH = "nginx-logs.txt"
DEFAULT_REQUIRED_TOOLS: Tuple[str, ...] = ("docker",)


def _split(value: str) -> list:
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_port_list(value: str) -> Tuple[int, ...]:
    return parse_ports(_split(value))


def parse_endpoint(spec: str) -> HealthEndpoint:
    """Parse ``url``, ``name=url`` or ``name=url@status``."""
    name, sep, rest = spec.partition("=")
    if not sep or "://" in name:
        name, rest = "", spec
    name = name.strip()
    url = rest.strip()
    expected_status = None
    head, at, status = url.rpartition("@")
    if at and status.isdigit():
        url, expected_status = head, int(status)
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"Health endpoint must be an http(s) URL: {spec!r}")
    return HealthEndpoint(name=name or url, url=url, expected_status=expected_status)


def parse_endpoint_list(value: str) -> Tuple[HealthEndpoint, ...]:
    return tuple(parse_endpoint(part) for part in _split(value))


def build_plan(
    compose_file: Optional[str] = None,
    project_dir: str = ".",
    ports: str = DEFAULT_PORTS,
    health_endpoints: str = DEFAULT_HEALTH_ENDPOINTS,
    image_pattern: str = DEFAULT_IMAGE_PATTERN,
    inspect_image: str = DEFAULT_INSPECT_IMAGE,
    ancestor_image: Optional[str] = None,
    report_path: str = DEFAULT_REPORT_PATH,
    required_tools: Sequence[str] = DEFAULT_REQUIRED_TOOLS,
    health_config: Optional[HealthCheckConfig] = None,
    remove_volumes: bool = True,
) -> DeploymentPlan:
    candidates = (compose_file,) if compose_file else DEFAULT_COMPOSE_CANDIDATES
    # the stock nginx lookup matches nginx:alpine exactly; any other pattern is its own ancestor
    if ancestor_image is None and image_pattern == DEFAULT_IMAGE_PATTERN:
        ancestor_image = inspect_image
    return DeploymentPlan(
        compose_candidates=candidates,
        project_dir=Path(project_dir),
        required_ports=parse_port_list(ports),
        required_tools=tuple(required_tools),
        health_endpoints=parse_endpoint_list(health_endpoints),
        health_config=health_config or HealthCheckConfig(),
        image_pattern=image_pattern,
        inspect_image=inspect_image,
        ancestor_image=ancestor_image or None,
        report_path=Path(report_path),
        remove_volumes=remove_volumes,
    )
