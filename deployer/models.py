"""Data models shared by the deployment stages."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _Missing:
    """Marker for a metadata field that is absent from the inspected record."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


class HealthEndpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    # None means any status below 400, like `curl -f`
    expected_status: Optional[int] = None

    def is_success(self, status_code: int) -> bool:
        if self.expected_status is not None:
            return status_code == self.expected_status
        return status_code < 400


class HealthCheckConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=10, ge=1)
    interval: float = Field(default=1.0, ge=0)
    timeout: float = Field(default=5.0, gt=0)
    initial_delay: float = Field(default=0.0, ge=0)


class DeploymentPlan(BaseModel):
    """Everything a deployment run needs, fixed at startup."""

    model_config = ConfigDict(frozen=True)

    compose_candidates: Tuple[str, ...]
    project_dir: Path = Path(".")
    required_ports: Tuple[int, ...] = ()
    required_tools: Tuple[str, ...] = ("docker",)
    health_endpoints: Tuple[HealthEndpoint, ...] = ()
    health_config: HealthCheckConfig = HealthCheckConfig()
    image_pattern: str = "nginx"
    inspect_image: str = "nginx:alpine"
    # exact image for the ancestor filter; None means the image pattern itself
    ancestor_image: Optional[str] = None
    report_path: Path = Path("nginx-logs.txt")
    remove_volumes: bool = True


class ToolAvailability(Mapping[str, bool]):
    """Read-only tool name -> presence mapping, in check order."""

    def __init__(self, found: Mapping[str, bool]):
        self._found = dict(found)

    def __getitem__(self, name: str) -> bool:
        return self._found[name]

    def __iter__(self):
        return iter(self._found)

    def __len__(self) -> int:
        return len(self._found)

    def missing(self) -> List[str]:
        return [name for name, present in self._found.items() if not present]

    def __repr__(self) -> str:
        return f"ToolAvailability({self._found!r})"


class HealthCheckResult(BaseModel):
    endpoint: str
    succeeded: bool
    attempts_used: int
    last_error: Optional[str] = None
    status_code: Optional[int] = None


class ContainerSummary(BaseModel):
    id: str
    name: Optional[str] = None
    image: str = ""
    status: Optional[str] = None

    @property
    def short_id(self) -> str:
        return self.id[:12]


class ContainerMetadata(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    image: str
    fields: Dict[str, Any] = Field(default_factory=dict)

    def missing_fields(self) -> List[str]:
        return [path for path, value in self.fields.items() if value is MISSING]

    def present_fields(self) -> Dict[str, Any]:
        return {p: v for p, v in self.fields.items() if v is not MISSING}


class DeploymentReport(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: str
    exit_code: int = 0
    error: Optional[str] = None
    compose_file: Optional[Path] = None
    health_results: List[HealthCheckResult] = Field(default_factory=list)
    container_id: Optional[str] = None
    metadata: Optional[ContainerMetadata] = None
    report_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"
