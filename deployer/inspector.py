# deployer/inspector.py
"""Locate the proxy container and pull metadata out of its image."""
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence

from loguru import logger

from .engine import ContainerRuntime
from .errors import ContainerNotFound, InspectError
from .models import MISSING, ContainerMetadata, ContainerSummary
from .network import exposed_port_numbers

DEFAULT_FIELDS: Sequence[str] = (
    "RepoTags",
    "Created",
    "Os",
    "Config",
    "Config.ExposedPorts",
)


def extract_field(record: Any, path: str) -> Any:
    """Follow a dotted ``path`` through nested dicts; MISSING if any key is absent."""
    value = record
    for key in path.split("."):
        if not isinstance(value, dict) or key not in value:
            return MISSING
        value = value[key]
    return value


class ContainerInspector:
    def __init__(self, runtime: ContainerRuntime):
        self.runtime = runtime

    def find_container(self, image_pattern: str, ancestor: Optional[str] = None) -> ContainerSummary:
        """Find a running container created from ``ancestor`` or whose image
        name contains ``image_pattern``.

        The ancestor filter is tried first; the case-insensitive substring
        match is only a fallback. When several containers match, the first
        one in the runtime's listing order wins. That order is not stable
        between calls, so callers must not rely on which one they get.
        """
        ancestor = ancestor or image_pattern
        matches = self.runtime.list_containers(filters={"ancestor": ancestor})
        if matches:
            found = matches[0]
            logger.debug(f"Matched {found.short_id} by ancestor {ancestor}")
            return found

        needle = image_pattern.lower()
        for container in self.runtime.list_containers():
            if needle in (container.image or "").lower():
                logger.debug(f"Matched {container.short_id} by image name {container.image}")
                return container
        raise ContainerNotFound(image_pattern)

    def inspect_image(self, name: str) -> Dict[str, Any]:
        logger.info(f"Inspecting image {name} ...")
        try:
            record = self.runtime.inspect_image(name)
        except Exception as e:
            raise InspectError(f"Could not inspect image {name}: {e}") from e
        if not isinstance(record, dict):
            raise InspectError(f"Unexpected inspect output for {name}: {type(record).__name__}")
        return record

    def write_report(self, record: Dict[str, Any], path: Path) -> Path:
        """Write the record the way ``docker inspect`` prints it: a JSON array."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(str(path), "w") as f:
                json.dump([record], f, indent=4, default=str)
        except OSError as e:
            raise InspectError(f"Could not write {path}: {e}") from e
        logger.info(f"{path} created.")
        return path

    def extract_fields(
        self, record: Dict[str, Any], field_paths: Iterable[str] = DEFAULT_FIELDS, image: str = ""
    ) -> ContainerMetadata:
        fields = {}
        for path in field_paths:
            value = extract_field(record, path)
            if value is MISSING:
                logger.warning(f"Could not read {path}")
            fields[path] = value
        return ContainerMetadata(image=image, fields=fields)

    def log_metadata(self, metadata: ContainerMetadata) -> None:
        logger.info(f"===== Extracted Values from {metadata.image} =====")
        for path, value in metadata.fields.items():
            if value is MISSING:
                logger.info(f"{path}: (missing)")
                continue
            logger.info(f"{path}: {json.dumps(value, default=str)}")
        ports = exposed_port_numbers(metadata.fields.get("Config.ExposedPorts"))
        if ports:
            logger.info(f"Image exposes port(s): {', '.join(str(p) for p in ports)}")
