# deployer/engine.py
"""Container runtime boundary.

All interaction with Docker, Docker Compose and the host goes through a
``ContainerRuntime``. ``DockerRuntime`` is the real implementation; tests pass
a mock in its place.
"""
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence

from loguru import logger

from .models import ContainerSummary


class ContainerRuntime(Protocol):
    def check_tool_available(self, name: str) -> bool: ...

    def check_port_in_use(self, port: int) -> Optional[bool]: ...

    def compose_available(self) -> bool: ...

    def compose_down(self, compose_file: Path, volumes: bool = True) -> bool: ...

    def compose_build(self, compose_file: Path) -> bool: ...

    def compose_up(self, compose_file: Path) -> bool: ...

    def list_containers(self, filters: Optional[Dict[str, str]] = None) -> List[ContainerSummary]: ...

    def inspect_image(self, name: str) -> Dict[str, Any]: ...


class DockerRuntime:
    def __init__(self, client: Optional[Any] = None):
        self._client = client
        self._compose_cmd: Optional[List[str]] = None

    def _ensure_client(self):
        if self._client is None:
            import docker

            self._client = docker.from_env()
        return self._client

    @property
    def client(self):
        return self._ensure_client()

    @client.setter
    def client(self, value):
        self._client = value

    # -------------------------
    # HOST CHECKS
    # -------------------------
    def check_tool_available(self, name: str) -> bool:
        path = shutil.which(name)
        if path:
            logger.debug(f"Found {name} at {path}")
            return True
        logger.debug(f"Tool not found: {name}")
        return False

    def check_port_in_use(self, port: int) -> Optional[bool]:
        """Return True when something listens on ``port``.

        Returns None when ``lsof`` is not installed and the port cannot be
        checked.
        """
        if not self.check_tool_available("lsof"):
            return None
        r = subprocess.run(["lsof", f"-i:{port}"], capture_output=True)
        return r.returncode == 0

    # -------------------------
    # COMPOSE
    # -------------------------
    def _detect_compose(self) -> Optional[List[str]]:
        if self._compose_cmd is not None:
            return self._compose_cmd
        if self.check_tool_available("docker"):
            try:
                r = subprocess.run(["docker", "compose", "version"], capture_output=True)
                if r.returncode == 0:
                    self._compose_cmd = ["docker", "compose"]
                    return self._compose_cmd
            except OSError as e:
                logger.debug(f"'docker compose' probe failed: {e}")
        if self.check_tool_available("docker-compose"):
            self._compose_cmd = ["docker-compose"]
        return self._compose_cmd

    def compose_available(self) -> bool:
        return self._detect_compose() is not None

    def _compose(self, compose_file: Path, *args: str) -> bool:
        cmd = self._detect_compose()
        if cmd is None:
            logger.error("Docker Compose is not installed")
            return False
        argv: Sequence[str] = [*cmd, "-f", str(compose_file), *args]
        logger.debug(f"Running: {' '.join(argv)}")
        try:
            r = subprocess.run(argv)
        except OSError as e:
            logger.error(f"Could not run {' '.join(argv)}: {e}")
            return False
        return r.returncode == 0

    def compose_down(self, compose_file: Path, volumes: bool = True) -> bool:
        args = ["down", "-v"] if volumes else ["down"]
        return self._compose(compose_file, *args)

    def compose_build(self, compose_file: Path) -> bool:
        return self._compose(compose_file, "build")

    def compose_up(self, compose_file: Path) -> bool:
        return self._compose(compose_file, "up", "-d")

    # -------------------------
    # DOCKER API
    # -------------------------
    def list_containers(self, filters: Optional[Dict[str, str]] = None) -> List[ContainerSummary]:
        client = self.client
        kwargs: Dict[str, Any] = {"all": False}
        if filters:
            kwargs["filters"] = filters
        containers = client.containers.list(**kwargs)
        summaries = []
        for c in containers:
            attrs = getattr(c, "attrs", None) or {}
            image = (attrs.get("Config") or {}).get("Image")
            if not image:
                tags = getattr(getattr(c, "image", None), "tags", None) or []
                image = tags[0] if tags else ""
            summaries.append(
                ContainerSummary(
                    id=c.id,
                    name=getattr(c, "name", None),
                    image=image,
                    status=getattr(c, "status", None),
                )
            )
        return summaries

    def inspect_image(self, name: str) -> Dict[str, Any]:
        client = self.client
        return client.images.get(name).attrs
