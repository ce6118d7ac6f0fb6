# deployer/driver.py
from pathlib import Path

from loguru import logger

from .engine import ContainerRuntime
from .errors import BuildError, StartError


class DeploymentDriver:
    def __init__(self, runtime: ContainerRuntime, remove_volumes: bool = True):
        self.runtime = runtime
        self.remove_volumes = remove_volumes

    def tear_down(self, compose_file: Path) -> bool:
        """Bring down a previous deployment. Never raises."""
        logger.info("Bringing down any existing containers...")
        try:
            ok = self.runtime.compose_down(compose_file, volumes=self.remove_volumes)
        except Exception as e:
            logger.warning(f"Tear down failed, continuing: {e}")
            return False
        if not ok:
            logger.warning("Tear down exited non-zero, continuing")
        return ok

    def build(self, compose_file: Path) -> None:
        logger.info("Building images...")
        try:
            ok = self.runtime.compose_build(compose_file)
        except Exception as e:
            raise BuildError(f"Image build failed for {compose_file}: {e}") from e
        if not ok:
            raise BuildError(f"Image build failed for {compose_file}")
        logger.success("Images built")

    def start_detached(self, compose_file: Path) -> None:
        logger.info("Starting containers in detached mode...")
        try:
            ok = self.runtime.compose_up(compose_file)
        except Exception as e:
            raise StartError(f"Could not start containers from {compose_file}: {e}") from e
        if not ok:
            raise StartError(f"Could not start containers from {compose_file}")
        logger.success("Containers started")

    def deploy(self, compose_file: Path) -> None:
        self.tear_down(compose_file)
        self.build(compose_file)
        self.start_detached(compose_file)
