# deployer/errors.py
"""Error types raised by the deployment stages.

Every fatal failure derives from ``DeploymentError`` and carries the process
exit code the CLI should return for it.
"""
from typing import Iterable, Optional


class DeploymentError(Exception):
    exit_code = 1


class PreflightError(DeploymentError):
    exit_code = 2


class MissingTool(PreflightError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' is not installed or not in PATH")


class PortInUse(PreflightError):
    def __init__(self, port: int):
        self.port = port
        super().__init__(f"Port {port} is already in use. Free it and run again.")


class NoManifestFound(DeploymentError):
    exit_code = 3

    def __init__(self, candidates: Iterable[str], base_dir: Optional[str] = None):
        self.candidates = list(candidates)
        self.base_dir = base_dir
        where = f" in {base_dir}" if base_dir else ""
        super().__init__(f"None of {', '.join(self.candidates)} found{where}")


class BuildError(DeploymentError):
    exit_code = 4


class StartError(DeploymentError):
    exit_code = 5


class EndpointUnresponsive(DeploymentError):
    exit_code = 6

    def __init__(self, endpoint: str, attempts: int, last_error: Optional[str] = None):
        self.endpoint = endpoint
        self.attempts = attempts
        self.last_error = last_error
        msg = f"{endpoint} did not respond after {attempts} attempt(s)"
        if last_error:
            msg += f": {last_error}"
        super().__init__(msg)


class InspectError(DeploymentError):
    exit_code = 7


class ContainerNotFound(LookupError):
    """No running container matched the image pattern. Never fatal."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"Could not find a running container matching '{pattern}'")
