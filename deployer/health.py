# deployer/health.py
import time
from typing import Callable, Iterable, List, Optional

import requests
from loguru import logger

from .errors import EndpointUnresponsive
from .metrics import HEALTH_CHECK_ATTEMPTS
from .models import HealthCheckConfig, HealthCheckResult, HealthEndpoint


class HealthVerifier:
    """Poll HTTP endpoints until they answer or the attempt ceiling is hit."""

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self.sleep = sleep

    def _attempt(self, endpoint: HealthEndpoint, timeout: float):
        """Return (succeeded, status_code, error) for a single request."""
        try:
            r = requests.get(endpoint.url, timeout=timeout)
        except requests.RequestException as e:
            return False, None, f"{type(e).__name__}: {e}"
        if endpoint.is_success(r.status_code):
            return True, r.status_code, None
        return False, r.status_code, f"HTTP {r.status_code}"

    def verify(self, endpoint: HealthEndpoint, config: HealthCheckConfig) -> HealthCheckResult:
        logger.info(f"Running health check on {endpoint.name} ({endpoint.url})...")
        last_error: Optional[str] = None
        for attempt in range(1, config.max_attempts + 1):
            ok, status_code, error = self._attempt(endpoint, config.timeout)
            HEALTH_CHECK_ATTEMPTS.labels(
                endpoint=endpoint.name, result="ok" if ok else "failed"
            ).inc()
            if ok:
                logger.success(f"{endpoint.name} is responding (HTTP {status_code})")
                return HealthCheckResult(
                    endpoint=endpoint.url,
                    succeeded=True,
                    attempts_used=attempt,
                    status_code=status_code,
                )
            last_error = error
            logger.debug(
                f"{endpoint.name} attempt {attempt}/{config.max_attempts} failed: {error}"
            )
            if attempt < config.max_attempts and config.interval > 0:
                self.sleep(config.interval)

        logger.error(f"{endpoint.name} unresponsive after {config.max_attempts} attempt(s)")
        raise EndpointUnresponsive(endpoint.url, config.max_attempts, last_error)

    def verify_all(
        self, endpoints: Iterable[HealthEndpoint], config: HealthCheckConfig
    ) -> List[HealthCheckResult]:
        endpoints = list(endpoints)
        if endpoints and config.initial_delay > 0:
            logger.info(f"Waiting {config.initial_delay:g}s for services to start...")
            self.sleep(config.initial_delay)
        return [self.verify(endpoint, config) for endpoint in endpoints]
