# deployer/pipeline.py
"""Sequential, fail-fast deployment run.

Each stage raises a ``DeploymentError`` subclass on a fatal failure;
``DeploymentPipeline.run`` stops at the first one and turns it into a failed
``DeploymentReport`` carrying the matching exit code.
"""
from pathlib import Path
from typing import Optional

from loguru import logger

from .driver import DeploymentDriver
from .engine import ContainerRuntime
from .errors import ContainerNotFound, DeploymentError, EndpointUnresponsive
from .health import HealthVerifier
from .inspector import DEFAULT_FIELDS, ContainerInspector
from .metrics import DEPLOYMENT_COUNTER
from .models import DeploymentPlan, DeploymentReport, HealthCheckResult
from .preflight import PreflightChecker
from .resolver import resolve_compose_file


class DeploymentPipeline:
    def __init__(
        self,
        plan: DeploymentPlan,
        runtime: ContainerRuntime,
        verifier: Optional[HealthVerifier] = None,
    ):
        self.plan = plan
        self.runtime = runtime
        self.preflight = PreflightChecker(runtime)
        self.driver = DeploymentDriver(runtime, remove_volumes=plan.remove_volumes)
        self.verifier = verifier or HealthVerifier()
        self.inspector = ContainerInspector(runtime)

    def _log_running_containers(self) -> None:
        try:
            containers = self.runtime.list_containers()
        except Exception as e:
            logger.warning(f"Could not list running containers: {e}")
            return
        logger.info("Current running containers:")
        for c in containers:
            logger.info(f"  {c.short_id}  {c.image:<30}  {c.status or ''}  {c.name or ''}")

    def _find_proxy_container(self, report: DeploymentReport) -> None:
        plan = self.plan
        try:
            container = self.inspector.find_container(plan.image_pattern, ancestor=plan.ancestor_image)
        except ContainerNotFound as e:
            logger.warning(f"{e}")
            return
        except Exception as e:
            logger.warning(f"Container lookup failed: {e}")
            return
        report.container_id = container.id
        logger.info(f"Container ID for '{plan.image_pattern}': {container.short_id}")

    def _run_stages(self, report: DeploymentReport) -> None:
        plan = self.plan

        logger.info(">> Pre-deployment checks")
        self.preflight.check(plan)

        logger.info(">> Resolving compose file")
        compose_file = resolve_compose_file(plan.compose_candidates, plan.project_dir)
        report.compose_file = compose_file

        logger.info(">> Build & deploy")
        self.driver.deploy(compose_file)

        logger.info(">> Health checks")
        try:
            for result in self.verifier.verify_all(plan.health_endpoints, plan.health_config):
                report.health_results.append(result)
        except EndpointUnresponsive as e:
            report.health_results.append(
                HealthCheckResult(
                    endpoint=e.endpoint,
                    succeeded=False,
                    attempts_used=e.attempts,
                    last_error=e.last_error,
                )
            )
            raise

        self._log_running_containers()
        self._find_proxy_container(report)

        logger.info(">> Image inspection")
        record = self.inspector.inspect_image(plan.inspect_image)
        report.report_path = self.inspector.write_report(record, Path(plan.report_path))
        metadata = self.inspector.extract_fields(record, DEFAULT_FIELDS, image=plan.inspect_image)
        report.metadata = metadata
        self.inspector.log_metadata(metadata)

    def run(self) -> DeploymentReport:
        report = DeploymentReport(status="ok")
        try:
            self._run_stages(report)
        except DeploymentError as e:
            logger.error(f"{type(e).__name__}: {e}")
            report.status = "failed"
            report.error = str(e)
            report.exit_code = e.exit_code
            DEPLOYMENT_COUNTER.labels(outcome=type(e).__name__).inc()
            return report

        DEPLOYMENT_COUNTER.labels(outcome="ok").inc()
        logger.success("Deployment completed successfully")
        return report
