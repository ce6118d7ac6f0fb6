# deployer/cli.py
import sys
from typing import Optional

import click
from dotenv import load_dotenv
from loguru import logger

from . import __version__
from .config import (
    DEFAULT_HEALTH_ENDPOINTS,
    DEFAULT_IMAGE_PATTERN,
    DEFAULT_INSPECT_IMAGE,
    DEFAULT_PORTS,
    DEFAULT_REPORT_PATH,
    build_plan,
)
from .engine import DockerRuntime
from .metrics import write_metrics
from .models import HealthCheckConfig
from .pipeline import DeploymentPipeline

EXIT_INTERRUPTED = 130


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    if log_file:
        logger.add(log_file, level="DEBUG")


@click.command(context_settings={"auto_envvar_prefix": "DEPLOY"})
@click.option("--compose-file", default=None, help="Compose file to use instead of the default lookup.")
@click.option("--project-dir", default=".", show_default=True, type=click.Path(file_okay=False))
@click.option("--ports", default=DEFAULT_PORTS, show_default=True, help="Ports that must be free.")
@click.option(
    "--health-endpoints",
    default=DEFAULT_HEALTH_ENDPOINTS,
    show_default=True,
    help="Comma separated url, name=url or name=url@status entries.",
)
@click.option("--image-pattern", default=DEFAULT_IMAGE_PATTERN, show_default=True)
@click.option("--inspect-image", default=DEFAULT_INSPECT_IMAGE, show_default=True)
@click.option(
    "--ancestor-image",
    default=None,
    help="Exact image for the first container lookup. Defaults to --inspect-image for the nginx pattern, else the pattern.",
)
@click.option("--report-path", default=DEFAULT_REPORT_PATH, show_default=True)
@click.option("--health-attempts", default=10, show_default=True, type=click.IntRange(min=1))
@click.option("--health-interval", default=1.0, show_default=True, type=click.FloatRange(min=0))
@click.option("--health-timeout", default=5.0, show_default=True, type=click.FloatRange(min=0, min_open=True))
@click.option("--initial-delay", default=0.0, show_default=True, type=click.FloatRange(min=0))
@click.option("--keep-volumes", is_flag=True, help="Do not pass -v when tearing down.")
@click.option("--metrics-file", default=None, help="Write Prometheus textfile metrics here.")
@click.option("--log-file", default=None)
@click.option("-v", "--verbose", is_flag=True)
@click.version_option(__version__)
def main(
    compose_file,
    project_dir,
    ports,
    health_endpoints,
    image_pattern,
    inspect_image,
    ancestor_image,
    report_path,
    health_attempts,
    health_interval,
    health_timeout,
    initial_delay,
    keep_volumes,
    metrics_file,
    log_file,
    verbose,
):
    """Build and start the compose stack, then health check and inspect it."""
    configure_logging(verbose, log_file)

    try:
        plan = build_plan(
            compose_file=compose_file,
            project_dir=project_dir,
            ports=ports,
            health_endpoints=health_endpoints,
            image_pattern=image_pattern,
            inspect_image=inspect_image,
            ancestor_image=ancestor_image,
            report_path=report_path,
            health_config=HealthCheckConfig(
                max_attempts=health_attempts,
                interval=health_interval,
                timeout=health_timeout,
                initial_delay=initial_delay,
            ),
            remove_volumes=not keep_volumes,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    logger.info("===== Automated Deployment =====")
    pipeline = DeploymentPipeline(plan, DockerRuntime())
    try:
        report = pipeline.run()
    except KeyboardInterrupt:
        # no cleanup of a half-started stack
        logger.warning("Interrupted")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logger.exception(f"Fatal error during execution: {e}")
        sys.exit(1)
    finally:
        if metrics_file:
            try:
                write_metrics(metrics_file)
            except OSError as e:
                logger.warning(f"Could not write metrics to {metrics_file}: {e}")

    sys.exit(report.exit_code)


def run():
    load_dotenv()
    main()
