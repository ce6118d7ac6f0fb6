# deployer/preflight.py
from loguru import logger

from .engine import ContainerRuntime
from .errors import MissingTool, PortInUse
from .models import DeploymentPlan, ToolAvailability

COMPOSE_TOOL = "docker compose"


class PreflightChecker:
    """Verify tools and ports before anything is torn down or built."""

    def __init__(self, runtime: ContainerRuntime):
        self.runtime = runtime

    def check_tools(self, plan: DeploymentPlan) -> ToolAvailability:
        found = {}
        for tool in plan.required_tools:
            found[tool] = self.runtime.check_tool_available(tool)
        found[COMPOSE_TOOL] = self.runtime.compose_available()
        tools = ToolAvailability(found)

        missing = tools.missing()
        if missing:
            raise MissingTool(missing[0])
        logger.info(f"Required tools found: {', '.join(tools)}")
        return tools

    def check_ports(self, plan: DeploymentPlan) -> None:
        if not plan.required_ports:
            return
        logger.info(
            f"Checking if required ports are free: {' '.join(str(p) for p in plan.required_ports)}"
        )
        for port in plan.required_ports:
            in_use = self.runtime.check_port_in_use(port)
            if in_use is None:
                logger.warning(f"'lsof' not available, skipping strict port check for {port}")
                continue
            if in_use:
                raise PortInUse(port)

    def check(self, plan: DeploymentPlan) -> ToolAvailability:
        tools = self.check_tools(plan)
        self.check_ports(plan)
        return tools
