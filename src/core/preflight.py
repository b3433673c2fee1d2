"""
Startup environment validation
Each check is reported on its own so the operator sees exactly what is missing
"""

import re
import logging
from typing import Optional, Tuple, Iterable

from .models import PreflightCheck, PreflightResult
from .platforms.base_handler import BaseDiskHandler
from .tool_manager import ToolManager

logger = logging.getLogger(__name__)

REQUIRED_SYSTEM = "Linux"
KERNEL_VERSION = re.compile(r'^(\d+)(?:\.(\d+))?(?:\.(\d+))?')


def parse_kernel_version(release: str) -> Optional[Tuple[int, int, int]]:
    """Extract (major, minor, patch) from a kernel release string like '6.1.0-13-amd64'"""
    match = KERNEL_VERSION.match(release.strip())
    if not match:
        return None
    return tuple(int(part) if part else 0 for part in match.groups())


def check_system(handler: BaseDiskHandler) -> PreflightCheck:
    system = handler.get_system_name()
    if system != REQUIRED_SYSTEM:
        return PreflightCheck("system", False,
                              f"This tool requires {REQUIRED_SYSTEM}, found {system or 'unknown'}")
    return PreflightCheck("system", True, system)


def check_kernel(handler: BaseDiskHandler, min_version: str) -> PreflightCheck:
    release = handler.get_kernel_version()
    current = parse_kernel_version(release)
    required = parse_kernel_version(min_version)
    if current is None:
        return PreflightCheck("kernel", False, f"Unable to determine kernel version from '{release}'")
    if required is not None and current < required:
        return PreflightCheck("kernel", False,
                              f"Kernel {release} is too old, version {min_version} or later is required")
    return PreflightCheck("kernel", True, release)


def check_tools(tool_manager: ToolManager, tools: Iterable[str]) -> PreflightCheck:
    missing = [tool for tool in tools if not tool_manager.is_tool_available(tool)]
    if missing:
        suggestions = tool_manager.get_installation_suggestions()
        hints = [f"{tool}: {suggestions[tool]}" for tool in missing if tool in suggestions]
        message = f"This tool requires {', '.join(missing)}"
        if hints:
            message += " (" + "; ".join(hints) + ")"
        return PreflightCheck("tools", False, message)
    return PreflightCheck("tools", True, "all required tools available")


def check_privilege(handler: BaseDiskHandler) -> PreflightCheck:
    if not handler.is_privileged():
        return PreflightCheck("privilege", False,
                              "This tool must be run as root or with sudo")
    return PreflightCheck("privilege", True, "running as root")


def run_preflight(handler: BaseDiskHandler, tool_manager: ToolManager, config: dict) -> PreflightResult:
    """
    Validate the environment before touching any device

    Stops at the first failed check, later checks are not run.

    Returns:
        PreflightResult with the checks that were run, in order
    """
    result = PreflightResult()
    checks = (
        lambda: check_system(handler),
        lambda: check_kernel(handler, config.get("min_kernel_version", "0")),
        lambda: check_tools(tool_manager, config.get("required_tools", ["hdparm"])),
        lambda: check_privilege(handler),
    )

    for run_check in checks:
        check = run_check()
        result.checks.append(check)
        if not check.passed:
            logger.error(f"Preflight check '{check.name}' failed: {check.message}")
            break
        logger.debug(f"Preflight check '{check.name}' passed: {check.message}")

    return result
