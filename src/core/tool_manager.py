"""
Tool Manager for locating the external utilities the erase procedure drives
"""

import subprocess
import logging
from typing import Optional, Dict, List, Iterable

logger = logging.getLogger(__name__)

DEFAULT_TOOLS = ('hdparm',)

# Distribution package providing each tool
TOOL_PACKAGES = {
    'hdparm': 'hdparm',
}


class ToolManager:
    """Resolves required tools on the system PATH"""

    def __init__(self, tools: Iterable[str] = DEFAULT_TOOLS):
        # tool -> resolved command, None once a lookup has failed
        self.tool_paths: Dict[str, Optional[str]] = {}
        self.tools = list(tools)

    def get_tool_path(self, tool_name: str) -> Optional[str]:
        """
        Get the command to run a tool

        Returns:
            The tool name if it is on the PATH, None otherwise
        """
        if tool_name not in self.tools:
            logger.warning(f"Unknown tool: {tool_name}")
            return None

        if tool_name not in self.tool_paths:
            if self._check_system_tool(tool_name):
                logger.debug(f"Using system {tool_name}")
                self.tool_paths[tool_name] = tool_name
            else:
                logger.debug(f"Tool {tool_name} not available")
                self.tool_paths[tool_name] = None
        return self.tool_paths[tool_name]

    def _check_system_tool(self, command: str) -> bool:
        """Check if a system tool is available"""
        try:
            result = subprocess.run(["which", command],
                                    capture_output=True,
                                    text=True)
            return result.returncode == 0
        except FileNotFoundError:
            return False

    def is_tool_available(self, tool_name: str) -> bool:
        return self.get_tool_path(tool_name) is not None

    def get_missing_tools(self) -> List[str]:
        """Get list of tools that could not be located"""
        return [tool_name for tool_name in self.tools
                if not self.is_tool_available(tool_name)]

    def get_installation_suggestions(self) -> Dict[str, str]:
        """Get installation suggestions for missing tools"""
        suggestions = {}
        for tool_name in self.get_missing_tools():
            package = TOOL_PACKAGES.get(tool_name, tool_name)
            suggestions[tool_name] = (
                f"install the '{package}' package with your distribution's "
                f"package manager (e.g. sudo apt-get install {package})"
            )
        return suggestions
