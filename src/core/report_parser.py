"""
Parsing of hdparm identify reports
Extracts security-erase capability and state from ``hdparm -I`` output
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import DeviceReport

logger = logging.getLogger(__name__)

SECURITY_MARKER = "Security:"
SUPPORT_TOKEN = "Master"
NEGATION_TOKEN = "not"
FROZEN_MARKER = "frozen"
ERASE_TIME_MARKER = "for SECURITY ERASE UNIT"
ENHANCED_ERASE_TIME_MARKER = "for ENHANCED SECURITY ERASE UNIT"
ENHANCED_SUPPORT_MARKER = "supported: enhanced erase"

# Offsets of the lines below the security marker, as laid out by hdparm:
#   Security:
#       Master password revision code = 65534
#           supported
#       not enabled
SUPPORT_LINE_OFFSET = 1
PASSWORD_LINE_OFFSET = 3


class ReportParser(ABC):
    """Turns the text of an identify report into a DeviceReport"""

    @abstractmethod
    def parse(self, text: str) -> DeviceReport:
        """Parse an identify report"""
        pass


class HdparmReportParser(ReportParser):
    """
    Fixed-offset parser for ``hdparm -I`` output

    The password state is read from the third line after the security
    marker. hdparm has printed the block in this shape for years, but any
    change to it breaks password detection first.
    """

    def parse(self, text: str) -> DeviceReport:
        lines = text.splitlines()
        marker = self._find_line(lines, SECURITY_MARKER)

        if marker is None:
            logger.debug("No security block found in identify report")

        estimated = self._find_line(lines, ERASE_TIME_MARKER)
        estimated_enhanced = self._find_line(lines, ENHANCED_ERASE_TIME_MARKER)

        return DeviceReport(
            supported=self._first_token_at(lines, marker, SUPPORT_LINE_OFFSET) == SUPPORT_TOKEN,
            frozen=self._is_frozen(lines),
            password_enabled=self._is_password_enabled(lines, marker),
            estimated_erase_time=lines[estimated].strip() if estimated is not None else None,
            enhanced_erase_supported=self._is_enhanced_supported(lines),
            estimated_enhanced_erase_time=self._enhanced_time(lines, estimated_enhanced),
        )

    @staticmethod
    def _find_line(lines: List[str], needle: str, start: int = 0) -> Optional[int]:
        """Index of the first line containing needle"""
        for index in range(start, len(lines)):
            if needle in lines[index]:
                return index
        return None

    @staticmethod
    def _first_token_at(lines: List[str], marker: Optional[int], offset: int) -> Optional[str]:
        if marker is None:
            return None
        index = marker + offset
        if index >= len(lines):
            return None
        tokens = lines[index].split()
        return tokens[0] if tokens else None

    def _is_frozen(self, lines: List[str]) -> bool:
        # Anything other than an explicit "not frozen" counts as frozen
        index = self._find_line(lines, FROZEN_MARKER)
        if index is None:
            return True
        tokens = lines[index].split()
        return not tokens or tokens[0] != NEGATION_TOKEN

    def _is_password_enabled(self, lines: List[str], marker: Optional[int]) -> bool:
        token = self._first_token_at(lines, marker, PASSWORD_LINE_OFFSET)
        if token is None:
            return False
        return token != NEGATION_TOKEN

    def _is_enhanced_supported(self, lines: List[str]) -> bool:
        # "not\tsupported: enhanced erase" when absent
        index = self._find_line(lines, ENHANCED_SUPPORT_MARKER)
        if index is None:
            return False
        return lines[index].split()[0] != NEGATION_TOKEN

    @staticmethod
    def _enhanced_time(lines: List[str], index: Optional[int]) -> Optional[str]:
        # hdparm prints both estimates on one line:
        #   "4min for SECURITY ERASE UNIT. 2min for ENHANCED SECURITY ERASE UNIT."
        if index is None:
            return None
        for sentence in lines[index].split("."):
            if ENHANCED_ERASE_TIME_MARKER in sentence:
                return sentence.strip()
        return None
