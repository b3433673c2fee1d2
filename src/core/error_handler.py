"""
Error handling for the secure erase procedure
Maps terminal outcomes to operator messages and suggested remedies
"""

import logging
from typing import List, Optional
from dataclasses import dataclass, field

from .models import OperationOutcome

logger = logging.getLogger(__name__)

FROZEN_HELP_URL = "https://ata.wiki.kernel.org/index.php/ATA_Secure_Erase"

# Failures after the password is set may leave the disk locked
_CRITICAL_OUTCOMES = (OperationOutcome.PASSWORD_SET_FAILED, OperationOutcome.ERASE_FAILED)


@dataclass
class ErrorInfo:
    """Error information surfaced to the operator"""
    outcome: OperationOutcome
    message: str
    device: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)

    @property
    def critical(self) -> bool:
        return self.outcome in _CRITICAL_OUTCOMES


class ErrorHandler:
    """Turns failed outcomes into logged, operator-facing error information"""

    def __init__(self, password: str = ""):
        self.password = password

    def handle_outcome(self, outcome: OperationOutcome, device: Optional[str] = None,
                       detail: str = "") -> Optional[ErrorInfo]:
        """
        Handle a terminal outcome

        Returns:
            ErrorInfo for failures, None for success and cancellation
        """
        if not outcome.is_error:
            return None

        error_info = ErrorInfo(
            outcome=outcome,
            message=detail or self._get_message(outcome, device),
            device=device,
            suggestions=self._get_suggestions(outcome, device),
        )
        self._log_error(error_info)
        return error_info

    def _get_message(self, outcome: OperationOutcome, device: Optional[str]) -> str:
        messages = {
            OperationOutcome.PREFLIGHT_FAILED: "Environment check failed",
            OperationOutcome.DEVICE_NOT_FOUND: f"No such block device {device}",
            OperationOutcome.UNSUPPORTED: f"ATA SECURITY ERASE UNIT unsupported on {device}",
            OperationOutcome.FROZEN: f"Disk {device} security state is frozen",
            OperationOutcome.PASSWORD_SET_FAILED: f"Error setting user password on {device}",
            OperationOutcome.ERASE_FAILED: f"Error performing secure erase on {device}",
        }
        return messages[outcome]

    def _get_suggestions(self, outcome: OperationOutcome, device: Optional[str]) -> List[str]:
        """Get remedies for a failed outcome"""
        if outcome == OperationOutcome.DEVICE_NOT_FOUND:
            return ["Verify the device path, use -l to list disks that support secure erase"]
        if outcome == OperationOutcome.UNSUPPORTED:
            return [f"Check the Security section of 'hdparm -I {device}'"]
        if outcome == OperationOutcome.FROZEN:
            return [f"Check {FROZEN_HELP_URL} for possible solutions "
                    "(suspending and resuming the system, or hot-plugging the disk, "
                    "usually clears the frozen state)"]
        if outcome == OperationOutcome.PASSWORD_SET_FAILED:
            return [
                f"Check with 'hdparm -I {device}' to ensure {device} is still in a usable state",
                f"The user password is {self.password}. If present, it should be removed with:",
                f"hdparm --user-master u --security-unlock {self.password} {device}",
            ]
        if outcome == OperationOutcome.ERASE_FAILED:
            return [
                f"Check the security state with 'hdparm -I {device}'",
                f"If the user password {self.password} is still set, clear it with -d {device} "
                f"or 'hdparm --user-master u --security-disable {self.password} {device}'",
            ]
        return []

    def _log_error(self, error_info: ErrorInfo):
        """Log the error with appropriate level"""
        log_message = f"[{error_info.outcome.value}] {error_info.message}"
        if error_info.critical:
            logger.critical(log_message)
        else:
            logger.error(log_message)
