"""
Data models for the ATA secure erase application
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


class OperationOutcome(Enum):
    """Terminal result of one invocation"""
    SUCCESS = "success"
    CANCELLED = "cancelled"
    UNSUPPORTED = "unsupported"
    FROZEN = "frozen"
    PASSWORD_SET_FAILED = "password_set_failed"
    ERASE_FAILED = "erase_failed"
    PREFLIGHT_FAILED = "preflight_failed"
    DEVICE_NOT_FOUND = "device_not_found"

    @property
    def is_error(self) -> bool:
        """Cancelling is a user decision, not a failure"""
        return self not in (OperationOutcome.SUCCESS, OperationOutcome.CANCELLED)

    @property
    def exit_code(self) -> int:
        return 1 if self.is_error else 0


class EraseState(Enum):
    """States traversed by a single erase call"""
    START = "start"
    PREFLIGHT_OK = "preflight_ok"
    SUPPORT_CHECKED = "support_checked"
    FROZEN_CHECKED = "frozen_checked"
    CONFIRM_PROMPT = "confirm_prompt"
    PASSWORD_SET = "password_set"
    PASSWORD_VERIFIED = "password_verified"
    ERASED = "erased"
    VERIFIED = "verified"


@dataclass(frozen=True)
class DeviceReport:
    """Parsed view of the security block of an identify report"""
    supported: bool = False
    frozen: bool = True
    password_enabled: bool = False
    estimated_erase_time: Optional[str] = None
    enhanced_erase_supported: bool = False
    estimated_enhanced_erase_time: Optional[str] = None


@dataclass(frozen=True)
class Device:
    """A block device identified by its path"""
    path: str

    @classmethod
    def from_name(cls, name: str, dev_dir: str = "/dev") -> "Device":
        return cls(os.path.join(dev_dir, name))

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __str__(self):
        return self.path


@dataclass
class PreflightCheck:
    """Result of one environment check"""
    name: str
    passed: bool
    message: str = ""


@dataclass
class PreflightResult:
    """Ordered results of the startup environment checks"""
    checks: List[PreflightCheck] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(check.passed for check in self.checks)

    @property
    def failures(self) -> List[PreflightCheck]:
        return [check for check in self.checks if not check.passed]

    @property
    def first_failure(self) -> Optional[PreflightCheck]:
        failures = self.failures
        return failures[0] if failures else None
