"""
Core ATA secure erase procedure
Sequential decision procedure around hdparm's SECURITY ERASE UNIT support
"""

import logging
from typing import Callable, Iterator, List, Optional, Union

from .models import Device, DeviceReport, EraseState, OperationOutcome, PreflightResult
from .report_parser import ReportParser, HdparmReportParser
from .platforms.base_handler import BaseDiskHandler
from .preflight import run_preflight
from .tool_manager import ToolManager
from .config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

AFFIRMATIVE_ANSWERS = ("y", "yes")


class EligibleDevices:
    """
    Block devices that support SECURITY ERASE UNIT

    Every iteration enumerates the system again and re-queries each device,
    so the sequence can be walked more than once and reflects the current
    state of the disks.
    """

    def __init__(self, controller: "EraseController"):
        self.controller = controller

    def __iter__(self) -> Iterator[Device]:
        for device in self.controller.handler.list_block_devices():
            if self.controller.query_report(device).supported:
                yield device


class EraseController:
    """Drives one secure erase, checking the device state before and after each step"""

    def __init__(self, handler: BaseDiskHandler, parser: Optional[ReportParser] = None,
                 tool_manager: Optional[ToolManager] = None, config: Optional[dict] = None,
                 confirm: Callable[[str], str] = input, output: Callable[[str], None] = print):
        self.handler = handler
        self.parser = parser or HdparmReportParser()
        self.tool_manager = tool_manager
        self.config = config or DEFAULT_CONFIG
        self.password = self.config.get("password", DEFAULT_CONFIG["password"])
        self.confirm = confirm
        self.output = output
        self.preflight_result: Optional[PreflightResult] = None
        self.trace: List[EraseState] = []

    def check_environment(self) -> PreflightResult:
        """Run the startup checks and remember the result for later erase calls"""
        if self.tool_manager is None:
            self.tool_manager = ToolManager(self.config.get("required_tools", ["hdparm"]))
        self.preflight_result = run_preflight(self.handler, self.tool_manager, self.config)
        return self.preflight_result

    def query_report(self, device: Union[Device, str]) -> DeviceReport:
        """Get a freshly parsed security report for a device"""
        device = self._as_device(device)
        report = self.parser.parse(self.handler.identify(device))
        logger.debug(f"Security report for {device}: {report}")
        return report

    def list_eligible(self) -> EligibleDevices:
        """Get the devices on which a secure erase can be attempted"""
        return EligibleDevices(self)

    def erase(self, device: Union[Device, str], interactive: bool = True,
              enhanced: bool = False) -> OperationOutcome:
        """
        Erase a disk with the ATA SECURITY ERASE UNIT command

        Args:
            device: Block device to erase
            interactive: Ask the operator for confirmation before erasing
            enhanced: Use ENHANCED SECURITY ERASE UNIT when the disk supports it

        Returns:
            The terminal outcome; no step is ever retried
        """
        device = self._as_device(device)
        self.trace = []
        self._enter(EraseState.START, device)

        if self.preflight_result is not None and not self.preflight_result.passed:
            return self._finish(OperationOutcome.PREFLIGHT_FAILED, device)
        self._enter(EraseState.PREFLIGHT_OK, device)

        if not self.handler.is_block_device(device.path):
            return self._finish(OperationOutcome.DEVICE_NOT_FOUND, device)

        report = self.query_report(device)
        if not report.supported:
            return self._finish(OperationOutcome.UNSUPPORTED, device)
        self._enter(EraseState.SUPPORT_CHECKED, device)

        report = self.query_report(device)
        if report.frozen:
            return self._finish(OperationOutcome.FROZEN, device)
        self._enter(EraseState.FROZEN_CHECKED, device)

        if interactive:
            self._enter(EraseState.CONFIRM_PROMPT, device)
            if not self._confirmed(device):
                self.output("Secure erase operation cancelled")
                return self._finish(OperationOutcome.CANCELLED, device)

        self.output("Attempting to set user password and enable secure erase...")
        if not self.handler.set_password(device, self.password):
            logger.debug(f"Set password command reported failure on {device}, checking report")
        self._enter(EraseState.PASSWORD_SET, device)

        report = self.query_report(device)
        if not report.password_enabled:
            return self._finish(OperationOutcome.PASSWORD_SET_FAILED, device)
        self._enter(EraseState.PASSWORD_VERIFIED, device)

        use_enhanced = enhanced and report.enhanced_erase_supported
        if enhanced and not use_enhanced:
            logger.warning(f"{device} does not advertise ENHANCED SECURITY ERASE, using normal erase")
            self.output(f"Enhanced erase not supported on {device}, using SECURITY ERASE UNIT")

        self.output(f"User password set, attempting secure erase for {device}")
        estimate = report.estimated_enhanced_erase_time if use_enhanced else report.estimated_erase_time
        if estimate:
            self.output(estimate)

        if not self.handler.security_erase(device, self.password, enhanced=use_enhanced):
            logger.debug(f"Erase command reported failure on {device}, checking report")
        self._enter(EraseState.ERASED, device)

        # A completed erase leaves the security feature disabled again
        report = self.query_report(device)
        self._enter(EraseState.VERIFIED, device)
        if report.password_enabled:
            return self._finish(OperationOutcome.ERASE_FAILED, device)

        self.output(f"Secure erase was successful for {device}")
        return self._finish(OperationOutcome.SUCCESS, device)

    def disable_password(self, device: Union[Device, str]) -> OperationOutcome:
        """Clear the transient user password left behind by an interrupted erase"""
        device = self._as_device(device)
        if not self.handler.is_block_device(device.path):
            return self._finish(OperationOutcome.DEVICE_NOT_FOUND, device, "Password disable")

        self.handler.disable_password(device, self.password)
        if self.query_report(device).password_enabled:
            return self._finish(OperationOutcome.ERASE_FAILED, device, "Password disable")

        self.output(f"User password cleared on {device}")
        return self._finish(OperationOutcome.SUCCESS, device, "Password disable")

    def _confirmed(self, device: Device) -> bool:
        self.output(f"WARNING: this procedure will erase all data on {device} beyond recovery.")
        mount_points = self.handler.get_mount_points(device)
        if mount_points:
            self.output(f"WARNING: {device} is mounted on {', '.join(mount_points)}")
        try:
            answer = self.confirm("Continue [Y/N]? ")
        except EOFError:
            return False
        return answer.strip().lower() in AFFIRMATIVE_ANSWERS

    def _enter(self, state: EraseState, device: Device):
        self.trace.append(state)
        logger.debug(f"{device}: {state.value}")

    def _finish(self, outcome: OperationOutcome, device: Device,
                action: str = "Secure erase") -> OperationOutcome:
        if outcome.is_error:
            logger.error(f"{action} of {device} ended with {outcome.value}")
        else:
            logger.info(f"{action} of {device} ended with {outcome.value}")
        return outcome

    @staticmethod
    def _as_device(device: Union[Device, str]) -> Device:
        return device if isinstance(device, Device) else Device(device)
