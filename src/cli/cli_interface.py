"""
Command-line interface for the ATA secure erase application
Erase a disk with the ATA SECURITY ERASE UNIT command
"""

import argparse
import sys
import logging
from typing import List, Optional

from ..core.config import load_config
from ..core.erase_controller import EraseController
from ..core.error_handler import ErrorHandler, ErrorInfo
from ..core.models import OperationOutcome
from ..core.platforms.linux_disk_handler import LinuxDiskHandler
from ..core.report_parser import HdparmReportParser
from ..core.tool_manager import ToolManager
from ..utils.logger import setup_logger

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with the tool's failure exit code"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


class CLIInterface:
    """Command-line interface for the secure erase procedure"""

    def __init__(self, controller: Optional[EraseController] = None, configure_logging: bool = True):
        self.controller = controller
        self.configure_logging = configure_logging
        self.error_handler = ErrorHandler()

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Run the CLI interface

        Returns:
            Process exit code: 0 for success, cancellation and listing, 1 for any failure
        """
        if argv is None:
            argv = sys.argv[1:]

        parser = self._create_parser()
        if not argv:
            parser.print_help(sys.stderr)
            return 1

        try:
            args = parser.parse_args(argv)
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1

        try:
            config = load_config(args.config)
            if self.configure_logging:
                if args.verbose:
                    log_level = logging.DEBUG
                elif args.quiet:
                    log_level = logging.WARNING
                else:
                    log_level = logging.INFO
                setup_logger(log_level, args.log_file, config.get("log_dir", "logs"), console=args.verbose)

            controller = self.controller or self._create_controller(config)
            self.error_handler = ErrorHandler(password=controller.password)

            preflight = controller.check_environment()
            if not preflight.passed:
                failure = preflight.first_failure
                return self._report(OperationOutcome.PREFLIGHT_FAILED, None, f"Error: {failure.message}")

            if args.list:
                return self._list_disks(controller)
            elif args.info:
                return self._show_report(controller, args.info)
            elif args.disable_password:
                return self._disable_password(controller, args.disable_password)
            elif args.device:
                return self._erase_disk(controller, args.device, not args.force, args.enhanced)
            else:
                parser.print_usage(sys.stderr)
                print(f"{parser.prog}: error: a device is required", file=sys.stderr)
                return 1

        except KeyboardInterrupt:
            print("\nOperation interrupted by user", file=sys.stderr)
            logger.warning("Operation interrupted by user")
            return 1
        except OSError as e:
            logger.error(f"Application error: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create command-line argument parser"""
        parser = _ArgumentParser(
            description="Erase a disk with the ATA SECURITY ERASE UNIT command",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            usage="%(prog)s [-f] [-e] device\n       %(prog)s -l",
            epilog="""
Examples:
  %(prog)s -l                      # List disks supporting secure erase
  %(prog)s /dev/sdb                # Erase /dev/sdb after confirmation
  %(prog)s -f /dev/sdb             # Erase /dev/sdb without prompting
  %(prog)s -i /dev/sdb             # Show the security state of /dev/sdb
  %(prog)s -d /dev/sdb             # Clear a password left by a failed erase
            """
        )

        parser.add_argument('device', nargs='?',
                            help='Device path to erase (e.g., /dev/sdb)')
        parser.add_argument('-f', '--force', action='store_true',
                            help="Don't prompt before erasing")
        parser.add_argument('-l', '--list', action='store_true',
                            help='List disks')
        parser.add_argument('-e', '--enhanced', action='store_true',
                            help='Use ENHANCED SECURITY ERASE UNIT when supported')
        parser.add_argument('-i', '--info', metavar='DEVICE',
                            help='Show the security state of a disk')
        parser.add_argument('-d', '--disable-password', metavar='DEVICE',
                            help='Remove the temporary user password from a disk')
        parser.add_argument('-c', '--config', metavar='PATH',
                            help='Configuration file (JSON)')
        parser.add_argument('--log-file', metavar='PATH',
                            help='Log file (default: timestamped file under logs/)')
        parser.add_argument('-v', '--verbose', action='store_true',
                            help='Enable verbose output')
        parser.add_argument('-q', '--quiet', action='store_true',
                            help='Only log warnings and errors')

        return parser

    def _create_controller(self, config: dict) -> EraseController:
        tool_manager = ToolManager(config.get("required_tools", ["hdparm"]))
        handler = LinuxDiskHandler(tool_manager,
                                   partitions_file=config.get("partitions_file", "/proc/partitions"),
                                   dev_dir=config.get("dev_dir", "/dev"))
        return EraseController(handler, HdparmReportParser(), tool_manager, config)

    def _list_disks(self, controller: EraseController) -> int:
        """List disks supporting SECURITY ERASE UNIT"""
        devices = list(controller.list_eligible())
        if not devices:
            print("No disks available for secure erase")
            return 0

        print("Available disks for secure erase are:")
        for device in devices:
            print(device.path)
        return 0

    def _show_report(self, controller: EraseController, device: str) -> int:
        """Show the parsed security state of a disk"""
        if not controller.handler.is_block_device(device):
            return self._report(OperationOutcome.DEVICE_NOT_FOUND, device)

        report = controller.query_report(device)
        print(f"Security state of {device}")
        print("=" * 50)
        print(f"SECURITY ERASE UNIT supported: {'Yes' if report.supported else 'No'}")
        print(f"Enhanced erase supported:      {'Yes' if report.enhanced_erase_supported else 'No'}")
        print(f"Frozen:                        {'Yes' if report.frozen else 'No'}")
        print(f"User password enabled:         {'Yes' if report.password_enabled else 'No'}")
        if report.estimated_erase_time:
            print(f"Estimated time:                {report.estimated_erase_time}")
        print("=" * 50)
        return 0

    def _disable_password(self, controller: EraseController, device: str) -> int:
        outcome = controller.disable_password(device)
        if outcome == OperationOutcome.ERASE_FAILED:
            return self._report(outcome, device, f"Error removing user password on {device}")
        return self._report(outcome, device)

    def _erase_disk(self, controller: EraseController, device: str, interactive: bool, enhanced: bool) -> int:
        outcome = controller.erase(device, interactive=interactive, enhanced=enhanced)
        return self._report(outcome, device)

    def _report(self, outcome: OperationOutcome, device: Optional[str], detail: str = "") -> int:
        """Print a failed outcome with its remedies and map it to an exit code"""
        error_info = self.error_handler.handle_outcome(outcome, device, detail)
        if error_info is not None:
            self._print_error(error_info)
        return outcome.exit_code

    def _print_error(self, error_info: ErrorInfo):
        message = error_info.message
        if not message.startswith("Error"):
            message = f"Error: {message}"
        print(message, file=sys.stderr)
        for suggestion in error_info.suggestions:
            print(suggestion, file=sys.stderr)
