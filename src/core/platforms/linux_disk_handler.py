"""
Linux-specific disk handling implementation
Uses hdparm for the ATA security feature set and /proc/partitions for enumeration
"""

import os
import re
import stat
import platform
import subprocess
import logging
import psutil
from typing import List, Optional

from .base_handler import BaseDiskHandler
from ..models import Device
from ..tool_manager import ToolManager

logger = logging.getLogger(__name__)

# Whole disks found by udev end in a letter (sda, hdb), partitions in a digit
WHOLE_DISK_LINE = re.compile(r'[0-9].*[a-z]$')

# What may follow a disk path in the name of one of its own partitions
PARTITION_SUFFIX = re.compile(r"p?[0-9]*")


class HdparmNotFoundError(OSError):
    """Raised when hdparm cannot be located at the time it is needed"""


class LinuxDiskHandler(BaseDiskHandler):
    """Linux-specific disk handler"""

    def __init__(self, tool_manager: Optional[ToolManager] = None,
                 partitions_file: str = "/proc/partitions", dev_dir: str = "/dev"):
        self.tool_manager = tool_manager or ToolManager()
        self.partitions_file = partitions_file
        self.dev_path = dev_dir

    def get_system_name(self) -> str:
        return platform.system()

    def get_kernel_version(self) -> str:
        return platform.release()

    def is_privileged(self) -> bool:
        return os.geteuid() == 0

    def list_block_devices(self) -> List[Device]:
        """Get whole-disk block devices listed in /proc/partitions"""
        devices = []
        with open(self.partitions_file, 'r') as f:
            for line in f:
                line = line.rstrip("\n")
                if not WHOLE_DISK_LINE.search(line):
                    continue
                fields = line.split()
                if len(fields) < 4:
                    continue
                devices.append(Device.from_name(fields[3], self.dev_path))
        logger.debug(f"Enumerated block devices: {[d.path for d in devices]}")
        return devices

    def is_block_device(self, path: str) -> bool:
        try:
            return stat.S_ISBLK(os.stat(path).st_mode)
        except OSError:
            return False

    def identify(self, device: Device) -> str:
        """Run hdparm -I, merging stderr into the report text"""
        cmd = [self._hdparm(), "-I", device.path]
        logger.debug(f"Running: {' '.join(cmd)}")
        # Identify strings come straight from the drive and need not be valid UTF-8
        result = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                                encoding="utf-8", errors="replace")
        if result.returncode != 0:
            logger.debug(f"hdparm -I {device} exited with {result.returncode}")
        return result.stdout

    def set_password(self, device: Device, password: str) -> bool:
        return self._run_security_command(
            ["--user-master", "u", "--security-set-pass", password, device.path],
            "set security password")

    def security_erase(self, device: Device, password: str, enhanced: bool = False) -> bool:
        option = "--security-erase-enhanced" if enhanced else "--security-erase"
        return self._run_security_command(
            ["--user-master", "u", option, password, device.path],
            "enhanced security erase" if enhanced else "security erase")

    def disable_password(self, device: Device, password: str) -> bool:
        return self._run_security_command(
            ["--user-master", "u", "--security-disable", password, device.path],
            "disable security password")

    def get_mount_points(self, device: Device) -> List[str]:
        """Get mount points of the device and its partitions"""
        mount_points = []
        for partition in psutil.disk_partitions(all=False):
            suffix = partition.device[len(device.path):]
            if partition.device.startswith(device.path) and PARTITION_SUFFIX.fullmatch(suffix):
                mount_points.append(partition.mountpoint)
        return mount_points

    def _hdparm(self) -> str:
        hdparm_path = self.tool_manager.get_tool_path('hdparm')
        if not hdparm_path:
            raise HdparmNotFoundError("hdparm not available")
        return hdparm_path

    def _run_security_command(self, args: List[str], description: str) -> bool:
        """Run an hdparm security command, discarding its output"""
        cmd = [self._hdparm()] + args
        # The password is an argument, keep it out of the log
        logger.debug(f"Running hdparm {description} on {args[-1]}")
        result = subprocess.run(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        if result.returncode != 0:
            logger.warning(f"hdparm {description} on {args[-1]} exited with {result.returncode}")
        return result.returncode == 0
