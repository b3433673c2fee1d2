from pathlib import Path
import sys
from typing import Dict, List, Optional

import pytest

# Ensure repository root is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.core.models import Device  # noqa: E402
from src.core.platforms.base_handler import BaseDiskHandler  # noqa: E402


HDPARM_HEADER = """\

{path}:

ATA device, with non-removable media
\tModel Number:       INTEL SSDSC2CT240A4
\tSerial Number:      CVKI3206029X240DGN
\tFirmware Revision:  335u
\tTransport:          Serial, ATA8-AST, SATA 1.0a, SATA II Extensions
Standards:
\tUsed: unknown (minor revision code 0xffff)
\tSupported: 9 8 7 6 5
Configuration:
\tLogical\t\tmax\tcurrent
\tLBA48  user addressable sectors:  468862128
\tdevice size with M = 1000*1000:      240057 MBytes (240 GB)
Commands/features:
\tEnabled\tSupported:
\t   *\tSMART feature set
\t   *\tSecurity Mode feature set
"""

HDPARM_FOOTER = """\
Logical Unit WWN Device Identifier: 5001517bb28a7c2d
Checksum: correct
"""


def build_hdparm_report(path: str = "/dev/sdb", supported: bool = True, enabled: bool = False,
                        frozen: bool = False, enhanced: bool = True, security: bool = True) -> str:
    """Build ``hdparm -I`` output with the given security state"""
    text = HDPARM_HEADER.format(path=path)
    if not security:
        return text + HDPARM_FOOTER

    lines = ["Security: "]
    if supported:
        lines.append("\tMaster password revision code = 65534")
        lines.append("\t\tsupported")
    else:
        lines.append("\tnot\tsupported")
    lines.append("\t\tenabled" if enabled else "\tnot\tenabled")
    lines.append("\t\tlocked" if enabled else "\tnot\tlocked")
    lines.append("\t\tfrozen" if frozen else "\tnot\tfrozen")
    lines.append("\tnot\texpired: security count")
    if enhanced:
        lines.append("\t\tsupported: enhanced erase")
        lines.append("\t4min for SECURITY ERASE UNIT. 2min for ENHANCED SECURITY ERASE UNIT.")
    else:
        lines.append("\tnot\tsupported: enhanced erase")
        lines.append("\t4min for SECURITY ERASE UNIT.")
    return text + "\n".join(lines) + "\n" + HDPARM_FOOTER


class FakeHandler(BaseDiskHandler):
    """In-memory disks whose security state reacts to set-password and erase calls"""

    def __init__(self, disks: Dict[str, dict], system: str = "Linux", kernel: str = "6.1.0-13-amd64",
                 privileged: bool = True, password_takes_effect: bool = True,
                 erase_clears_password: bool = True, disable_clears_password: bool = True,
                 mounts: Optional[Dict[str, List[str]]] = None):
        self.disks = {path: dict(state) for path, state in disks.items()}
        self.system = system
        self.kernel = kernel
        self.privileged = privileged
        self.password_takes_effect = password_takes_effect
        self.erase_clears_password = erase_clears_password
        self.disable_clears_password = disable_clears_password
        self.mounts = mounts or {}
        self.calls: List[tuple] = []

    def calls_named(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    def get_system_name(self) -> str:
        return self.system

    def get_kernel_version(self) -> str:
        return self.kernel

    def is_privileged(self) -> bool:
        return self.privileged

    def list_block_devices(self) -> List[Device]:
        self.calls.append(("list",))
        return [Device(path) for path in self.disks]

    def is_block_device(self, path: str) -> bool:
        return path in self.disks

    def identify(self, device: Device) -> str:
        self.calls.append(("identify", device.path))
        return build_hdparm_report(device.path, **self.disks[device.path])

    def set_password(self, device: Device, password: str) -> bool:
        self.calls.append(("set_password", device.path, password))
        if self.password_takes_effect:
            self.disks[device.path]["enabled"] = True
        return self.password_takes_effect

    def security_erase(self, device: Device, password: str, enhanced: bool = False) -> bool:
        self.calls.append(("erase", device.path, password, enhanced))
        if self.erase_clears_password:
            self.disks[device.path]["enabled"] = False
        return self.erase_clears_password

    def disable_password(self, device: Device, password: str) -> bool:
        self.calls.append(("disable", device.path, password))
        if self.disable_clears_password:
            self.disks[device.path]["enabled"] = False
        return self.disable_clears_password

    def get_mount_points(self, device: Device) -> List[str]:
        return self.mounts.get(device.path, [])


class FakeToolManager:
    def __init__(self, available=("hdparm",)):
        self.available = set(available)

    def is_tool_available(self, tool_name: str) -> bool:
        return tool_name in self.available

    def get_installation_suggestions(self) -> Dict[str, str]:
        return {"hdparm": "install the 'hdparm' package with your distribution's package manager"}


@pytest.fixture
def hdparm_report():
    return build_hdparm_report


@pytest.fixture
def make_handler():
    return FakeHandler


@pytest.fixture
def make_tool_manager():
    return FakeToolManager
