"""
Base class for platform-specific disk handlers
The erase procedure only talks to the system through this interface
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import Device


class BaseDiskHandler(ABC):
    """Abstract base class for the external capabilities of the erase procedure"""

    @abstractmethod
    def get_system_name(self) -> str:
        """Get the operating system identity (e.g. 'Linux')"""
        pass

    @abstractmethod
    def get_kernel_version(self) -> str:
        """Get the running kernel release string"""
        pass

    @abstractmethod
    def is_privileged(self) -> bool:
        """Check if the caller runs with elevated privileges"""
        pass

    @abstractmethod
    def list_block_devices(self) -> List[Device]:
        """Enumerate whole-disk block devices, in system order"""
        pass

    @abstractmethod
    def is_block_device(self, path: str) -> bool:
        """Check if a path names an existing block device"""
        pass

    @abstractmethod
    def identify(self, device: Device) -> str:
        """Get the identify report of a device as text"""
        pass

    @abstractmethod
    def set_password(self, device: Device, password: str) -> bool:
        """Set the user security password, returning the command's success"""
        pass

    @abstractmethod
    def security_erase(self, device: Device, password: str, enhanced: bool = False) -> bool:
        """Issue SECURITY ERASE UNIT, returning the command's success"""
        pass

    @abstractmethod
    def disable_password(self, device: Device, password: str) -> bool:
        """Clear the user security password, returning the command's success"""
        pass

    def get_mount_points(self, device: Device) -> List[str]:
        """Get the mount points of a device and its partitions"""
        return []
