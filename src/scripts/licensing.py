"""
Licensing records and the interface the activation procedure talks to.

Nothing here imports WMI, the Windows implementation lives in
scripts.licensing_wmi.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional


class LicenseStatus(IntEnum):
    UNLICENSED = 0
    LICENSED = 1
    OOB_GRACE = 2
    OOT_GRACE = 3
    NON_GENUINE_GRACE = 4
    NOTIFICATION = 5
    EXTENDED_GRACE = 6


LICENSE_STATUS_NAMES = {
    LicenseStatus.UNLICENSED: "Unlicensed",
    LicenseStatus.LICENSED: "Licensed",
    LicenseStatus.OOB_GRACE: "OOBGrace (Out-of-Box Grace Period)",
    LicenseStatus.OOT_GRACE: "OOTGrace (Out-of-Tolerance Grace Period)",
    LicenseStatus.NON_GENUINE_GRACE: "NonGenuineGrace (Non-Genuine Grace Period)",
    LicenseStatus.NOTIFICATION: "Notification (Not Activated)",
    LicenseStatus.EXTENDED_GRACE: "ExtendedGrace",
}


def describe_status(code: Optional[int]) -> str:
    if code is None:
        return "Unknown"
    try:
        return LICENSE_STATUS_NAMES[LicenseStatus(code)]
    except ValueError:
        return f"Unknown ({code})"


def format_status_reason(reason: Optional[int]) -> str:
    """LicenseStatusReason is an HRESULT, shown the way slmgr shows it."""
    if reason is None:
        return "N/A"
    return f"0x{reason & 0xFFFFFFFF:08X}"


class LicensingError(RuntimeError):
    """A call into the Software Licensing Service failed."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.message = message


@dataclass(frozen=True)
class LicensingProductRecord:
    """Snapshot of one SoftwareLicensingProduct instance."""
    id: str
    name: Optional[str]
    license_status: Optional[int]
    license_status_reason: Optional[int] = None
    offline_installation_id: Optional[str] = None
    product_key_id: Optional[str] = None
    partial_product_key: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_licensed(self) -> bool:
        return self.license_status == LicenseStatus.LICENSED

    @property
    def status_text(self) -> str:
        return describe_status(self.license_status)


class LicensingService(ABC):
    """Operations of the OS licensing facility used during activation."""

    @abstractmethod
    def find_products(self, partial_key: str) -> List[LicensingProductRecord]:
        raise NotImplementedError

    @abstractmethod
    def install_product_key(self, product_key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def activate_product(self, product_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def refresh_license_status(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_installed_products(self) -> List[LicensingProductRecord]:
        raise NotImplementedError
