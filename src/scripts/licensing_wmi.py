"""
Software Licensing Service access via WMI (root\\cimv2).

Classes used:
- SoftwareLicensingService: InstallProductKey, RefreshLicenseStatus
- SoftwareLicensingProduct: one row per license, Activate()

Every WMI / COM failure is re-raised as LicensingError.
"""

from typing import List, Optional

import pywintypes
import wmi

from scripts.licensing import LicensingError, LicensingProductRecord, LicensingService

PRODUCT_FIELDS = (
    "ID, Name, Description, LicenseStatus, LicenseStatusReason, "
    "OfflineInstallationId, ProductKeyID, PartialProductKey"
)


def _error_text(exc: Exception) -> str:
    """Prefer the COM exception description over the raw tuple repr."""
    com_error = getattr(exc, "com_error", exc)
    excepinfo = getattr(com_error, "excepinfo", None)
    if excepinfo and len(excepinfo) > 2 and excepinfo[2]:
        return str(excepinfo[2]).strip()
    return str(exc).strip() or exc.__class__.__name__


def _as_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def to_record(product) -> LicensingProductRecord:
    return LicensingProductRecord(
        id=product.ID,
        name=product.Name,
        description=getattr(product, "Description", None),
        license_status=_as_int(product.LicenseStatus),
        license_status_reason=_as_int(getattr(product, "LicenseStatusReason", None)),
        offline_installation_id=getattr(product, "OfflineInstallationId", None),
        product_key_id=getattr(product, "ProductKeyID", None),
        partial_product_key=getattr(product, "PartialProductKey", None),
    )


def _check_return(operation: str, result) -> None:
    # wmi returns the out parameters as a tuple in Properties_ order; for
    # InstallProductKey, Activate and RefreshLicenseStatus ReturnValue is the only one
    if isinstance(result, tuple) and result:
        code = result[0]
        if code not in (None, 0):
            raise LicensingError(operation, f"returned 0x{int(code) & 0xFFFFFFFF:08X}")


class WmiLicensing(LicensingService):

    def __init__(self, connection=None):
        self._connection = connection

    @property
    def connection(self):
        if self._connection is None:
            try:
                self._connection = wmi.WMI()
            except (wmi.x_wmi, pywintypes.com_error) as e:
                raise LicensingError("Connect to WMI", _error_text(e)) from e
        return self._connection

    def _service(self):
        services = self.connection.SoftwareLicensingService()
        if not services:
            raise LicensingError("Query SoftwareLicensingService", "no instance found")
        return services[0]

    def _query(self, where: str) -> list:
        return self.connection.query(f"SELECT {PRODUCT_FIELDS} FROM SoftwareLicensingProduct WHERE {where}")

    def find_products(self, partial_key: str) -> List[LicensingProductRecord]:
        try:
            products = self._query(f"PartialProductKey = '{partial_key}'")
        except (wmi.x_wmi, pywintypes.com_error) as e:
            raise LicensingError("Query SoftwareLicensingProduct", _error_text(e)) from e
        return [to_record(p) for p in products]

    def list_installed_products(self) -> List[LicensingProductRecord]:
        try:
            products = self._query("PartialProductKey IS NOT NULL")
        except (wmi.x_wmi, pywintypes.com_error) as e:
            raise LicensingError("Query SoftwareLicensingProduct", _error_text(e)) from e
        return [to_record(p) for p in products]

    def install_product_key(self, product_key: str) -> None:
        try:
            result = self._service().InstallProductKey(ProductKey=product_key)
        except (wmi.x_wmi, pywintypes.com_error) as e:
            raise LicensingError("InstallProductKey", _error_text(e)) from e
        _check_return("InstallProductKey", result)

    def activate_product(self, product_id: str) -> None:
        try:
            products = self.connection.query(f"SELECT * FROM SoftwareLicensingProduct WHERE ID = '{product_id}'")
            if not products:
                raise LicensingError("Activate", f"product {product_id} not found")
            result = products[0].Activate()
        except (wmi.x_wmi, pywintypes.com_error) as e:
            raise LicensingError("Activate", _error_text(e)) from e
        _check_return("Activate", result)

    def refresh_license_status(self) -> None:
        try:
            result = self._service().RefreshLicenseStatus()
        except (wmi.x_wmi, pywintypes.com_error) as e:
            raise LicensingError("RefreshLicenseStatus", _error_text(e)) from e
        _check_return("RefreshLicenseStatus", result)
