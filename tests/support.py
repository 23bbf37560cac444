"""Fakes shared by the test modules."""

import logging

from scripts.licensing import LicensingProductRecord, LicensingService

PRODUCT_KEY = "ABCDE-FGHIJ-KLMNO-PQRST-UVW12"

def make_record(status, reason=None, partial_key="UVW12", name="Windows(R), Professional edition"):
    return LicensingProductRecord(
        id="2de67392-b7a7-462a-b1ca-108dd189f588",
        name=name,
        license_status=status,
        license_status_reason=reason,
        offline_installation_id="123456789012345678901234567890",
        product_key_id="03612-03311-000-000000-00-1033-19045.0000-2582023",
        partial_product_key=partial_key,
    )

class FakeLicensing(LicensingService):
    """Licensing service whose records change as keys get installed and activated."""

    def __init__(self, before=None, installed=None, activated=None,
                 query_error=None, install_error=None, activate_error=None):
        self.records = {
            "before": before or [],
            "installed": installed or [],
            "activated": activated or [],
        }
        self.stage = "before"
        self.query_error = query_error
        self.install_error = install_error
        self.activate_error = activate_error
        self.calls = []

    def called(self, name):
        return any(call[0] == name for call in self.calls)

    def find_products(self, partial_key):
        self.calls.append(("find_products", partial_key))
        if self.query_error is not None:
            raise self.query_error
        return list(self.records[self.stage])

    def list_installed_products(self):
        self.calls.append(("list_installed_products",))
        if self.query_error is not None:
            raise self.query_error
        return list(self.records[self.stage])

    def install_product_key(self, product_key):
        self.calls.append(("install_product_key", product_key))
        if self.install_error is not None:
            raise self.install_error
        self.stage = "installed"

    def activate_product(self, product_id):
        self.calls.append(("activate_product", product_id))
        if self.activate_error is not None:
            raise self.activate_error
        self.stage = "activated"

    def refresh_license_status(self):
        self.calls.append(("refresh_license_status",))


def fail_opening(monkeypatch, path, error):
    """Make every attempt to open the log file at path raise error."""
    open_log = logging.FileHandler._open

    def fake_open(handler):
        if handler.baseFilename == str(path):
            raise error
        return open_log(handler)

    monkeypatch.setattr(logging.FileHandler, "_open", fake_open)
