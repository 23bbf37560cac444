"""
Install a Windows product key and activate it through the Software Licensing Service.

Steps:
1. look up the key by its last 5 characters, stop if it is already licensed
2. InstallProductKey
3. look the key up again, it must exist now
4. log name / installation ID / activation ID / extended product ID
5. Activate, RefreshLicenseStatus, check LicenseStatus == 1

Each step returns a result, the first failing step ends the run.
Nothing is retried and nothing is rolled back.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

from scripts.activation_log import ActivationLog, LogWriteError
from scripts.licensing import (
    LicensingError,
    LicensingProductRecord,
    LicensingService,
    format_status_reason,
)
from scripts.product_key import ProductKey


class Outcome(Enum):
    ACTIVATED = "activated"
    ALREADY_ACTIVATED = "already activated"
    QUERY_FAILED = "query failed"
    INSTALL_FAILED = "install failed"
    ACTIVATION_FAILED = "activation failed"
    LOG_FAILED = "log failed"


class ExitCode(IntEnum):
    SUCCESS = 0
    VALIDATION_ERROR = 2
    QUERY_FAILED = 3
    INSTALL_FAILED = 4
    ACTIVATION_FAILED = 5
    LOG_FAILED = 6


EXIT_CODES = {
    Outcome.ACTIVATED: ExitCode.SUCCESS,
    Outcome.ALREADY_ACTIVATED: ExitCode.SUCCESS,
    Outcome.QUERY_FAILED: ExitCode.QUERY_FAILED,
    Outcome.INSTALL_FAILED: ExitCode.INSTALL_FAILED,
    Outcome.ACTIVATION_FAILED: ExitCode.ACTIVATION_FAILED,
    Outcome.LOG_FAILED: ExitCode.LOG_FAILED,
}


@dataclass
class ActivationResult:
    outcome: Outcome
    message: str
    record: Optional[LicensingProductRecord] = None

    @property
    def exit_code(self) -> ExitCode:
        return EXIT_CODES[self.outcome]

    @property
    def succeeded(self) -> bool:
        return self.exit_code == ExitCode.SUCCESS


def pick_record(records: List[LicensingProductRecord]) -> Optional[LicensingProductRecord]:
    """Several SKUs can share a partial key, prefer the licensed one."""
    if not records:
        return None
    for record in records:
        if record.is_licensed:
            return record
    return records[0]


class ActivationRunner:

    def __init__(self, licensing: LicensingService, log: ActivationLog):
        self._licensing = licensing
        self._log = log

    def run(self, product_key: ProductKey) -> ActivationResult:
        try:
            return self._run(product_key)
        except LogWriteError as e:
            return ActivationResult(Outcome.LOG_FAILED, str(e))

    def _run(self, product_key: ProductKey) -> ActivationResult:
        self._log.info(f"Starting activation for product key {product_key.masked()}")

        existing, failure = self._query(product_key, "Checking current activation state")
        if failure is not None:
            return failure
        if existing is not None and existing.is_licensed:
            return self._finish(ActivationResult(
                Outcome.ALREADY_ACTIVATED,
                f"Product key {product_key.masked()} is already installed and activated ({existing.name}).",
                existing,
            ))

        failure = self._install(product_key)
        if failure is not None:
            return failure

        record, failure = self._query(product_key, "Retrieving licensing information")
        if failure is not None:
            return failure
        if record is None:
            return self._finish(ActivationResult(
                Outcome.QUERY_FAILED,
                f"No licensing product found for partial key {product_key.partial_key} after install.",
            ))

        self._log_metadata(record)

        return self._activate(product_key, record)

    def _query(self, product_key: ProductKey, what: str) -> Tuple[Optional[LicensingProductRecord], Optional[ActivationResult]]:
        self._log.info(f"{what} (partial key {product_key.partial_key})...")
        try:
            records = self._licensing.find_products(product_key.partial_key)
        except LicensingError as e:
            return None, self._finish(ActivationResult(
                Outcome.QUERY_FAILED,
                f"Could not query licensing status: {e.message}",
            ))
        record = pick_record(records)
        if record is not None:
            self._log.info(f"Found '{record.name}', status: {record.status_text}")
        return record, None

    def _install(self, product_key: ProductKey) -> Optional[ActivationResult]:
        self._log.info(f"Installing product key {product_key.masked()}...")
        try:
            self._licensing.install_product_key(product_key.value)
        except LicensingError as e:
            return self._finish(ActivationResult(
                Outcome.INSTALL_FAILED,
                f"Could not install product key: {e.message}",
            ))
        self._log.success("Product key installed.")
        return None

    def _log_metadata(self, record: LicensingProductRecord):
        self._log.info(f"Name:                {record.name or 'N/A'}")
        self._log.info(f"Installation ID:     {record.offline_installation_id or 'N/A'}")
        self._log.info(f"Activation ID:       {record.id or 'N/A'}")
        self._log.info(f"Extended PID:        {record.product_key_id or 'N/A'}")

    def _activate(self, product_key: ProductKey, record: LicensingProductRecord) -> ActivationResult:
        self._log.info("Activating...")
        try:
            self._licensing.activate_product(record.id)
            self._licensing.refresh_license_status()
        except LicensingError as e:
            return self._finish(ActivationResult(
                Outcome.ACTIVATION_FAILED,
                f"Activation failed: {e.message}",
                record,
            ))

        refreshed, failure = self._query(product_key, "Verifying activation")
        if failure is not None:
            return failure
        if refreshed is None:
            return self._finish(ActivationResult(
                Outcome.QUERY_FAILED,
                f"No licensing product found for partial key {product_key.partial_key} after activation.",
                record,
            ))

        if not refreshed.is_licensed:
            return self._finish(ActivationResult(
                Outcome.ACTIVATION_FAILED,
                f"Activation failed. License status: {refreshed.status_text}, "
                f"reason: {format_status_reason(refreshed.license_status_reason)}",
                refreshed,
            ))

        return self._finish(ActivationResult(
            Outcome.ACTIVATED,
            f"'{refreshed.name}' activated successfully.",
            refreshed,
        ))

    def _finish(self, result: ActivationResult) -> ActivationResult:
        if result.succeeded:
            self._log.success(result.message)
        else:
            self._log.error(result.message)
        return result


if __name__ == "__main__":
    import sys

    from core.cli import main

    sys.exit(main())
