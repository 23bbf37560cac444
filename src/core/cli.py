import argparse
import sys
from typing import List, Optional, TextIO

from colorama import Fore, Style

from core.utils import APP_NAME, APP_VERSION, is_admin
from scripts.activate_product_key import ActivationResult, ActivationRunner, Outcome
from scripts.activation_log import FALLBACK_LOG_PATH, ActivationLog, LogWriteError
from scripts.licensing import LicensingError, LicensingService
from scripts.product_key import ProductKey, ProductKeyError


def _product_key_arg(text: str) -> ProductKey:
    try:
        return ProductKey.parse(text)
    except ProductKeyError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="activate-product-key",
        description="Install a Windows product key and activate it via the Software Licensing Service (Windows only).",
    )
    parser.add_argument(
        "-ProductKey", "--product-key",
        dest="product_key",
        type=_product_key_arg,
        required=True,
        metavar="XXXXX-XXXXX-XXXXX-XXXXX-XXXXX",
        help="product key to install and activate",
    )
    parser.add_argument(
        "-LogFile", "--log-file",
        dest="log_file",
        default=str(FALLBACK_LOG_PATH),
        help=f"log file to append to (default: {FALLBACK_LOG_PATH})",
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def default_licensing() -> LicensingService:
    try:
        from scripts.licensing_wmi import WmiLicensing
    except ImportError as e:
        raise LicensingError("Load WMI", f"{e} (the Software Licensing Service is only available on Windows)") from e
    return WmiLicensing()


def run_activation(
        product_key: ProductKey,
        log_file: Optional[str] = None,
        licensing: Optional[LicensingService] = None,
        console: Optional[TextIO] = None,
) -> ActivationResult:
    log = ActivationLog(log_file, console=console)
    try:
        if licensing is None:
            licensing = default_licensing()
        result = ActivationRunner(licensing, log).run(product_key)
    except LicensingError as e:
        result = ActivationResult(Outcome.QUERY_FAILED, f"Could not query licensing status: {e}")
        try:
            log.error(result.message)
        except LogWriteError as log_error:
            result = ActivationResult(Outcome.LOG_FAILED, str(log_error))
    finally:
        log.close()

    if result.outcome is Outcome.LOG_FAILED:
        print(f"{Fore.RED}[ERROR] {result.message}{Style.RESET_ALL}", file=sys.stderr)
    return result


def main(argv: Optional[List[str]] = None, licensing: Optional[LicensingService] = None) -> int:
    args = build_parser().parse_args(argv)

    if not is_admin():
        print(f"{Fore.YELLOW}[WARN] Not running as administrator, installing the key will likely fail.{Style.RESET_ALL}")

    result = run_activation(args.product_key, args.log_file, licensing=licensing)
    return int(result.exit_code)
