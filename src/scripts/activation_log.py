"""
Activation log: every message goes to the console and is appended to a log file.

- The file is opened on the first write, which also writes a session header
  and a version line.
- If the configured file cannot be opened because its directory is missing or
  access is denied, writing moves to FALLBACK_LOG_PATH and a warning is printed.
- Any other failure while writing raises LogWriteError.
"""

import logging
import os
import platform
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

from colorama import Fore, Style

from core.utils import APP_NAME, APP_VERSION

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOGGER_NAME = "activation"

FALLBACK_LOG_PATH = Path(tempfile.gettempdir()) / "ProductKeyActivation.log"

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_STYLES = {
    logging.DEBUG: ("", "[DEBUG]"),
    logging.INFO: ("", "[INFO]"),
    SUCCESS: (Fore.GREEN, "[OK]"),
    logging.WARNING: (Fore.YELLOW, "[WARN]"),
    logging.ERROR: (Fore.RED, "[ERROR]"),
}


class LogWriteError(RuntimeError):
    pass


def session_header() -> str:
    started = datetime.now().strftime(DATE_FORMAT)
    return (
        f"===== Session started {started} =====\n"
        f"{APP_NAME} {APP_VERSION} ({platform.platform()})\n"
    )


class FallbackFileHandler(logging.FileHandler):
    """FileHandler that opens lazily and switches to a fallback file once."""

    def __init__(
            self,
            path: Union[str, Path],
            fallback_path: Union[str, Path] = FALLBACK_LOG_PATH,
            on_fallback: Optional[Callable[[str, str, OSError], None]] = None,
    ):
        super().__init__(str(path), mode="a", encoding="utf-8", delay=True)
        self.fallback_path = os.path.abspath(str(fallback_path))
        self.used_fallback = False
        self._on_fallback = on_fallback

    def _open(self):
        try:
            stream = super()._open()
        except (FileNotFoundError, PermissionError) as e:
            if self.used_fallback or self.baseFilename == self.fallback_path:
                raise LogWriteError(f"Cannot open log file {self.baseFilename}: {e}") from e
            original = self.baseFilename
            self.used_fallback = True
            self.baseFilename = self.fallback_path
            if self._on_fallback is not None:
                self._on_fallback(original, self.fallback_path, e)
            try:
                stream = super()._open()
            except OSError as e2:
                raise LogWriteError(f"Cannot open fallback log file {self.fallback_path}: {e2}") from e2
        except OSError as e:
            raise LogWriteError(f"Cannot open log file {self.baseFilename}: {e}") from e

        try:
            stream.write(session_header())
            stream.flush()
        except OSError as e:
            stream.close()
            raise LogWriteError(f"Cannot write log file {self.baseFilename}: {e}") from e
        return stream

    def handleError(self, record):
        # Called from inside an except block in emit()
        _, exc, _ = sys.exc_info()
        raise LogWriteError(f"Cannot write log file {self.baseFilename}: {exc}") from exc


class ConsoleHandler(logging.StreamHandler):
    """Console mirror in the '[OK] message' style, coloured by level."""

    def format(self, record):
        color, prefix = CONSOLE_STYLES.get(record.levelno, ("", f"[{record.levelname}]"))
        text = f"{prefix} {record.getMessage()}"
        if color:
            return f"{color}{text}{Style.RESET_ALL}"
        return text


class ActivationLog:
    """
    Console + file log for a single activation run.

    All runs share the LOGGER_NAME logger, a new log replaces the handlers
    of the previous one.
    """

    def __init__(
            self,
            log_file: Optional[Union[str, Path]] = None,
            console: Optional[TextIO] = None,
            fallback_path: Union[str, Path] = FALLBACK_LOG_PATH,
    ):
        self.requested_path = Path(log_file) if log_file else Path(fallback_path)
        self._console = console if console is not None else sys.stdout

        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        self._file_handler = FallbackFileHandler(
            self.requested_path,
            fallback_path=fallback_path,
            on_fallback=self._warn_fallback,
        )
        self._file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
        self._console_handler = ConsoleHandler(self._console)

        self._logger.addHandler(self._console_handler)
        self._logger.addHandler(self._file_handler)

    def _warn_fallback(self, original: str, fallback: str, error: OSError):
        print(
            f"{Fore.YELLOW}[WARN] Cannot write log file '{original}' ({error.__class__.__name__}). "
            f"Logging to '{fallback}' instead.{Style.RESET_ALL}",
            file=self._console,
        )

    @property
    def path(self) -> Path:
        """File currently written to (fallback path once it was used)."""
        return Path(self._file_handler.baseFilename)

    @property
    def used_fallback(self) -> bool:
        return self._file_handler.used_fallback

    def info(self, message: str):
        self._logger.info(message)

    def success(self, message: str):
        self._logger.log(SUCCESS, message)

    def warning(self, message: str):
        self._logger.warning(message)

    def error(self, message: str):
        self._logger.error(message)

    def close(self):
        for handler in (self._console_handler, self._file_handler):
            self._logger.removeHandler(handler)
            handler.close()
