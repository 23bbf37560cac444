import ctypes
import os
import subprocess
import sys

APP_NAME = "Product Key Activator"
APP_VERSION = "1.0.0"


def cls():
    os.system('cls' if os.name == 'nt' else 'clear')


def is_admin() -> bool:
    """Check if the current process is running as administrator"""
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except (AttributeError, OSError):
        return False


def run_as_admin() -> bool:
    """
    Restart the script with admin rights using UAC elevation.

    Returns True when the current process already is elevated. Otherwise the
    elevated copy is started and the current process exits.
    """
    if is_admin():
        return True

    # "runas" verb -> tells Windows to run with elevation (UAC prompt)
    ctypes.windll.shell32.ShellExecuteW(
        None,  # handle to parent window (None = no parent)
        "runas",  # operation to perform
        sys.executable,  # executable to run
        subprocess.list2cmdline(sys.argv),  # command line parameters, quoted
        None,  # working directory (None = current)
        1  # window style (1 = normal window)
    )
    sys.exit()
