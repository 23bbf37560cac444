import os
import sys

from colorama import init

from core.utils import run_as_admin


def main():
    init()

    if len(sys.argv) > 1:
        # Command line mode: -ProductKey XXXXX-... [-LogFile path]
        from core.cli import main as cli_main
        sys.exit(cli_main())

    run_as_admin()

    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

    from core.loop import main_loop
    main_loop()

    if os.name == "nt":
        os.system("pause")


if __name__ == "__main__":
    main()
