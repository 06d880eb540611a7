# SPDX-License-Identifier: MIT

from lifeline.cleanup import register_cleanup
from lifeline.terminal.app import run


def main() -> None:
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
