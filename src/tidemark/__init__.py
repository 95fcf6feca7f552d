# SPDX-License-Identifier: MIT

from tidemark.cleanup import register_cleanup
from tidemark.initialize import initialize
from tidemark.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
