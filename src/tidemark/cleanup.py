# SPDX-License-Identifier: MIT

import atexit

from tidemark.repository.configuration import CONFIGURATION_REPO


def flush() -> None:
    # The entity store is a disposable cache; only settings persist
    CONFIGURATION_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush)
