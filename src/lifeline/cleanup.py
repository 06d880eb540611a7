# SPDX-License-Identifier: MIT

import atexit

from lifeline.repository.configuration import CONFIGURATION_REPO
from lifeline.repository.entry import ENTRY_REPO


def flush() -> None:
    CONFIGURATION_REPO.flush()
    ENTRY_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush)
