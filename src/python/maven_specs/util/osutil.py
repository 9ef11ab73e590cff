# Copyright 2023 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import getpass
import os


def getuser() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # Running with a uid that has no passwd entry, e.g. in a docker container with a host uid.
        # Python 3.13 re-raises the passwd lookup failure as OSError.
        return str(os.getuid())
