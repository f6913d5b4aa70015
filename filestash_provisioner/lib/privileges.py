from __future__ import annotations

import os
from typing import Callable


def is_elevated(geteuid: Callable[[], int] = os.geteuid) -> bool:
    return geteuid() == 0
