from __future__ import annotations

import logging
from typing import Sequence

from .command import CommandRunner

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(run: CommandRunner) -> None:
    run(["apt-get", "update"], env=APT_ENV)


def apt_install(run: CommandRunner, packages: Sequence[str]) -> None:
    """Install packages; apt treats already-installed ones as success."""
    if not packages:
        return
    run(["apt-get", "install", "-y", *packages], env=APT_ENV)
