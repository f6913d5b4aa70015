from __future__ import annotations

import logging

from .command import CommandRunner

logger = logging.getLogger(__name__)


def user_exists(run: CommandRunner, name: str) -> bool:
    r = run(["id", name], check=False)
    return r.returncode == 0


def create_system_user(run: CommandRunner, name: str, *, home: str, shell: str = "/bin/false") -> None:
    """Create a non-login system account whose home is the install location."""

    run(["useradd", "--system", "--home-dir", home, "--shell", shell, name])


def chown_recursive(run: CommandRunner, path: str, *, user: str, group: str) -> None:
    run(["chown", "-R", f"{user}:{group}", path])
