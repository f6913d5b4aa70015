from __future__ import annotations

import shlex
from typing import Sequence


class ProvisionError(RuntimeError):
    """Base class for every failure that aborts the pipeline."""


class PrivilegeError(ProvisionError):
    pass


class ConfigError(ProvisionError):
    pass


class FilesystemError(ProvisionError):
    pass


class ChecksumError(ProvisionError):
    pass


class CommandError(ProvisionError):
    """An external command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr

        msg = f"Command failed ({returncode}): {' '.join(shlex.quote(a) for a in self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)
