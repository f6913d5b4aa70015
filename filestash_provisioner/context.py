from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict

from .config import ProvisionConfig
from .lib.command import CommandRunner


@dataclass
class ProvisionContext:
    """Everything a step may touch on the host, in one place.

    The runner and geteuid are the seams tests replace with fakes.
    """

    cfg: ProvisionConfig
    run: CommandRunner
    source_dir: Path = field(default_factory=Path.cwd)
    geteuid: Callable[[], int] = os.geteuid
    cpu_count: int = field(default_factory=lambda: os.cpu_count() or 1)
    decisions: Dict[str, Any] = field(default_factory=dict)

    @property
    def dry_run(self) -> bool:
        return bool(getattr(self.run, "dry_run", False))

    def build_env(self) -> Dict[str, str]:
        """Subprocess env with the pinned toolchain ahead of any other Go."""
        path = os.environ.get("PATH", "")
        return {"PATH": f"{self.cfg.toolchain.bin_dir}:{path}" if path else str(self.cfg.toolchain.bin_dir)}
