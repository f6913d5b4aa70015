from __future__ import annotations

import logging
import os
import shlex
import subprocess
import threading
from dataclasses import dataclass
from typing import IO, List, Mapping, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr; each line is logged at DEBUG as it arrives.
    - Output that is not valid UTF-8 is decoded with replacement characters.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    if cwd:
        logger.info("CMD (cwd=%s) %s", cwd, fmt_argv(argv_list))
    else:
        logger.info("CMD %s", fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.Popen(
            argv_list,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError as e:
        # Missing executable is reported like any other command failure.
        raise CommandError(argv_list, 127, str(e)) from e

    out: List[str] = []
    err: List[str] = []
    # stderr is drained on its own thread so a full pipe never blocks the child.
    t = threading.Thread(target=_pump, args=(p.stderr, "STDERR", err), daemon=True)
    t.start()
    _pump(p.stdout, "STDOUT", out)
    t.join()
    returncode = p.wait()

    stdout, stderr = "".join(out), "".join(err)
    if check and returncode != 0:
        raise CommandError(argv_list, returncode, stderr)

    return CmdResult(argv=argv_list, returncode=returncode, stdout=stdout, stderr=stderr)


def _pump(stream: IO[str], label: str, sink: List[str]) -> None:
    with stream:
        for line in stream:
            sink.append(line)
            logger.debug("%s %s", label, line.rstrip())


class CommandRunner:
    """Process port handed to every step.

    Steps never call subprocess directly; tests substitute a recording fake.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
    ) -> CmdResult:
        return run_cmd(argv, check=check, env=env, cwd=cwd, dry_run=self.dry_run)
