"""
Shared test fixtures: a recording command runner and a config rooted in tmp_path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Sequence

import pytest

from filestash_provisioner.config import NativeLibConfig, ProvisionConfig, ToolchainConfig
from filestash_provisioner.context import ProvisionContext
from filestash_provisioner.errors import CommandError
from filestash_provisioner.lib.command import CmdResult, CommandRunner


class FakeRunner(CommandRunner):
    """Records every command instead of executing it.

    - `fail_on`: argv prefixes that exit non-zero.
    - `users`: names for which `id <name>` succeeds.
    """

    def __init__(self, *, fail_on: Sequence[Sequence[str]] = (), users: Sequence[str] = ()) -> None:
        super().__init__(dry_run=False)
        self.fail_on = [list(f) for f in fail_on]
        self.users = set(users)
        self.calls: list[dict] = []

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
    ) -> CmdResult:
        argv_list = list(argv)
        self.calls.append({"argv": argv_list, "cwd": cwd, "env": dict(env or {})})

        rc = 0
        if argv_list[:1] == ["id"]:
            rc = 0 if argv_list[1] in self.users else 1
        elif argv_list[:1] == ["useradd"]:
            self.users.add(argv_list[-1])
        if any(argv_list[: len(f)] == f for f in self.fail_on):
            rc = 2

        if check and rc != 0:
            raise CommandError(argv_list, rc, "simulated failure")
        return CmdResult(argv=argv_list, returncode=rc, stdout="", stderr="")

    @property
    def argvs(self) -> list[list[str]]:
        return [c["argv"] for c in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(a[: len(prefix)] == list(prefix) for a in self.argvs)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by configure_logging so they never outlive capsys."""
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, "_filestash_provisioner", False):
            root.removeHandler(h)
            h.close()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def cfg(tmp_path: Path) -> ProvisionConfig:
    """Defaults with every host path moved under tmp_path."""
    return ProvisionConfig(
        install_dir=str(tmp_path / "opt" / "filestash"),
        unit_dir=str(tmp_path / "etc" / "systemd" / "system"),
        native_lib=NativeLibConfig(),
        toolchain=ToolchainConfig(
            prefix=str(tmp_path / "usr" / "local"),
            profile_path=str(tmp_path / "etc" / "profile"),
        ),
    )


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A checkout that looks like it has already been built."""
    src = tmp_path / "src" / "filestash"
    (src / "config").mkdir(parents=True)
    (src / "config" / "config.json").write_text('{"general": {}}\n', encoding="utf-8")
    (src / "dist").mkdir()
    (src / "dist" / "filestash").write_text("#!/bin/sh\n", encoding="utf-8")
    (src / "server").mkdir()
    (src / "server" / "main.go").write_text("package main\n", encoding="utf-8")
    (src / ".gitignore").write_text("dist/\n", encoding="utf-8")
    (src / "Makefile").write_text("build_init:\nbuild_backend:\n", encoding="utf-8")
    return src


@pytest.fixture
def ctx(cfg: ProvisionConfig, runner: FakeRunner, source_tree: Path) -> ProvisionContext:
    return ProvisionContext(cfg=cfg, run=runner, source_dir=source_tree, geteuid=lambda: 0, cpu_count=4)
