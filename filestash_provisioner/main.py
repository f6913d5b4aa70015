from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from .config import ProvisionConfig, describe, load_config
from .context import ProvisionContext
from .errors import ProvisionError
from .lib.command import CommandRunner
from .logging_utils import configure_logging
from .pipeline import PipelineResult, Step, run_pipeline
from .steps import (
    BuildDeployStep,
    BuildNativeLibStep,
    CheckPrivilegesStep,
    CreateUserStep,
    InstallDependenciesStep,
    InstallToolchainStep,
    RegisterServiceStep,
)

logger = logging.getLogger(__name__)


def build_steps() -> List[Step]:
    return [
        CheckPrivilegesStep(),
        InstallDependenciesStep(),
        BuildNativeLibStep(),
        InstallToolchainStep(),
        CreateUserStep(),
        BuildDeployStep(),
        RegisterServiceStep(),
    ]


def run(
    cfg: ProvisionConfig,
    *,
    runner: Optional[CommandRunner] = None,
    source_dir: Optional[Path] = None,
    geteuid: Optional[Callable[[], int]] = None,
    dry_run: bool = False,
) -> PipelineResult:
    """Provision this host for the configured application."""

    ctx = ProvisionContext(
        cfg=cfg,
        run=runner or CommandRunner(dry_run=dry_run),
        source_dir=source_dir or Path.cwd(),
        geteuid=geteuid or os.geteuid,
    )
    logger.info("Starting Filestash installation... (%s)", ", ".join(describe(cfg)))
    result = run_pipeline(ctx=ctx, steps=build_steps())
    logger.debug("Decisions: %s", ctx.decisions)
    return result


def _summary(cfg: ProvisionConfig) -> None:
    logger.info("Installation completed successfully!")
    logger.info("To start Filestash: systemctl start %s", cfg.service_name)
    logger.info("To check status: systemctl status %s", cfg.service_name)
    logger.info("Filestash will be available at %s", cfg.listen_url)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="filestash-provisioner",
        description="Install Filestash from source and register it as a systemd service.",
    )
    p.add_argument("--config", default=None, help="YAML file overriding the built-in defaults")
    p.add_argument("--log", default=None, help="Also write a detailed log to this file")
    p.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    p.add_argument("-v", "--verbose", action="store_true", help="Show command output")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = load_config(args.config)
    except ProvisionError as e:
        logger.error("%s", e)
        return 1

    result = run(cfg, dry_run=bool(args.dry_run))
    if not result.ok:
        stage = result.failed_stage.value if result.failed_stage else "?"
        logger.error("Failed at %s: %s", stage, result.error)
        return 1

    _summary(cfg)
    return 0
