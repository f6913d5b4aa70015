from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..lib.accounts import chown_recursive
from ..lib.fs import (
    apply_data_permissions,
    apply_executable_permissions,
    copy_tree,
    install_default_config,
    same_path,
)
from ..pipeline import Stage

logger = logging.getLogger(__name__)


class BuildDeployStep:
    step_id = "60_build_deploy"
    stage = Stage.BUILD_DEPLOY

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.cfg
        install = cfg.install_path
        source = ctx.source_dir
        logger.info("Building Filestash...")

        if ctx.dry_run:
            logger.info("Would create %s", install)
        else:
            install.mkdir(parents=True, exist_ok=True)

        # Bootstrap copy only; running from the install dir is a no-op.
        if same_path(source, install):
            logger.info("Source already at %s; skipping copy", install)
            ctx.decisions["bootstrap_copy"] = "skipped"
        else:
            n = copy_tree(source, install, dry_run=ctx.dry_run)
            logger.info("Copied %d files from %s to %s", n, source, install)
            ctx.decisions["bootstrap_copy"] = str(source)

        env = ctx.build_env()
        for target in cfg.build_targets:
            ctx.run(["make", target], cwd=str(install), env=env)

        runtime_cfg = install / cfg.runtime_config
        if not ctx.dry_run:
            runtime_cfg.parent.mkdir(parents=True, exist_ok=True)
        wrote = install_default_config(
            install / cfg.default_config,
            runtime_cfg,
            overwrite=cfg.reset_config,
            dry_run=ctx.dry_run,
        )
        if wrote and cfg.reset_config:
            logger.warning("Runtime config reset to defaults: %s", runtime_cfg)
        ctx.decisions["runtime_config_written"] = wrote

        chown_recursive(ctx.run, str(install), user=cfg.user, group=cfg.group)
        apply_data_permissions(cfg.data_path, dry_run=ctx.dry_run)
        apply_executable_permissions(cfg.executable_path, dry_run=ctx.dry_run)

        logger.info("Filestash built successfully")
