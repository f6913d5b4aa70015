from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..lib.pkg import apt_install, apt_update
from ..pipeline import Stage

logger = logging.getLogger(__name__)


class InstallDependenciesStep:
    step_id = "20_install_dependencies"
    stage = Stage.DEPS

    def run(self, ctx: ProvisionContext) -> None:
        logger.info("Installing system dependencies...")
        apt_update(ctx.run)
        apt_install(ctx.run, ctx.cfg.packages)
        ctx.decisions["packages"] = list(ctx.cfg.packages)
        logger.info("System dependencies installed successfully")
