from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..lib.systemd import daemon_reload, enable_service, render_unit, write_unit
from ..pipeline import Stage

logger = logging.getLogger(__name__)


class RegisterServiceStep:
    step_id = "70_register_service"
    stage = Stage.REGISTER

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.cfg
        logger.info("Creating systemd service...")

        write_unit(cfg.unit_path, render_unit(cfg), dry_run=ctx.dry_run)
        daemon_reload(ctx.run)
        enable_service(ctx.run, cfg.service_name)

        ctx.decisions["unit_path"] = str(cfg.unit_path)
        logger.info("Systemd service created and enabled")
