from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..lib.accounts import create_system_user, user_exists
from ..pipeline import Stage

logger = logging.getLogger(__name__)


class CreateUserStep:
    step_id = "50_create_user"
    stage = Stage.ACCOUNT

    def run(self, ctx: ProvisionContext) -> None:
        name = ctx.cfg.user
        logger.info("Creating %s user...", name)

        if user_exists(ctx.run, name):
            logger.info("User %s already exists", name)
            ctx.decisions["account_created"] = False
            return

        create_system_user(ctx.run, name, home=ctx.cfg.install_dir)
        ctx.decisions["account_created"] = True
        logger.info("User %s created", name)
