from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import PrivilegeError
from ..lib.privileges import is_elevated
from ..pipeline import Stage

logger = logging.getLogger(__name__)


class CheckPrivilegesStep:
    step_id = "10_check_privileges"
    stage = Stage.PRIV_CHECK

    def run(self, ctx: ProvisionContext) -> None:
        # Checked once; later steps assume root.
        if not is_elevated(ctx.geteuid):
            raise PrivilegeError("This installer must be run as root")
        logger.info("Running as root")
