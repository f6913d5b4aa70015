from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..context import ProvisionContext
from ..lib.arch import go_arch
from ..lib.download import download, extract_tarball, scratch_dir, verify_sha256
from ..lib.profile import ensure_path_entry
from ..pipeline import Stage

logger = logging.getLogger(__name__)


class InstallToolchainStep:
    step_id = "40_install_toolchain"
    stage = Stage.TOOLCHAIN

    def __init__(self, machine: str | None = None) -> None:
        self.machine = machine

    def run(self, ctx: ProvisionContext) -> None:
        tc = ctx.cfg.toolchain
        arch = go_arch(self.machine)
        logger.info("Installing Go %s (linux-%s)...", tc.version, arch)

        # Any previous install is replaced so only the pinned version remains.
        if tc.root.exists():
            if ctx.dry_run:
                logger.info("Would remove %s", tc.root)
            else:
                logger.warning("Removing existing Go installation at %s", tc.root)
                shutil.rmtree(tc.root)

        with scratch_dir(prefix="go-download-") as work:
            archive = download(ctx.run, tc.archive_url(arch), work / "go.tar.gz")
            if not ctx.dry_run and not verify_sha256(archive, tc.sha256):
                logger.info("No sha256 configured for Go %s; skipping verification", tc.version)
            if not ctx.dry_run:
                Path(tc.prefix).mkdir(parents=True, exist_ok=True)
            extract_tarball(ctx.run, archive, Path(tc.prefix))

        changed = ensure_path_entry(Path(tc.profile_path), str(tc.bin_dir), dry_run=ctx.dry_run)
        ctx.decisions["toolchain"] = {"version": tc.version, "arch": arch, "profile_updated": changed}
        logger.info("Go %s installed successfully", tc.version)
