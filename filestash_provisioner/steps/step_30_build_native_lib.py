from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..lib.download import download, extract_tarball, scratch_dir, verify_sha256
from ..pipeline import Stage

logger = logging.getLogger(__name__)


class BuildNativeLibStep:
    """Build libwebp from a pinned release so libsharpyuv is available.

    Distribution packages ship an older libwebp without it.
    """

    step_id = "30_build_native_lib"
    stage = Stage.NATIVE_LIB

    def run(self, ctx: ProvisionContext) -> None:
        lib = ctx.cfg.native_lib
        logger.info("Installing %s %s from source...", lib.name, lib.version)

        with scratch_dir(prefix=f"{lib.name}-build-") as work:
            archive = download(ctx.run, lib.archive_url, work / f"{lib.name}.tar.gz")
            if ctx.dry_run:
                logger.info("Would verify checksum of %s", archive.name)
            elif not verify_sha256(archive, lib.sha256):
                logger.warning(
                    "No sha256 configured for %s %s; archive integrity is NOT verified",
                    lib.name,
                    lib.version,
                )
            extract_tarball(ctx.run, archive, work)

            build_dir = work / lib.source_dirname / "build"
            if not ctx.dry_run:
                build_dir.mkdir(parents=True, exist_ok=True)
            cwd = str(build_dir)
            ctx.run(["cmake", "..", *lib.cmake_flags], cwd=cwd)
            ctx.run(["make", f"-j{ctx.cpu_count}"], cwd=cwd)
            ctx.run(["make", "install"], cwd=cwd)
            ctx.run(["ldconfig"])

        ctx.decisions["native_lib"] = f"{lib.name}-{lib.version}"
        logger.info("%s %s installed successfully", lib.name, lib.version)
