from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)


def path_export_line(bin_dir: str) -> str:
    return f"export PATH=$PATH:{bin_dir}"


def _exports_dir(line: str, bin_dir: str) -> bool:
    # Matches `export PATH=$PATH:<dir>`, optionally quoted.
    pattern = r"export\s+PATH=([\"']?)\$PATH:" + re.escape(bin_dir) + r"/?\1"
    return re.fullmatch(pattern, line.strip()) is not None


def ensure_path_entry(profile: Path, bin_dir: str, *, dry_run: bool = False) -> bool:
    """Make profile export bin_dir on PATH exactly once.

    Existing exports of bin_dir are collapsed into a single canonical line.
    Returns True when the file changed.
    """

    wanted = path_export_line(bin_dir)
    original = profile.read_text(encoding="utf-8") if profile.exists() else ""
    lines = original.splitlines()

    kept: list[str] = []
    seen = False
    for line in lines:
        if _exports_dir(line, bin_dir):
            if seen:
                continue
            seen = True
            kept.append(wanted)
        else:
            kept.append(line)
    if not seen:
        kept.append(wanted)

    updated = "\n".join(kept) + "\n"
    if updated == original:
        logger.info("PATH entry for %s already present in %s", bin_dir, profile)
        return False

    if dry_run:
        logger.info("Would update %s with %r", profile, wanted)
        return True

    profile.parent.mkdir(parents=True, exist_ok=True)
    profile.write_text(updated, encoding="utf-8")
    logger.info("Updated PATH entry for %s in %s", bin_dir, profile)
    return True
