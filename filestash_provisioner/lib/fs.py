from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ..errors import FilesystemError

logger = logging.getLogger(__name__)

DATA_DIR_MODE = 0o770
DATA_FILE_MODE = 0o640
EXECUTABLE_MODE = 0o770


def same_path(a: Path, b: Path) -> bool:
    return a.resolve() == b.resolve()


def copy_tree(src: Path, dst: Path, *, dry_run: bool = False) -> int:
    """Copy every entry of src (dotfiles included) into dst, overwriting files.

    This is a one-shot copy, not a sync: nothing in dst is ever deleted.
    Returns the number of files copied.
    """

    if not src.is_dir():
        raise FilesystemError(f"Source directory missing: {src}")

    if dry_run:
        logger.info("Would copy tree %s -> %s", src, dst)
        return 0

    dst_resolved = dst.resolve()
    # Only a destination nested inside the source can be reached by the walk.
    dst_in_src = src.resolve() in dst_resolved.parents
    copied = 0
    dst.mkdir(parents=True, exist_ok=True)
    for item in sorted(src.rglob("*")):
        if dst_in_src and (item.resolve() == dst_resolved or dst_resolved in item.resolve().parents):
            continue
        out = dst / item.relative_to(src)
        if item.is_symlink():
            if out.is_symlink() or out.is_file():
                out.unlink()
            out.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(os.readlink(item), out)
            copied += 1
        elif item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)
            copied += 1
    return copied


def install_default_config(src: Path, dst: Path, *, overwrite: bool, dry_run: bool = False) -> bool:
    """Copy the application's default config into the runtime tree.

    With overwrite=False an existing runtime config is left untouched.
    Returns True when the file was written.
    """

    if dst.exists() and not overwrite:
        logger.info("Keeping existing runtime config %s", dst)
        return False
    if dry_run:
        # The bootstrap copy was skipped too, so src may not exist yet.
        logger.info("Would copy %s -> %s", src, dst)
        return True
    if not src.is_file():
        raise FilesystemError(f"Default configuration missing: {src}")
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)
    return True


def apply_data_permissions(data_dir: Path, *, dry_run: bool = False) -> None:
    """Directories under data_dir become 0770, files 0640."""

    if dry_run:
        logger.info("Would chmod %s (dirs %o, files %o)", data_dir, DATA_DIR_MODE, DATA_FILE_MODE)
        return
    if not data_dir.is_dir():
        raise FilesystemError(f"Runtime data directory missing: {data_dir}")

    data_dir.chmod(DATA_DIR_MODE)
    for root, dirs, files in os.walk(data_dir):
        for d in dirs:
            p = Path(root, d)
            # os.walk lists links to directories here; never follow them.
            if not p.is_symlink():
                p.chmod(DATA_DIR_MODE)
        for f in files:
            p = Path(root, f)
            if not p.is_symlink():
                p.chmod(DATA_FILE_MODE)


def apply_executable_permissions(path: Path, *, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would chmod %o %s", EXECUTABLE_MODE, path)
        return
    if not path.is_file():
        raise FilesystemError(f"Built executable missing: {path}")
    path.chmod(EXECUTABLE_MODE)
