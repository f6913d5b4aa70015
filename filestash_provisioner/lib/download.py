from __future__ import annotations

import contextlib
import hashlib
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Iterator, Optional

from ..errors import ChecksumError
from .command import CommandRunner

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def scratch_dir(prefix: str, *, base: Optional[str] = None) -> Iterator[Path]:
    """Yield a fresh temporary directory that is removed on every exit path."""

    p = Path(tempfile.mkdtemp(prefix=prefix, dir=base))
    logger.debug("Created scratch directory %s", p)
    try:
        yield p
    finally:
        shutil.rmtree(p, ignore_errors=True)
        logger.debug("Removed scratch directory %s", p)


def download(run: CommandRunner, url: str, dest: Path) -> Path:
    run(["curl", "-fsSL", url, "-o", str(dest)])
    return dest


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_sha256(path: Path, expected: Optional[str]) -> bool:
    """Check an archive against a pinned digest.

    Returns False when no digest is configured so the caller can warn.
    """

    if not expected:
        return False
    actual = sha256_file(path)
    if actual.lower() != expected.strip().lower():
        raise ChecksumError(f"Checksum mismatch for {path.name}: expected {expected}, got {actual}")
    logger.info("Checksum verified for %s", path.name)
    return True


def extract_tarball(run: CommandRunner, archive: Path, dest: Path) -> None:
    run(["tar", "-C", str(dest), "-xzf", str(archive)])
