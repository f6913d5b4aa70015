from __future__ import annotations

import platform

from ..errors import ProvisionError


def go_arch(machine: str | None = None) -> str:
    """Map a kernel machine name to the arch suffix used by go.dev downloads."""

    m = (machine if machine is not None else platform.machine()).lower()
    arch = {
        "x86_64": "amd64",
        "amd64": "amd64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "armv7l": "armv6l",
        "armv6l": "armv6l",
        "i386": "386",
        "i686": "386",
    }.get(m)
    if arch is None:
        raise ProvisionError(f"Unsupported architecture for Go toolchain: {m!r}")
    return arch
