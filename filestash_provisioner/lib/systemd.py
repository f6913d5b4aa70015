from __future__ import annotations

import logging
from pathlib import Path

from ..config import ProvisionConfig
from .command import CommandRunner

logger = logging.getLogger(__name__)


def render_unit(cfg: ProvisionConfig) -> str:
    """Render the service unit for the installed application.

    Sandboxing: no privilege escalation, private /tmp, read-only system
    with writes allowed only under the install location, and only
    CAP_NET_BIND_SERVICE retained.
    """

    install_dir = cfg.install_dir
    return "\n".join(
        [
            "[Unit]",
            f"Description={cfg.description}",
            "After=network.target",
            "Wants=network.target",
            "",
            "[Service]",
            "Type=simple",
            f"User={cfg.user}",
            f"Group={cfg.group}",
            f"WorkingDirectory={install_dir}",
            f"ExecStart={cfg.executable_path}",
            "Restart=always",
            f"RestartSec={cfg.restart_sec}",
            "StandardOutput=journal",
            "StandardError=journal",
            "",
            "# Security settings",
            "NoNewPrivileges=true",
            "PrivateTmp=true",
            "ProtectSystem=strict",
            "ProtectHome=true",
            f"ReadWritePaths={install_dir}",
            "CapabilityBoundingSet=CAP_NET_BIND_SERVICE",
            "AmbientCapabilities=CAP_NET_BIND_SERVICE",
            "",
            "[Install]",
            "WantedBy=multi-user.target",
            "",
        ]
    )


def write_unit(path: Path, contents: str, *, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would write %s", path)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    logger.info("Wrote unit %s", path)


def daemon_reload(run: CommandRunner) -> None:
    run(["systemctl", "daemon-reload"])


def enable_service(run: CommandRunner, name: str) -> None:
    # enable only links the unit for boot; it does not start it.
    run(["systemctl", "enable", f"{name}.service"])
