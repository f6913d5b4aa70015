"""Filestash host provisioner.

Brings a Debian/Ubuntu host to a state where Filestash is built from source,
owned by a dedicated system account and registered with systemd.

Core design goals:
- Strictly ordered, fail-fast stages
- Idempotent where the host allows it
- Host access only through small adapters (lib/)
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
