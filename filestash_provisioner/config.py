from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .errors import ConfigError

DEFAULT_PACKAGES: Tuple[str, ...] = (
    "curl",
    "make",
    "gcc",
    "g++",
    "git",
    "ffmpeg",
    "libjpeg-dev",
    "libtiff-dev",
    "libpng-dev",
    "libwebp-dev",
    "libraw-dev",
    "libheif-dev",
    "libgif-dev",
    "libvips-dev",
    "pkg-config",
    "build-essential",
    "cmake",
    "ca-certificates",
)


@dataclass(frozen=True)
class NativeLibConfig:
    """libwebp built from source for libsharpyuv support."""

    name: str = "libwebp"
    version: str = "1.3.2"
    url: str = "https://github.com/webmproject/libwebp/archive/v{version}.tar.gz"
    # No digest is pinned upstream; set one to enforce verification.
    sha256: Optional[str] = None
    cmake_flags: Tuple[str, ...] = ("-DCMAKE_BUILD_TYPE=Release", "-DWEBP_BUILD_SHARPYUV=ON")

    @property
    def archive_url(self) -> str:
        return self.url.format(version=self.version)

    @property
    def source_dirname(self) -> str:
        return f"{self.name}-{self.version}"


@dataclass(frozen=True)
class ToolchainConfig:
    version: str = "1.24.0"
    url: str = "https://go.dev/dl/go{version}.linux-{arch}.tar.gz"
    prefix: str = "/usr/local"
    profile_path: str = "/etc/profile"
    sha256: Optional[str] = None

    @property
    def root(self) -> Path:
        return Path(self.prefix) / "go"

    @property
    def bin_dir(self) -> Path:
        return self.root / "bin"

    def archive_url(self, arch: str) -> str:
        return self.url.format(version=self.version, arch=arch)


@dataclass(frozen=True)
class ProvisionConfig:
    install_dir: str = "/opt/filestash"
    user: str = "filestash"
    service_name: str = "filestash"
    description: str = "Filestash File Manager"
    listen_url: str = "http://localhost:8334"
    unit_dir: str = "/etc/systemd/system"
    packages: Tuple[str, ...] = DEFAULT_PACKAGES
    build_targets: Tuple[str, ...] = ("build_init", "build_backend")
    executable: str = "dist/filestash"
    default_config: str = "config/config.json"
    runtime_config: str = "data/state/config/config.json"
    data_dir: str = "data"
    # True restores shipped defaults on every run; False keeps operator edits.
    reset_config: bool = True
    restart_sec: int = 5
    native_lib: NativeLibConfig = field(default_factory=NativeLibConfig)
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)

    @property
    def group(self) -> str:
        return self.user

    @property
    def install_path(self) -> Path:
        return Path(self.install_dir)

    @property
    def executable_path(self) -> Path:
        return self.install_path / self.executable

    @property
    def data_path(self) -> Path:
        return self.install_path / self.data_dir

    @property
    def unit_path(self) -> Path:
        return Path(self.unit_dir) / f"{self.service_name}.service"


_NESTED = {"native_lib": NativeLibConfig, "toolchain": ToolchainConfig}


def _coerce(value: Any, type_name: str, key: str) -> Any:
    """Check a YAML value against the field's annotation (kept as a string)."""

    if type_name == "Tuple[str, ...]":
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{key} must be a list of strings")
        return tuple(value)
    if type_name == "Optional[str]":
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{key} must be a string or null")
        return value
    if type_name == "bool":
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false")
        return value
    if type_name == "int":
        # bool is a subclass of int
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key} must be an integer")
        return value
    if type_name == "str":
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a string")
        return value
    raise ConfigError(f"{key} has unsupported type {type_name}")


def _build(cls: Any, raw: Dict[str, Any], section: str) -> Any:
    known = {f.name: f for f in dataclasses.fields(cls)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise ConfigError(f"Unknown keys in {section}: {', '.join(unknown)}")

    kwargs: Dict[str, Any] = {}
    for key, value in raw.items():
        name = key if section == "config" else f"{section}.{key}"
        if key in _NESTED and cls is ProvisionConfig:
            if not isinstance(value, dict):
                raise ConfigError(f"{key} must be a mapping")
            kwargs[key] = _build(_NESTED[key], value, key)
        else:
            kwargs[key] = _coerce(value, str(known[key].type), name)
    return cls(**kwargs)


def config_from_dict(raw: Dict[str, Any]) -> ProvisionConfig:
    return _build(ProvisionConfig, raw, "config")


def load_config(path: Optional[str]) -> ProvisionConfig:
    """Load YAML overrides on top of the built-in defaults.

    path=None returns the defaults unchanged.
    """

    if path is None:
        return ProvisionConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")
    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config must be YAML")

    import yaml

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")

    return config_from_dict(raw)


def describe(cfg: ProvisionConfig) -> List[str]:
    return [
        f"install_dir={cfg.install_dir}",
        f"user={cfg.user}",
        f"service={cfg.service_name}",
        f"{cfg.native_lib.name}={cfg.native_lib.version}",
        f"go={cfg.toolchain.version}",
    ]
