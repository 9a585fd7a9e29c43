"""Configuration loader for Cosmos Explorer.

Loads from cosmos-explorer.toml with sensible defaults when file is absent.
Configuration is loaded once at startup and passed via dependency injection.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from cosmos_explorer.exceptions import ExplorerError

CONFIG_FILENAME = "cosmos-explorer.toml"


class ConfigError(ExplorerError):
    """Raised when configuration loading or validation fails."""


@dataclass(frozen=True)
class EmulatorConfig:
    """Local emulator ports. Zero means the port is not configured."""

    mongo_port: int = 10255
    port: int = 8081


@dataclass(frozen=True)
class StateConfig:
    path: str = "~/.cosmos-explorer/state.json"


@dataclass(frozen=True)
class SecretsConfig:
    enabled: bool = True


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    path: str = "~/.cosmos-explorer/logs/cosmos-explorer.log"


@dataclass(frozen=True)
class Config:
    """Top-level Cosmos Explorer configuration."""

    emulator: EmulatorConfig = field(default_factory=EmulatorConfig)
    state: StateConfig = field(default_factory=StateConfig)
    secrets: SecretsConfig = field(default_factory=SecretsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def state_path(self) -> Path:
        return Path(self.state.path).expanduser()

    @property
    def log_path(self) -> Path:
        return Path(self.logging.path).expanduser()


def default_config_candidates() -> list[Path]:
    return [
        Path.cwd() / CONFIG_FILENAME,
        Path.home() / ".cosmos-explorer" / CONFIG_FILENAME,
    ]


def _parse_port(raw: object, *, name: str, default: int, path: Path) -> int:
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise ConfigError(f"Invalid {name} in {path}: expected integer port.")
    try:
        port = int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid {name} in {path}: expected integer port.") from e
    if port < 0 or port > 65535:
        raise ConfigError(f"Invalid {name} in {path}: {port} is out of range.")
    return port


def load_config(path: Path | None = None) -> Config:
    """Load configuration from a TOML file.

    If path is None, searches for cosmos-explorer.toml in the current
    directory then ~/.cosmos-explorer/. Returns default config if no file
    is found.
    """
    if path is None:
        for candidate in default_config_candidates():
            if candidate.exists():
                path = candidate
                break

    if path is None or not path.exists():
        return Config()

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    emu_data = raw.get("emulator", {})
    emulator = EmulatorConfig(
        mongo_port=_parse_port(
            emu_data.get("mongo_port"), name="emulator.mongo_port",
            default=10255, path=path,
        ),
        port=_parse_port(
            emu_data.get("port"), name="emulator.port", default=8081, path=path,
        ),
    )

    state_data = raw.get("state", {})
    state = StateConfig(
        path=str(state_data.get("path", "~/.cosmos-explorer/state.json")),
    )

    secrets_data = raw.get("secrets", {})
    secrets = SecretsConfig(enabled=bool(secrets_data.get("enabled", True)))

    log_data = raw.get("logging", {})
    logging_cfg = LoggingConfig(
        level=str(log_data.get("level", "INFO")).upper(),
        path=str(log_data.get("path", "~/.cosmos-explorer/logs/cosmos-explorer.log")),
    )

    return Config(
        emulator=emulator,
        state=state,
        secrets=secrets,
        logging=logging_cfg,
    )
