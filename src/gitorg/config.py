"""Persistent configuration: access token and default organizations."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from .errors import ConfigError, NotAuthenticated

APP_NAME = "gitorg"
CONFIG_FILE = "config.toml"


@dataclass
class AuthConfig:
    token: str | None = None


@dataclass
class DefaultsConfig:
    orgs: list[str] | None = None


@dataclass
class Config:
    auth: AuthConfig = field(default_factory=AuthConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    def token(self) -> str:
        """Return the stored token, raising NotAuthenticated if there is none."""
        token = (self.auth.token or "").strip()
        if not token:
            raise NotAuthenticated()
        return token

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        auth = data.get("auth") or {}
        defaults = data.get("defaults") or {}
        if not isinstance(auth, Mapping) or not isinstance(defaults, Mapping):
            raise ConfigError("[auth] and [defaults] must be tables")

        token = auth.get("token")
        if token is not None and not isinstance(token, str):
            raise ConfigError("auth.token must be a string")
        orgs = defaults.get("orgs")
        if orgs is not None and (
            not isinstance(orgs, list) or not all(isinstance(o, str) for o in orgs)
        ):
            raise ConfigError("defaults.orgs must be a list of strings")

        return cls(auth=AuthConfig(token=token), defaults=DefaultsConfig(orgs=orgs))

    def to_dict(self) -> dict[str, Any]:
        # TOML has no null, so unset values are left out.
        auth: dict[str, Any] = {}
        if self.auth.token is not None:
            auth["token"] = self.auth.token
        defaults: dict[str, Any] = {}
        if self.defaults.orgs is not None:
            defaults["orgs"] = list(self.defaults.orgs)
        return {"auth": auth, "defaults": defaults}


def config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Location of the config file, honouring ``$XDG_CONFIG_HOME``."""
    env = os.environ if environ is None else environ
    xdg = env.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME / CONFIG_FILE
    return Path.home() / ".config" / APP_NAME / CONFIG_FILE


def load_config(path: Path | None = None) -> Config:
    """Load the config file. A missing file yields an empty config."""
    path = path or config_path()
    if not path.exists():
        return Config()
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    return Config.from_dict(data)


def save_config(config: Config, path: Path | None = None) -> None:
    """Write the config file, readable and writable by the owner only."""
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(tomli_w.dumps(config.to_dict()))
        if os.name == "posix":
            # os.open only applies the mode to newly created files.
            path.chmod(0o600)
    except OSError as exc:
        raise ConfigError(f"cannot write {path}: {exc}") from exc
