"""Tests for the config module."""

from __future__ import annotations

import os
import stat
import tomllib
from pathlib import Path

import pytest

from gitorg.config import (
    AuthConfig,
    Config,
    DefaultsConfig,
    config_path,
    load_config,
    save_config,
)
from gitorg.errors import ConfigError, NotAuthenticated


def test_config_path_uses_xdg():
    path = config_path({"XDG_CONFIG_HOME": "/tmp/test_xdg"})
    assert path == Path("/tmp/test_xdg/gitorg/config.toml")


def test_config_path_defaults_to_home(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    assert config_path({}) == tmp_path / ".config" / "gitorg" / "config.toml"


def test_config_default_has_no_token():
    with pytest.raises(NotAuthenticated, match="gitorg auth"):
        Config().token()


def test_config_blank_token_is_not_authenticated():
    with pytest.raises(NotAuthenticated):
        Config(auth=AuthConfig(token="   ")).token()


def test_config_token_accessor():
    assert Config(auth=AuthConfig(token="ghp_abc")).token() == "ghp_abc"


def test_load_missing_file_returns_default(tmp_path):
    config = load_config(tmp_path / "nope" / "config.toml")
    assert config == Config()
    with pytest.raises(NotAuthenticated):
        config.token()


def test_load_empty_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("")
    config = load_config(path)
    assert config.auth.token is None
    assert config.defaults.orgs is None


def test_config_roundtrip(tmp_path):
    path = tmp_path / "gitorg" / "config.toml"
    config = Config(
        auth=AuthConfig(token="ghp_test123"),
        defaults=DefaultsConfig(orgs=["myorg", "other"]),
    )
    save_config(config, path)

    loaded = load_config(path)
    assert loaded.auth.token == "ghp_test123"
    assert loaded.defaults.orgs == ["myorg", "other"]

    with path.open("rb") as f:
        raw = tomllib.load(f)
    assert raw == {"auth": {"token": "ghp_test123"}, "defaults": {"orgs": ["myorg", "other"]}}


def test_save_omits_unset_values(tmp_path):
    path = tmp_path / "config.toml"
    save_config(Config(auth=AuthConfig(token="t")), path)
    with path.open("rb") as f:
        raw = tomllib.load(f)
    assert raw == {"auth": {"token": "t"}, "defaults": {}}


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
def test_save_restricts_permissions(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("")
    path.chmod(0o644)
    save_config(Config(auth=AuthConfig(token="secret")), path)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_load_invalid_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[auth\ntoken = ")
    with pytest.raises(ConfigError, match="cannot parse"):
        load_config(path)


def test_load_wrong_types(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[defaults]\norgs = "myorg"\n')
    with pytest.raises(ConfigError, match="defaults.orgs"):
        load_config(path)


def test_save_failure_is_config_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    with pytest.raises(ConfigError, match="cannot write"):
        save_config(Config(), blocker / "config.toml")
