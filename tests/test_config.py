"""
Tests for installer settings.
"""

import os

import pytest

from modpack_installer.config import InstallerConfig, load_config
from modpack_installer.exceptions import ConfigFileError


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("MODPACK_INSTALLER_MINECRAFT_DIR", str(tmp_path))
    monkeypatch.delenv("MODPACK_INSTALLER_USER_AGENT", raising=False)

    config = InstallerConfig()

    assert config.manifest_path == "modpack.json"
    assert config.minecraft_dir == str(tmp_path)
    assert config.target_dir == os.path.join(str(tmp_path), "versions")
    assert config.user_agent.startswith("modpack-installer/")


def test_server_installs_into_cwd(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    assert InstallerConfig(server=True).target_dir == os.getcwd()
    assert InstallerConfig(server=True, install_dir="/srv").target_dir == "/srv"


@pytest.mark.parametrize(
    "name,content",
    [
        ("installer.toml", 'max_retries = 5\nfail_fast = true\nretry_delay = 2\n'),
        ("installer.json", '{"max_retries": 5, "fail_fast": true, "retry_delay": 2}'),
        ("installer.yaml", "max_retries: 5\nfail_fast: true\nretry_delay: 2\n"),
    ],
)
def test_load_config_formats(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content)

    config = load_config(str(path))

    assert config.max_retries == 5
    assert config.fail_fast is True
    assert config.retry_delay == 2.0


@pytest.mark.parametrize(
    "data",
    [
        {"unknown": 1},
        {"max_retries": "3"},
        {"max_retries": True},
        {"fail_fast": "yes"},
        {"max_retries": -1},
        {"timeout": 0},
        {"user_agent": None},
    ],
)
def test_invalid_settings(data):
    with pytest.raises(ConfigFileError):
        InstallerConfig.from_dict(data)


def test_unsupported_and_broken_files(tmp_path):
    ini = tmp_path / "installer.ini"
    ini.write_text("[x]")
    broken = tmp_path / "installer.toml"
    broken.write_text("max_retries = ")

    with pytest.raises(ConfigFileError):
        load_config(str(ini))
    with pytest.raises(ConfigFileError):
        load_config(str(broken))
    with pytest.raises(ConfigFileError):
        load_config(str(tmp_path / "missing.toml"))


def test_merge_ignores_none():
    config = InstallerConfig(max_retries=5).merge(max_retries=None, server=True)
    assert config.max_retries == 5
    assert config.server is True


def test_user_agent_env(monkeypatch):
    monkeypatch.setenv("MODPACK_INSTALLER_USER_AGENT", "pack/9")
    assert InstallerConfig().user_agent == "pack/9"
