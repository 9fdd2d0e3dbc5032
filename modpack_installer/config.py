"""
安装器配置

清单描述“装什么”，这里的配置描述“怎么装”：安装位置、网络参数、
失败策略等。配置可以来自 TOML / JSON / YAML 设置文件、环境变量和命令行。
"""

import json
import os
import platform
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import toml
import yaml

from modpack_installer import __version__
from modpack_installer.exceptions import ConfigFileError

MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
DEFAULT_MANIFEST = "modpack.json"
DEFAULT_FABRIC_INSTALLER_VERSION = "0.11.2"


def default_minecraft_dir() -> str:
    """
    返回平台默认的 .minecraft 目录

    Windows: %APPDATA%\\.minecraft
    macOS: ~/Library/Application Support/minecraft
    Linux: ~/.minecraft
    """
    system = platform.system()
    home = Path.home()
    if system == "Windows":
        appdata = os.getenv("APPDATA")
        if appdata:
            return str(Path(appdata) / ".minecraft")
        return str(home / ".minecraft")
    elif system == "Darwin":
        return str(home / "Library" / "Application Support" / "minecraft")
    return str(home / ".minecraft")


@dataclass
class InstallerConfig:
    """安装器配置"""

    manifest_path: str = DEFAULT_MANIFEST
    server: bool = False
    install_dir: Optional[str] = None
    minecraft_dir: Optional[str] = None
    api_base_url: str = MODRINTH_BASE_URL
    user_agent: str = f"modpack-installer/{__version__}"
    max_retries: int = 3
    retry_delay: float = 1.0
    timeout: float = 60.0
    fail_fast: bool = False
    allow_latest_fallback: bool = False
    install_loader: bool = True
    create_profile: bool = True
    fabric_installer_version: str = DEFAULT_FABRIC_INSTALLER_VERSION
    java_path: str = "java"

    def __post_init__(self):
        if self.minecraft_dir is None:
            self.minecraft_dir = os.environ.get(
                "MODPACK_INSTALLER_MINECRAFT_DIR"
            ) or default_minecraft_dir()
        env_agent = os.environ.get("MODPACK_INSTALLER_USER_AGENT")
        if env_agent:
            self.user_agent = env_agent

    @classmethod
    def from_dict(cls, data: dict) -> "InstallerConfig":
        """从设置文件内容构建配置，未知键和类型错误都会报错"""
        if not isinstance(data, dict):
            raise ConfigFileError("设置文件顶层必须是表/对象")

        known = {f.name: f for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise ConfigFileError(f"未知配置项: {key}", context={"key": key})
            values[key] = _coerce(key, known[key].default, value)

        config = cls(**values)
        if config.max_retries < 0:
            raise ConfigFileError("max_retries 不能为负数")
        if config.retry_delay < 0 or config.timeout <= 0:
            raise ConfigFileError("retry_delay 不能为负数，timeout 必须大于 0")
        return config

    def merge(self, **overrides) -> "InstallerConfig":
        """返回合并了非 None 覆盖值的新配置（命令行参数优先）"""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return InstallerConfig(**values)

    @property
    def target_dir(self) -> str:
        """
        整合包文件夹的父目录

        客户端安装到 .minecraft/versions，服务端安装到当前目录；
        ``install_dir`` 可覆盖两者。
        """
        if self.install_dir:
            return self.install_dir
        if self.server:
            return os.getcwd()
        return os.path.join(self.minecraft_dir, "versions")


def _coerce(key: str, default: Any, value: Any) -> Any:
    """按字段默认值的类型校验设置值；默认为 None 的字段是可选字符串"""
    if value is None:
        if default is None:
            return None
        raise ConfigFileError(f"配置项 {key} 不能为空", context={"key": key})
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigFileError(f"配置项 {key} 必须是布尔值", context={"key": key})
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigFileError(f"配置项 {key} 必须是整数", context={"key": key})
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigFileError(f"配置项 {key} 必须是数字", context={"key": key})
        return float(value)
    if not isinstance(value, str):
        raise ConfigFileError(f"配置项 {key} 必须是字符串", context={"key": key})
    return value


def load_config_file(config_path: str) -> dict:
    """加载设置文件（.toml / .json / .yaml / .yml）"""
    path = Path(config_path)

    if not path.exists():
        raise ConfigFileError(
            f"设置文件不存在: {config_path}", context={"path": config_path}
        )

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigFileError(
            f"设置文件解析失败: {e}", context={"path": config_path}
        ) from e

    raise ConfigFileError(
        f"不支持的设置文件格式: {suffix}", context={"path": config_path}
    )


def load_config(config_path: Optional[str] = None) -> InstallerConfig:
    if config_path is None:
        return InstallerConfig()
    return InstallerConfig.from_dict(load_config_file(config_path))
