"""
启动器配置

在官方启动器的 launcher_profiles.json 中为整合包写入一个配置，
指向加载器版本和整合包文件夹。
"""

import json
import os
from datetime import datetime, timezone

from loguru import logger

from modpack_installer.exceptions import ProfileError
from modpack_installer.models import Manifest

PROFILE_FILE = "launcher_profiles.json"
DEFAULT_JAVA_ARGS = (
    "-Xmx4G -XX:+UnlockExperimentalVMOptions -XX:+UseG1GC "
    "-XX:G1NewSizePercent=20 -XX:G1ReservePercent=20 "
    "-XX:MaxGCPauseMillis=50 -XX:G1HeapRegionSize=32M"
)
# 启动器内置图标
DEFAULT_ICON = "Furnace"


def build_profile(manifest: Manifest, game_dir: str, java_args: str = DEFAULT_JAVA_ARGS) -> dict:
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")
    return {
        "name": manifest.name or manifest.folder,
        "type": "custom",
        "created": now,
        "lastUsed": now,
        "lastVersionId": manifest.loader,
        "gameDir": game_dir,
        "icon": DEFAULT_ICON,
        "javaArgs": java_args,
    }


def write_profile(minecraft_dir: str, manifest: Manifest, game_dir: str) -> str:
    """
    写入或替换整合包的启动器配置

    Args:
        minecraft_dir: .minecraft 目录
        manifest: 清单
        game_dir: 整合包文件夹（游戏目录）

    Returns:
        配置键名
    """
    path = os.path.join(minecraft_dir, PROFILE_FILE)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ProfileError(
            f"找不到启动器配置文件: {path}", context={"path": path}
        ) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ProfileError(
            f"无法读取启动器配置文件: {e}", context={"path": path}
        ) from e

    if not isinstance(data, dict):
        raise ProfileError("启动器配置文件格式错误", context={"path": path})
    profiles = data.setdefault("profiles", {})
    if not isinstance(profiles, dict):
        raise ProfileError("启动器配置文件中的 profiles 不是对象", context={"path": path})

    key = manifest.name or manifest.folder
    profiles[key] = build_profile(manifest, os.path.abspath(game_dir))

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise ProfileError(
            f"无法写入启动器配置文件: {e}", context={"path": path}
        ) from e

    logger.success(f"[配置] 已写入启动器配置 '{key}'")
    return key
