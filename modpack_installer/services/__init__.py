"""
modpack-installer 服务层

包含业务逻辑服务：API 客户端、模组解析、下载计划构建、清单定位。
"""

from modpack_installer.services.api_client import ModrinthClient
from modpack_installer.services.mod_resolver import ModResolver
from modpack_installer.services.plan_builder import build_plan
from modpack_installer.services.manifest_locator import (
    decode_invocation_url,
    locate_manifest,
)

__all__ = [
    "ModrinthClient",
    "ModResolver",
    "build_plan",
    "decode_invocation_url",
    "locate_manifest",
]
