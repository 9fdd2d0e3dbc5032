"""
modpack-installer 数据模型包

包含清单模型、下载计划模型和 API 模型定义。
"""

from modpack_installer.models.manifest import (
    ExternalEntry,
    Manifest,
    parse_manifest,
)
from modpack_installer.models.plan import DownloadOrigin, ResolvedDownload
from modpack_installer.models.api import (
    ProjectInfo,
    FileInfo,
    VersionInfo,
    ResolvedFile,
)

__all__ = [
    # 清单模型
    "ExternalEntry",
    "Manifest",
    "parse_manifest",
    # 下载计划
    "DownloadOrigin",
    "ResolvedDownload",
    # API 模型
    "ProjectInfo",
    "FileInfo",
    "VersionInfo",
    "ResolvedFile",
]
