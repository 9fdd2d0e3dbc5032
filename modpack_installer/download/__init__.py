"""
modpack-installer 下载层

包含下载计划执行和 ZIP 解压。
"""

from modpack_installer.download.manager import (
    DownloadManager,
    DownloadReport,
    DownloadResult,
    DownloadStatus,
)
from modpack_installer.download.extractor import extract_archive

__all__ = [
    "DownloadManager",
    "DownloadReport",
    "DownloadResult",
    "DownloadStatus",
    "extract_archive",
]
