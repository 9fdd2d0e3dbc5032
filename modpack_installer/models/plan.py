"""
下载计划模型
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DownloadOrigin(Enum):
    """计划条目来源"""

    FROM_MOD = "mod"
    FROM_EXTERNAL = "external"


@dataclass(frozen=True)
class ResolvedDownload:
    """已确定的 (目标路径, 来源 URL) 下载条目"""

    destination_path: str
    source_url: str
    origin: DownloadOrigin
    # 仅 FROM_EXTERNAL 的 ZIP 条目使用：解压目标目录
    extract_to: Optional[str] = None

    @property
    def is_mod(self) -> bool:
        return self.origin is DownloadOrigin.FROM_MOD
