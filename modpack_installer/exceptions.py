"""
modpack-installer 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和字典序列化。
"""

from typing import Any, Dict, Optional

import aiohttp


class InstallerError(Exception):
    """安装器基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(InstallerError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ConfigFileError(ConfigError):
    """安装器设置文件错误"""

    def _get_default_code(self) -> str:
        return "E101"


class ManifestError(ConfigError):
    """整合包清单错误"""

    def _get_default_code(self) -> str:
        return "E110"


class ManifestParseError(ManifestError):
    """清单不是合法 JSON，或缺少必填字段、字段类型错误"""

    def _get_default_code(self) -> str:
        return "E111"


class ManifestNotFoundError(ManifestError):
    """本地文件和启动名推导出的 URL 都没有得到清单"""

    def _get_default_code(self) -> str:
        return "E112"


class ModApiError(InstallerError):
    """模组托管 API 错误（传输层或 HTTP 层）"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, code, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E200"


class ModNotFoundError(ModApiError):
    """找不到模组，或没有与目标版本/加载器匹配的文件"""

    def _get_default_code(self) -> str:
        return "E404"


class ModApiRateLimitError(ModApiError):
    """API 速率限制"""

    def _get_default_code(self) -> str:
        return "E429"


class DownloadError(InstallerError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class FetchError(DownloadError):
    """下载网络错误"""

    def _get_default_code(self) -> str:
        return "E301"


class WriteError(DownloadError):
    """写入文件失败"""

    def _get_default_code(self) -> str:
        return "E303"


class ExtractError(DownloadError):
    """解压归档失败"""

    def _get_default_code(self) -> str:
        return "E304"


class LoaderError(InstallerError):
    """加载器相关错误"""

    def _get_default_code(self) -> str:
        return "E600"


class LoaderInstallError(LoaderError):
    """加载器安装程序运行失败"""

    def _get_default_code(self) -> str:
        return "E601"


class ProfileError(LoaderError):
    """启动器配置文件读写失败"""

    def _get_default_code(self) -> str:
        return "E602"


__all__ = [
    # 基础异常
    "InstallerError",
    # 配置异常
    "ConfigError",
    "ConfigFileError",
    "ManifestError",
    "ManifestParseError",
    "ManifestNotFoundError",
    # API 异常
    "ModApiError",
    "ModNotFoundError",
    "ModApiRateLimitError",
    # 下载异常
    "DownloadError",
    "FetchError",
    "WriteError",
    "ExtractError",
    # 加载器异常
    "LoaderError",
    "LoaderInstallError",
    "ProfileError",
]
