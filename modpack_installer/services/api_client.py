"""
Modrinth API 客户端

只包含安装器需要的两个查询：项目信息和按版本/加载器过滤的版本列表。
不做重试：速率限制以 ModApiRateLimitError 的形式交给调用者处理。
"""

import asyncio
import json
from typing import List, Optional

import aiohttp
from loguru import logger

from modpack_installer.config import MODRINTH_BASE_URL
from modpack_installer.exceptions import ModApiError, ModApiRateLimitError
from modpack_installer.models import ProjectInfo, VersionInfo


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = MODRINTH_BASE_URL,
        user_agent: Optional[str] = None,
        timeout: float = 60.0,
    ):
        self._session = session
        self._owned_session = session is None
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            self._session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owned_session = True
        return self._session

    async def _request(self, endpoint: str, params: Optional[dict] = None):
        """发送 API 请求，404 返回 None"""
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"[API] GET {url} {params or ''}")
        try:
            async with self.session.get(url, params=params) as response:
                if response.status == 200:
                    return await response.json(content_type=None)
                elif response.status == 404:
                    return None
                elif response.status == 429:
                    reset = response.headers.get("X-Ratelimit-Reset")
                    raise ModApiRateLimitError(
                        f"触发 Modrinth 速率限制，{reset or '?'} 秒后重置",
                        context={"reset": reset},
                        response=response,
                    )
                else:
                    raise ModApiError(
                        f"API 请求失败 (状态码: {response.status})",
                        response=response,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError) as e:
            raise ModApiError(
                f"API 请求失败: {e.__class__.__name__}: {e}",
                context={"url": url},
            ) from e

    async def get_project(self, idx: str) -> Optional[ProjectInfo]:
        """获取项目信息（idx 可以是 ID 或 slug）"""
        response = await self._request(f"/project/{idx}")
        if response is None:
            return None
        return ProjectInfo.from_modrinth(response)

    async def get_versions(
        self,
        idx: str,
        mc_version: Optional[str] = None,
        mod_loader: Optional[str] = None,
    ) -> List[VersionInfo]:
        """
        获取项目版本列表（新版本在前）

        Args:
            idx: 项目 ID 或 slug
            mc_version: 只返回支持该 Minecraft 版本的版本
            mod_loader: 只返回支持该加载器的版本
        """
        params = {}
        if mc_version:
            params["game_versions"] = json.dumps([mc_version])
        if mod_loader:
            params["loaders"] = json.dumps([mod_loader])

        response = await self._request(f"/project/{idx}/version", params or None)
        if not response:
            return []
        return [VersionInfo.from_modrinth(version) for version in response]

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
