"""
模组解析服务

把清单中的模组 ID 解析为具体的可下载文件（文件名 + URL）。
每个 ID 单独查询一次，不做批量、缓存或重试。
"""

from typing import Iterable, List, Optional

from loguru import logger

from modpack_installer.exceptions import ModNotFoundError
from modpack_installer.models import ResolvedFile, VersionInfo
from modpack_installer.services.api_client import ModrinthClient

DEFAULT_LOADER = "fabric"


class ModResolver:
    """模组解析器，绑定一个目标 Minecraft 版本和加载器"""

    def __init__(
        self,
        client: ModrinthClient,
        mc_version: str,
        mod_loader: str = DEFAULT_LOADER,
        allow_latest_fallback: bool = False,
    ):
        self.client = client
        self.mc_version = mc_version
        self.mod_loader = mod_loader
        self.allow_latest_fallback = allow_latest_fallback

    async def resolve(self, mod_id: str) -> ResolvedFile:
        """
        解析单个模组

        Args:
            mod_id: Modrinth 项目 ID 或 slug

        Returns:
            ResolvedFile

        Raises:
            ModNotFoundError: 项目不存在或没有匹配的文件
            ModApiError: 网络或 HTTP 错误
        """
        project = await self.client.get_project(mod_id)
        if project is None:
            raise ModNotFoundError(
                f"模组 '{mod_id}' 不存在", context={"mod_id": mod_id}
            )

        versions = await self.client.get_versions(
            project.id, self.mc_version, self.mod_loader
        )
        version = self._pick_version(versions, strict=True)

        if version is None and self.allow_latest_fallback:
            logger.warning(
                f"[回退] '{project.title}' 没有适用于 {self.mc_version}/{self.mod_loader} 的版本，"
                "使用最新版本"
            )
            version = self._pick_version(
                await self.client.get_versions(project.id), strict=False
            )

        if version is None:
            raise ModNotFoundError(
                f"模组 '{project.title}' ({mod_id}) 没有适用于 "
                f"Minecraft {self.mc_version} / {self.mod_loader} 的文件",
                context={
                    "mod_id": mod_id,
                    "mc_version": self.mc_version,
                    "loader": self.mod_loader,
                },
            )

        resolved = ResolvedFile.from_version(project, version, version.primary_file)
        logger.debug(
            f"[解析] {project.title} ({mod_id}) -> {resolved.file_name}"
        )
        return resolved

    def _pick_version(
        self, versions: List[VersionInfo], strict: bool
    ) -> Optional[VersionInfo]:
        # API 返回的列表新版本在前
        for version in versions:
            if version.primary_file is None:
                continue
            if strict and not version.supports(self.mc_version, self.mod_loader):
                continue
            return version
        return None

    async def resolve_all(self, mod_ids: Iterable[str]) -> List[ResolvedFile]:
        """
        按清单顺序逐个解析

        第一个失败会直接抛出，调用者不会拿到部分结果。
        """
        results = []
        for mod_id in mod_ids:
            results.append(await self.resolve(mod_id))
        return results

