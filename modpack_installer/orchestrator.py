"""
主协调器

整合各服务层组件，按顺序执行：定位清单 → 解析清单 → 解析模组 →
构建下载计划 → 下载 → 安装加载器 → 写入启动器配置。
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from modpack_installer.config import InstallerConfig
from modpack_installer.download import DownloadManager, DownloadReport
from modpack_installer.loader import FabricInstaller, write_profile
from modpack_installer.models import Manifest, ResolvedDownload, parse_manifest
from modpack_installer.services import (
    ModResolver,
    ModrinthClient,
    build_plan,
    locate_manifest,
)


@dataclass
class InstallReport:
    """一次运行的结果"""

    manifest: Optional[Manifest] = None
    modpack_dir: Optional[str] = None
    plan: List[ResolvedDownload] = field(default_factory=list)
    downloads: Optional[DownloadReport] = None
    already_installed: bool = False
    loader_installed: bool = False
    profile: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.downloads is None or self.downloads.ok


class InstallOrchestrator:
    """安装主协调器"""

    def __init__(
        self,
        config: InstallerConfig,
        invocation: Optional[str] = None,
        client: Optional[ModrinthClient] = None,
        downloader: Optional[DownloadManager] = None,
        loader_installer: Optional[FabricInstaller] = None,
    ):
        self.config = config
        self.invocation = invocation
        self.client = client or ModrinthClient(
            base_url=config.api_base_url,
            user_agent=config.user_agent,
            timeout=config.timeout,
        )
        self.downloader = downloader or DownloadManager(
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
            user_agent=config.user_agent,
            fail_fast=config.fail_fast,
        )
        self.loader_installer = loader_installer or FabricInstaller(
            minecraft_dir=config.minecraft_dir,
            downloader=self.downloader,
            installer_version=config.fabric_installer_version,
            java_path=config.java_path,
        )

    async def load_manifest(self) -> Manifest:
        data = await locate_manifest(
            self.config.manifest_path,
            self.invocation,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
        )
        manifest = parse_manifest(data)
        logger.info(
            f"[清单] {manifest.display_name}: Minecraft {manifest.target}, "
            f"{len(manifest.mods)} 个模组, {len(manifest.external)} 个外部文件"
        )
        return manifest

    async def prepare_plan(self, manifest: Manifest, root: str) -> List[ResolvedDownload]:
        """解析全部模组并构建下载计划；任一模组解析失败都会中止"""
        if not manifest.mods:
            return build_plan(manifest, [], root=root)

        resolver = ModResolver(
            self.client,
            mc_version=manifest.target,
            allow_latest_fallback=self.config.allow_latest_fallback,
        )
        logger.info(f"开始解析 {len(manifest.mods)} 个模组...")
        resolved = await resolver.resolve_all(manifest.mods)
        return build_plan(manifest, resolved, root=root)

    async def run(self, dry_run: bool = False) -> InstallReport:
        """运行完整的安装流程"""
        report = InstallReport()
        try:
            manifest = await self.load_manifest()
            report.manifest = manifest

            target_dir = self.config.target_dir
            modpack_dir = os.path.join(target_dir, manifest.folder)
            report.modpack_dir = modpack_dir

            if dry_run:
                report.plan = await self.prepare_plan(manifest, target_dir)
                return report

            client_install = not self.config.server

            if os.path.exists(modpack_dir):
                logger.warning(f"整合包已安装: {modpack_dir}")
                report.already_installed = True
                return report

            logger.info(f"正在安装整合包 {manifest.display_name}...")
            report.plan = await self.prepare_plan(manifest, target_dir)

            os.makedirs(os.path.join(modpack_dir, "mods"), exist_ok=True)
            report.downloads = await self.downloader.execute(report.plan)

            stats = report.downloads
            logger.info(
                f"下载完成: {stats.completed} 成功, {stats.failed} 失败, {stats.skipped} 跳过"
            )

            if client_install and self.config.install_loader:
                report.loader_installed = await self.loader_installer.ensure_installed(
                    manifest
                )

            if client_install and self.config.create_profile:
                report.profile = write_profile(
                    self.config.minecraft_dir, manifest, modpack_dir
                )

            if report.ok:
                logger.success("整合包安装完成!")
            else:
                for failure in stats.failures():
                    logger.error(
                        f"[失败] {failure.entry.destination_path} <- {failure.entry.source_url}: {failure.error}"
                    )
            return report
        finally:
            await self.client.close()
            await self.downloader.close()
