"""
Fabric 加载器安装

下载官方 fabric-installer，并以客户端模式运行：
``java -jar fabric-installer.jar client -dir <.minecraft> -loader <版本> -mcversion <MC 版本> -noprofile``
"""

import asyncio
import os
import tempfile
from typing import List, Optional

from loguru import logger

from modpack_installer.config import DEFAULT_FABRIC_INSTALLER_VERSION
from modpack_installer.download.manager import DownloadManager
from modpack_installer.exceptions import DownloadError, LoaderInstallError
from modpack_installer.models import Manifest

FABRIC_MAVEN = "https://maven.fabricmc.net/net/fabricmc/fabric-installer"


def installer_url(version: str = DEFAULT_FABRIC_INSTALLER_VERSION) -> str:
    return f"{FABRIC_MAVEN}/{version}/fabric-installer-{version}.jar"


class FabricInstaller:
    """Fabric 加载器安装器"""

    def __init__(
        self,
        minecraft_dir: str,
        downloader: DownloadManager,
        installer_version: str = DEFAULT_FABRIC_INSTALLER_VERSION,
        java_path: str = "java",
        work_dir: Optional[str] = None,
    ):
        self.minecraft_dir = minecraft_dir
        self.downloader = downloader
        self.installer_version = installer_version
        self.java_path = java_path
        self.work_dir = work_dir or tempfile.gettempdir()

    def loader_dir(self, manifest: Manifest) -> str:
        return os.path.join(self.minecraft_dir, "versions", manifest.loader)

    def is_installed(self, manifest: Manifest) -> bool:
        """``versions/<loader>`` 目录存在即视为已安装"""
        return os.path.isdir(self.loader_dir(manifest))

    def build_command(self, jar_path: str, manifest: Manifest) -> List[str]:
        command = [
            self.java_path,
            "-jar",
            jar_path,
            "client",
            "-dir",
            self.minecraft_dir,
            "-mcversion",
            manifest.target,
            "-noprofile",
        ]
        if manifest.fabric:
            command[6:6] = ["-loader", manifest.fabric]
        return command

    async def ensure_installed(self, manifest: Manifest) -> bool:
        """
        未安装时下载并运行安装程序

        Returns:
            是否执行了安装
        """
        if self.is_installed(manifest):
            logger.info(f"[加载器] {manifest.loader} 已安装，跳过")
            return False
        await self.install(manifest)
        return True

    async def install(self, manifest: Manifest):
        jar_path = os.path.join(
            self.work_dir, f"fabric-installer-{self.installer_version}.jar"
        )
        if not os.path.exists(jar_path):
            try:
                await self.downloader.download_file(
                    installer_url(self.installer_version), jar_path
                )
            except DownloadError as e:
                raise LoaderInstallError(
                    f"下载 Fabric 安装程序失败: {e.message}",
                    context={"url": installer_url(self.installer_version)},
                ) from e

        command = self.build_command(jar_path, manifest)
        logger.info(
            f"[加载器] 安装 Fabric {manifest.fabric or '(最新)'} for Minecraft {manifest.target}"
        )
        logger.debug(f"[加载器] 执行: {' '.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise LoaderInstallError(
                f"找不到 Java 可执行文件: {self.java_path}",
                context={"java": self.java_path},
            ) from e

        stdout, _ = await process.communicate()
        output = stdout.decode(errors="replace") if stdout else ""
        for line in output.splitlines():
            logger.debug(f"[fabric-installer] {line}")

        if process.returncode != 0:
            raise LoaderInstallError(
                f"Fabric 安装程序退出码 {process.returncode}",
                context={"returncode": process.returncode, "output": output[-2000:]},
            )

        logger.success(f"[加载器] Fabric 安装完成: {manifest.loader}")
