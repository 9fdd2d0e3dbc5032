"""
加载器安装与启动器配置
"""

from modpack_installer.loader.fabric import FabricInstaller, installer_url
from modpack_installer.loader.profile import write_profile

__all__ = ["FabricInstaller", "installer_url", "write_profile"]
