"""
modpack-installer

读取 JSON 整合包清单，从 Modrinth 解析模组，下载模组与外部文件，
并可选地安装 Fabric 加载器。
"""

__version__ = "0.2.0"
