"""
API 数据模型

定义 Modrinth API 相关的数据类，包括项目信息、版本信息等。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import unquote


@dataclass
class ProjectInfo:
    """
    模组项目信息。
    """

    id: str
    slug: str
    title: str
    project_type: str
    client_side: str = "unknown"
    server_side: str = "unknown"
    versions: List[str] = field(default_factory=list)

    @classmethod
    def from_modrinth(cls, data: dict) -> "ProjectInfo":
        return cls(
            id=data["id"],
            slug=data.get("slug", data["id"]),
            title=data.get("title", data["id"]),
            project_type=data.get("project_type", "mod"),
            client_side=data.get("client_side", "unknown"),
            server_side=data.get("server_side", "unknown"),
            versions=data.get("versions", []),
        )


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    size: int = 0
    primary: bool = False
    hashes: Optional[Dict[str, str]] = None


@dataclass
class VersionInfo:
    """
    模组版本信息。
    """

    id: str
    project_id: str
    name: str
    version_number: str
    loaders: List[str]
    game_versions: List[str]
    files: List[FileInfo]

    @classmethod
    def from_modrinth(cls, data: dict) -> "VersionInfo":
        """
        将 Modrinth API 返回的版本信息转换为 VersionInfo 对象。
        """
        files = [
            FileInfo(
                url=file["url"],
                filename=file["filename"],
                size=file.get("size", 0),
                primary=file.get("primary", False),
                hashes=file.get("hashes"),
            )
            for file in data.get("files", [])
        ]

        return cls(
            id=data.get("id", ""),
            project_id=data.get("project_id", ""),
            name=data.get("name", ""),
            version_number=data.get("version_number", ""),
            loaders=data.get("loaders", []),
            game_versions=data.get("game_versions", []),
            files=files,
        )

    @property
    def primary_file(self) -> Optional[FileInfo]:
        """获取主文件：优先 primary 标记的文件，否则第一个文件"""
        if not self.files:
            return None
        for file in self.files:
            if file.primary:
                return file
        return self.files[0]

    def supports(self, mc_version: str, loader: str) -> bool:
        return mc_version in self.game_versions and loader in self.loaders


@dataclass(frozen=True)
class ResolvedFile:
    """模组解析结果：可直接下载的文件"""

    file_name: str
    download_url: str
    project_id: str = ""
    title: str = ""
    version_number: str = ""

    @classmethod
    def from_version(cls, project: ProjectInfo, version: VersionInfo, file: FileInfo):
        # Modrinth 的文件名可能带百分号编码
        return cls(
            file_name=unquote(file.filename),
            download_url=file.url,
            project_id=project.id,
            title=project.title,
            version_number=version.version_number,
        )
