"""
整合包清单模型

清单是一个 JSON 文档，描述目标游戏版本、Fabric 加载器版本、
模组 ID 列表以及任意的外部文件下载。

注意：``external`` 条目可以把任意 URL 的内容写到安装目录下的任意相对路径，
这是清单格式有意提供的能力，清单作者即信任边界。安装器不会对其做沙箱处理。
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from modpack_installer.exceptions import ManifestParseError

REQUIRED_FIELDS = ("target", "loader", "folder")
OPTIONAL_STRING_FIELDS = ("name", "version", "fabric")


@dataclass(frozen=True)
class ExternalEntry:
    """外部文件：从 ``url`` 下载并写入 ``folder/file``"""

    url: str
    file: str
    extract: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "ExternalEntry":
        if not isinstance(data, dict):
            raise ManifestParseError(
                f"external[{index}] 必须是对象",
                context={"index": index},
            )
        for key in ("url", "file"):
            if key not in data:
                raise ManifestParseError(
                    f"external[{index}] 缺少字段 '{key}'",
                    context={"index": index, "field": key},
                )
            if not isinstance(data[key], str) or not data[key]:
                raise ManifestParseError(
                    f"external[{index}].{key} 必须是非空字符串",
                    context={"index": index, "field": key},
                )
        extract = data.get("extract")
        if extract is not None and not isinstance(extract, str):
            raise ManifestParseError(
                f"external[{index}].extract 必须是字符串",
                context={"index": index, "field": "extract"},
            )
        return cls(url=data["url"], file=data["file"], extract=extract)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"url": self.url, "file": self.file}
        if self.extract is not None:
            data["extract"] = self.extract
        return data

    @property
    def is_archive(self) -> bool:
        """是否为需要解压的 ZIP 归档"""
        return self.extract is not None and self.file.lower().endswith(".zip")


@dataclass(frozen=True)
class Manifest:
    """
    整合包清单

    解析后不可变：``mods`` 与 ``external`` 保存为元组，保持清单中的顺序，
    不去重。
    """

    target: str
    loader: str
    folder: str
    name: str = ""
    version: str = ""
    fabric: str = ""
    mods: Tuple[str, ...] = field(default_factory=tuple)
    external: Tuple[ExternalEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Any) -> "Manifest":
        """从已解码的 JSON 对象构建清单"""
        if not isinstance(data, dict):
            raise ManifestParseError("清单顶层必须是 JSON 对象")

        for key in REQUIRED_FIELDS:
            if key not in data:
                raise ManifestParseError(
                    f"清单缺少必填字段 '{key}'", context={"field": key}
                )
            if not isinstance(data[key], str) or not data[key]:
                raise ManifestParseError(
                    f"字段 '{key}' 必须是非空字符串", context={"field": key}
                )

        for key in OPTIONAL_STRING_FIELDS:
            if key in data and not isinstance(data[key], str):
                raise ManifestParseError(
                    f"字段 '{key}' 必须是字符串", context={"field": key}
                )

        mods = data.get("mods", [])
        if not isinstance(mods, list) or not all(
            isinstance(mod, str) and mod for mod in mods
        ):
            raise ManifestParseError(
                "字段 'mods' 必须是非空字符串数组", context={"field": "mods"}
            )

        external = data.get("external", [])
        if not isinstance(external, list):
            raise ManifestParseError(
                "字段 'external' 必须是数组", context={"field": "external"}
            )

        return cls(
            target=data["target"],
            loader=data["loader"],
            folder=data["folder"],
            name=data.get("name", ""),
            version=data.get("version", ""),
            fabric=data.get("fabric", ""),
            mods=tuple(mods),
            external=tuple(
                ExternalEntry.from_dict(entry, index)
                for index, entry in enumerate(external)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """转换为可直接 ``json.dumps`` 的字典"""
        return {
            "name": self.name,
            "version": self.version,
            "target": self.target,
            "fabric": self.fabric,
            "loader": self.loader,
            "folder": self.folder,
            "mods": list(self.mods),
            "external": [entry.to_dict() for entry in self.external],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @property
    def display_name(self) -> str:
        if self.name and self.version:
            return f"{self.name} v{self.version}"
        return self.name or self.folder


def parse_manifest(data: Union[bytes, str]) -> Manifest:
    """
    解析清单

    Args:
        data: 清单原始内容（bytes 按 UTF-8 解码，允许 BOM）

    Returns:
        Manifest

    Raises:
        ManifestParseError: 内容不是合法 JSON，或缺少字段、字段类型错误
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ManifestParseError(
                f"清单不是合法的 UTF-8 文本: {e}"
            ) from e

    try:
        decoded = json.loads(data)
    except json.JSONDecodeError as e:
        raise ManifestParseError(
            f"清单不是合法的 JSON: {e.msg}",
            context={"line": e.lineno, "column": e.colno},
        ) from e

    return Manifest.from_dict(decoded)
