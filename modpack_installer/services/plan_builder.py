"""
下载计划构建

纯函数：把解析后的模组和清单中的外部条目合并为一个有序的下载列表。
先模组（按清单顺序），后外部文件（按清单顺序），不去重、不重排。
"""

from typing import List, Sequence

from modpack_installer.models import (
    DownloadOrigin,
    Manifest,
    ResolvedDownload,
    ResolvedFile,
)

MODS_FOLDER = "mods"


def _join(*parts: str) -> str:
    # 后续片段去掉首尾斜杠，结果始终落在第一段之下
    parts = [part for part in parts if part]
    if not parts:
        return ""
    head, tail = parts[0], parts[1:]
    if not tail:
        return head
    return "/".join([head.rstrip("/")] + [part.strip("/") for part in tail])


def build_plan(
    manifest: Manifest,
    resolved_mods: Sequence[ResolvedFile],
    root: str = "",
) -> List[ResolvedDownload]:
    """
    构建下载计划

    Args:
        manifest: 清单
        resolved_mods: 与 ``manifest.mods`` 一一对应的解析结果
        root: 整合包文件夹所在的父目录，默认为空（相对路径）

    Returns:
        ``len(mods) + len(external)`` 个 ResolvedDownload
    """
    if len(resolved_mods) != len(manifest.mods):
        raise ValueError(
            f"解析结果数量 ({len(resolved_mods)}) 与清单模组数量 ({len(manifest.mods)}) 不一致"
        )

    folder = _join(root, manifest.folder)
    plan = [
        ResolvedDownload(
            destination_path=_join(folder, MODS_FOLDER, resolved.file_name),
            source_url=resolved.download_url,
            origin=DownloadOrigin.FROM_MOD,
        )
        for resolved in resolved_mods
    ]

    for entry in manifest.external:
        plan.append(
            ResolvedDownload(
                destination_path=_join(folder, entry.file),
                source_url=entry.url,
                origin=DownloadOrigin.FROM_EXTERNAL,
                extract_to=_join(folder, entry.extract) if entry.is_archive else None,
            )
        )

    return plan
