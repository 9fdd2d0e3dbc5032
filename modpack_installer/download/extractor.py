"""
ZIP 解压

外部条目可以声明 ``extract``：下载的 ZIP 会解压到整合包文件夹下的
该目录，然后删除归档。光影包、资源包常把全部内容放在同一个顶层目录里，
这种情况下会去掉这一层目录。
"""

import os
import shutil
import zipfile
from typing import List

from loguru import logger

from modpack_installer.exceptions import ExtractError


def toplevel_prefix(names: List[str]) -> str:
    """
    所有条目共享的唯一顶层目录（带结尾 ``/``），没有则返回空字符串
    """
    tops = {name.split("/", 1)[0] for name in names}
    if len(tops) != 1:
        return ""
    top = tops.pop()
    # 顶层是单个文件，或是越出目录的路径
    if top in ("", ".", "..") or top in names:
        return ""
    return top + "/"


def extract_archive(archive: str, destination: str, remove: bool = True) -> int:
    """
    解压 ZIP 归档

    Args:
        archive: 归档路径
        destination: 解压目标目录
        remove: 解压后是否删除归档

    Returns:
        解压出的文件数量
    """
    destination = os.path.abspath(destination)
    try:
        os.makedirs(destination, exist_ok=True)
        count = 0
        with zipfile.ZipFile(archive) as zf:
            members = zf.infolist()
            prefix = toplevel_prefix([member.filename for member in members])

            for member in members:
                name = member.filename[len(prefix):]
                if not name:
                    continue

                target = os.path.abspath(os.path.join(destination, name))
                if os.path.commonpath([destination, target]) != destination:
                    raise ExtractError(
                        f"归档条目越出目标目录: {member.filename}",
                        context={"archive": archive, "member": member.filename},
                    )

                if member.is_dir():
                    os.makedirs(target, exist_ok=True)
                    continue

                os.makedirs(os.path.dirname(target), exist_ok=True)
                with zf.open(member) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                count += 1
    except zipfile.BadZipFile as e:
        raise ExtractError(
            f"不是有效的 ZIP 文件: {archive}", context={"archive": archive}
        ) from e
    except OSError as e:
        raise ExtractError(
            f"解压失败: {e}", context={"archive": archive, "destination": destination}
        ) from e

    if remove:
        os.remove(archive)

    logger.info(f"[解压] {os.path.basename(archive)} -> {destination} ({count} 个文件)")
    return count
