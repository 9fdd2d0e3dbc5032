"""
清单定位

优先读取当前目录下的清单文件；找不到时，尝试把程序的启动名解码为
清单的下载地址。程序可以被重命名为编码后的 URL，例如
``https;--example.com-modpack.json.exe`` 对应
``https://example.com/modpack.json``。
"""

import asyncio
import os
import re
from typing import Optional

import aiofiles
import aiohttp
from loguru import logger

from modpack_installer.exceptions import ManifestNotFoundError, WriteError


def is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def decode_invocation_url(raw: Optional[str]) -> Optional[str]:
    """
    将启动名解码为 URL

    取路径最后一段（同时支持 ``/`` 和 ``\\``），去掉 ``.exe`` 后缀，
    然后替换 ``-`` → ``/``、``;`` → ``:``。结果不是 http(s) URL 时返回 None。
    """
    if not raw:
        return None

    name = re.split(r"[\\/]", raw)[-1]
    if name.lower().endswith(".exe"):
        name = name[:-4]

    candidate = name.replace("-", "/").replace(";", ":")
    if is_url(candidate):
        return candidate
    return None


async def fetch_manifest(
    url: str,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 60.0,
    user_agent: Optional[str] = None,
) -> bytes:
    """下载清单内容"""
    owned = session is None
    if owned:
        session = aiohttp.ClientSession(
            headers={"User-Agent": user_agent} if user_agent else None,
            timeout=aiohttp.ClientTimeout(total=timeout),
        )
    try:
        async with session.get(url) as response:
            if response.status != 200:
                raise ManifestNotFoundError(
                    f"下载清单失败 (HTTP {response.status}): {url}",
                    context={"url": url, "status": response.status},
                )
            return await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise ManifestNotFoundError(
            f"下载清单失败: {e}", context={"url": url}
        ) from e
    finally:
        if owned:
            await session.close()


async def locate_manifest(
    manifest_path: str,
    invocation: Optional[str] = None,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 60.0,
    user_agent: Optional[str] = None,
) -> bytes:
    """
    查找并读取清单

    Args:
        manifest_path: 本地清单路径
        invocation: 程序启动名（通常为 ``sys.argv[0]``）
        session: 可选的 aiohttp session

    Returns:
        清单原始内容

    Raises:
        ManifestNotFoundError: 本地文件不存在且启动名无法解码为 URL，或下载失败
    """
    if os.path.isfile(manifest_path):
        logger.info(f"[清单] 读取本地清单: {manifest_path}")
        async with aiofiles.open(manifest_path, "rb") as f:
            return await f.read()

    url = decode_invocation_url(invocation)
    if url is None:
        raise ManifestNotFoundError(
            f"找不到清单文件 '{manifest_path}'，且启动名无法解析为 URL",
            context={"path": manifest_path, "invocation": invocation},
        )

    logger.info(f"[清单] 从启动名推导出清单地址: {url}")
    data = await fetch_manifest(
        url, session=session, timeout=timeout, user_agent=user_agent
    )

    # 保存一份到本地，下次运行直接读取
    try:
        parent = os.path.dirname(manifest_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        async with aiofiles.open(manifest_path, "wb") as f:
            await f.write(data)
    except OSError as e:
        raise WriteError(
            f"保存清单失败: {e}", context={"path": manifest_path}
        ) from e

    return data
