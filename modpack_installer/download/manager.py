"""
下载管理器

按顺序执行下载计划：每个条目单独下载、写入一次，失败的条目单独记录，
最终报告中与成功条目区分开。
"""

import asyncio
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import aiofiles
import aiohttp
from loguru import logger

from modpack_installer.download.extractor import extract_archive
from modpack_installer.exceptions import DownloadError, FetchError, WriteError
from modpack_installer.models import ResolvedDownload


class DownloadStatus(Enum):
    """单个条目的下载结果"""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DownloadResult:
    entry: ResolvedDownload
    status: DownloadStatus
    bytes_written: int = 0
    error: Optional[str] = None


@dataclass
class DownloadReport:
    """下载报告"""

    results: List[DownloadResult] = field(default_factory=list)
    bytes_downloaded: int = 0

    def _count(self, status: DownloadStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def completed(self) -> int:
        return self._count(DownloadStatus.COMPLETED)

    @property
    def skipped(self) -> int:
        return self._count(DownloadStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(DownloadStatus.FAILED)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def failures(self) -> List[DownloadResult]:
        return [r for r in self.results if r.status is DownloadStatus.FAILED]


class DownloadManager:
    """下载管理器"""

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 60.0,
        user_agent: Optional[str] = None,
        fail_fast: bool = False,
        skip_existing_mods: bool = True,
        session: Optional[aiohttp.ClientSession] = None,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ):
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.user_agent = user_agent
        self.fail_fast = fail_fast
        self.skip_existing_mods = skip_existing_mods
        self._session = session
        self._owned_session = session is None
        self._progress_callback = progress_callback

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            self._session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owned_session = True
        return self._session

    async def execute(self, plan: List[ResolvedDownload]) -> DownloadReport:
        """
        执行下载计划

        只跳过开始前就已存在的模组文件；同一计划里重复的条目各自下载。
        ``fail_fast`` 为 True 时，第一个失败直接抛出；否则记录失败并继续。
        """
        report = DownloadReport()
        logger.info(f"[启动] 共 {len(plan)} 个文件待下载")

        existing = set()
        if self.skip_existing_mods:
            existing = {
                entry.destination_path
                for entry in plan
                if entry.is_mod and os.path.exists(entry.destination_path)
            }

        for entry in plan:
            name = os.path.basename(entry.destination_path)

            if entry.is_mod and entry.destination_path in existing:
                logger.info(f"[跳过] '{name}' 已存在")
                report.results.append(DownloadResult(entry, DownloadStatus.SKIPPED))
                continue

            try:
                written = await self.download_file(
                    entry.source_url, entry.destination_path
                )
                if entry.extract_to:
                    await asyncio.to_thread(
                        extract_archive, entry.destination_path, entry.extract_to
                    )
            except DownloadError as e:
                logger.error(f"[错误] '{name}' 失败: {e}")
                report.results.append(
                    DownloadResult(entry, DownloadStatus.FAILED, error=str(e))
                )
                if self.fail_fast:
                    raise
                continue

            report.bytes_downloaded += written
            report.results.append(
                DownloadResult(entry, DownloadStatus.COMPLETED, bytes_written=written)
            )

        return report

    async def download_file(self, url: str, file_path: str) -> int:
        """
        下载单个文件，网络错误、5xx 和 429 按指数退避重试

        Returns:
            写入的字节数

        Raises:
            FetchError: HTTP 状态错误或网络错误（重试耗尽后）
            WriteError: 无法创建目录或写入文件
        """
        filename = os.path.basename(file_path)
        parent = os.path.dirname(file_path)
        try:
            if parent:
                os.makedirs(parent, exist_ok=True)
        except OSError as e:
            raise WriteError(
                f"无法创建目录 {parent}: {e}", context={"path": file_path}
            ) from e

        logger.info(f"[开始] 下载: {filename}")

        for attempt in range(self.max_retries + 1):
            try:
                written = await self._fetch_to(url, file_path, filename)
                logger.success(f"[完成] '{filename}' 下载完成")
                return written
            except WriteError:
                self._cleanup(file_path)
                raise
            except FetchError as e:
                self._cleanup(file_path)
                if attempt < self.max_retries and self.is_retryable(e):
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        f"[重试] 下载 '{filename}' 失败 (第 {attempt + 1} 次): {e}. "
                        f"{delay:.1f}s 后重试..."
                    )
                    await asyncio.sleep(delay)
                else:
                    raise

        # max_retries < 0 时不会进入循环
        raise FetchError(f"下载失败: {filename}", context={"url": url})

    @staticmethod
    def is_retryable(error: FetchError) -> bool:
        """网络错误、5xx 和 429 可以重试，其余 HTTP 状态直接失败"""
        status = error.context.get("status")
        return status is None or status >= 500 or status == 429

    async def _fetch_to(self, url: str, file_path: str, filename: str) -> int:
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise FetchError(
                        f"HTTP {response.status}",
                        context={"url": url, "status": response.status},
                    )

                total_size = int(response.headers.get("Content-Length", 0))
                downloaded = 0
                last_percent = 0.0

                try:
                    f = await aiofiles.open(file_path, "wb")
                except OSError as e:
                    raise WriteError(
                        f"无法写入 {file_path}: {e}", context={"path": file_path}
                    ) from e

                try:
                    async for chunk in response.content.iter_chunked(8192):
                        try:
                            await f.write(chunk)
                        except OSError as e:
                            raise WriteError(
                                f"无法写入 {file_path}: {e}",
                                context={"path": file_path},
                            ) from e
                        downloaded += len(chunk)

                        if total_size > 0:
                            percent = (downloaded / total_size) * 100
                            if percent - last_percent >= 5:
                                if self._progress_callback:
                                    self._progress_callback(filename, percent)
                                logger.debug(f"[进度] {filename}: {percent:.1f}%")
                                last_percent = percent
                finally:
                    await f.close()

                return downloaded
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(
                f"{e.__class__.__name__}: {e}", context={"url": url}
            ) from e

    @staticmethod
    def _cleanup(file_path: str):
        """清理不完整的文件"""
        if os.path.exists(file_path):
            try:
                os.remove(file_path)
            except OSError:
                pass

    async def close(self):
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
