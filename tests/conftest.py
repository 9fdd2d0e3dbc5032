import json

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from modpack_installer.models import FileInfo, ProjectInfo, ResolvedFile, VersionInfo


@pytest.fixture
def manifest_dict():
    return {
        "name": "Gamin",
        "version": "1.0.0",
        "target": "1.19.4",
        "fabric": "0.14.19",
        "loader": "fabric-loader-0.14.19-1.19.4",
        "folder": "1.19.4-gamin",
        "mods": ["P7dR8mSH"],
        "external": [{"url": "https://crepe.moe/c/1", "file": "config/crepe.moe"}],
    }


@pytest.fixture
def manifest_bytes(manifest_dict):
    return json.dumps(manifest_dict).encode()


@pytest_asyncio.fixture
async def make_server():
    """启动本地 aiohttp 测试服务器，测试结束后关闭"""
    servers = []

    async def _make(app):
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return server

    yield _make

    for server in servers:
        await server.close()


class FakeModrinthClient:
    """按 mod_id 返回固定结果的内存客户端"""

    def __init__(self, files=None, missing=()):
        self.files = files or {}
        self.missing = set(missing)
        self.calls = []
        self.closed = False

    async def get_project(self, idx):
        self.calls.append(("project", idx))
        if idx in self.missing:
            return None
        return ProjectInfo(id=idx, slug=idx, title=idx.title(), project_type="mod")

    async def get_versions(self, idx, mc_version=None, mod_loader=None):
        self.calls.append(("versions", idx, mc_version, mod_loader))
        filename = self.files.get(idx, f"{idx}.jar")
        return [
            VersionInfo(
                id=f"{idx}-v1",
                project_id=idx,
                name="v1",
                version_number="1.0.0",
                loaders=["fabric"],
                game_versions=["1.19.4"],
                files=[FileInfo(url=f"https://cdn.example/{filename}", filename=filename, primary=True)],
            )
        ]

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeModrinthClient()


@pytest.fixture
def fake_client_factory():
    return FakeModrinthClient


@pytest.fixture
def resolved_sodium():
    return ResolvedFile(
        file_name="sodium-fabric-0.4.10.jar",
        download_url="https://cdn.modrinth.com/data/AANobbMI/versions/1/sodium-fabric-0.4.10.jar",
        project_id="AANobbMI",
        title="Sodium",
    )
