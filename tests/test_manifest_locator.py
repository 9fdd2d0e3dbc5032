"""
Tests for finding the manifest locally or through the invocation name.
"""

import pytest
from aiohttp import web

from modpack_installer.exceptions import ManifestNotFoundError
from modpack_installer.services import decode_invocation_url, locate_manifest


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https;--example.com-modpack.json", "https://example.com/modpack.json"),
        ("https;--example.com-modpack.json.exe", "https://example.com/modpack.json"),
        (
            "C:\\Users\\me\\Downloads\\https;--example.com-modpack.json.exe",
            "https://example.com/modpack.json",
        ),
        ("/usr/local/bin/http;--localhost;8080-p.json", "http://localhost:8080/p.json"),
        ("modpack-installer", None),
        ("/usr/bin/python3", None),
        ("", None),
        (None, None),
    ],
)
def test_decode_invocation_url(raw, expected):
    assert decode_invocation_url(raw) == expected


@pytest.mark.asyncio
async def test_local_file_wins(tmp_path, manifest_bytes):
    path = tmp_path / "modpack.json"
    path.write_bytes(manifest_bytes)

    data = await locate_manifest(str(path), "https;--unreachable.invalid-x.json")

    assert data == manifest_bytes


@pytest.mark.asyncio
async def test_downloads_from_invocation_name(tmp_path, make_server, manifest_bytes):
    async def handler(request):
        return web.Response(body=manifest_bytes)

    app = web.Application()
    app.router.add_get("/modpack.json", handler)
    server = await make_server(app)
    invocation = f"http;--{server.host};{server.port}-modpack.json.exe"
    path = tmp_path / "modpack.json"

    data = await locate_manifest(str(path), invocation)

    assert data == manifest_bytes
    assert path.read_bytes() == manifest_bytes


@pytest.mark.asyncio
async def test_remote_error_is_manifest_not_found(tmp_path, make_server):
    server = await make_server(web.Application())
    invocation = f"http;--{server.host};{server.port}-missing.json"

    with pytest.raises(ManifestNotFoundError) as exc_info:
        await locate_manifest(str(tmp_path / "modpack.json"), invocation)
    assert exc_info.value.context["status"] == 404


@pytest.mark.asyncio
async def test_nothing_found(tmp_path):
    with pytest.raises(ManifestNotFoundError):
        await locate_manifest(str(tmp_path / "modpack.json"), "modpack-installer")
