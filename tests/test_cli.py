"""
Tests for the command line interface.
"""

import pytest
from click.testing import CliRunner

from modpack_installer import cli
from modpack_installer.download import DownloadReport, DownloadResult, DownloadStatus
from modpack_installer.exceptions import ModNotFoundError
from modpack_installer.models import parse_manifest
from modpack_installer.orchestrator import InstallReport
from modpack_installer.services import build_plan


@pytest.fixture
def calls(monkeypatch, manifest_bytes, resolved_sodium):
    """用假的协调器替换真实流程，记录收到的配置"""
    recorded = []
    outcome = {"fail": None, "error": None}

    class FakeOrchestrator:
        def __init__(self, config, invocation=None):
            recorded.append((config, invocation))

        async def run(self, dry_run=False):
            if outcome["error"]:
                raise outcome["error"]
            manifest = parse_manifest(manifest_bytes)
            report = InstallReport(
                manifest=manifest,
                modpack_dir="srv/1.19.4-gamin",
                plan=build_plan(manifest, [resolved_sodium], root="srv"),
            )
            if not dry_run:
                report.downloads = DownloadReport(
                    results=[
                        DownloadResult(
                            entry,
                            DownloadStatus.FAILED
                            if outcome["fail"] == entry.source_url
                            else DownloadStatus.COMPLETED,
                        )
                        for entry in report.plan
                    ]
                )
            return report

    monkeypatch.setattr(cli, "InstallOrchestrator", FakeOrchestrator)
    monkeypatch.setattr(cli, "setup_logger", lambda **kwargs: None)
    return recorded, outcome


def test_dry_run_prints_plan(calls):
    result = CliRunner().invoke(cli.main, ["pack.json", "--server", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "srv/1.19.4-gamin/mods/sodium-fabric-0.4.10.jar" in result.output
    assert "srv/1.19.4-gamin/config/crepe.moe <- https://crepe.moe/c/1" in result.output
    config, _ = calls[0][0]
    assert config.manifest_path == "pack.json"
    assert config.server is True


def test_flags_override_config_file(calls, tmp_path):
    settings = tmp_path / "installer.toml"
    settings.write_text("max_retries = 7\ncreate_profile = true\n")

    result = CliRunner().invoke(
        cli.main, ["--config", str(settings), "--no-profile", "--fail-fast"]
    )

    assert result.exit_code == 0, result.output
    config, _ = calls[0][0]
    assert config.max_retries == 7
    assert config.create_profile is False
    assert config.fail_fast is True
    assert config.server is False


def test_failed_download_exits_non_zero(calls):
    calls[1]["fail"] = "https://crepe.moe/c/1"

    result = CliRunner().invoke(cli.main, [])

    assert result.exit_code == 1
    assert "1 个文件下载失败" in result.output


def test_installer_error_exits_non_zero(calls):
    calls[1]["error"] = ModNotFoundError("模组 'x' 不存在")

    result = CliRunner().invoke(cli.main, [])

    assert result.exit_code == 1
    assert "[E404]" in result.output


def test_version():
    result = CliRunner().invoke(cli.main, ["--version"])
    assert result.exit_code == 0
    assert "0.2.0" in result.output
