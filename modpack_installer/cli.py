"""
CLI 模块

命令行接口实现。
"""

import asyncio
import sys
from typing import Optional

import click
from loguru import logger

from modpack_installer import __version__
from modpack_installer.config import load_config
from modpack_installer.exceptions import InstallerError
from modpack_installer.logger import setup_logger
from modpack_installer.orchestrator import InstallOrchestrator, InstallReport


def print_plan(report: InstallReport):
    click.echo(f"整合包: {report.manifest.display_name}")
    click.echo(f"安装目录: {report.modpack_dir}")
    click.echo(f"共 {len(report.plan)} 个文件:")
    for entry in report.plan:
        click.echo(f"  [{entry.origin.value}] {entry.destination_path} <- {entry.source_url}")


async def run_async(
    config_path: Optional[str],
    invocation: Optional[str],
    dry_run: bool,
    **overrides,
) -> InstallReport:
    """异步运行"""
    config = load_config(config_path).merge(**overrides)
    orchestrator = InstallOrchestrator(config, invocation=invocation)
    return await orchestrator.run(dry_run=dry_run)


@click.command()
@click.argument("manifest", required=False)
@click.option("--server", is_flag=True, help="服务端安装（安装到当前目录，不安装加载器）")
@click.option("--dir", "install_dir", type=click.Path(file_okay=False), help="整合包文件夹的父目录")
@click.option("--minecraft-dir", type=click.Path(file_okay=False), help=".minecraft 目录")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="安装器设置文件 (toml/json/yaml)")
@click.option("--fail-fast", is_flag=True, help="第一个下载失败时立即中止")
@click.option("--no-loader", is_flag=True, help="不安装 Fabric 加载器")
@click.option("--no-profile", is_flag=True, help="不写入启动器配置")
@click.option("--allow-latest", is_flag=True, help="没有匹配版本时使用模组的最新版本")
@click.option("--dry-run", is_flag=True, help="只解析并打印下载计划")
@click.option("--log-file", type=click.Path(dir_okay=False), help="同时写入日志文件")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
def main(
    manifest: Optional[str],
    server: bool,
    install_dir: Optional[str],
    minecraft_dir: Optional[str],
    config_path: Optional[str],
    fail_fast: bool,
    no_loader: bool,
    no_profile: bool,
    allow_latest: bool,
    dry_run: bool,
    log_file: Optional[str],
    debug: bool,
):
    """modpack-installer - 根据 JSON 清单安装 Minecraft 整合包

    未指定 MANIFEST 时读取当前目录的 modpack.json；不存在时，
    程序名会被解码为清单下载地址（'-' 表示 '/'，';' 表示 ':'）。
    """
    setup_logger(level="DEBUG" if debug else None, log_file=log_file)

    try:
        report = asyncio.run(
            run_async(
                config_path,
                sys.argv[0],
                dry_run,
                manifest_path=manifest,
                server=server or None,
                install_dir=install_dir,
                minecraft_dir=minecraft_dir,
                fail_fast=fail_fast or None,
                allow_latest_fallback=allow_latest or None,
                install_loader=False if no_loader else None,
                create_profile=False if no_profile else None,
            )
        )
    except InstallerError as e:
        logger.error(f"安装失败: {e}")
        raise click.ClickException(str(e))
    except Exception as e:
        logger.exception(f"运行时错误: {e}")
        raise click.ClickException(f"运行时错误: {e}")

    if dry_run:
        print_plan(report)
        return

    if not report.ok:
        raise click.ClickException(
            f"{report.downloads.failed} 个文件下载失败，详见上方日志"
        )


if __name__ == "__main__":
    main()
