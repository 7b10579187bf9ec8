"""
locally 命令行入口
"""

import os
import sys

import click

from locally import __version__
from locally.app import LocallyApp
from locally.config import Config
from locally.errors import (
    CertificateError,
    DomainNotFound,
    DuplicateDomain,
    InvalidHostname,
    LocallyError,
    NotInitialized,
    PermissionManagerError,
    RegionMalformed,
    WriteVerificationFailed,
)

RULE = "=" * 53


def _guidance(error: LocallyError) -> str:
    """根据错误类型给出下一步建议"""
    if isinstance(error, NotInitialized):
        return "locallyCLI 尚未初始化，请先运行 'locally init'。"
    if isinstance(error, RegionMalformed):
        return "请手动检查 hosts 文件中的 locallyCLI 标记（可运行 'locally debug-hosts'）。"
    if isinstance(error, DuplicateDomain):
        return (
            f"启动开发服务器并访问 https://{error.hostname} 确认是否可用。"
            f"如果不可用，请运行 'locally rm {error.hostname}' 后再 'locally add {error.hostname}'。"
        )
    if isinstance(error, DomainNotFound):
        return "域名是否输入正确？运行 'locally list' 查看 locallyCLI 安装的全部域名。"
    if isinstance(error, WriteVerificationFailed):
        return "请重新运行该命令，并检查 hosts 文件是否可写。"
    if isinstance(error, InvalidHostname):
        return "域名只能包含字母、数字、- 和 .，不能包含空白字符。"
    if isinstance(error, CertificateError):
        return "请确认 mkcert 已安装并可执行（brew install mkcert）。"
    if isinstance(error, PermissionManagerError):
        return "无法获取 hosts 文件写权限，请确认有 sudo 权限。"
    return "如果问题持续存在，请在 locallyCLI 仓库提交 issue。"


def _fail(error: LocallyError) -> None:
    click.echo("", err=True)
    click.echo(f"Error: {error}", err=True)
    click.echo(RULE, err=True)
    click.echo(_guidance(error), err=True)
    click.echo("Script stopped.", err=True)
    sys.exit(1)


def _app(ctx: click.Context) -> LocallyApp:
    ctx.ensure_object(dict)
    if "app" not in ctx.obj:
        ctx.obj["app"] = LocallyApp(Config.from_env())
    return ctx.obj["app"]


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """为 .local 域名管理本地受信任的 HTTPS 开发环境"""
    ctx.ensure_object(dict)


@main.command()
def version() -> None:
    """显示 locallyCLI 版本"""
    click.echo(f"locallyCLI v{__version__}")


@main.command()
@click.option('--yes', '-y', is_flag=True, help='跳过确认')
@click.option('--skip-ca', is_flag=True, help='不执行 mkcert -install')
@click.pass_context
def init(ctx: click.Context, yes: bool, skip_ca: bool) -> None:
    """初始化 locallyCLI：安装 mkcert CA 并写入 hosts 配置区域"""
    app = _app(ctx)
    click.echo(f"修改 {app.config.hosts_file_path} 需要 sudo 权限。")
    if not yes and not click.confirm("是否继续?"):
        click.echo("Permission denied. Script stopped.")
        return

    try:
        created = app.initialize(install_ca=not skip_ca)
    except LocallyError as e:
        _fail(e)

    if not created:
        click.echo("locallyCLI 配置区域已存在，无需重复初始化。")
        return

    click.echo(RULE)
    click.echo("locallyCLI successfully initialized")
    click.echo(RULE)
    click.echo("🧰 locally add [domain] - 添加带 https 的 .local 域名")
    click.echo("🧰 locally rm [domain] - 移除 locallyCLI 安装的域名")
    click.echo("📜 locally list - 列出 locallyCLI 安装的全部域名")


@main.command(name='list')
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """列出 locallyCLI 安装的全部域名"""
    app = _app(ctx)
    try:
        lines = list(app.display_lines())
    except LocallyError as e:
        _fail(e)

    click.echo("Domains installed by locallyCLI:")
    click.echo("================================")
    if not lines:
        click.echo("🈳 No domains installed by locallyCLI")
        return
    for line in lines:
        click.echo(line)


@main.command()
@click.argument('domain')
@click.option('--project-root', default=None, type=click.Path(file_okay=False),
              help='项目根目录（默认: 当前目录）')
@click.option('--yes', '-y', is_flag=True, help='跳过确认')
@click.pass_context
def add(ctx: click.Context, domain: str, project_root: str, yes: bool) -> None:
    """添加 .local 域名并生成证书（域名可省略 .local）"""
    app = _app(ctx)
    project_root = project_root or os.getcwd()

    if not yes and not click.confirm(f"当前是否在项目根目录?\n {project_root}\n"):
        click.echo('请切换到项目根目录后再运行 "locally add [domain]"。')
        click.echo("Script stopped.")
        return

    try:
        record = app.add_domain(domain, project_root)
    except LocallyError as e:
        _fail(e)

    click.echo(RULE)
    click.echo(f"[SUCCESS] Domain {record.hostname} has been installed.")
    click.echo(RULE)
    click.echo(f"证书目录: {record.cert_dir}")
    click.echo(f"启动开发服务器并访问 https://{record.hostname} 确认是否可用。")


@main.command()
@click.argument('domain')
@click.option('--project-root', default=None, type=click.Path(file_okay=False),
              help='记录中没有证书目录时使用的项目根目录（默认: 当前目录）')
@click.pass_context
def rm(ctx: click.Context, domain: str, project_root: str) -> None:
    """移除 locallyCLI 安装的域名及其证书"""
    app = _app(ctx)
    try:
        hostname = app.remove_domain(domain, project_root or os.getcwd())
    except LocallyError as e:
        _fail(e)

    click.echo(RULE)
    click.echo(f"Domain {hostname} has been successfully removed.")
    click.echo(RULE)


@main.command(name='debug-hosts')
@click.pass_context
def debug_hosts(ctx: click.Context) -> None:
    """用系统默认程序打开 hosts 文件"""
    app = _app(ctx)
    click.launch(app.config.hosts_file_path)


if __name__ == '__main__':
    main()
