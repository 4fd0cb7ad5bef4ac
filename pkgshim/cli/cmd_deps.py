"""CLI — 依赖包安装/探测命令"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click

from pkgshim.core.config import get_config
from pkgshim.core.exceptions import CliError, ExecutionError, PkgShimError


def register(group: click.Group) -> None:
    group.add_command(install)
    group.add_command(exists)
    group.add_command(jsii_path)
    group.add_command(render_install)


@contextmanager
def _user_errors(action: str) -> Iterator[None]:
    """业务异常转为 CliError，由 CLI 入口友好输出"""
    try:
        yield
    except CliError:
        raise
    except ExecutionError as e:
        lines = [f"{action}失败: {e}"]
        if e.cmd:
            lines.append(f"命令: {e.cmd}")
        raise CliError(*lines) from e
    except PkgShimError as e:
        raise CliError(f"{action}失败: {e}") from e


@click.command()
@click.argument(
    "base_dir", type=click.Path(file_okay=False, exists=True, resolve_path=True),
)
@click.argument("spec")
def install(base_dir: str, spec: str) -> None:
    """安装依赖包并输出解析出的真实包名"""
    from pkgshim.core.installer import install_package
    with _user_errors("安装"):
        name = install_package(base_dir, spec)
    click.echo(name)


@click.command()
@click.argument("spec")
@click.option("--cwd", default=".", help="执行 npm view 的工作目录")
@click.pass_context
def exists(ctx: click.Context, spec: str, cwd: str) -> None:
    """检查依赖包是否存在（本地路径或 npm 注册表）"""
    from pkgshim.core.probe import module_exists
    if module_exists(cwd, spec):
        click.echo("yes")
    else:
        click.echo("no")
        ctx.exit(1)


@click.command(name="jsii-path")
@click.argument("module")
@click.option("--base-dir", default=".", help="模块查找起点目录")
def jsii_path(module: str, base_dir: str) -> None:
    """输出已安装模块中 .jsii 文件所在目录"""
    from pkgshim.core.jsii import find_jsii_file_path
    try:
        path = find_jsii_file_path(base_dir, module, get_config().jsii_file)
    except (ValueError, OSError, PkgShimError) as e:
        raise CliError(f"解析模块失败: {module}", str(e)) from e
    if path is None:
        raise CliError(
            f"{module} 不是 jsii 模块",
            f"在 {base_dir} 的 node_modules 中未找到 {get_config().jsii_file}",
        )
    click.echo(path)


@click.command(name="render-install")
@click.argument("dir")
@click.argument("spec")
def render_install(dir: str, spec: str) -> None:  # noqa: A002
    """输出将要执行的 npm 安装命令（不执行）"""
    from pkgshim.core.installer import render_install_command
    click.echo(render_install_command(dir, spec, npm=get_config().npm_bin))
