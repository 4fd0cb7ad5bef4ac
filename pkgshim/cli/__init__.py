"""pkgshim 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
CliError 只输出提示信息，不打印堆栈。
"""

from __future__ import annotations

import os
from typing import Any

import click

from pkgshim import __version__
from pkgshim.core.config import DEFAULT_CONFIG_PATH, init_config
from pkgshim.core.exceptions import CliError, ConfigError
from pkgshim.utils.logger import setup_logging


class _Group(click.Group):
    """把 CliError 转成 click 的用户错误（Error: ...，退出码 1）"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except CliError as e:
            raise click.ClickException(str(e)) from e


@click.group(cls=_Group)
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path", default=DEFAULT_CONFIG_PATH,
    help="配置文件路径",
)
def main(config_path: str) -> None:
    """pkgshim - npm 依赖包安装/解析工具"""
    setup_logging(
        level=os.getenv("PKGSHIM_LOG_LEVEL", "INFO"),
        json_output=os.getenv("PKGSHIM_LOG_JSON", "") == "1",
    )
    try:
        init_config(config_path)
    except ConfigError as e:
        raise CliError(str(e)) from e


# 注册各领域子命令
from pkgshim.cli.cmd_deps import register as _reg_deps  # noqa: E402

_reg_deps(main)
