"""依赖包存在性探测

- 本地引用（./xxx、/xxx、*.tgz）: 检查文件系统
- 注册表引用（foo、foo@^1.2）: 调用 `npm view`，退出码 0 视为存在

探测与后续安装不是原子操作，结果只代表调用时刻的状态。
"""

from __future__ import annotations

import logging
import os
import re
import subprocess

from pkgshim.core.config import Config, get_config
from pkgshim.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

_LOCAL_PREFIX = re.compile(r"^(\./|/)")


def is_local_module(module: str, archive_suffix: str = ".tgz") -> bool:
    """是否为本地引用（纯文本判断，不访问文件系统）"""
    return bool(_LOCAL_PREFIX.match(module)) or module.endswith(archive_suffix)


def module_exists(
    cwd: str,
    module: str,
    *,
    executor: CommandExecutor | None = None,
    config: Config | None = None,
) -> bool:
    """检查依赖包是否存在（本地路径或 npm 注册表）

    本地路径只判断条目是否存在，不校验内容。
    相对路径以参数 cwd 为基准，而不是进程当前目录，与 npm view / npm install
    使用同一个目录解析引用。
    注册表查询失败（非零退出或进程无法启动）一律视为不存在。
    """
    cfg = config or get_config()
    logger.debug("Checking if external module '%s' exists...", module)

    if is_local_module(module, cfg.archive_suffix):
        return os.path.exists(os.path.join(cwd, module))

    ex = executor or get_executor()
    try:
        r = ex.execute(
            f"{cfg.npm_bin} view {module}", cwd=cwd,
            timeout=cfg.command_timeout, shell=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("npm view 无法执行: %s", e)
        return False
    return r.success
