"""依赖包安装器 — 通过 `npm install` 安装并解析真实包名

依赖解析、版本求解、下载、锁文件全部交给 npm，这里只负责:
1. 确保 package.json 存在（不存在时 `npm init --yes` 临时创建）
2. 拼装并执行安装命令
3. 回读 devDependencies 得到真实包名（如 `@foo/bar`）
4. 临时创建的 package.json 用完即删
"""

from __future__ import annotations

import logging
from pathlib import Path

from pkgshim.core.config import Config, get_config
from pkgshim.core.exceptions import ResolutionError
from pkgshim.core.manifest import Manifest, pick_installed_name, transient_manifest
from pkgshim.core.probe import is_local_module
from pkgshim.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)


def render_install_command(dir: str, module: str, *, npm: str = "npm") -> str:  # noqa: A002
    """渲染 npm 安装命令

    这里用 -f 跳过 engine 检查，保证在任意宿主版本下都能装上；
    兼容性由调用方在后续阶段校验。

    module 原样拼接、不加引号，调用方负责保证其内容可信。
    """
    return (
        f"{npm} install --save --save-dev -f --no-package-lock "
        f'--prefix="{dir}" {module}'
    )


def install_package(
    base_dir: str,
    spec: str,
    *,
    executor: CommandExecutor | None = None,
    config: Config | None = None,
) -> str:
    """安装依赖包到 base_dir/node_modules，返回真实包名

    Args:
        base_dir: 目标目录
        spec: 包描述符，如 `foo@^1.2` 或 `/tmp/pkg.tgz`
        executor: 命令执行器（不传则使用全局默认）
        config: 配置（不传则使用全局配置）

    Raises:
        ExecutionError: npm 退出码非零
        ResolutionError: 安装后清单中找不到新包名
    """
    cfg = config or get_config()
    # npm 以 cwd 解析 --prefix，两者必须指向同一个绝对路径
    base_dir = str(Path(base_dir).resolve())
    manifest_path = Path(base_dir) / cfg.manifest_name

    with transient_manifest(manifest_path) as existed:
        before: list[str] = []
        if existed:
            before = list(Manifest.load(manifest_path).dev_dependencies)
        else:
            run_cmd(
                f"{cfg.npm_bin} init --yes", cwd=base_dir, label="npm init",
                executor=executor, timeout=cfg.command_timeout,
            )

        source = "local" if is_local_module(spec, cfg.archive_suffix) else "external"
        logger.info("installing %s module %s...", source, spec)
        run_cmd(
            render_install_command(base_dir, spec, npm=cfg.npm_bin),
            cwd=base_dir, label="npm install", executor=executor,
            shell=True, timeout=cfg.command_timeout,
        )

        after = Manifest.load(manifest_path).dev_dependencies
        name = pick_installed_name(after, before, exclude=cfg.host_tool)
        if not name:
            raise ResolutionError(spec)

    logger.info("已安装: %s -> %s", spec, name)
    return name
