"""jsii 元数据文件定位

按 Node 的模块查找规则（从 base_dir 逐级向上的 node_modules，
然后 NODE_PATH 与全局目录）解析 `<module>/.jsii`，返回其所在目录。
包声明了 package.json exports 时与 Node 一致，只能解析 exports 导出的子路径。

解析结果用显式的标签类型表达，而不是靠检查异常字段区分「找不到」与其他错误:
    Found(path) | NotFound(request) | ResolveFailed(cause)
"""

from __future__ import annotations

import json
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from pkgshim.core.exceptions import PackagePathNotExportedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    path: Path


@dataclass(frozen=True)
class NotFound:
    request: str


@dataclass(frozen=True)
class ResolveFailed:
    cause: Exception


ResolveResult = Union[Found, NotFound, ResolveFailed]

# require() 场景下 Node 依次匹配的导出条件
_EXPORT_CONDITIONS = ("node", "require", "default")


def node_module_paths(base_dir: str | Path) -> list[Path]:
    """生成 Node 的 node_modules 查找路径列表（按优先级排列）"""
    start = Path(os.path.abspath(base_dir))
    paths = [
        d / "node_modules"
        for d in (start, *start.parents)
        if d.name != "node_modules"
    ]
    for entry in os.environ.get("NODE_PATH", "").split(os.pathsep):
        if entry:
            paths.append(Path(entry))
    home = Path.home()
    paths.extend([home / ".node_modules", home / ".node_libraries"])
    return paths


def _validate_request(request: str) -> None:
    if not request or request.startswith(("/", "./", "../")) or "\0" in request:
        raise ValueError(f"无效的模块请求: {request!r}")


def _split_request(request: str) -> tuple[str, str]:
    """拆分为 (包名, 子路径)，如 `@scope/pkg/.jsii` -> (`@scope/pkg`, `./.jsii`)"""
    parts = request.split("/")
    n = 2 if request.startswith("@") else 1
    return "/".join(parts[:n]), "./" + "/".join(parts[n:])


def _conditional_target(target: Any) -> str | None:
    """从 exports 条目中取出 require 场景下的目标路径"""
    if isinstance(target, str):
        return target
    if isinstance(target, list):
        for item in target:
            resolved = _conditional_target(item)
            if resolved is not None:
                return resolved
        return None
    if isinstance(target, dict):
        for cond in _EXPORT_CONDITIONS:
            if cond in target:
                return _conditional_target(target[cond])
    return None


def _export_target(exports: Any, subpath: str) -> str | None:
    """按 exports 映射查找子路径的目标，未导出返回 None"""
    if not isinstance(exports, dict) or not any(k.startswith(".") for k in exports):
        # 字符串、数组或条件对象都只是 "." 的简写
        exports = {".": exports}
    if subpath in exports:
        return _conditional_target(exports[subpath])

    best: tuple[str, str] | None = None
    for key in exports:
        if key.count("*") != 1:
            continue
        prefix, suffix = key.split("*")
        if (
            subpath.startswith(prefix) and subpath.endswith(suffix)
            and len(subpath) >= len(prefix) + len(suffix)
            and (best is None or len(prefix) > len(best[0].split("*")[0]))
        ):
            best = (key, subpath[len(prefix):len(subpath) - len(suffix)])
    if best is None:
        return None
    target = _conditional_target(exports[best[0]])
    return target.replace("*", best[1]) if target is not None else None


def _resolve_exports(pkg_dir: Path, subpath: str, request: str) -> ResolveResult | None:
    """package.json 声明了 exports 时按映射解析；未声明返回 None，走普通文件查找"""
    manifest = pkg_dir / "package.json"
    try:
        with open(manifest, encoding="utf-8") as f:
            data = json.load(f)
    except (FileNotFoundError, NotADirectoryError):
        return None
    except (OSError, ValueError) as e:
        return ResolveFailed(e)
    if not isinstance(data, dict) or data.get("exports") is None:
        return None

    target = _export_target(data["exports"], subpath)
    if target is None:
        return ResolveFailed(PackagePathNotExportedError(str(pkg_dir), subpath))
    path = pkg_dir / target
    if not path.is_file():
        return NotFound(request)
    return Found(Path(os.path.realpath(path)))


def resolve_module(base_dir: str | Path, request: str) -> ResolveResult:
    """按模块查找规则解析 request 对应的文件

    包的 package.json 声明了 exports 时只认 exports 映射，未导出的子路径
    返回 ResolveFailed(PackagePathNotExportedError)。
    只有「文件不存在」归为 NotFound，其余错误（非法请求、权限不足等）
    以 ResolveFailed 携带原异常返回。
    """
    try:
        _validate_request(request)
    except ValueError as e:
        return ResolveFailed(e)

    package, subpath = _split_request(request)
    for root in node_module_paths(base_dir):
        exported = _resolve_exports(root / package, subpath, request)
        if exported is not None:
            return exported

        candidate = root / request
        try:
            st = os.stat(candidate)
        except (FileNotFoundError, NotADirectoryError):
            continue
        except OSError as e:
            return ResolveFailed(e)
        if stat.S_ISDIR(st.st_mode):
            continue
        return Found(Path(os.path.realpath(candidate)))
    return NotFound(request)


def find_jsii_file_path(
    base_dir: str | Path, module_name: str, jsii_file: str = ".jsii",
) -> str | None:
    """返回已安装模块中 .jsii 文件所在目录；非 jsii 模块返回 None

    非「找不到」的解析错误原样抛出，包括 exports 未导出 .jsii 时的
    PackagePathNotExportedError。
    """
    result = resolve_module(base_dir, f"{module_name}/{jsii_file}")
    if isinstance(result, Found):
        return str(result.path.parent)
    if isinstance(result, NotFound):
        # 不是 jsii 模块
        logger.debug("未找到 %s: %s", jsii_file, result.request)
        return None
    raise result.cause
