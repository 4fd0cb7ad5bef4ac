"""npm 清单 (package.json) 读取与临时清单管理

清单本身由 npm 负责读写，这里只做两件事:
- 安装后回读 devDependencies，找出刚装上的包名
- 调用前不存在的清单在调用结束后删除，保持目录原样
"""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Manifest:
    """package.json 的只读视图"""

    path: Path
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str | Path) -> Manifest:
        p = Path(path)
        with open(p, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"清单内容不是 JSON 对象: {p}")
        return cls(path=p, data=data)

    @property
    def dev_dependencies(self) -> dict[str, str]:
        deps = self.data.get("devDependencies") or {}
        return deps if isinstance(deps, dict) else {}


def pick_installed_name(
    after: Mapping[str, Any],
    before: Iterable[str] = (),
    exclude: str = "",
) -> str | None:
    """从安装后的依赖表中挑出新装的包名

    线性扫描: 优先返回安装前不存在的键，否则返回第一个不等于 exclude 的键。
    """
    previous = set(before)
    fallback: str | None = None
    for name in after:
        if name == exclude:
            continue
        if name not in previous:
            return name
        if fallback is None:
            fallback = name
    return fallback


def remove_quietly(path: Path) -> None:
    """尽力删除文件或目录，失败只记录日志"""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("清理失败（忽略）: %s (%s)", path, e)


@contextmanager
def transient_manifest(path: str | Path) -> Iterator[bool]:
    """记录清单是否预先存在；若原本不存在，退出时将其删除

    yield 值为清单是否预先存在。
    """
    p = Path(path)
    existed = p.exists()
    try:
        yield existed
    finally:
        if not existed:
            remove_quietly(p)
