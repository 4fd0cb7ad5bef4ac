"""共享 fixture — 假 npm 执行器 + 全局状态复位

FakeNpm 模拟 npm 对 package.json 的副作用，无需真实进程:
  npm init --yes          -> 写入最小清单
  npm install --prefix=<dir> <spec>
                          -> 在 <cwd>/<dir>/package.json 中加入 install_as 指定的包名
  npm view <spec>         -> 按 registry 集合决定退出码
"""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from pkgshim.core.config import reset_config
from pkgshim.utils.logger import reset_logging
from pkgshim.utils.shell import CommandResult, LocalExecutor, set_executor


class FakeNpm:
    """记录调用并模拟 npm 行为的命令执行器"""

    def __init__(
        self,
        install_as: str | None = None,
        registry: set[str] | None = None,
        init_deps: dict[str, str] | None = None,
        fail_on: str = "",
    ) -> None:
        self.install_as = install_as
        self.registry = registry or set()
        self.init_deps = init_deps or {}
        self.fail_on = fail_on
        self.calls: list[dict] = []

    def execute(self, cmd, *, cwd=".", env=None, timeout=None, shell=False):
        self.calls.append({"cmd": cmd, "cwd": cwd, "shell": shell})
        if self.fail_on and self.fail_on in cmd:
            return CommandResult(returncode=1, stdout="", stderr="npm ERR! boom")

        manifest = Path(cwd) / "package.json"
        if cmd.startswith("npm init"):
            data = {"name": "tmp", "version": "1.0.0"}
            if self.init_deps:
                data["devDependencies"] = dict(self.init_deps)
            manifest.write_text(json.dumps(data), encoding="utf-8")
        elif cmd.startswith("npm install"):
            # 与 npm 一致: --prefix 以 cwd 为基准解析，目标清单不存在时新建
            m = re.search(r'--prefix="([^"]*)"', cmd)
            if m:
                manifest = Path(cwd) / m.group(1) / "package.json"
            manifest.parent.mkdir(parents=True, exist_ok=True)
            data = {}
            if manifest.exists():
                data = json.loads(manifest.read_text(encoding="utf-8"))
            if self.install_as:
                data.setdefault("devDependencies", {})[self.install_as] = "^1.0.0"
            manifest.write_text(json.dumps(data), encoding="utf-8")
        elif cmd.startswith("npm view"):
            spec = cmd.split()[-1]
            rc = 0 if spec in self.registry else 1
            return CommandResult(returncode=rc, stdout="", stderr="")
        return CommandResult(returncode=0, stdout="", stderr="")

    @property
    def commands(self) -> list[str]:
        return [c["cmd"] for c in self.calls]


@pytest.fixture()
def fake_npm():
    return FakeNpm


@pytest.fixture(autouse=True)
def _reset_globals():
    yield
    reset_config()
    reset_logging()
    set_executor(LocalExecutor())
