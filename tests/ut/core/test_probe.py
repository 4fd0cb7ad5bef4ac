"""本地引用判断 + 存在性探测测试"""

from __future__ import annotations

import pytest

from pkgshim.core.probe import is_local_module, module_exists


class TestIsLocalModule:
    @pytest.mark.parametrize("spec", [
        "./foo",
        "./dist/js/pkg-1.0.0.tgz",
        "/var/folders/8k/T/projen-RYurCw/pkg.tgz",
        "/abs/dir",
        "pkg.tgz",
        "foo@/tmp/pkg.tgz",
    ])
    def test_local(self, spec: str) -> None:
        assert is_local_module(spec) is True

    @pytest.mark.parametrize("spec", [
        "foo",
        "foo@^1.2",
        "@scope/bar@~2.0.0",
        "../sibling",
        "foo.tgz.bak",
        "tgz",
    ])
    def test_registry(self, spec: str) -> None:
        assert is_local_module(spec) is False

    def test_custom_suffix(self) -> None:
        assert is_local_module("pkg.tar.gz", archive_suffix=".tar.gz") is True
        assert is_local_module("pkg.tgz", archive_suffix=".tar.gz") is False


class TestModuleExists:
    def test_local_file_exists(self, tmp_path, fake_npm) -> None:
        (tmp_path / "pkg.tgz").write_bytes(b"")
        fake = fake_npm()
        assert module_exists(str(tmp_path), str(tmp_path / "pkg.tgz"), executor=fake)
        # 本地引用不调用 npm
        assert fake.calls == []

    def test_local_relative_to_cwd(self, tmp_path, fake_npm) -> None:
        (tmp_path / "mod").mkdir()
        assert module_exists(str(tmp_path), "./mod", executor=fake_npm())

    def test_local_ignores_process_cwd(self, tmp_path, fake_npm, monkeypatch) -> None:
        """相对路径按参数 cwd 解析，进程当前目录下的同名条目不算数"""
        (tmp_path / "elsewhere" / "mod").mkdir(parents=True)
        base = tmp_path / "base"
        base.mkdir()
        monkeypatch.chdir(tmp_path / "elsewhere")
        assert module_exists(str(base), "./mod", executor=fake_npm()) is False
        (base / "mod").mkdir()
        assert module_exists(str(base), "./mod", executor=fake_npm()) is True

    def test_local_missing(self, tmp_path, fake_npm) -> None:
        fake = fake_npm()
        assert module_exists(str(tmp_path), "./missing", executor=fake) is False
        assert module_exists(str(tmp_path), str(tmp_path / "x.tgz"), executor=fake) is False
        assert fake.calls == []

    def test_registry_exists(self, tmp_path, fake_npm) -> None:
        fake = fake_npm(registry={"foo@^1.2"})
        assert module_exists(str(tmp_path), "foo@^1.2", executor=fake) is True
        assert fake.commands == ["npm view foo@^1.2"]
        assert fake.calls[0]["cwd"] == str(tmp_path)

    def test_registry_missing_returns_false(self, tmp_path, fake_npm) -> None:
        fake = fake_npm(registry=set())
        assert module_exists(str(tmp_path), "no-such-pkg", executor=fake) is False

    def test_spawn_failure_returns_false(self, tmp_path) -> None:
        class Broken:
            def execute(self, cmd, **kwargs):
                raise FileNotFoundError("npm")

        assert module_exists(str(tmp_path), "foo", executor=Broken()) is False
