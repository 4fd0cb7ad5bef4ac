"""统一异常体系

所有业务异常继承 PkgShimError，替代散落的 ValueError / RuntimeError。
CLI 层据此区分「面向用户的错误」与内部异常，前者只输出提示不打印堆栈。
"""

from __future__ import annotations


class PkgShimError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(PkgShimError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class DependencyError(PkgShimError):
    """依赖包安装或解析失败"""

    code = "DEPENDENCY_ERROR"


class ResolutionError(DependencyError):
    """安装成功但无法从清单中解析出包名"""

    code = "RESOLUTION_ERROR"

    def __init__(self, spec: str) -> None:
        super().__init__(f"Unable to resolve package name from spec {spec}")
        self.spec = spec


class ExecutionError(PkgShimError):
    """外部命令执行失败（非零退出码）"""

    code = "EXECUTION_ERROR"

    def __init__(
        self, message: str, *,
        cmd: str = "", returncode: int | None = None, stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr


class CliError(PkgShimError):
    """面向命令行用户的错误，可包含多行提示

    CLI 入口捕获后只打印消息，不输出堆栈。
    """

    code = "CLI_ERROR"

    def __init__(self, *lines: str) -> None:
        super().__init__("\n".join(lines))
        self.lines = lines


class PackagePathNotExportedError(PkgShimError):
    """包的 package.json exports 未导出所请求的子路径"""

    code = "ERR_PACKAGE_PATH_NOT_EXPORTED"

    def __init__(self, package_dir: str, subpath: str) -> None:
        super().__init__(
            f"Package subpath '{subpath}' is not defined by \"exports\" "
            f"in {package_dir}/package.json"
        )
        self.package_dir = package_dir
        self.subpath = subpath
