"""pkgshim - npm 依赖包安装/解析薄封装"""

__version__ = "0.1.0"
