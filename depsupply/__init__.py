"""depsupply - 依赖版本解析与安装"""

__version__ = "0.1.0"
