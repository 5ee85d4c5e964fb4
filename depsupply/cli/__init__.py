"""depsupply 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import click

from depsupply import __version__
from depsupply.utils.logger import setup_logging_from_env


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """depsupply - 依赖版本解析与安装"""
    setup_logging_from_env()


# 注册各领域子命令
from depsupply.cli.cmd_supply import register as _reg_supply  # noqa: E402

_reg_supply(main)
