"""依赖供应命令：supply, resolve, versions, lines"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from depsupply.core.catalog import ManifestCatalog
from depsupply.core.exceptions import SupplyError
from depsupply.core.models import SupplyTarget
from depsupply.core.resolver import VersionResolver
from depsupply.core.stager import LocalStager
from depsupply.core.supplier import Supplier
from depsupply.core.version import Version, sort_versions
from depsupply.core.version_lines import MANIFEST_FILE, load_version_lines


def register(main: click.Group) -> None:
    """注册供应相关命令"""
    main.add_command(supply)
    main.add_command(resolve)
    main.add_command(versions)
    main.add_command(lines)


@contextmanager
def _handle_errors() -> Iterator[None]:
    """业务异常转为单行错误提示，退出码 1"""
    try:
        yield
    except SupplyError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


_catalog_option = click.option(
    "--catalog-dir", default=".", show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help=f"依赖目录根目录（包含 {MANIFEST_FILE}）",
)


@click.command()
@click.option("--build-dir", required=True,
              type=click.Path(file_okay=False, path_type=Path), help="构建目录")
@click.option("--dep-dir", required=True,
              type=click.Path(file_okay=False, path_type=Path), help="依赖安装根目录")
@_catalog_option
@click.option("--name", default=SupplyTarget.name, show_default=True, help="依赖名")
@click.option("--config-file", default=None, help="构建目录下的配置文件名 [默认: <name>.yml]")
@click.option("--binary-path", default=None,
              help="安装目录内的二进制相对路径 [默认: <name>/sbin/<name>]")
@click.option("--link-name", default=None, help="发布的链接名 [默认: <name>]")
def supply(
    build_dir: Path, dep_dir: Path, catalog_dir: Path, name: str,
    config_file: str | None, binary_path: str | None, link_name: str | None,
) -> None:
    """解析版本、安装依赖并发布二进制链接"""
    target = SupplyTarget(
        name=name,
        config_file=config_file or f"{name}.yml",
        binary_path=binary_path or f"{name}/sbin/{name}",
        link_name=link_name or name,
    )
    with _handle_errors():
        supplier = Supplier(
            LocalStager(build_dir, dep_dir), ManifestCatalog(catalog_dir), target,
        )
        dep = supplier.run()
    click.echo(f"Ready: {dep.name} {dep.version} -> {dep_dir / 'bin' / target.link_name}")


@click.command()
@click.argument("name")
@click.argument("specifier", default="")
@_catalog_option
def resolve(name: str, specifier: str, catalog_dir: Path) -> None:
    """只解析版本，不安装"""
    with _handle_errors():
        catalog = ManifestCatalog(catalog_dir)
        table = load_version_lines(catalog.root_dir / MANIFEST_FILE)
        dep = VersionResolver(catalog, table).resolve(name, specifier)
    click.echo(dep.version)


@click.command()
@click.argument("name")
@_catalog_option
def versions(name: str, catalog_dir: Path) -> None:
    """列出依赖的全部目录版本（从高到低）"""
    with _handle_errors():
        catalog = ManifestCatalog(catalog_dir)
    found = catalog.all_dependency_versions(name)
    if not found:
        click.echo(f"目录中没有依赖: {name}")
        return
    for v in sort_versions(found):
        marker = "  (无法解析，不参与匹配)" if Version.parse(v) is None else ""
        click.echo(f"  {v}{marker}")


@click.command()
@_catalog_option
def lines(catalog_dir: Path) -> None:
    """列出清单中的版本线"""
    with _handle_errors():
        table = load_version_lines(catalog_dir / MANIFEST_FILE)
    if not table:
        click.echo("没有定义版本线。")
        return
    for line_name in sorted(table):
        click.echo(f"  {line_name:12s} {table[line_name]}")
