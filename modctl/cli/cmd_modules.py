"""CLI — 模块管理命令：list / install / remove"""

from __future__ import annotations

from typing import Sequence

import click

from modctl.cli import _svc, echo_ok, handle_errors
from modctl.core.models import Module


def register(group: click.Group) -> None:
    group.add_command(list_modules)
    group.add_command(install)
    group.add_command(remove)


def _format_table(modules: Sequence[Module]) -> list[str]:
    """格式化为两列表格：模块名 | 依赖模块"""
    header = ("模块名", "依赖模块")
    rows = [(m.name, ", ".join(m.dependencies)) for m in modules]
    width = max([len(header[0])] + [len(r[0]) for r in rows])
    lines = [f"  {header[0]:{width}s}  {header[1]}", f"  {'-' * width}  {'-' * 8}"]
    lines.extend(f"  {name:{width}s}  {deps}" for name, deps in rows)
    return lines


@click.command(name="list")
@click.option("--db", default=None, help="只列出该数据库已安装的模块")
@handle_errors
def list_modules(db: str | None) -> None:
    """列出全部模块或某个数据库已安装的模块"""
    modules = _svc().modules.list_modules(db)
    if not modules:
        click.echo("没有模块。" if db is None else f"{db} 尚未安装任何模块。")
        return
    for line in _format_table(modules):
        click.echo(line)


@click.command()
@click.argument("modules", nargs=-1)
@click.option("--db", default=None, help="目标数据库别名（不指定则交互选择）")
@click.option("--yes", "-y", is_flag=True, help="跳过确认")
@click.option("--transitive", is_flag=True, help="补充完整依赖闭包而不只是直接依赖")
@handle_errors
def install(modules: tuple[str, ...], db: str | None, yes: bool, transitive: bool) -> None:
    """安装模块（不指定模块则交互选择），自动补充缺失的直接依赖"""
    svc = _svc().modules
    svc.assume_yes = svc.assume_yes or yes
    svc.transitive = svc.transitive or transitive

    alias = svc.resolve_db(db)
    plan = svc.prepare_install(alias, list(modules) if modules else None)
    click.echo(f"待安装模块: {', '.join(plan.requested)}")
    if plan.implied:
        echo_ok(f"安装还需要以下依赖模块: {', '.join(plan.implied)}")
    svc.execute_install(alias, plan)
    echo_ok("安装完成")


@click.command()
@click.argument("modules", nargs=-1)
@click.option("--db", default=None, help="目标数据库别名（不指定则交互选择）")
@click.option("--yes", "-y", is_flag=True, help="跳过确认")
@handle_errors
def remove(modules: tuple[str, ...], db: str | None, yes: bool) -> None:
    """卸载模块（不指定模块则交互选择），拒绝卸载仍被依赖的模块"""
    svc = _svc().modules
    svc.assume_yes = svc.assume_yes or yes

    alias = svc.resolve_db(db)
    names = svc.prepare_removal(alias, list(modules) if modules else None)
    click.echo(f"待卸载模块: {', '.join(names)}")
    svc.execute_removal(alias, names)
    echo_ok("卸载完成")
