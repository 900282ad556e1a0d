"""CLI — 数据库列表"""

from __future__ import annotations

import click

from modctl.cli import _svc, handle_errors


def register(group: click.Group) -> None:
    group.add_command(list_dbs)


@click.command(name="dbs")
@handle_errors
def list_dbs() -> None:
    """列出服务端已知的数据库别名"""
    dbs = _svc().modules.list_databases()
    if not dbs:
        click.echo("没有可用的数据库。")
        return
    for alias in dbs:
        click.echo(f"  {alias}")
