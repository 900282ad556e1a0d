"""modctl 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
所有错误在这里统一输出并设置退出码：业务错误退出 1，用户中止退出 0。
"""

from __future__ import annotations

import functools
import logging
import os
from typing import Any, Callable, TypeVar

import click

from modctl import __version__
from modctl.core.exceptions import ModCtlError, UserAbort
from modctl.services.container import ServiceContainer, get_container, set_container
from modctl.utils.logger import setup_logging

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _svc() -> ServiceContainer:
    """获取全局服务容器的快捷方式"""
    return get_container()


def make_container(config: Any) -> ServiceContainer:
    """构造 CLI 使用的服务容器（测试中可替换）"""
    from modctl.cli.prompts import ClickPrompter
    return ServiceContainer(config=config, prompter=ClickPrompter())


def echo_error(message: str) -> None:
    click.secho("[错误] ", fg="red", bold=True, err=True, nl=False)
    click.echo(message, err=True)


def echo_warn(message: str) -> None:
    click.secho("[提示] ", fg="yellow", bold=True, nl=False)
    click.echo(message)


def echo_ok(message: str) -> None:
    click.secho("[完成] ", fg="green", bold=True, nl=False)
    click.echo(message)


def handle_errors(func: F) -> F:
    """命令顶层分发：ModCtlError → 退出码 1，UserAbort → 提示后退出码 0"""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except UserAbort as e:
            echo_warn(e.message)
            return None
        except ModCtlError as e:
            logger.debug("命令失败 [%s]", e.code, exc_info=True)
            echo_error(e.message)
            raise click.exceptions.Exit(1) from e

    return wrapper  # type: ignore[return-value]


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "config_path", default=None, envvar="MODCTL_CONFIG",
    help="配置文件路径（默认 ~/.modctl/config.yml）",
)
@handle_errors
def main(config_path: str | None) -> None:
    """modctl - 数据库实例模块管理工具"""
    from modctl.core.config import init_config

    setup_logging(
        level=os.getenv("MODCTL_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("MODCTL_LOG_JSON", "") == "1",
    )
    cfg = init_config(config_path)
    set_container(make_container(cfg))


# 注册各领域子命令
from modctl.cli.cmd_modules import register as _reg_modules  # noqa: E402
from modctl.cli.cmd_db import register as _reg_db  # noqa: E402

_reg_modules(main)
_reg_db(main)
