"""卸载校验

保证卸载后剩余的已安装模块依赖全部满足：
剩余模块中任何一个依赖了待卸载模块，即拒绝卸载。
只报告第一个违规，检查顺序固定（剩余模块按名称排序，依赖按声明顺序）。
"""

from __future__ import annotations

import logging
from typing import Sequence

from modctl.core.exceptions import (
    ModuleNotFound,
    ModuleNotInstalled,
    ModuleStillDepended,
    NothingToDo,
)
from modctl.core.models import Catalog, InstalledSet, dedupe
from modctl.core.protocols import Prompter
from modctl.core.selection import select_names

logger = logging.getLogger(__name__)


def resolve_removal(
    catalog: Catalog,
    installed: InstalledSet,
    requested: Sequence[str] | None,
    prompter: Prompter | None = None,
) -> list[str]:
    """获取并校验待卸载模块，未指定时交互选择

    返回:
        校验通过的模块名列表（保持请求顺序）

    异常:
        NothingToDo: 实例上没有已安装模块
        UserAbort: 交互选择为空
        ModuleNotFound / ModuleNotInstalled / ModuleStillDepended
    """
    if not installed:
        raise NothingToDo("尚未安装任何模块")

    if requested is None:
        names = select_names(prompter, installed.names())
    else:
        names = dedupe(requested)
        for name in names:
            if name not in catalog:
                raise ModuleNotFound(name)
        for name in names:
            if name not in installed:
                raise ModuleNotInstalled(name)

    check_removal(installed, names)
    logger.debug("卸载校验通过: %s", names)
    return names


def check_removal(installed: InstalledSet, names: Sequence[str]) -> None:
    """检查剩余已安装模块是否依赖待卸载模块"""
    removing = set(names)
    remaining = sorted(
        (m for m in installed.modules() if m.name not in removing),
        key=lambda m: m.name,
    )
    for module in remaining:
        for dep in module.dependencies:
            if dep in removing:
                raise ModuleStillDepended(dependency=dep, dependent=module.name)
