"""安装计划计算

默认只补充一层依赖：请求模块直接声明、且既未安装也未请求的依赖。
被补充模块自身的依赖不会在同一次计算中继续展开。
开启 transitive 后改为计算完整依赖闭包，并检测循环依赖。
"""

from __future__ import annotations

import logging
from typing import Sequence

from modctl.core.exceptions import (
    DependencyCycleError,
    ModuleAlreadyInstalled,
    ModuleNotFound,
    NothingToDo,
)
from modctl.core.models import Catalog, InstalledSet, InstallPlan, dedupe
from modctl.core.protocols import Prompter
from modctl.core.selection import select_names

logger = logging.getLogger(__name__)


def plan_install(
    catalog: Catalog,
    installed: InstalledSet,
    requested: Sequence[str] | None,
    prompter: Prompter | None = None,
    *,
    transitive: bool = False,
) -> InstallPlan:
    """获取并校验待安装模块，补充缺失依赖

    参数:
        catalog: 全部模块清单
        installed: 目标实例已安装模块
        requested: 显式请求的模块名，None 表示交互选择
        prompter: 交互选择实现
        transitive: 是否展开完整依赖闭包

    返回:
        InstallPlan，requested 保持输入顺序，implied 为发现顺序

    异常:
        NothingToDo: 所有模块均已安装
        UserAbort: 交互选择为空
        ModuleNotFound / ModuleAlreadyInstalled / DependencyCycleError
    """
    if len(installed) == len(catalog):
        raise NothingToDo("所有可用模块均已安装")

    if requested is None:
        available = [n for n in catalog.names() if n not in installed]
        names = select_names(prompter, available)
    else:
        names = dedupe(requested)
        for name in names:
            if name not in catalog:
                raise ModuleNotFound(name)
        for name in names:
            if name in installed:
                raise ModuleAlreadyInstalled(name)

    if transitive:
        implied = dependency_closure(catalog, installed, names)
    else:
        implied = implied_dependencies(catalog, installed, names)

    if implied:
        logger.info("自动补充依赖模块: %s", ", ".join(implied))
    return InstallPlan(requested=tuple(names), implied=tuple(implied))


def implied_dependencies(
    catalog: Catalog, installed: InstalledSet, names: Sequence[str],
) -> list[str]:
    """单层依赖补充：只看请求模块直接声明的依赖"""
    requested = set(names)
    implied: list[str] = []
    for name in names:
        module = catalog.get(name)
        if module is None:
            continue
        for dep in module.dependencies:
            if dep in installed or dep in requested or dep in implied:
                continue
            implied.append(dep)
    return implied


def dependency_closure(
    catalog: Catalog, installed: InstalledSet, names: Sequence[str],
) -> list[str]:
    """完整依赖闭包（广度优先，保持发现顺序），存在循环依赖时报错"""
    seen = set(names)
    queue = list(names)
    implied: list[str] = []
    while queue:
        module = catalog.get(queue.pop(0))
        if module is None:
            continue
        for dep in module.dependencies:
            if dep in installed or dep in seen:
                continue
            if dep not in catalog:
                logger.warning("模块 %s 声明的依赖 %s 不在清单中", module.name, dep)
            seen.add(dep)
            implied.append(dep)
            queue.append(dep)

    _check_cycles(catalog, list(names) + implied)
    return implied


def _check_cycles(catalog: Catalog, nodes: Sequence[str]) -> None:
    """在待安装模块构成的子图上做 DFS 环检测"""
    members = set(nodes)
    visiting: list[str] = []
    done: set[str] = set()

    def visit(name: str) -> None:
        if name in done:
            return
        if name in visiting:
            start = visiting.index(name)
            raise DependencyCycleError(visiting[start:] + [name])
        visiting.append(name)
        module = catalog.get(name)
        for dep in module.dependencies if module else ():
            if dep in members:
                visit(dep)
        visiting.pop()
        done.add(name)

    for name in nodes:
        visit(name)
