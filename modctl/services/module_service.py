"""模块服务: install / remove / list 的编排

流程: 解析数据库 → 拉取快照 → 校验 / 计算安装计划 → 确认 → 执行。
本层只抛异常，不输出、不退出进程；输出与退出码由 CLI 顶层统一处理。
"""

from __future__ import annotations

import logging
from typing import Sequence

from modctl.core.exceptions import (
    DatabaseNotFound,
    NothingToDo,
    UserAbort,
    ValidationError,
)
from modctl.core.install import plan_install
from modctl.core.models import InstallPlan, Module
from modctl.core.protocols import ModuleBackend, Prompter
from modctl.core.removal import resolve_removal

logger = logging.getLogger(__name__)


class ModuleService:
    """模块安装 / 卸载服务"""

    def __init__(
        self,
        backend: ModuleBackend,
        prompter: Prompter | None = None,
        *,
        transitive: bool = False,
        assume_yes: bool = False,
    ) -> None:
        self.backend = backend
        self.prompter = prompter
        self.transitive = transitive
        self.assume_yes = assume_yes

    def list_modules(self, db: str | None = None) -> list[Module]:
        """列出全部模块，指定 db 时只列出该实例已安装的模块"""
        if db is None:
            return list(self.backend.fetch_catalog())
        return self.backend.fetch_installed(db).modules()

    def list_databases(self) -> list[str]:
        return self.backend.list_databases()

    def resolve_db(self, db: str | None) -> str:
        """校验显式指定的数据库，未指定时交互选择"""
        if db is not None and not db.strip():
            raise ValidationError("数据库别名不能为空")
        dbs = self.backend.list_databases()
        if db is None:
            if not dbs:
                raise NothingToDo("没有可用的数据库")
            if self.prompter is None:
                raise ValidationError("未指定 --db 且当前不支持交互式选择")
            return dbs[self.prompter.select_one("选择数据库", dbs, 0)]
        if db not in dbs:
            raise DatabaseNotFound(db)
        return db

    # ---- 卸载 ----

    def prepare_removal(self, db: str, names: Sequence[str] | None) -> list[str]:
        catalog, installed = self.backend.fetch_snapshot(db)
        return resolve_removal(catalog, installed, names, self.prompter)

    def execute_removal(self, db: str, names: Sequence[str]) -> None:
        self.confirm("按回车确认卸载", aborted="没有卸载任何模块")
        self.backend.remove_modules(db, names)
        logger.info("卸载完成", extra={"db": db, "modules": list(names)})

    # ---- 安装 ----

    def prepare_install(self, db: str, names: Sequence[str] | None) -> InstallPlan:
        catalog, installed = self.backend.fetch_snapshot(db)
        return plan_install(
            catalog, installed, names, self.prompter, transitive=self.transitive,
        )

    def execute_install(self, db: str, plan: InstallPlan) -> None:
        self.confirm("按回车确认安装", aborted="没有安装任何模块")
        self.backend.install_modules(db, plan.modules)
        logger.info("安装完成", extra={"db": db, "modules": plan.modules})

    def confirm(self, prompt: str, *, aborted: str) -> None:
        """执行前确认，拒绝时抛 UserAbort"""
        if self.assume_yes:
            return
        if self.prompter is None:
            raise ValidationError("需要确认操作，请使用 --yes 或在交互式终端中运行")
        if not self.prompter.confirm(prompt, True):
            raise UserAbort(aborted)
