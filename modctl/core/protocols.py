"""领域协议定义

校验逻辑只依赖这里的抽象，交互式选择 / 确认与远程调用的具体实现
由 CLI 层和 CatalogClient 提供，测试中可替换为 fake。

使用 typing.Protocol 而非 ABC，使得现有类无需修改继承关系即可满足协议。
"""

from __future__ import annotations

from typing import Protocol, Sequence

from modctl.core.models import Catalog, InstalledSet


# =========================================================================
# 交互选择 / 确认协议
# =========================================================================

class Prompter(Protocol):
    """交互式选择与确认

    select_many 返回被选中选项的下标，可以为空；
    校验逻辑只在返回的名称上做检查，不做重试。
    """

    def select_many(self, prompt: str, options: Sequence[str]) -> list[int]:
        """多选，返回选中项下标"""
        ...

    def select_one(self, prompt: str, options: Sequence[str], default: int = 0) -> int:
        """单选，返回选中项下标"""
        ...

    def confirm(self, prompt: str, default: bool = True) -> bool:
        """确认操作"""
        ...


# =========================================================================
# 模块服务端协议
# =========================================================================

class ModuleBackend(Protocol):
    """模块清单读取 + 安装 / 卸载执行

    抽象远程服务，使 ModuleService 不绑定 HTTP 实现。
    """

    def fetch_snapshot(self, alias: str) -> tuple[Catalog, InstalledSet]:
        """并发拉取全部模块清单与实例已安装模块"""
        ...

    def fetch_catalog(self) -> Catalog:
        """拉取全部模块清单"""
        ...

    def fetch_installed(self, alias: str) -> InstalledSet:
        """拉取实例已安装模块"""
        ...

    def list_databases(self) -> list[str]:
        """列出服务端已知的数据库别名"""
        ...

    def install_modules(self, alias: str, names: Sequence[str]) -> None:
        """在实例上安装模块"""
        ...

    def remove_modules(self, alias: str, names: Sequence[str]) -> None:
        """从实例上卸载模块"""
        ...
