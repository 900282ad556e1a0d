"""测试共享 fixture: 模块清单构造 + fake 交互 / fake 服务端

所有 fixture 都返回工厂或可配置的 fake，测试用例只写差异参数:

    def test_xxx(make_catalog, make_installed):
        catalog = make_catalog({"A": [], "B": ["A"]})
        installed = make_installed(catalog, ["A"])
"""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from modctl.core.exceptions import CatalogFetchError, CommandExecutionError
from modctl.core.models import Catalog, InstalledSet, Module
from modctl.services.container import reset_container


def _make_catalog(spec: dict[str, list[str]]) -> Catalog:
    return Catalog(Module(name, tuple(deps)) for name, deps in spec.items())


def _make_installed(catalog: Catalog, names: Sequence[str]) -> InstalledSet:
    return InstalledSet(catalog.get(n) or Module(n) for n in names)


class FakePrompter:
    """按预设返回选择结果，并记录每次调用"""

    def __init__(
        self, selection: Sequence[int] = (), confirmed: bool = True, db_index: int = 0,
    ) -> None:
        self.selection = list(selection)
        self.confirmed = confirmed
        self.db_index = db_index
        self.calls: list[tuple[str, object]] = []

    def select_many(self, prompt: str, options: Sequence[str]) -> list[int]:
        self.calls.append(("select_many", list(options)))
        return list(self.selection)

    def select_one(self, prompt: str, options: Sequence[str], default: int = 0) -> int:
        self.calls.append(("select_one", list(options)))
        return self.db_index

    def confirm(self, prompt: str, default: bool = True) -> bool:
        self.calls.append(("confirm", prompt))
        return self.confirmed


class FakeBackend:
    """内存版模块服务端"""

    def __init__(
        self,
        spec: dict[str, list[str]],
        installed: dict[str, list[str]] | None = None,
        *,
        fail_fetch: str = "",
        fail_execute: str = "",
    ) -> None:
        self.catalog = _make_catalog(spec)
        self.installed = {db: list(names) for db, names in (installed or {}).items()}
        self.fail_fetch = fail_fetch
        self.fail_execute = fail_execute
        self.installs: list[tuple[str, list[str]]] = []
        self.removes: list[tuple[str, list[str]]] = []

    def fetch_catalog(self) -> Catalog:
        if self.fail_fetch:
            raise CatalogFetchError(f"获取模块列表失败: {self.fail_fetch}")
        return self.catalog

    def fetch_installed(self, alias: str) -> InstalledSet:
        if self.fail_fetch:
            raise CatalogFetchError(f"获取模块列表失败: {self.fail_fetch}")
        return _make_installed(self.catalog, self.installed.get(alias, []))

    def fetch_snapshot(self, alias: str) -> tuple[Catalog, InstalledSet]:
        return self.fetch_catalog(), self.fetch_installed(alias)

    def list_databases(self) -> list[str]:
        return list(self.installed)

    def install_modules(self, alias: str, names: Sequence[str]) -> None:
        if self.fail_execute:
            raise CommandExecutionError(f"安装模块失败: {self.fail_execute}")
        self.installs.append((alias, list(names)))

    def remove_modules(self, alias: str, names: Sequence[str]) -> None:
        if self.fail_execute:
            raise CommandExecutionError(f"卸载模块失败: {self.fail_execute}")
        self.removes.append((alias, list(names)))


@pytest.fixture()
def make_catalog() -> Callable[[dict[str, list[str]]], Catalog]:
    """Catalog 工厂: make_catalog({"A": [], "B": ["A"]})"""
    return _make_catalog


@pytest.fixture()
def make_installed() -> Callable[[Catalog, Sequence[str]], InstalledSet]:
    """InstalledSet 工厂，依赖信息取自 catalog"""
    return _make_installed


@pytest.fixture()
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture()
def fake_backend_cls() -> type[FakeBackend]:
    return FakeBackend


@pytest.fixture()
def fake_prompter_cls() -> type[FakePrompter]:
    return FakePrompter


@pytest.fixture(autouse=True)
def _isolate_container():
    """每个测试使用独立的全局服务容器"""
    reset_container()
    yield
    reset_container()
