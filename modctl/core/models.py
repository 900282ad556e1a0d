"""核心数据模型

Module / Catalog / InstalledSet 均为单次命令内的不可变快照，
命令开始时拉取一次，经过一次校验后丢弃，不做跨调用缓存。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Module:
    """单个模块定义"""

    name: str
    dependencies: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str) -> Module:
        """从服务端返回的 {name, dependencies} 构造，兼容只返回名称的旧格式

        异常:
            ValueError: 条目不是字符串或字典、缺少 name、依赖不是字符串数组
        """
        if isinstance(data, str):
            data = {"name": data}
        if not isinstance(data, dict):
            raise ValueError(f"无效的模块条目: {data!r}")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"模块条目缺少 name: {data!r}")
        deps = data.get("dependencies") or []
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            raise ValueError(f"模块 {name} 的 dependencies 必须是字符串数组")
        return cls(name=name, dependencies=tuple(deps))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "dependencies": list(self.dependencies)}


def _index_modules(modules: Iterable[Module], source: str) -> dict[str, Module]:
    """按名称建立有序索引，重复名称保留第一次出现"""
    index: dict[str, Module] = {}
    for m in modules:
        if m.name in index:
            logger.warning("%s 中模块名重复，忽略后出现的定义: %s", source, m.name)
            continue
        index[m.name] = m
    return index


class Catalog:
    """服务端已知的全部模块（按服务端返回顺序）"""

    def __init__(self, modules: Iterable[Module] = ()) -> None:
        self._modules = _index_modules(modules, "模块清单")

    @classmethod
    def from_payload(cls, payload: list[Any]) -> Catalog:
        return cls(Module.from_dict(item) for item in payload)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[Module]:
        return iter(self._modules.values())

    def get(self, name: str) -> Module | None:
        return self._modules.get(name)

    def names(self) -> list[str]:
        return list(self._modules)


class InstalledSet:
    """某个数据库实例上当前已安装的模块"""

    def __init__(self, modules: Iterable[Module] = ()) -> None:
        self._modules = _index_modules(modules, "已安装列表")

    @classmethod
    def from_payload(cls, payload: list[Any]) -> InstalledSet:
        return cls(Module.from_dict(item) for item in payload)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def __bool__(self) -> bool:
        return bool(self._modules)

    def names(self) -> list[str]:
        return list(self._modules)

    def modules(self) -> list[Module]:
        return list(self._modules.values())


@dataclass(frozen=True)
class InstallPlan:
    """安装计划：显式请求的模块 + 自动补充的依赖模块"""

    requested: tuple[str, ...]
    implied: tuple[str, ...] = field(default_factory=tuple)

    @property
    def modules(self) -> list[str]:
        return list(self.requested) + list(self.implied)

    @property
    def is_empty(self) -> bool:
        return not self.requested and not self.implied


def dedupe(names: Iterable[str]) -> list[str]:
    """去重并保持首次出现的顺序"""
    return list(dict.fromkeys(names))
