"""模块清单客户端

职责:
- 拉取全部模块清单 / 某实例已安装模块
- 并发拉取两份快照，两者都完成后才进入校验
- 列出数据库别名
- 调用安装 / 卸载接口
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from modctl.core.exceptions import CatalogFetchError, CommandExecutionError, ServiceError
from modctl.core.models import Catalog, InstalledSet
from modctl.utils.http import ApiClient

logger = logging.getLogger(__name__)


class CatalogClient:
    """模块服务客户端，只读接口失败抛 CatalogFetchError，写接口失败抛 CommandExecutionError"""

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    # ---- 只读 ----

    def fetch_catalog(self) -> Catalog:
        payload = self._list_modules({"all": True})
        try:
            return Catalog.from_payload(payload)
        except ValueError as e:
            raise CatalogFetchError(f"获取模块列表失败: 响应格式错误 - {e}") from e

    def fetch_installed(self, alias: str) -> InstalledSet:
        payload = self._list_modules({"installed": True, "dbAlias": alias})
        try:
            return InstalledSet.from_payload(payload)
        except ValueError as e:
            raise CatalogFetchError(f"获取已安装模块失败: 响应格式错误 - {e}") from e

    def fetch_snapshot(self, alias: str) -> tuple[Catalog, InstalledSet]:
        """并发拉取全部清单与已安装列表，任一失败则整体失败"""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="catalog") as pool:
            catalog_future = pool.submit(self.fetch_catalog)
            installed_future = pool.submit(self.fetch_installed, alias)
            # 两个请求都结束后再取结果，清单失败优先报告
            catalog_exc = catalog_future.exception()
            installed_exc = installed_future.exception()
        if catalog_exc is not None:
            raise catalog_exc
        if installed_exc is not None:
            raise installed_exc
        catalog = catalog_future.result()
        installed = installed_future.result()
        logger.info(
            "模块快照: 共 %d 个模块, %s 已安装 %d 个",
            len(catalog), alias, len(installed),
        )
        return catalog, installed

    def list_databases(self) -> list[str]:
        try:
            payload = self.api.post("db/list", {})
        except ServiceError as e:
            raise CatalogFetchError(f"获取数据库列表失败: {e.message}") from e
        aliases: list[str] = []
        for item in payload or []:
            if isinstance(item, dict):
                item = item.get("alias") or item.get("name") or ""
            if item:
                aliases.append(str(item))
        return aliases

    def _list_modules(self, body: dict[str, Any]) -> list[Any]:
        try:
            payload = self.api.post("module/list", body)
        except ServiceError as e:
            raise CatalogFetchError(f"获取模块列表失败: {e.message}") from e
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise CatalogFetchError(
                f"获取模块列表失败: 响应不是数组 ({type(payload).__name__})",
            )
        return payload

    # ---- 写操作 ----

    def install_modules(self, alias: str, names: Sequence[str]) -> None:
        self._mutate("module/install", alias, names, "安装模块失败")

    def remove_modules(self, alias: str, names: Sequence[str]) -> None:
        self._mutate("module/remove", alias, names, "卸载模块失败")

    def _mutate(self, path: str, alias: str, names: Sequence[str], label: str) -> None:
        logger.info("POST %s", path, extra={"db": alias, "modules": list(names)})
        try:
            self.api.post(path, {"list": list(names), "dbAlias": alias})
        except ServiceError as e:
            raise CommandExecutionError(f"{label}: {e.message}") from e
