"""CatalogClient 测试: 请求体、并发快照、错误映射"""

from __future__ import annotations

import threading
from typing import Any

import pytest

from modctl.core.catalog import CatalogClient
from modctl.core.exceptions import CatalogFetchError, CommandExecutionError, ServiceError

ALL = [
    {"name": "aws_account", "dependencies": []},
    {"name": "aws_vpc", "dependencies": ["aws_account"]},
]
INSTALLED = [{"name": "aws_account", "dependencies": []}]


class FakeApi:
    """记录请求体，按 body 返回预设响应"""

    def __init__(self, *, fail: dict[str, str] | None = None, barrier: threading.Barrier | None = None) -> None:
        self.fail = fail or {}
        self.barrier = barrier
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._lock = threading.Lock()

    def post(self, path: str, body: dict[str, Any]) -> Any:
        with self._lock:
            self.calls.append((path, body))
        if self.barrier is not None:
            self.barrier.wait()
        key = "installed" if body.get("installed") else "all" if body.get("all") else path
        if key in self.fail:
            raise ServiceError(self.fail[key], status=500)
        if path == "module/list":
            return ALL if body.get("all") else INSTALLED
        if path == "db/list":
            return ["dev", {"alias": "prod"}, ""]
        return None


class TestFetch:
    def test_fetch_catalog(self) -> None:
        api = FakeApi()
        catalog = CatalogClient(api).fetch_catalog()
        assert catalog.names() == ["aws_account", "aws_vpc"]
        assert api.calls == [("module/list", {"all": True})]

    def test_fetch_installed(self) -> None:
        api = FakeApi()
        installed = CatalogClient(api).fetch_installed("dev")
        assert installed.names() == ["aws_account"]
        assert api.calls == [("module/list", {"installed": True, "dbAlias": "dev"})]

    def test_snapshot_issues_both_reads_concurrently(self) -> None:
        """两个请求必须同时在途：串行执行时 barrier 会超时"""
        api = FakeApi(barrier=threading.Barrier(2, timeout=5))
        catalog, installed = CatalogClient(api).fetch_snapshot("dev")
        assert len(catalog) == 2 and installed.names() == ["aws_account"]
        assert len(api.calls) == 2

    @pytest.mark.parametrize(("fail", "expected"), [
        ({"all": "boom"}, "boom"),
        ({"installed": "no such db"}, "no such db"),
        ({"all": "catalog down", "installed": "db down"}, "catalog down"),
    ])
    def test_snapshot_failure(self, fail: dict[str, str], expected: str) -> None:
        client = CatalogClient(FakeApi(fail=fail))
        with pytest.raises(CatalogFetchError, match=expected):
            client.fetch_snapshot("dev")

    def test_non_list_payload(self) -> None:
        class DictApi:
            def post(self, path: str, body: dict[str, Any]) -> Any:
                return {"message": "ERROR"}

        with pytest.raises(CatalogFetchError, match="不是数组"):
            CatalogClient(DictApi()).fetch_catalog()

    @pytest.mark.parametrize("payload", [[{"dependencies": []}, 7], [None]])
    def test_malformed_item(self, payload: list[Any]) -> None:
        class BadItemApi:
            def post(self, path: str, body: dict[str, Any]) -> Any:
                return payload

        client = CatalogClient(BadItemApi())
        with pytest.raises(CatalogFetchError, match="响应格式错误"):
            client.fetch_catalog()
        with pytest.raises(CatalogFetchError, match="响应格式错误"):
            client.fetch_snapshot("dev")

    def test_list_databases(self) -> None:
        assert CatalogClient(FakeApi()).list_databases() == ["dev", "prod"]

    def test_list_databases_failure(self) -> None:
        with pytest.raises(CatalogFetchError, match="数据库列表"):
            CatalogClient(FakeApi(fail={"db/list": "denied"})).list_databases()


class TestMutations:
    def test_install_body(self) -> None:
        api = FakeApi()
        CatalogClient(api).install_modules("dev", ["aws_vpc", "aws_account"])
        assert api.calls == [
            ("module/install", {"list": ["aws_vpc", "aws_account"], "dbAlias": "dev"}),
        ]

    def test_remove_body(self) -> None:
        api = FakeApi()
        CatalogClient(api).remove_modules("dev", ("aws_vpc",))
        assert api.calls == [("module/remove", {"list": ["aws_vpc"], "dbAlias": "dev"})]

    def test_failure_carries_service_message(self) -> None:
        client = CatalogClient(FakeApi(fail={"module/remove": "table in use"}))
        with pytest.raises(CommandExecutionError, match="卸载模块失败: table in use"):
            client.remove_modules("dev", ["aws_vpc"])
