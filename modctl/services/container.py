"""服务容器 — 统一依赖注入

CLI 通过 get_container() 获取服务，测试中可用 reset_container() 清理，
或直接构造 ServiceContainer(config=..., prompter=...)。

依赖关系图（→ 表示依赖）:
  modules → catalog → api

用法:
    container = ServiceContainer()
    svc = container.modules        # 懒加载
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modctl.core.catalog import CatalogClient
    from modctl.core.config import Config
    from modctl.core.protocols import ModuleBackend, Prompter
    from modctl.services.module_service import ModuleService
    from modctl.utils.http import ApiClient

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器 — 每个实例持有一组共享的服务"""

    def __init__(
        self,
        config: Config | None = None,
        prompter: Prompter | None = None,
        backend: ModuleBackend | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from modctl.core.config import get_config
            config = get_config()
        self._config = config
        self._prompter = prompter
        if backend is not None:
            self._instances["catalog"] = backend

    @property
    def config(self) -> Config:
        return self._config

    @property
    def api(self) -> ApiClient:
        if "api" not in self._instances:
            from modctl.utils.http import ApiClient
            self._instances["api"] = ApiClient(
                self._config.server_url,
                token=self._config.api_token,
                timeout=self._config.timeout,
            )
        return self._instances["api"]  # type: ignore[return-value]

    @property
    def catalog(self) -> CatalogClient:
        if "catalog" not in self._instances:
            from modctl.core.catalog import CatalogClient
            self._instances["catalog"] = CatalogClient(self.api)
        return self._instances["catalog"]  # type: ignore[return-value]

    @property
    def modules(self) -> ModuleService:
        if "modules" not in self._instances:
            from modctl.services.module_service import ModuleService
            self._instances["modules"] = ModuleService(
                self.catalog,
                self._prompter,
                transitive=self._config.transitive_dependencies,
                assume_yes=self._config.assume_yes,
            )
        return self._instances["modules"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def set_container(container: ServiceContainer) -> None:
    """替换全局容器（CLI 入口 / 测试使用）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = container


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
