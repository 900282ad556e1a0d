"""统一异常体系

所有业务异常继承 ModCtlError，由 CLI 顶层统一输出并设置退出码。
UserAbort 不属于错误：空选择、拒绝确认等情况以成功状态退出。
"""

from __future__ import annotations


class ModCtlError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(ModCtlError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(ModCtlError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ServiceError(ModCtlError):
    """远程服务调用失败（网络错误或服务端返回错误）"""

    code = "SERVICE_ERROR"

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class CatalogFetchError(ModCtlError):
    """拉取模块清单失败"""

    code = "CATALOG_FETCH_ERROR"


class CommandExecutionError(ModCtlError):
    """安装 / 卸载调用在服务端失败"""

    code = "COMMAND_EXECUTION_ERROR"


class DatabaseNotFound(ModCtlError):
    """指定的数据库别名不存在"""

    code = "DATABASE_NOT_FOUND"

    def __init__(self, alias: str) -> None:
        super().__init__(f"不存在名为 {alias} 的数据库")
        self.alias = alias


# =========================================================================
# 模块校验异常
# =========================================================================


class ModuleValidationError(ModCtlError):
    """模块选择校验失败"""

    code = "MODULE_VALIDATION_ERROR"


class ModuleNotFound(ModuleValidationError):
    code = "MODULE_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"不存在名为 {name} 的模块")
        self.name = name


class ModuleNotInstalled(ModuleValidationError):
    code = "MODULE_NOT_INSTALLED"

    def __init__(self, name: str) -> None:
        super().__init__(f"模块 {name} 未安装")
        self.name = name


class ModuleAlreadyInstalled(ModuleValidationError):
    code = "MODULE_ALREADY_INSTALLED"

    def __init__(self, name: str) -> None:
        super().__init__(f"模块 {name} 已安装")
        self.name = name


class ModuleStillDepended(ModuleValidationError):
    """待卸载模块仍被剩余的已安装模块依赖"""

    code = "MODULE_STILL_DEPENDED"

    def __init__(self, dependency: str, dependent: str) -> None:
        super().__init__(f"模块 {dependent} 依赖模块 {dependency}，无法卸载")
        self.dependency = dependency
        self.dependent = dependent


class DependencyCycleError(ModuleValidationError):
    """依赖闭包计算时发现循环依赖"""

    code = "DEPENDENCY_CYCLE"

    def __init__(self, path: list[str]) -> None:
        super().__init__(f"检测到循环依赖: {' -> '.join(path)}")
        self.path = list(path)


# =========================================================================
# 良性中止（非错误）
# =========================================================================


class UserAbort(Exception):
    """用户取消或无事可做，以退出码 0 结束"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NothingToDo(UserAbort):
    """没有可卸载 / 可安装的模块"""
