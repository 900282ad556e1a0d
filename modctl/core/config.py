"""集中配置管理

支持从 YAML 文件加载 + 环境变量覆盖 + 编程式覆盖。
查找顺序: --config 参数 > MODCTL_CONFIG 环境变量 > ~/.modctl/config.yml
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field

import yaml

from modctl.core.exceptions import ConfigError, ValidationError
from modctl.utils.net import validate_url_scheme
from modctl.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.modctl/config.yml"

# 环境变量 -> 配置字段
_ENV_OVERRIDES = {
    "MODCTL_SERVER_URL": "server_url",
    "MODCTL_API_TOKEN": "api_token",
    "MODCTL_TIMEOUT": "timeout",
}


@dataclass
class Config:
    """客户端全局配置"""

    # 服务端
    server_url: str = "http://localhost:8088"
    api_token: str = ""
    timeout: int = 30  # 单次请求超时（秒）

    # 行为
    transitive_dependencies: bool = False
    assume_yes: bool = False

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_PATH) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"读取配置文件失败: {path} - {e}") from e
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def apply_env(self, environ: dict[str, str] | None = None) -> Config:
        """用环境变量覆盖对应字段"""
        env = os.environ if environ is None else environ
        for var, attr in _ENV_OVERRIDES.items():
            value = env.get(var)
            if value:
                setattr(self, attr, value)
        return self

    def validate(self) -> Config:
        try:
            self.timeout = int(self.timeout)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"timeout 必须是整数: {self.timeout!r}") from e
        if self.timeout <= 0:
            raise ConfigError(f"timeout 必须大于 0: {self.timeout}")
        try:
            validate_url_scheme(self.server_url, context="server_url")
        except ValidationError as e:
            raise ConfigError(e.message) from e
        return self

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str | None = None) -> Config:
    """从文件 + 环境变量初始化全局配置"""
    global _current  # noqa: PLW0603
    path = path or os.getenv("MODCTL_CONFIG") or DEFAULT_CONFIG_PATH
    _current = Config.from_file(path).apply_env().validate()
    logger.info("配置已加载: %s (server=%s)", path, _current.server_url)
    return _current
