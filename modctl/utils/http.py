"""模块服务 HTTP 客户端

所有接口均为 POST + JSON，路径相对于 {server_url}/v1/。
服务端出错时返回 {"message": "..."}，统一转换为 ServiceError。
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any

from modctl.core.exceptions import ServiceError
from modctl.utils.net import join_url, validate_url_scheme

logger = logging.getLogger(__name__)

API_PREFIX = "v1"


class ApiClient:
    """基于 urllib 的轻量 JSON 客户端"""

    def __init__(self, base_url: str, *, token: str = "", timeout: int = 30) -> None:
        validate_url_scheme(base_url, context="server_url")
        self.base_url = base_url
        self.token = token
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        return join_url(self.base_url, API_PREFIX, path)

    def post(self, path: str, body: dict[str, Any]) -> Any:
        """POST JSON，返回解析后的响应体；空响应返回 None

        Raises:
            ServiceError: 网络错误、HTTP 错误或响应不是合法 JSON
        """
        url = self.url_for(path)
        data = json.dumps(body, ensure_ascii=False).encode("utf-8")
        req = urllib.request.Request(
            url, data=data, method="POST",
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        if self.token:
            req.add_header("Authorization", f"Bearer {self.token}")

        logger.debug("POST %s %s", url, body)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            message = _error_message(e.read().decode("utf-8", errors="replace"))
            raise ServiceError(message or f"HTTP 错误 {e.code}: {e.reason}", status=e.code) from e
        except urllib.error.URLError as e:
            raise ServiceError(f"网络错误: {e.reason}") from e
        except OSError as e:
            raise ServiceError(f"网络错误: {e}") from e

        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ServiceError(f"响应格式错误: {e}") from e


def _error_message(raw: str) -> str:
    """从错误响应体中提取 message 字段，非 JSON 时返回原文"""
    raw = raw.strip()
    if not raw:
        return ""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return raw[:500]
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    if isinstance(data, str):
        return data
    return raw[:500]
