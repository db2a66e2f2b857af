"""ES 客户端连接数据模型定义模块."""

import os
from dataclasses import dataclass, field

from .exceptions import ConnectionConfigError

# 环境变量名称
ENV_URL = "ELASTICSEARCH_URL"
ENV_USERNAME = "ELASTICSEARCH_USERNAME"
ENV_PASSWORD = "ELASTICSEARCH_PASSWORD"
ENV_API_KEY = "ELASTICSEARCH_API_KEY"
ENV_CA_CERTS = "ELASTICSEARCH_CA_CERTS"


@dataclass
class ConnectionConfig:
    """Elasticsearch 连接配置模型.

    Attributes:
        hosts: ES 节点地址列表（必需，不可为空）
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        max_retries: 客户端传输层最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 True

    Raises:
        ConnectionConfigError: 当参数不合法时抛出

    Examples:
        >>> config = ConnectionConfig(hosts=["http://localhost:9200"])
    """

    hosts: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True
    request_timeout: int = 30
    max_retries: int = 3
    retry_on_timeout: bool = True

    def __post_init__(self) -> None:
        """校验连接配置参数合法性."""
        if not self.hosts:
            raise ConnectionConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")
        if self.request_timeout < 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
        if self.max_retries < 0:
            raise ConnectionConfigError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )

    @classmethod
    def from_env(cls, **overrides) -> "ConnectionConfig":
        """从环境变量加载连接配置.

        环境变量:
            ELASTICSEARCH_URL: 节点地址，多个地址用逗号分隔（必需）
            ELASTICSEARCH_USERNAME / ELASTICSEARCH_PASSWORD: Basic Auth
            ELASTICSEARCH_API_KEY: API Key
            ELASTICSEARCH_CA_CERTS: CA 证书路径

        Args:
            **overrides: 覆盖环境变量的字段值

        Returns:
            ConnectionConfig 实例

        Raises:
            ConnectionConfigError: 未设置 ELASTICSEARCH_URL 且未通过 overrides 提供 hosts
        """
        raw_url = os.getenv(ENV_URL, "")
        hosts = [host.strip() for host in raw_url.split(",") if host.strip()]

        values = {
            "hosts": hosts,
            "username": os.getenv(ENV_USERNAME),
            "password": os.getenv(ENV_PASSWORD),
            "api_key": os.getenv(ENV_API_KEY),
            "ca_certs": os.getenv(ENV_CA_CERTS),
        }
        values.update(overrides)
        if not values["hosts"]:
            raise ConnectionConfigError(f"缺少环境变量 {ENV_URL}")
        return cls(**values)
