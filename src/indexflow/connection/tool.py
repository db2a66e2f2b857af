"""ES 客户端工厂工具模块.

客户端的生命周期由调用方持有：引擎的每个入口都显式接收客户端（或基于它的后端），
模块内不保存任何全局单例。

使用示例:
    from indexflow.connection import ESClientFactory, ConnectionConfig

    with ESClientFactory(ConnectionConfig(hosts=["http://localhost:9200"])) as factory:
        client = factory.get_client()
"""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch

from .models import ConnectionConfig

logger = logging.getLogger(__name__)


class ESClientFactory:
    """Elasticsearch 客户端工厂.

    惰性创建并缓存单个客户端，退出上下文管理器时关闭。

    Examples:
        >>> factory = ESClientFactory(ConnectionConfig(hosts=["http://localhost:9200"]))
        >>> client = factory.get_client()
        >>> factory.close()
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self._config = config
        self._client: Elasticsearch | None = None

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def _create_client(self) -> Elasticsearch:
        """根据连接配置创建 Elasticsearch 客户端实例."""
        config = self._config
        kwargs: dict = {
            "hosts": config.hosts,
            "max_retries": config.max_retries,
            "retry_on_timeout": config.retry_on_timeout,
            "request_timeout": config.request_timeout,
        }

        # Basic Auth 认证
        if config.username and config.password:
            kwargs["basic_auth"] = (config.username, config.password)

        # API Key 认证
        if config.api_key:
            kwargs["api_key"] = config.api_key

        # Bearer Token 认证
        if config.bearer_token:
            kwargs["bearer_auth"] = config.bearer_token

        if config.ca_certs:
            kwargs["ca_certs"] = config.ca_certs
        kwargs["verify_certs"] = config.verify_certs

        logger.info(f"创建 Elasticsearch 客户端: hosts={config.hosts}")
        return Elasticsearch(**kwargs)

    def get_client(self) -> Elasticsearch:
        """获取客户端，首次调用时创建."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def __enter__(self) -> ESClientFactory:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """关闭已创建的客户端并清空缓存，之后可再次调用 get_client()."""
        if self._client is None:
            return
        try:
            self._client.close()
        except Exception as e:
            logger.warning(f"关闭 Elasticsearch 客户端失败: {str(e)}")
        self._client = None
