"""ES 客户端连接模块 - 由调用方持有 Elasticsearch 客户端的创建与关闭.

主要组件:
    - ESClientFactory: 惰性创建并缓存客户端，支持上下文管理器
    - ConnectionConfig: 连接配置模型，支持从环境变量加载

使用示例:
    from indexflow.connection import ESClientFactory, ConnectionConfig

    with ESClientFactory(ConnectionConfig.from_env()) as factory:
        client = factory.get_client()
"""

from .exceptions import ConnectionConfigError
from .models import ConnectionConfig
from .tool import ESClientFactory

__all__ = [
    "ESClientFactory",
    "ConnectionConfig",
    "ConnectionConfigError",
]
