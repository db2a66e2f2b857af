"""indexflow - Zero-downtime index rebuild engine for Elasticsearch.

在后台构建新的索引，校验后原子地切换别名，支持回滚到历史备份和按保留数量
清理旧索引。

主要功能:
    - IndexRebuilder: 构建 / 停止 / 恢复 / 列出备份
    - ElasticsearchBackend: 基于 Elasticsearch 原生别名的后端
    - ESClientFactory: 由调用方持有的客户端工厂

使用示例:
    from elasticsearch import Elasticsearch
    from indexflow import ElasticsearchBackend, IndexRebuilder, IndexerConfig

    rebuilder = IndexRebuilder(ElasticsearchBackend(Elasticsearch("http://localhost:9200")))
    report = rebuilder.build(IndexerConfig(alias="articles"), next_batch)
"""

__version__ = "0.1.0"

# 导出后端
from indexflow.backends import AliasAction, ElasticsearchBackend, IndexBackend

# 导出连接工具
from indexflow.connection import ConnectionConfig, ESClientFactory

# 导出异常
from indexflow.exceptions import BackendUnavailableError, ConfigError, IndexFlowError

# 导出引擎
from indexflow.indexer import (
    BackupListing,
    BatchCallbackError,
    BatchSource,
    BuildCancelledError,
    BuildInProgressError,
    BuildMode,
    BuildReport,
    IndexerConfig,
    IndexRebuilder,
    PruneError,
    RestoreConfig,
    SwapError,
    ValidationFailedError,
)

# 导出命名工具
from indexflow.naming import IndexNaming

__all__ = [
    # 版本
    "__version__",
    # 引擎
    "IndexRebuilder",
    "IndexerConfig",
    "RestoreConfig",
    "BuildMode",
    "BuildReport",
    "BackupListing",
    "BatchSource",
    # 命名
    "IndexNaming",
    # 后端
    "IndexBackend",
    "ElasticsearchBackend",
    "AliasAction",
    # 连接
    "ConnectionConfig",
    "ESClientFactory",
    # 异常
    "IndexFlowError",
    "ConfigError",
    "BackendUnavailableError",
    "BatchCallbackError",
    "ValidationFailedError",
    "SwapError",
    "PruneError",
    "BuildInProgressError",
    "BuildCancelledError",
]
