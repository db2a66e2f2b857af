"""零停机索引重建模块.

在后台写满新的候选索引，校验后原子地切换别名（蓝绿部署），并提供恢复历史
备份、列出备份以及按保留数量清理旧索引的功能。

示例用法:
    >>> from indexflow.backends import ElasticsearchBackend
    >>> from indexflow.indexer import IndexRebuilder, IndexerConfig, RestoreConfig
    >>> rebuilder = IndexRebuilder(ElasticsearchBackend(es_client))
    >>> def next_batch(offset, config, report):
    ...     return fetch_articles(offset=offset, limit=500)
    >>> report = rebuilder.build(IndexerConfig(alias="articles"), next_batch)
    >>> print(report.to_dict())
    >>> rebuilder.restore(RestoreConfig(alias="articles", backup_ordinal=1))
"""

from .exceptions import (
    BatchCallbackError,
    BuildCancelledError,
    BuildInProgressError,
    PruneError,
    SwapError,
    ValidationFailedError,
)
from .loader import BatchLoader, BatchSource, CallbackSource, as_batch_source
from .models import (
    BackupListing,
    BuildMode,
    BuildReport,
    IndexerConfig,
    RestoreConfig,
)
from .restore import BackupLister, RestoreEngine
from .retention import RetentionManager
from .swapper import SWAP_SUFFIX, AliasSwapper
from .tool import IndexRebuilder
from .validator import Validator

__all__ = [
    # 核心类
    "IndexRebuilder",
    # 组件
    "BatchLoader",
    "BatchSource",
    "CallbackSource",
    "as_batch_source",
    "Validator",
    "AliasSwapper",
    "SWAP_SUFFIX",
    "RetentionManager",
    "RestoreEngine",
    "BackupLister",
    # 数据模型
    "BuildMode",
    "IndexerConfig",
    "RestoreConfig",
    "BuildReport",
    "BackupListing",
    # 异常类
    "BatchCallbackError",
    "ValidationFailedError",
    "SwapError",
    "PruneError",
    "BuildInProgressError",
    "BuildCancelledError",
]
