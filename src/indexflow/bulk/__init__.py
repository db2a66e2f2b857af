"""批量写入模块.

将一批记录转换为针对候选索引的批量操作：未标记删除的记录按主键 upsert，
带删除标记（tombstone）的记录按主键删除。每一批记录只提交一次批量请求。

示例用法:
    >>> from indexflow.bulk import BulkWriter
    >>> writer = BulkWriter(backend)
    >>> result = writer.write("articles---18.10.2026_14-05-09", records, config)
    >>> print(f"成功: {result.success}, 失败: {result.failed}")
"""

from .exceptions import BulkOperationError
from .models import (
    BulkAction,
    BulkErrorItem,
    BulkOperation,
    BulkResult,
)
from .tool import BulkWriter

__all__ = [
    "BulkAction",
    "BulkErrorItem",
    "BulkOperation",
    "BulkResult",
    "BulkWriter",
    "BulkOperationError",
]
