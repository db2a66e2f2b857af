"""批量写入核心工具类."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from .models import BulkAction, BulkOperation, BulkResult

if TYPE_CHECKING:
    from ..backends.base import IndexBackend
    from ..indexer.models import IndexerConfig
    from ..typing import Record

logger = logging.getLogger(__name__)


class BulkWriter:
    """批量写入工具.

    把一页记录翻译为批量操作并通过后端一次性提交。单条文档的失败只记录在
    结果中，不会中断调用方的批次循环；整个批量请求失败时由后端抛出
    BackendUnavailableError。

    Args:
        backend: 索引后端实例
    """

    def __init__(self, backend: IndexBackend):
        self.backend = backend

    @staticmethod
    def is_tombstone(record: Record, config: IndexerConfig) -> bool:
        """判断记录是否为删除标记."""
        return bool(record.get(config.tombstone_field))

    def build_operations(
        self,
        index_name: str,
        records: list[Record],
        config: IndexerConfig,
    ) -> tuple[list[BulkOperation], BulkResult]:
        """将记录转换为批量操作.

        Args:
            index_name: 目标索引名称
            records: 一批记录
            config: 索引器配置（主键字段、删除标记字段、批量元数据）

        Returns:
            元组：(批量操作列表, 预处理结果)。缺少主键的记录无法按主键写入或删除，
            作为失败项记录在预处理结果中。
        """
        operations: list[BulkOperation] = []
        prepared = BulkResult(total=len(records))
        metadata: dict[str, Any] = dict(config.bulk_options or {})

        for record in records:
            key = record.get(config.key_field)
            doc_id = str(key) if key is not None else None
            action = (
                BulkAction.DELETE
                if self.is_tombstone(record, config)
                else BulkAction.INDEX
            )

            # 没有主键就无法按主键 upsert 或删除
            if doc_id is None:
                prepared.add_error(
                    index_name=index_name,
                    doc_id=None,
                    error_type="missing_key",
                    error_reason=f"记录缺少主键字段 '{config.key_field}'",
                    status=400,
                    operation=action,
                )
                continue

            operations.append(
                BulkOperation(
                    action=action,
                    index_name=index_name,
                    doc_id=doc_id,
                    source=record if action == BulkAction.INDEX else None,
                    metadata=metadata,
                )
            )

        return operations, prepared

    def write(
        self,
        index_name: str,
        records: list[Record],
        config: IndexerConfig,
    ) -> BulkResult:
        """将一批记录写入索引，整批只提交一次批量请求.

        Args:
            index_name: 目标索引名称
            records: 一批记录
            config: 索引器配置

        Returns:
            批量写入结果

        Raises:
            BackendUnavailableError: 批量请求整体失败时抛出
        """
        start_time = time.time()
        operations, result = self.build_operations(index_name, records, config)

        if operations:
            response = self.backend.bulk(operations, refresh=config.refresh)
            result.success += response.success
            result.failed += response.failed
            result.created += response.created
            result.updated += response.updated
            result.deleted += response.deleted
            result.errors.extend(response.errors)

        result.took = time.time() - start_time

        if result.failed > 0:
            logger.warning(
                f"索引 '{index_name}' 批量写入: 成功 {result.success}, 失败 {result.failed}"
            )
        else:
            logger.info(
                f"索引 '{index_name}' 批量写入全部成功: "
                f"created={result.created}, updated={result.updated}, "
                f"deleted={result.deleted}"
            )
        return result
