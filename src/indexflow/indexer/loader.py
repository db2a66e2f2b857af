"""批次加载模块.

批次循环是显式的迭代状态机：LOAD -> WRITE -> (LOAD | DONE | FAILED)。
下一批只会在上一批写入完成后才请求，任意时刻最多只有一批在处理中。
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable
from collections.abc import Callable

from ..bulk import BulkWriter
from ..bulk.models import BulkResult
from ..exceptions import BackendUnavailableError
from ..typing import BatchCallback, RecordBatch, TestCallback
from .exceptions import BatchCallbackError, BuildCancelledError
from .models import BuildReport, IndexerConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class BatchSource(Protocol):
    """数据源接口.

    next_batch 返回下一页记录，返回 None 或空列表表示数据已加载完毕，抛出异常
    表示失败。validate 返回 None/True 表示通过，返回 False 或抛出异常表示拒绝。
    """

    def next_batch(
        self, offset: int, config: IndexerConfig, report: BuildReport
    ) -> RecordBatch: ...

    def validate(self, config: IndexerConfig, report: BuildReport) -> Any: ...


class CallbackSource:
    """用普通函数构造的数据源.

    Args:
        batch_callback: (offset, config, report) -> 记录列表
        test_callback: (config, report) -> 校验结果，None 表示不校验
    """

    def __init__(
        self,
        batch_callback: BatchCallback,
        test_callback: TestCallback | None = None,
    ):
        if not callable(batch_callback):
            raise TypeError("batch_callback 必须是可调用对象")
        self._batch_callback = batch_callback
        self._test_callback = test_callback

    def next_batch(
        self, offset: int, config: IndexerConfig, report: BuildReport
    ) -> RecordBatch:
        return self._batch_callback(offset, config, report)

    def validate(self, config: IndexerConfig, report: BuildReport) -> Any:
        if self._test_callback is None:
            return None
        return self._test_callback(config, report)


def as_batch_source(
    source: BatchSource | BatchCallback,
    test_callback: TestCallback | None = None,
) -> BatchSource:
    """将函数或数据源对象统一为 BatchSource."""
    if isinstance(source, BatchSource):
        if test_callback is not None:
            raise TypeError("数据源对象已实现 validate，不能再传入 test_callback")
        return source
    return CallbackSource(source, test_callback)


class BatchLoader:
    """批次加载器.

    依次调用数据源获取记录并交给 BulkWriter 写入，直到数据源返回空批次。
    offset 是调用方定义的游标，引擎只按本批记录数向前推进。

    Args:
        writer: 批量写入工具
    """

    def __init__(self, writer: BulkWriter):
        self.writer = writer

    def run(
        self,
        index_name: str,
        config: IndexerConfig,
        report: BuildReport,
        source: BatchSource,
        should_continue: Callable[[], bool] | None = None,
    ) -> BulkResult:
        """执行批次循环.

        Args:
            index_name: 写入的索引名称
            config: 索引器配置
            report: 构建报告，每个 offset 的结果写入 report.insert_data
            source: 数据源
            should_continue: 每批开始前检查的停止标志，返回 False 时中止

        Returns:
            所有批次累计的写入结果

        Raises:
            BatchCallbackError: 数据源抛出异常时抛出
            BuildCancelledError: 收到停止请求时抛出
            BackendUnavailableError: 批量请求整体失败时抛出
        """
        offset = 0
        totals = BulkResult()

        while True:
            if should_continue is not None and not should_continue():
                raise BuildCancelledError(
                    f"别名 '{config.alias}' 的构建已在 offset={offset} 处停止"
                )

            entry = report.batch_entry(offset)

            # 加载
            try:
                records = source.next_batch(offset, config, report)
            except Exception as e:
                entry["callback_error"] = str(e) or type(e).__name__
                logger.error(
                    f"批次回调失败: alias='{config.alias}', index='{index_name}', "
                    f"offset={offset}, error={e!r}"
                )
                raise BatchCallbackError(
                    f"批次回调在 offset={offset} 处失败: {e}"
                ) from e

            records = list(records or [])
            entry["callback_succeeded"] = True
            logger.info(
                f"批次回调成功: alias='{config.alias}', index='{index_name}', "
                f"offset={offset}, count={len(records)}"
            )

            if not records:
                logger.info(
                    f"数据加载完毕: alias='{config.alias}', index='{index_name}', "
                    f"total={offset}"
                )
                return totals

            # 写入
            try:
                result = self.writer.write(index_name, records, config)
            except BackendUnavailableError as e:
                entry["inserting_errors"] = [str(e)]
                raise

            totals.merge(result)
            if result.is_success():
                entry["inserting_succeeded"] = True
            else:
                entry["inserting_errors"] = [error.to_dict() for error in result.errors]

            offset += len(records)
