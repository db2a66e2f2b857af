"""索引重建引擎核心工具类."""

from __future__ import annotations

import logging
import threading
from typing import Any

from ..backends.base import IndexBackend
from ..bulk import BulkWriter
from ..exceptions import IndexFlowError
from ..naming import IndexNaming
from ..typing import BatchCallback, TestCallback
from .exceptions import (
    BuildCancelledError,
    BuildInProgressError,
    ValidationFailedError,
)
from .loader import BatchLoader, BatchSource, as_batch_source
from .models import (
    BackupListing,
    BuildMode,
    BuildReport,
    IndexerConfig,
    RestoreConfig,
)
from .restore import BackupLister, RestoreEngine
from .retention import RetentionManager
from .swapper import AliasSwapper
from .validator import Validator

logger = logging.getLogger(__name__)


class IndexRebuilder:
    """零停机索引重建引擎.

    在后台写满一个新的候选索引，校验通过后把别名原子地切换过去，并按保留数量
    清理旧的代际索引。阶段严格串行：创建 -> 写入 -> 校验 -> 切换 -> 清理。

    同一进程内每个别名同时只允许一个构建；stop() 设置的停止标志只在批次之间
    和切换之前检查。不同进程之间没有任何协调。

    Args:
        backend: 索引后端，客户端生命周期由调用方管理
        naming: 索引命名工具，默认使用 UTC 当前时间

    Example:
        >>> rebuilder = IndexRebuilder(ElasticsearchBackend(es_client))
        >>> config = IndexerConfig(alias="articles")
        >>> report = rebuilder.build(
        ...     config, lambda offset, config, report: [] if offset else [{"id": 1}]
        ... )
        >>> report.to_dict()["succeeded"]
        True
    """

    def __init__(self, backend: IndexBackend, naming: IndexNaming | None = None):
        if backend is None:
            raise ValueError("backend 不能为 None")
        self.backend = backend
        self.naming = naming or IndexNaming()
        self.loader = BatchLoader(BulkWriter(backend))
        self.validator = Validator()
        self.swapper = AliasSwapper(backend, self.naming)
        self.retention = RetentionManager(backend, self.naming)
        self.restorer = RestoreEngine(backend, self.naming, self.swapper)
        self.lister = BackupLister(backend, self.naming)
        self._in_process: dict[str, bool] = {}
        self._lock = threading.Lock()

    # ==================== 进程内构建标志 ====================

    def _acquire(self, alias: str) -> None:
        with self._lock:
            if alias in self._in_process:
                raise BuildInProgressError(f"别名 '{alias}' 已有构建正在运行")
            self._in_process[alias] = True

    def _release(self, alias: str) -> None:
        with self._lock:
            self._in_process.pop(alias, None)

    def _should_continue(self, alias: str) -> bool:
        with self._lock:
            return self._in_process.get(alias, False)

    def is_running(self, alias: str) -> bool:
        """判断别名是否有构建正在运行."""
        with self._lock:
            return alias in self._in_process

    def stop(self, alias: str) -> bool:
        """请求停止别名的构建.

        构建会在下一个阶段边界（下一批开始前或切换前）停止，候选索引保留。

        Returns:
            是否有正在运行的构建收到了停止请求
        """
        with self._lock:
            if alias not in self._in_process:
                return False
            self._in_process[alias] = False
        logger.info(f"已请求停止别名 '{alias}' 的构建")
        return True

    # ==================== 构建 ====================

    def current_index(self, alias: str) -> str | None:
        """返回别名当前指向的索引，指向多个时取最新的一个."""
        targets = self.backend.get_alias_targets(alias)
        if not targets:
            return None
        return self.naming.sort_indices(targets, alias)[0]

    def _prepare_index(self, config: IndexerConfig) -> BuildMode:
        """根据构建模式准备本次写入的索引，返回实际使用的模式."""
        current = self.current_index(config.alias)
        mode = config.mode

        if mode in (BuildMode.CLONE, BuildMode.SYNC) and current is None:
            logger.info(
                f"别名 '{config.alias}' 当前未指向任何索引，{mode.value} 模式回退为 new"
            )
            mode = BuildMode.NEW

        if mode is BuildMode.SYNC:
            config.index_name = current
            logger.info(f"[index mode] sync: alias='{config.alias}', index='{current}'")
            return mode

        config.index_name = self.naming.derive_candidate_name(config.alias)
        self.backend.create_index(config.index_name, config.mappings, config.settings)

        if mode is BuildMode.CLONE:
            self.backend.copy_index(current, config.index_name)
            logger.info(
                f"[index mode] clone: alias='{config.alias}', "
                f"index='{config.index_name}', source='{current}'"
            )
        else:
            logger.info(
                f"[index mode] create: alias='{config.alias}', index='{config.index_name}'"
            )
        return mode

    def _run_build(
        self, config: IndexerConfig, source: BatchSource, report: BuildReport
    ) -> None:
        mode = self._prepare_index(config)
        report.using_index = config.index_name

        totals = self.loader.run(
            config.index_name,
            config,
            report,
            source,
            should_continue=lambda: self._should_continue(config.alias),
        )
        logger.info(
            f"数据写入完成: alias='{config.alias}', index='{config.index_name}', "
            f"total={totals.total}, success={totals.success}, failed={totals.failed}, "
            f"deleted={totals.deleted}"
        )

        try:
            self.validator.validate(source, config, report)
        except ValidationFailedError:
            return

        # sync 模式直接写入活动索引，没有需要切换的候选索引
        if mode is BuildMode.SYNC:
            report.succeeded = True
            return

        if not self._should_continue(config.alias):
            raise BuildCancelledError(f"别名 '{config.alias}' 的构建在切换前停止")

        report.remove_aliases = self.swapper.swap(config.alias, config.index_name)

        report.keep_indices, report.remove_indices = self.retention.prune(
            config.alias, config.keep_count, exclude=[config.index_name]
        )
        report.succeeded = True

    def build(
        self,
        config: IndexerConfig,
        source: BatchSource | BatchCallback,
        test_callback: TestCallback | None = None,
    ) -> BuildReport:
        """构建并上线新的索引.

        Args:
            config: 索引器配置，config.index_name 会被设置为本次使用的索引
            source: 实现 BatchSource 的对象，或批次回调函数
                    ``(offset, config, report) -> list[dict] | None``
            test_callback: 校验回调 ``(config, report) -> bool | None``，
                           仅在 source 为函数时使用

        Returns:
            构建报告。报告 succeeded 为 True 表示全部阶段完成；失败原因记录在
            general_error、testing_error 或 insertData 中。
        """
        source = as_batch_source(source, test_callback)
        report = BuildReport()

        try:
            self._acquire(config.alias)
        except BuildInProgressError as e:
            report.general_error = str(e)
            logger.error(f"构建被拒绝: {str(e)}")
            return report

        try:
            self._run_build(config, source, report)
        except IndexFlowError as e:
            report.general_error = str(e)
            logger.error(
                f"构建失败: alias='{config.alias}', index='{config.index_name}', "
                f"error={str(e)}"
            )
        finally:
            self._release(config.alias)

        if report.succeeded:
            logger.info(
                f"构建完成: alias='{config.alias}', index='{config.index_name}'"
            )
        return report

    # ==================== 恢复与备份 ====================

    def restore(self, config: RestoreConfig) -> bool:
        """将别名切回指定备份，详见 RestoreEngine.restore."""
        return self.restorer.restore(config)

    def list_backups(self, alias: str) -> BackupListing:
        """列出别名的全部代际索引和活动索引."""
        return self.lister.list_backups(alias)

    def search(
        self,
        index_name: str,
        text: str = "*",
        from_: int = 0,
        size: int = 100,
    ) -> dict[str, Any]:
        """按名称查询任意索引或别名，可用于检查尚未上线的候选索引."""
        return self.backend.search(index_name, text=text, from_=from_, size=size)
