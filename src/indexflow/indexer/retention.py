"""备份保留策略模块."""

import logging
from collections.abc import Iterable

from ..backends.base import IndexBackend
from ..exceptions import IndexFlowError
from ..naming import IndexNaming
from .exceptions import PruneError

logger = logging.getLogger(__name__)


class RetentionManager:
    """按命名约定清理过期备份.

    列出所有符合 ``{alias}---*`` 的索引，排除活动索引后按时间由新到旧排序，
    保留前 keep_count 个，删除其余。单个索引删除失败只记录，不影响其他索引。

    Args:
        backend: 索引后端
        naming: 索引命名工具
    """

    def __init__(self, backend: IndexBackend, naming: IndexNaming):
        self.backend = backend
        self.naming = naming

    def _delete(self, index_name: str) -> None:
        try:
            if not self.backend.delete_index(index_name):
                logger.warning(f"备份 '{index_name}' 不存在或未确认删除")
        except IndexFlowError as e:
            raise PruneError(f"删除备份 '{index_name}' 失败: {str(e)}") from e

    def prune(
        self,
        alias: str,
        keep_count: int,
        exclude: Iterable[str] = (),
    ) -> tuple[list[str], dict[str, bool | str]]:
        """清理过期备份.

        Args:
            alias: 别名名称
            keep_count: 保留的备份数量
            exclude: 不参与排序和清理的索引（活动索引）

        Returns:
            元组：(保留的索引列表, {被删除的索引: True 或错误信息})
        """
        excluded = set(exclude)
        candidates = [
            name
            for name in self.backend.list_indices(self.naming.index_pattern(alias))
            if self.naming.is_generation(name, alias) and name not in excluded
        ]
        ranked = self.naming.sort_indices(candidates, alias)
        keep_indices = ranked[:keep_count]
        remove_indices: dict[str, bool | str] = {}

        for index_name in ranked[keep_count:]:
            try:
                self._delete(index_name)
                remove_indices[index_name] = True
                logger.info(
                    f"清理备份成功: alias='{alias}', index='{index_name}', "
                    f"keepIndices={keep_indices}"
                )
            except PruneError as e:
                remove_indices[index_name] = str(e)
                logger.error(
                    f"清理备份失败: alias='{alias}', index='{index_name}', "
                    f"keepIndices={keep_indices}, error={str(e)}"
                )

        return keep_indices, remove_indices
