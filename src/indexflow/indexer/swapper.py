"""别名切换模块."""

import logging

from ..backends.base import AliasAction, IndexBackend
from ..exceptions import IndexFlowError
from ..naming import IndexNaming
from .exceptions import SwapError

logger = logging.getLogger(__name__)

# 重命名流程中活动集合的临时名称后缀，不符合代际命名约定，不会被保留策略清理
SWAP_SUFFIX = "__swap"


class AliasSwapper:
    """别名切换器.

    后端支持原生别名时，在一个 update_aliases 请求内把别名加到目标索引并从
    原索引移除，对读请求是原子的。

    后端只支持重命名时分三步完成：活动集合 -> 临时名称，目标 -> 别名，
    临时名称 -> 新的带时间戳名称。这三步之间没有原子性：第一步之后、第二步
    完成之前崩溃，别名名称不存在（读请求失败）；第二步之后、第三步之前崩溃，
    旧数据停留在 ``{alias}__swap``，需要人工改名。

    Args:
        backend: 索引后端
        naming: 索引命名工具
    """

    def __init__(self, backend: IndexBackend, naming: IndexNaming):
        self.backend = backend
        self.naming = naming

    def swap(self, alias: str, target_index: str) -> list[str]:
        """将别名指向目标索引.

        原来指向的索引不会被删除，成为受保留策略管理的备份。

        Args:
            alias: 别名名称
            target_index: 目标索引名称

        Returns:
            别名被移除的索引名称列表

        Raises:
            SwapError: 切换失败时抛出
        """
        if self.backend.supports_aliases:
            return self._swap_alias(alias, target_index)
        return self._swap_rename(alias, target_index)

    def _swap_alias(self, alias: str, target_index: str) -> list[str]:
        try:
            current = self.backend.get_alias_targets(alias)
            removed = [index for index in current if index != target_index]
            actions = [AliasAction.add(target_index, alias)]
            actions.extend(AliasAction.remove(index, alias) for index in removed)
            self.backend.update_aliases(actions)
        except IndexFlowError as e:
            raise SwapError(
                f"别名 '{alias}' 切换到 '{target_index}' 失败: {str(e)}"
            ) from e

        logger.info(
            f"别名切换成功: alias='{alias}', index='{target_index}', "
            f"removeAliases={removed}"
        )
        return removed

    def _swap_rename(self, alias: str, target_index: str) -> list[str]:
        if target_index == alias:
            return []

        temp_name = f"{alias}{SWAP_SUFFIX}"
        step = "读取当前集合"
        try:
            has_active = bool(self.backend.get_alias_targets(alias))
            backup_name = None

            if has_active:
                step = f"'{alias}' -> '{temp_name}'"
                self.backend.rename_index(alias, temp_name)

            step = f"'{target_index}' -> '{alias}'"
            self.backend.rename_index(target_index, alias)

            if has_active:
                backup_name = self.naming.derive_candidate_name(alias)
                step = f"'{temp_name}' -> '{backup_name}'"
                self.backend.rename_index(temp_name, backup_name)
        except (IndexFlowError, NotImplementedError) as e:
            logger.error(
                f"重命名切换在步骤 {step} 失败，别名 '{alias}' 可能未绑定或旧数据"
                f"停留在 '{temp_name}': {str(e)}"
            )
            raise SwapError(f"别名 '{alias}' 重命名切换在步骤 {step} 失败: {str(e)}") from e

        removed = [backup_name] if backup_name else []
        logger.info(
            f"重命名切换成功: alias='{alias}', index='{target_index}', "
            f"removeAliases={removed}"
        )
        return removed
