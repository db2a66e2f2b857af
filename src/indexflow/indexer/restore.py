"""备份恢复与备份列表模块."""

import logging

from ..backends.base import IndexBackend
from ..exceptions import IndexFlowError
from ..naming import IndexNaming
from .models import BackupListing, RestoreConfig
from .swapper import AliasSwapper

logger = logging.getLogger(__name__)


class BackupLister:
    """列出别名的全部代际索引和当前活动索引."""

    def __init__(self, backend: IndexBackend, naming: IndexNaming):
        self.backend = backend
        self.naming = naming

    def list_backups(self, alias: str) -> BackupListing:
        """列出备份.

        Args:
            alias: 别名名称

        Returns:
            BackupListing，data 由新到旧排列

        Raises:
            BackendUnavailableError: 后端调用失败时抛出
        """
        names = [
            name
            for name in self.backend.list_indices(self.naming.index_pattern(alias))
            if self.naming.is_generation(name, alias)
        ]
        return BackupListing(
            data=self.naming.sort_indices(names, alias),
            actives=self.backend.get_alias_targets(alias),
        )


class RestoreEngine:
    """将别名切回指定的历史备份（回滚）.

    只改变别名绑定，不删除任何索引：恢复前的活动索引成为新的备份。

    Args:
        backend: 索引后端
        naming: 索引命名工具
        swapper: 别名切换器
    """

    def __init__(
        self,
        backend: IndexBackend,
        naming: IndexNaming,
        swapper: AliasSwapper,
    ):
        self.lister = BackupLister(backend, naming)
        self.swapper = swapper

    def resolve_backup(self, config: RestoreConfig, listing: BackupListing) -> str | None:
        """根据名称或序号找到要恢复的备份，找不到时返回 None."""
        if config.backup_name is not None:
            return config.backup_name if config.backup_name in listing.data else None

        backups = [name for name in listing.data if name not in listing.actives]
        position = config.backup_ordinal - 1
        if position < len(backups):
            return backups[position]
        return None

    def restore(self, config: RestoreConfig) -> bool:
        """恢复备份.

        Args:
            config: 恢复配置

        Returns:
            是否恢复成功；备份不存在或切换失败时返回 False
        """
        try:
            listing = self.lister.list_backups(config.alias)
            target = self.resolve_backup(config, listing)
            if target is None:
                logger.error(
                    f"恢复失败，备份不存在: alias='{config.alias}', "
                    f"backup_name={config.backup_name!r}, "
                    f"backup_ordinal={config.backup_ordinal!r}"
                )
                return False

            if listing.actives == [target]:
                logger.info(f"别名 '{config.alias}' 已指向 '{target}'，无需恢复")
                return True

            removed = self.swapper.swap(config.alias, target)
        except IndexFlowError as e:
            logger.error(f"恢复失败: alias='{config.alias}', error={str(e)}")
            return False

        logger.info(
            f"恢复成功: alias='{config.alias}', index='{target}', aliases={removed}"
        )
        return True
