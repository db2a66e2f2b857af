"""备份恢复与备份列表测试."""

import pytest

from indexflow.exceptions import BackendUnavailableError
from indexflow.indexer.models import RestoreConfig
from indexflow.indexer.restore import BackupLister, RestoreEngine
from indexflow.indexer.swapper import AliasSwapper

NEWEST = "articles---03.01.2026_10-00-00"
MIDDLE = "articles---02.01.2026_10-00-00"
OLDEST = "articles---01.01.2026_10-00-00"


@pytest.fixture
def seeded(backend):
    for name in (OLDEST, NEWEST, MIDDLE):
        backend.create_index(name)
    backend.aliases["articles"] = {NEWEST}
    return backend


@pytest.fixture
def engine(seeded, naming) -> RestoreEngine:
    return RestoreEngine(seeded, naming, AliasSwapper(seeded, naming))


class TestBackupLister:
    """备份列表测试."""

    def test_list_backups(self, seeded, naming) -> None:
        listing = BackupLister(seeded, naming).list_backups("articles")
        assert listing.data == [NEWEST, MIDDLE, OLDEST]
        assert listing.actives == [NEWEST]

    def test_empty(self, backend, naming) -> None:
        listing = BackupLister(backend, naming).list_backups("articles")
        assert listing.to_dict() == {"data": [], "actives": []}


class TestRestoreEngine:
    """恢复测试."""

    def test_restore_by_name(self, engine, seeded, naming) -> None:
        """测试恢复到指定名称的备份，原活动索引成为备份."""
        assert engine.restore(RestoreConfig(alias="articles", backup_name=OLDEST))

        assert seeded.get_alias_targets("articles") == [OLDEST]
        listing = BackupLister(seeded, naming).list_backups("articles")
        assert NEWEST in listing.data
        assert listing.actives == [OLDEST]
        # 恢复从不删除索引
        assert len(seeded.indices) == 3

    def test_restore_by_ordinal(self, engine, seeded) -> None:
        """测试按序号恢复，1 表示最近的非活动备份."""
        assert engine.restore(RestoreConfig(alias="articles", backup_ordinal=1))
        assert seeded.get_alias_targets("articles") == [MIDDLE]

    def test_restore_ordinal_out_of_range(self, engine, seeded) -> None:
        assert not engine.restore(RestoreConfig(alias="articles", backup_ordinal=3))
        assert seeded.get_alias_targets("articles") == [NEWEST]

    def test_restore_missing_name(self, engine, seeded) -> None:
        """测试备份不存在时返回 False 且别名不变."""
        config = RestoreConfig(alias="articles", backup_name="articles---09.09.2009_09-09-09")
        assert not engine.restore(config)
        assert seeded.get_alias_targets("articles") == [NEWEST]
        assert "update_aliases" not in seeded.calls

    def test_restore_active_is_noop(self, engine, seeded) -> None:
        """测试恢复当前活动索引直接返回成功."""
        assert engine.restore(RestoreConfig(alias="articles", backup_name=NEWEST))
        assert "update_aliases" not in seeded.calls

    def test_swap_failure_returns_false(self, engine, seeded) -> None:
        """测试切换失败时返回 False."""

        def broken(actions):
            raise BackendUnavailableError("cluster unavailable")

        seeded.update_aliases = broken

        assert not engine.restore(RestoreConfig(alias="articles", backup_name=MIDDLE))
        assert seeded.get_alias_targets("articles") == [NEWEST]
