"""备份保留策略测试."""

from indexflow.indexer.retention import RetentionManager

GENERATIONS = [
    "articles---01.02.2026_10-00-00",
    "articles---15.01.2026_10-00-00",
    "articles---02.01.2026_10-00-00",
    "articles---20.12.2025_10-00-00",
]


def _seed(backend, names):
    for name in names:
        backend.create_index(name)


class TestRetentionManager:
    """清理过期备份测试."""

    def test_keeps_newest_by_parsed_time(self, backend, naming) -> None:
        """测试按解析出的时间而不是字符串排序."""
        _seed(backend, GENERATIONS)

        keep, removed = RetentionManager(backend, naming).prune("articles", 2)

        assert keep == GENERATIONS[:2]
        assert removed == {GENERATIONS[2]: True, GENERATIONS[3]: True}
        assert sorted(backend.indices) == sorted(GENERATIONS[:2])

    def test_excluded_index_untouched(self, backend, naming) -> None:
        """测试排除的活动索引不参与排序和清理."""
        _seed(backend, GENERATIONS)

        keep, removed = RetentionManager(backend, naming).prune(
            "articles", 1, exclude=[GENERATIONS[0]]
        )

        assert keep == [GENERATIONS[1]]
        assert GENERATIONS[0] in backend.indices
        assert GENERATIONS[0] not in removed

    def test_other_indices_ignored(self, backend, naming) -> None:
        """测试不符合命名约定的索引不会被清理."""
        _seed(backend, GENERATIONS[:1] + ["articles_v2", "articlesx---01.01.2020_00-00-00"])

        keep, removed = RetentionManager(backend, naming).prune("articles", 0)

        assert keep == []
        assert removed == {GENERATIONS[0]: True}
        assert "articles_v2" in backend.indices
        assert "articlesx---01.01.2020_00-00-00" in backend.indices

    def test_malformed_names_pruned_first(self, backend, naming) -> None:
        """测试时间无法解析的索引视为最旧."""
        _seed(backend, [GENERATIONS[3], "articles---garbage"])

        keep, removed = RetentionManager(backend, naming).prune("articles", 1)

        assert keep == [GENERATIONS[3]]
        assert removed == {"articles---garbage": True}

    def test_delete_failure_isolated(self, backend, naming) -> None:
        """测试单个索引删除失败只记录，其他索引继续清理."""
        _seed(backend, GENERATIONS)
        backend.fail_delete.add(GENERATIONS[2])

        keep, removed = RetentionManager(backend, naming).prune("articles", 1)

        assert keep == [GENERATIONS[0]]
        assert removed[GENERATIONS[1]] is True
        assert removed[GENERATIONS[3]] is True
        assert isinstance(removed[GENERATIONS[2]], str)
        assert GENERATIONS[2] in removed[GENERATIONS[2]]
        assert GENERATIONS[2] in backend.indices
