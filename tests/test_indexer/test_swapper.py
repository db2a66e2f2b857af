"""别名切换测试."""

import pytest

from indexflow.indexer.exceptions import SwapError
from indexflow.indexer.swapper import SWAP_SUFFIX, AliasSwapper

OLD = "articles---17.10.2026_09-00-00"
NEW = "articles---18.10.2026_09-00-00"


class TestNativeAliasSwap:
    """原生别名切换测试."""

    def test_first_binding(self, backend, naming) -> None:
        """测试别名首次绑定."""
        backend.create_index(NEW)

        removed = AliasSwapper(backend, naming).swap("articles", NEW)

        assert removed == []
        assert backend.get_alias_targets("articles") == [NEW]

    def test_single_request_repoints_alias(self, backend, naming) -> None:
        """测试一次请求内完成添加和移除."""
        backend.create_index(OLD)
        backend.create_index(NEW)
        backend.aliases["articles"] = {OLD}

        removed = AliasSwapper(backend, naming).swap("articles", NEW)

        assert removed == [OLD]
        assert backend.get_alias_targets("articles") == [NEW]
        assert backend.calls.count("update_aliases") == 1
        # 旧索引保留为备份
        assert OLD in backend.indices

    def test_failure_leaves_alias_unchanged(self, backend, naming) -> None:
        """测试切换失败抛出 SwapError 且别名不变."""
        backend.create_index(OLD)
        backend.aliases["articles"] = {OLD}

        with pytest.raises(SwapError, match="articles"):
            AliasSwapper(backend, naming).swap("articles", "articles---missing")

        assert backend.get_alias_targets("articles") == [OLD]


class TestRenameSwap:
    """重命名切换测试."""

    def test_three_step_rename(self, rename_backend, naming) -> None:
        """测试活动集合被改名为新的带时间戳名称."""
        rename_backend.create_index("articles")
        rename_backend.indices["articles"]["1"] = {"id": 1}
        rename_backend.create_index(NEW)
        rename_backend.indices[NEW]["2"] = {"id": 2}

        removed = AliasSwapper(rename_backend, naming).swap("articles", NEW)

        assert len(removed) == 1
        assert removed[0].startswith("articles---")
        assert rename_backend.indices["articles"] == {"2": {"id": 2}}
        assert rename_backend.indices[removed[0]] == {"1": {"id": 1}}
        assert NEW not in rename_backend.indices
        assert f"articles{SWAP_SUFFIX}" not in rename_backend.indices
        assert [call for call in rename_backend.calls if call.startswith("rename")] == [
            f"rename:articles->articles{SWAP_SUFFIX}",
            f"rename:{NEW}->articles",
            f"rename:articles{SWAP_SUFFIX}->{removed[0]}",
        ]

    def test_without_active_collection(self, rename_backend, naming) -> None:
        """测试没有活动集合时只执行一次重命名."""
        rename_backend.create_index(NEW)

        removed = AliasSwapper(rename_backend, naming).swap("articles", NEW)

        assert removed == []
        assert list(rename_backend.indices) == ["articles"]

    def test_failure_raises_swap_error(self, rename_backend, naming) -> None:
        """测试重命名失败抛出 SwapError."""
        rename_backend.create_index("articles")

        with pytest.raises(SwapError, match="重命名切换"):
            AliasSwapper(rename_backend, naming).swap("articles", "articles---missing")
