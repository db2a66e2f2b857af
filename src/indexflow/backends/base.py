"""索引后端抽象定义模块."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..bulk.models import BulkOperation, BulkResult
from ..typing import AliasActionDict


@dataclass(frozen=True)
class AliasAction:
    """别名更新动作.

    Attributes:
        action: "add" 或 "remove"
        index: 索引名称
        alias: 别名名称
    """

    action: str
    index: str
    alias: str

    @classmethod
    def add(cls, index: str, alias: str) -> "AliasAction":
        return cls("add", index, alias)

    @classmethod
    def remove(cls, index: str, alias: str) -> "AliasAction":
        return cls("remove", index, alias)

    def to_dict(self) -> AliasActionDict:
        return {self.action: {"index": self.index, "alias": self.alias}}


class IndexBackend(ABC):
    """索引后端能力集合.

    所有方法在后端调用失败时应抛出 BackendUnavailableError（或其子类），
    不做任何重试。
    """

    #: 是否支持原生别名；为 False 时别名即活动集合自身的名称
    supports_aliases: bool = True

    @abstractmethod
    def create_index(
        self,
        index_name: str,
        mappings: dict[str, Any] | None = None,
        settings: dict[str, Any] | None = None,
    ) -> None:
        """创建空索引."""

    @abstractmethod
    def bulk(self, operations: list[BulkOperation], refresh: bool = True) -> BulkResult:
        """以单个批量请求提交操作，单条失败记录在结果中."""

    @abstractmethod
    def get_alias_targets(self, alias: str) -> list[str]:
        """返回别名当前指向的索引名称列表，别名不存在时返回空列表."""

    @abstractmethod
    def list_indices(self, pattern: str) -> list[str]:
        """返回匹配通配符模式的索引名称列表."""

    @abstractmethod
    def delete_index(self, index_name: str) -> bool:
        """删除索引，索引不存在时返回 False."""

    @abstractmethod
    def copy_index(self, source_index: str, dest_index: str) -> int:
        """将源索引的全部文档复制到目标索引，返回复制的文档数."""

    def update_aliases(self, actions: list[AliasAction]) -> None:
        """以单个原子请求执行一组别名动作."""
        raise NotImplementedError(f"{type(self).__name__} 不支持别名操作")

    def rename_index(self, old_name: str, new_name: str) -> None:
        """重命名索引/集合（仅用于不支持别名的后端）."""
        raise NotImplementedError(f"{type(self).__name__} 不支持重命名操作")

    def search(
        self,
        index_name: str,
        text: str = "*",
        from_: int = 0,
        size: int = 100,
    ) -> dict[str, Any]:
        """按 query_string 查询索引或别名."""
        raise NotImplementedError(f"{type(self).__name__} 不支持搜索")
