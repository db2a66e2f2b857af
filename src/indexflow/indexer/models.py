"""索引重建引擎数据模型定义模块."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exceptions import ConfigError
from ..naming import (
    GENERATION_SUFFIX_LENGTH,
    MAX_INDEX_NAME_BYTES,
    validate_index_name,
)


class BuildMode(Enum):
    """构建模式枚举.

    Attributes:
        NEW: 使用新建的空索引
        CLONE: 复制当前别名指向的索引，批次数据作为增量写入
        SYNC: 直接写入当前别名指向的索引，不切换别名也不产生新备份
    """

    NEW = "new"
    CLONE = "clone"
    SYNC = "sync"


@dataclass
class IndexerConfig:
    """索引器配置.

    Attributes:
        alias: 对外稳定的别名名称（必需）
        mappings: 新建索引的映射配置
        settings: 新建索引的设置配置
        bulk_options: 合并进每个批量动作的元数据，例如 routing、pipeline
        key_field: 记录主键字段，默认 "id"
        tombstone_field: 删除标记字段，默认 "deleted"
        mode: 构建模式，默认 NEW，也接受字符串 "new"/"clone"/"sync"
        keep_count: 保留的备份数量，默认 1
        refresh: 每次批量写入后是否刷新索引，默认 True
        index_name: 本次运行使用的索引名称，由引擎在运行开始时设置

    Raises:
        ConfigError: 必填项缺失或取值不合法时抛出

    Examples:
        >>> config = IndexerConfig(alias="articles", mode="clone", keep_count=2)
    """

    alias: str
    mappings: dict[str, Any] | None = None
    settings: dict[str, Any] | None = None
    bulk_options: dict[str, Any] = field(default_factory=dict)
    key_field: str = "id"
    tombstone_field: str = "deleted"
    mode: BuildMode = BuildMode.NEW
    keep_count: int = 1
    refresh: bool = True
    index_name: str | None = None

    def __post_init__(self) -> None:
        """校验配置参数合法性."""
        if not self.alias:
            raise ConfigError("alias 不能为空")
        if not validate_index_name(self.alias):
            raise ConfigError(f"别名 '{self.alias}' 不符合 Elasticsearch 规范")
        max_alias_bytes = MAX_INDEX_NAME_BYTES - GENERATION_SUFFIX_LENGTH
        if len(self.alias.encode("utf-8")) > max_alias_bytes:
            raise ConfigError(
                f"别名长度不能超过 {max_alias_bytes} 字节，否则候选索引名称超出限制"
            )
        if not self.key_field:
            raise ConfigError("key_field 不能为空")
        if self.keep_count < 0:
            raise ConfigError(f"keep_count 必须 >= 0，当前值: {self.keep_count}")
        if not isinstance(self.mode, BuildMode):
            try:
                self.mode = BuildMode(self.mode)
            except ValueError as e:
                raise ConfigError(f"不支持的构建模式: {self.mode!r}") from e


@dataclass
class RestoreConfig:
    """恢复配置.

    backup_name 与 backup_ordinal 必须且只能提供一个。backup_ordinal 从 1 开始，
    1 表示最近的一个备份。

    Attributes:
        alias: 别名名称
        backup_name: 要恢复的备份索引名称
        backup_ordinal: 要恢复的第 N 个最近备份
    """

    alias: str
    backup_name: str | None = None
    backup_ordinal: int | None = None

    def __post_init__(self) -> None:
        if not self.alias:
            raise ConfigError("alias 不能为空")
        if (self.backup_name is None) == (self.backup_ordinal is None):
            raise ConfigError("backup_name 与 backup_ordinal 必须且只能提供一个")
        if self.backup_ordinal is not None and self.backup_ordinal < 1:
            raise ConfigError(
                f"backup_ordinal 必须 >= 1，当前值: {self.backup_ordinal}"
            )


@dataclass
class BuildReport:
    """单次构建的结果报告.

    字段通过 to_dict() 以固定的键名输出，调用方与适配层依赖这些键名：
    using_index、insertData、testing_succeeded / testing_error、removeAliases、
    keepIndices、removeIndices、succeeded、general_error。

    Attributes:
        using_index: 本次写入的索引名称
        insert_data: 以 offset 为键的批次记录
        testing_succeeded: 校验通过时为 True
        testing_error: 校验失败原因
        remove_aliases: 别名被移除的旧索引
        keep_indices: 保留的备份索引
        remove_indices: 被清理的索引，值为 True 或错误信息
        succeeded: 全部阶段完成时为 True
        general_error: 导致构建中止的错误信息
    """

    using_index: str | None = None
    insert_data: dict[int, dict[str, Any]] = field(default_factory=dict)
    testing_succeeded: bool | None = None
    testing_error: str | None = None
    remove_aliases: list[str] | None = None
    keep_indices: list[str] | None = None
    remove_indices: dict[str, bool | str] | None = None
    succeeded: bool = False
    general_error: str | None = None

    def batch_entry(self, offset: int) -> dict[str, Any]:
        """返回 offset 对应的批次记录，不存在时创建."""
        return self.insert_data.setdefault(offset, {})

    def to_dict(self) -> dict[str, Any]:
        """输出固定键名的报告字典，未设置的键不输出（succeeded 总是输出）."""
        data: dict[str, Any] = {}
        if self.using_index is not None:
            data["using_index"] = self.using_index
        if self.insert_data:
            data["insertData"] = {
                offset: dict(entry) for offset, entry in self.insert_data.items()
            }
        if self.testing_succeeded:
            data["testing_succeeded"] = True
        if self.testing_error is not None:
            data["testing_error"] = self.testing_error
        if self.remove_aliases is not None:
            data["removeAliases"] = list(self.remove_aliases)
        if self.keep_indices is not None:
            data["keepIndices"] = list(self.keep_indices)
        if self.remove_indices is not None:
            data["removeIndices"] = dict(self.remove_indices)
        data["succeeded"] = self.succeeded
        if self.general_error is not None:
            data["general_error"] = self.general_error
        return data


@dataclass
class BackupListing:
    """备份列表.

    Attributes:
        data: 所有符合别名命名约定的索引，由新到旧
        actives: 当前别名指向的索引（通常只有一个）
    """

    data: list[str] = field(default_factory=list)
    actives: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {"data": list(self.data), "actives": list(self.actives)}
