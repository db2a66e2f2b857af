"""indexflow 类型定义模块."""

from typing import Any
from collections.abc import Callable

# 单条记录，格式: {key_field: 标识, ...字段, tombstone_field?: bool}
Record = dict[str, Any]

# 一批记录，None 或空列表表示数据已加载完毕
RecordBatch = list[Record] | None

# 批次回调: (offset, config, report) -> 记录列表
BatchCallback = Callable[[int, Any, Any], RecordBatch]

# 校验回调: (config, report) -> None/True 表示通过，False 或抛出异常表示拒绝
TestCallback = Callable[[Any, Any], bool | None]

# 别名更新动作，格式: {"add": {"index": ..., "alias": ...}}
AliasActionDict = dict[str, dict[str, str]]
