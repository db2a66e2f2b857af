"""索引命名核心工具类."""

from __future__ import annotations

import logging
from datetime import datetime, UTC
from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

# 别名与时间戳之间的分隔符
GENERATION_SEPARATOR = "---"

# en-GB 本地化时间 "18/10/2026, 14:05:09" 经 "/"->"."、", "->"_"、":"->"-" 替换后的格式
INDEX_TIME_FORMAT = "%d.%m.%Y_%H-%M-%S"

# Elasticsearch 索引名称的最大字节数
MAX_INDEX_NAME_BYTES = 255

# 别名之后追加的部分 "---18.10.2026_14-05-09" 的长度
GENERATION_SUFFIX_LENGTH = len(GENERATION_SEPARATOR) + len("18.10.2026_14-05-09")


class IndexNaming:
    """索引命名工具.

    负责根据别名和当前时间生成候选索引名称，并从索引名称中解析出时间用于排序。

    Args:
        now_func: 自定义获取当前时间的函数，主要用于测试。
                  默认返回 UTC 时间。
    """

    def __init__(self, now_func: Callable[[], datetime] | None = None):
        self._now_func = now_func or (lambda: datetime.now(UTC))

    def now(self) -> datetime:
        return self._now_func()

    @staticmethod
    def prefix(alias: str) -> str:
        """返回别名对应的代际索引名称前缀."""
        return f"{alias}{GENERATION_SEPARATOR}"

    @classmethod
    def index_pattern(cls, alias: str) -> str:
        """返回匹配别名所有代际索引的通配符模式，例如 ``articles---*``."""
        return f"{cls.prefix(alias)}*"

    @classmethod
    def is_generation(cls, name: str, alias: str) -> bool:
        """判断索引名称是否符合别名的代际命名约定."""
        return name.startswith(cls.prefix(alias))

    def derive_candidate_name(self, alias: str, now: datetime | None = None) -> str:
        """生成候选索引名称.

        Args:
            alias: 别名名称
            now: 生成名称使用的时间，默认为当前时间

        Returns:
            形如 ``articles---18.10.2026_14-05-09`` 的索引名称
        """
        moment = now if now is not None else self.now()
        return f"{self.prefix(alias)}{moment.strftime(INDEX_TIME_FORMAT)}"

    @classmethod
    def parse_index_time(cls, name: str, alias: str) -> datetime:
        """从索引名称中解析时间.

        名称可能来自 list_indices 而非本工具生成，解析失败时返回 ``datetime.min``
        （视为最旧），不会抛出异常。

        Args:
            name: 索引名称
            alias: 别名名称

        Returns:
            解析出的时间（不带时区），失败时为 datetime.min
        """
        prefix = cls.prefix(alias)
        if not name.startswith(prefix):
            return datetime.min
        try:
            return datetime.strptime(name[len(prefix) :], INDEX_TIME_FORMAT)
        except ValueError:
            logger.debug(f"索引 '{name}' 的时间部分无法解析，按最旧处理")
            return datetime.min

    @classmethod
    def sort_indices(cls, names: Iterable[str], alias: str) -> list[str]:
        """按解析出的时间降序排列索引名称，时间相同时按名称升序.

        Args:
            names: 索引名称
            alias: 别名名称

        Returns:
            由新到旧排列的索引名称列表
        """
        by_name = sorted(set(names))
        return sorted(
            by_name,
            key=lambda name: cls.parse_index_time(name, alias),
            reverse=True,
        )


def validate_index_name(index_name: str, allow_wildcards: bool = False) -> bool:
    """验证索引或别名名称是否符合 Elasticsearch 规范.

    Args:
        index_name: 索引名称
        allow_wildcards: 是否允许通配符（用于查询场景）

    Returns:
        是否有效

    Note:
        Elasticsearch 索引名称限制：
        - 必须为小写
        - 不能以 . 、_ 、- 或 + 开头
        - 不能包含 , # / \\ * ? " < > | : 空格
        - 不能是 . 或 ..
        - 长度不能超过 255 字节
    """
    if not index_name or not isinstance(index_name, str):
        return False

    if len(index_name.encode("utf-8")) > MAX_INDEX_NAME_BYTES:
        return False

    if index_name in (".", ".."):
        return False

    if index_name[0] in "._-+":
        return False

    if index_name != index_name.lower():
        return False

    invalid_chars = {",", "#", "/", "\\", '"', "<", ">", "|", ":", " ", "\t", "\n", "\r"}
    if not allow_wildcards:
        invalid_chars.update({"*", "?"})

    return not any(char in invalid_chars for char in index_name)
