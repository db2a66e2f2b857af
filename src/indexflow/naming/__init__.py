"""索引命名模块.

候选索引名称格式为 ``{alias}---{DD.MM.YYYY_HH-MM-SS}``。时间部分按日-月-年渲染，
不能按字符串排序，所有排序都必须重新解析出时间后比较。

示例用法:
    >>> from indexflow.naming import IndexNaming
    >>> naming = IndexNaming()
    >>> name = naming.derive_candidate_name("articles")
    >>> naming.sort_indices(["articles---01.02.2024_10-00-00", name], "articles")
"""

from .tool import (
    GENERATION_SEPARATOR,
    GENERATION_SUFFIX_LENGTH,
    INDEX_TIME_FORMAT,
    MAX_INDEX_NAME_BYTES,
    IndexNaming,
    validate_index_name,
)

__all__ = [
    "IndexNaming",
    "GENERATION_SEPARATOR",
    "INDEX_TIME_FORMAT",
    "GENERATION_SUFFIX_LENGTH",
    "MAX_INDEX_NAME_BYTES",
    "validate_index_name",
]
