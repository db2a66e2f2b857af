"""索引后端模块.

引擎只依赖 IndexBackend 定义的能力集合，任何文档/搜索存储只要实现这些方法
即可接入。ElasticsearchBackend 基于原生别名实现原子切换；不支持别名的后端
（只有可重命名的集合）将 supports_aliases 设为 False，由切换器改走重命名流程。

示例用法:
    >>> from elasticsearch import Elasticsearch
    >>> from indexflow.backends import ElasticsearchBackend
    >>> backend = ElasticsearchBackend(Elasticsearch("http://localhost:9200"))
    >>> backend.get_alias_targets("articles")
"""

from .base import AliasAction, IndexBackend
from .elasticsearch import ElasticsearchBackend

__all__ = [
    "AliasAction",
    "IndexBackend",
    "ElasticsearchBackend",
]
