"""Elasticsearch 索引后端实现模块."""

import logging
import time
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import NotFoundError
from luqum.exceptions import ParseError
from luqum.parser import lexer, parser

from ..bulk.exceptions import BulkOperationError
from ..bulk.models import BulkAction, BulkOperation, BulkResult
from ..exceptions import BackendUnavailableError, ConfigError
from ..naming import validate_index_name
from .base import AliasAction, IndexBackend

logger = logging.getLogger(__name__)


class ElasticsearchBackend(IndexBackend):
    """基于 Elasticsearch 的索引后端.

    别名切换使用 ``indices.update_aliases`` 在一个请求内完成 add/remove，
    对读请求是原子的。客户端由调用方创建和关闭。

    Args:
        es_client: Elasticsearch 客户端实例
    """

    supports_aliases = True

    def __init__(self, es_client: Elasticsearch):
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client

    def create_index(
        self,
        index_name: str,
        mappings: dict[str, Any] | None = None,
        settings: dict[str, Any] | None = None,
    ) -> None:
        """创建索引.

        Args:
            index_name: 索引名称
            mappings: 索引映射配置
            settings: 索引设置配置

        Raises:
            ConfigError: 索引名称不符合 Elasticsearch 规范时抛出
            BackendUnavailableError: 创建失败时抛出
        """
        if not validate_index_name(index_name):
            raise ConfigError(f"索引名称 '{index_name}' 不符合 Elasticsearch 规范")

        kwargs: dict[str, Any] = {"index": index_name}
        if mappings:
            kwargs["mappings"] = mappings
        if settings:
            kwargs["settings"] = settings

        try:
            self.es_client.indices.create(**kwargs)
        except Exception as e:
            raise BackendUnavailableError(
                f"创建索引 '{index_name}' 失败: {str(e)}"
            ) from e
        logger.info(f"索引 '{index_name}' 创建成功")

    @staticmethod
    def _prepare_bulk_body(operations: list[BulkOperation]) -> list[dict[str, Any]]:
        """将批量操作项转换为 bulk API 的请求体（动作行 + 文档行）."""
        body: list[dict[str, Any]] = []
        for operation in operations:
            header: dict[str, Any] = {"_index": operation.index_name}
            header.update(operation.metadata)
            if operation.doc_id is not None:
                header["_id"] = operation.doc_id
            body.append({operation.action.value: header})
            if operation.action == BulkAction.INDEX:
                body.append(operation.source or {})
        return body

    @staticmethod
    def _parse_bulk_response(
        response: Any, operations: list[BulkOperation]
    ) -> BulkResult:
        """解析 bulk API 响应，逐条统计结果."""
        result = BulkResult(total=len(operations))
        items = response.get("items", [])

        for item in items:
            op_type, info = next(iter(item.items()))
            try:
                operation = BulkAction(op_type)
            except ValueError:
                operation = None

            error = info.get("error")
            if error:
                if isinstance(error, dict):
                    error_type = error.get("type", "unknown")
                    error_reason = error.get("reason", "unknown error")
                else:
                    error_type, error_reason = "unknown", str(error)
                result.add_error(
                    index_name=info.get("_index", ""),
                    doc_id=info.get("_id"),
                    error_type=error_type,
                    error_reason=error_reason,
                    status=info.get("status", 0),
                    operation=operation,
                )
                continue

            result.success += 1
            outcome = info.get("result")
            if outcome == "created":
                result.created += 1
            elif outcome == "updated":
                result.updated += 1
            elif outcome == "deleted":
                result.deleted += 1

        return result

    def bulk(self, operations: list[BulkOperation], refresh: bool = True) -> BulkResult:
        """以单个 bulk 请求提交操作.

        Args:
            operations: 批量操作项列表
            refresh: 请求完成后是否刷新索引，使文档立即可查

        Returns:
            批量操作结果，单条失败记录在 errors 中

        Raises:
            BulkOperationError: bulk 请求整体失败时抛出
        """
        if not operations:
            return BulkResult()

        start_time = time.time()
        try:
            response = self.es_client.bulk(
                operations=self._prepare_bulk_body(operations),
                refresh=refresh,
            )
        except Exception as e:
            raise BulkOperationError(f"批量请求失败: {str(e)}") from e

        result = self._parse_bulk_response(response, operations)
        result.took = time.time() - start_time
        return result

    def get_alias_targets(self, alias: str) -> list[str]:
        """获取别名指向的所有索引.

        Args:
            alias: 别名名称

        Returns:
            索引名称列表，别名不存在时为空列表
        """
        try:
            response = self.es_client.indices.get_alias(name=alias)
            return list(response.keys())
        except NotFoundError:
            return []
        except Exception as e:
            raise BackendUnavailableError(
                f"获取别名 '{alias}' 指向的索引失败: {str(e)}"
            ) from e

    def update_aliases(self, actions: list[AliasAction]) -> None:
        """在一个请求内执行全部别名动作.

        Raises:
            BackendUnavailableError: 请求失败时抛出
        """
        try:
            self.es_client.indices.update_aliases(
                actions=[action.to_dict() for action in actions]
            )
        except Exception as e:
            raise BackendUnavailableError(f"更新别名失败: {str(e)}") from e
        logger.info(f"别名更新成功: {[action.to_dict() for action in actions]}")

    def list_indices(self, pattern: str) -> list[str]:
        """列出匹配模式的索引名称.

        Args:
            pattern: 索引匹配模式，例如 ``articles---*``

        Returns:
            索引名称列表
        """
        try:
            response = self.es_client.indices.get(index=pattern)
            return list(response.keys())
        except NotFoundError:
            return []
        except Exception as e:
            raise BackendUnavailableError(
                f"列出索引 '{pattern}' 失败: {str(e)}"
            ) from e

    def delete_index(self, index_name: str) -> bool:
        """删除索引.

        Args:
            index_name: 索引名称，不允许通配符

        Returns:
            是否删除成功，索引不存在时返回 False

        Raises:
            BackendUnavailableError: 删除失败时抛出
        """
        if "*" in index_name or "?" in index_name:
            raise ConfigError(f"拒绝删除包含通配符的索引名称 '{index_name}'")

        try:
            response = self.es_client.indices.delete(index=index_name)
        except NotFoundError:
            logger.warning(f"索引 '{index_name}' 不存在")
            return False
        except Exception as e:
            raise BackendUnavailableError(
                f"删除索引 '{index_name}' 失败: {str(e)}"
            ) from e

        acknowledged = response.get("acknowledged", False)
        if acknowledged:
            logger.info(f"索引 '{index_name}' 删除成功")
        return acknowledged

    def copy_index(self, source_index: str, dest_index: str) -> int:
        """通过 reindex 将源索引的数据复制到目标索引.

        同步等待完成并刷新目标索引。

        Returns:
            复制的文档数

        Raises:
            BackendUnavailableError: 复制失败或存在失败文档时抛出
        """
        try:
            response = self.es_client.reindex(
                source={"index": source_index},
                dest={"index": dest_index},
                wait_for_completion=True,
                refresh=True,
            )
        except Exception as e:
            raise BackendUnavailableError(
                f"复制索引 '{source_index}' 到 '{dest_index}' 失败: {str(e)}"
            ) from e

        failures = response.get("failures") or []
        if failures:
            raise BackendUnavailableError(
                f"复制索引 '{source_index}' 到 '{dest_index}' 有 {len(failures)} 个失败文档"
            )

        total = response.get("total", 0)
        logger.info(
            f"索引 '{source_index}' 复制到 '{dest_index}' 完成: "
            f"total={total}, created={response.get('created', 0)}"
        )
        return total

    def count(self, index_name: str) -> int:
        """返回索引或别名中的文档数."""
        try:
            response = self.es_client.count(index=index_name)
        except Exception as e:
            raise BackendUnavailableError(
                f"统计索引 '{index_name}' 文档数失败: {str(e)}"
            ) from e
        return response.get("count", 0)

    def search(
        self,
        index_name: str,
        text: str = "*",
        from_: int = 0,
        size: int = 100,
    ) -> dict[str, Any]:
        """按 query_string 查询索引或别名.

        可以直接按名称查询尚未上线的候选索引。

        Raises:
            ConfigError: 查询语句语法错误时抛出，不会发送请求
            BackendUnavailableError: 查询失败时抛出
        """
        query = text or "*"
        if query != "*":
            try:
                parser.parse(query, lexer=lexer)
            except ParseError as e:
                raise ConfigError(f"查询语句解析失败: {query!r}, {str(e)}") from e

        try:
            response = self.es_client.search(
                index=index_name,
                from_=from_,
                size=size,
                query={"query_string": {"query": query}},
            )
        except Exception as e:
            raise BackendUnavailableError(
                f"查询索引 '{index_name}' 失败: {str(e)}"
            ) from e
        return dict(response)
