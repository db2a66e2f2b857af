"""批量写入数据模型定义模块."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BulkAction(Enum):
    """批量操作类型枚举.

    INDEX 按 _id 创建或整体替换文档，即 upsert；DELETE 按 _id 删除文档。
    """

    INDEX = "index"
    DELETE = "delete"


@dataclass
class BulkOperation:
    """批量操作项数据类.

    Attributes:
        action: 操作类型
        index_name: 索引名称
        doc_id: 文档ID（INDEX 操作未指定时由后端生成）
        source: 文档源数据（仅 INDEX 操作）
        metadata: 额外的动作元数据，例如 routing、pipeline
    """

    action: BulkAction
    index_name: str
    doc_id: str | None = None
    source: dict[str, Any] | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class BulkErrorItem:
    """批量操作错误项数据类.

    Attributes:
        index_name: 索引名称
        doc_id: 文档ID
        error_type: 错误类型
        error_reason: 错误原因
        status: HTTP状态码
        operation: 失败的操作类型
    """

    index_name: str
    doc_id: str | None
    error_type: str
    error_reason: str
    status: int
    operation: BulkAction | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index_name,
            "_id": self.doc_id,
            "type": self.error_type,
            "reason": self.error_reason,
            "status": self.status,
            "action": self.operation.value if self.operation else None,
        }


@dataclass
class BulkResult:
    """批量操作结果数据类.

    Attributes:
        total: 总操作数
        success: 成功数
        failed: 失败数
        created: 新建文档数
        updated: 更新文档数
        deleted: 删除文档数
        errors: 错误详情列表
        took: 总耗时（秒）
    """

    total: int = 0
    success: int = 0
    failed: int = 0
    created: int = 0
    updated: int = 0
    deleted: int = 0
    errors: list[BulkErrorItem] = field(default_factory=list)
    took: float = 0.0

    def is_success(self) -> bool:
        """判断操作是否全部成功."""
        return self.failed == 0

    def add_error(
        self,
        index_name: str,
        doc_id: str | None,
        error_type: str,
        error_reason: str,
        status: int,
        operation: BulkAction | None = None,
    ) -> None:
        """添加错误项并累计失败数."""
        self.errors.append(
            BulkErrorItem(
                index_name=index_name,
                doc_id=doc_id,
                error_type=error_type,
                error_reason=error_reason,
                status=status,
                operation=operation,
            )
        )
        self.failed += 1

    def merge(self, other: "BulkResult") -> None:
        """合并另一个结果的计数和错误."""
        self.total += other.total
        self.success += other.success
        self.failed += other.failed
        self.created += other.created
        self.updated += other.updated
        self.deleted += other.deleted
        self.errors.extend(other.errors)
        self.took += other.took

    def get_error_summary(self) -> str:
        """获取错误摘要."""
        if not self.errors:
            return "No errors"
        summary = f"Total errors: {len(self.errors)}\n"
        for i, error in enumerate(self.errors[:10], 1):  # 只显示前10个错误
            summary += (
                f"{i}. [{error.operation.value if error.operation else 'unknown'}] "
                f"Index: {error.index_name}, DocID: {error.doc_id}, "
                f"Status: {error.status}, Reason: {error.error_reason}\n"
            )
        if len(self.errors) > 10:
            summary += f"... and {len(self.errors) - 10} more errors\n"
        return summary
