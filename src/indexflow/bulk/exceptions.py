"""批量写入异常定义模块."""

from ..exceptions import BackendUnavailableError


class BulkOperationError(BackendUnavailableError):
    """批量请求整体失败异常（非单条文档失败）."""

    pass
