"""索引重建引擎异常定义模块."""

from ..exceptions import IndexFlowError


class BatchCallbackError(IndexFlowError):
    """批次回调抛出异常，构建中止，别名保持不变."""

    pass


class ValidationFailedError(IndexFlowError):
    """校验回调拒绝候选索引，跳过上线，候选索引保留以便排查."""

    pass


class SwapError(IndexFlowError):
    """别名切换失败或部分失败."""

    pass


class PruneError(IndexFlowError):
    """删除单个过期备份失败，只记录不中断."""

    pass


class BuildInProgressError(IndexFlowError):
    """同一进程内同一别名已有构建在运行."""

    pass


class BuildCancelledError(IndexFlowError):
    """构建在阶段边界处响应了停止请求."""

    pass
