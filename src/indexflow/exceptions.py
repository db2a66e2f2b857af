"""indexflow 异常定义模块."""


class IndexFlowError(Exception):
    """indexflow 基础异常类."""

    pass


class ConfigError(IndexFlowError):
    """配置异常.

    必填项缺失或取值不合法时抛出，发生在任何后端调用之前。
    """

    pass


class BackendUnavailableError(IndexFlowError):
    """后端调用异常（连接、创建索引、批量写入、复制等失败）."""

    pass
