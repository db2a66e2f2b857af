"""候选索引校验模块."""

import logging

from .exceptions import ValidationFailedError
from .loader import BatchSource
from .models import BuildReport, IndexerConfig

logger = logging.getLogger(__name__)


class Validator:
    """在上线前对已写满的候选索引执行调用方提供的校验."""

    def validate(
        self, source: BatchSource, config: IndexerConfig, report: BuildReport
    ) -> None:
        """执行校验并写入报告.

        Raises:
            ValidationFailedError: 校验回调抛出异常或返回 False 时抛出
        """
        try:
            outcome = source.validate(config, report)
        except Exception as e:
            report.testing_error = str(e) or type(e).__name__
            logger.error(
                f"校验失败: alias='{config.alias}', index='{config.index_name}', "
                f"error={e!r}"
            )
            raise ValidationFailedError(f"索引 '{config.index_name}' 校验失败: {e}") from e

        if outcome is False:
            report.testing_error = "校验回调拒绝了候选索引"
            logger.error(
                f"校验未通过: alias='{config.alias}', index='{config.index_name}'"
            )
            raise ValidationFailedError(f"索引 '{config.index_name}' 校验未通过")

        report.testing_succeeded = True
        logger.info(f"校验通过: alias='{config.alias}', index='{config.index_name}'")
