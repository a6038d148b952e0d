"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

from .cleanup_helpers import PartialOutputGuard, validate_output_integrity

# 从日志工具模块导入
from .logging_helpers import configure_logging, get_logger

# 从消息格式化模块导入
from .message_formatter import MessageFormatter

# 从命名助手模块导入
from .naming_helpers import FileNamingStrategy, PathResolver


__all__ = [
    "FileNamingStrategy",
    "MessageFormatter",
    "PartialOutputGuard",
    "PathResolver",
    "configure_logging",
    "get_logger",
    "validate_output_integrity",
]
