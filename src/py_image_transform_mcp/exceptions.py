"""图像处理异常模块。

定义统一的异常类型和错误处理机制，包含异常转换装饰器。
"""

from collections.abc import Callable
from enum import Enum
from functools import wraps
from pathlib import Path
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.transform_result import BatchResult, TransformResult
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


class ProcessErrorKind(str, Enum):
    """处理错误类型"""

    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    ENCODE_FAILURE = "EncodeFailure"
    RESOURCE_EXHAUSTED = "ResourceExhausted"
    INVALID_POLICY = "InvalidPolicy"


# 统一的异常类型
class TransformError(Exception):
    """图像处理错误基类"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeError(TransformError):
    """源数据无法解码"""

    CORRUPT = "unrecognized or corrupt image data"
    RESOURCE_EXHAUSTED = "resource exhausted"
    NOT_FOUND = "source not found"

    def __init__(self, reason: str, detail: str | None = None):
        message = f"{reason}: {detail}" if detail else reason
        super().__init__(message)
        self.reason = reason


class ProcessError(TransformError):
    """处理过程错误，kind 区分具体原因"""

    def __init__(self, kind: ProcessErrorKind, message: str | None = None):
        super().__init__(message or kind.value)
        self.kind = kind


# 异常转换装饰器
def handle_image_errors(stage: str = "decode"):
    """将 Pillow 与系统异常转换为统一的处理异常

    Args:
        stage: "decode" 转换为 DecodeError，"encode" 转换为 ProcessError
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except TransformError:
                raise
            except (DecompressionBombError, MemoryError) as e:
                if stage == "decode":
                    raise DecodeError(DecodeError.RESOURCE_EXHAUSTED, str(e)) from e
                raise ProcessError(
                    ProcessErrorKind.RESOURCE_EXHAUSTED, f"内存不足: {e}"
                ) from e
            except UnidentifiedImageError as e:
                raise DecodeError(DecodeError.CORRUPT, str(e)) from e
            except (OSError, ValueError, SyntaxError) as e:
                # Pillow 对截断或损坏的数据可能抛出以上任意一种
                if stage == "decode":
                    raise DecodeError(DecodeError.CORRUPT, str(e)) from e
                raise ProcessError(
                    ProcessErrorKind.ENCODE_FAILURE, f"编码失败: {e}"
                ) from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    调用层使用：记录日志并生成失败结果，核心层只抛出异常。
    """

    # 各错误类型对应的日志级别
    LOG_LEVELS = {
        ProcessErrorKind.UNSUPPORTED_FORMAT: "warning",
        ProcessErrorKind.INVALID_POLICY: "warning",
        ProcessErrorKind.ENCODE_FAILURE: "error",
        ProcessErrorKind.RESOURCE_EXHAUSTED: "error",
    }

    @staticmethod
    def _log_error(
        operation: str, path: Path, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录"""
        log_msg = MessageFormatter.format_error(operation, path, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def error_kind(error: Exception) -> str:
        """获取异常对应的错误类型标识"""
        match error:
            case ProcessError() as pe:
                return pe.kind.value
            case DecodeError():
                return "DecodeError"
            case _:
                return "Unknown"

    @staticmethod
    def create_error_result(
        input_path: Path,
        error: Exception,
        output_path: Path | None = None,
    ) -> TransformResult:
        """创建标准化的错误结果"""
        try:
            original_size = input_path.stat().st_size if input_path.exists() else 0
        except OSError:
            original_size = 0

        kind = ErrorHandler.error_kind(error)
        return TransformResult(
            input_path=input_path,
            output_path=output_path,
            original_size=original_size,
            output_size=0,
            success=False,
            error=MessageFormatter.user_message(kind, error),
            error_kind=kind,
            format_used=None,
            quality_used=None,
        )

    @staticmethod
    def handle_transform_error(
        error: Exception,
        input_path: Path,
        operation: str = "图像处理",
        output_path: Path | None = None,
    ) -> TransformResult:
        """统一的处理错误分发"""
        match error:
            case ProcessError() as pe:
                level = ErrorHandler.LOG_LEVELS.get(pe.kind, "error")
            case DecodeError() as de if de.reason == DecodeError.RESOURCE_EXHAUSTED:
                level = "error"
            case DecodeError():
                level = "warning"
            case _:
                level = "error"

        ErrorHandler._log_error(operation, input_path, error, level)
        return ErrorHandler.create_error_result(input_path, error, output_path)

    @staticmethod
    def create_error_batch_result(
        output_dir: Path | None,
        error_message: str,
    ) -> BatchResult:
        """创建错误的批量处理结果"""
        return BatchResult(
            output_dir=output_dir,
            results=[],
            success=False,
            error=error_message,
        )
