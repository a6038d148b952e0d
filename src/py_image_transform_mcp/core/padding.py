"""填充数据生成模块。

按块生成全零填充并写入任意二进制输出对象。整个过程只分配一块
不超过 CHUNK_SIZE 的零缓冲区并反复复用，与请求的填充总量无关。
"""

import threading
from collections.abc import Iterator
from typing import BinaryIO

from ..exceptions import ProcessError, ProcessErrorKind
from ..models.constants import PaddingLimits
from ..models.policy import ExtraSize
from ..utils.logging_helpers import get_logger


logger = get_logger()


def compute_padding_size(extra_size: ExtraSize) -> int:
    """计算实际需要写入的填充字节数

    请求量超过 MAX_PADDING_BYTES 时静默截断。

    Raises:
        ProcessError: 数值超出 0-999（INVALID_POLICY）
    """
    magnitude = extra_size.magnitude
    if not (
        PaddingLimits.MIN_MAGNITUDE <= magnitude <= PaddingLimits.MAX_MAGNITUDE
    ):
        raise ProcessError(
            ProcessErrorKind.INVALID_POLICY,
            f"数据大小必须在 {PaddingLimits.MIN_MAGNITUDE}-"
            f"{PaddingLimits.MAX_MAGNITUDE} 之间，得到: {magnitude}",
        )

    requested = extra_size.requested_bytes
    padding = min(requested, PaddingLimits.MAX_PADDING_BYTES)
    if padding < requested:
        logger.debug(f"填充请求 {requested} 字节，截断为 {padding} 字节")
    return padding


def iter_padding_chunks(
    total: int, chunk_size: int = PaddingLimits.CHUNK_SIZE
) -> Iterator[bytes | memoryview]:
    """产出总长为 total 的零字节块，每块不超过 chunk_size

    Raises:
        ProcessError: 无法分配缓冲区（RESOURCE_EXHAUSTED）
    """
    if total <= 0:
        return

    chunk_size = max(1, min(chunk_size, PaddingLimits.CHUNK_SIZE))
    try:
        zero_chunk = bytes(min(chunk_size, total))
    except MemoryError as e:
        raise ProcessError(
            ProcessErrorKind.RESOURCE_EXHAUSTED, "内存不足，无法分配填充缓冲区"
        ) from e

    view = memoryview(zero_chunk)
    remaining = total
    while remaining > 0:
        current = min(len(zero_chunk), remaining)
        yield zero_chunk if current == len(zero_chunk) else view[:current]
        remaining -= current


def write_padding(
    sink: BinaryIO,
    total: int,
    chunk_size: int = PaddingLimits.CHUNK_SIZE,
    cancel_event: threading.Event | None = None,
) -> int:
    """将填充写入 sink

    Args:
        sink: 可写的二进制对象
        total: 填充总字节数
        chunk_size: 单块大小，不超过 CHUNK_SIZE
        cancel_event: 每块写入前检查，已设置时停止写入

    Returns:
        int: 写入的字节数

    Raises:
        ProcessError: 写入期间内存或磁盘资源耗尽，或已被取消（RESOURCE_EXHAUSTED）
    """
    written = 0
    try:
        for chunk in iter_padding_chunks(total, chunk_size):
            if cancel_event is not None and cancel_event.is_set():
                raise ProcessError(
                    ProcessErrorKind.RESOURCE_EXHAUSTED,
                    f"处理已取消（已写入 {written}/{total} 字节）",
                )
            sink.write(chunk)
            written += len(chunk)
    except (MemoryError, OSError) as e:
        raise ProcessError(
            ProcessErrorKind.RESOURCE_EXHAUSTED,
            f"写入数据时出错（已写入 {written}/{total} 字节）: {e}",
        ) from e

    return written
