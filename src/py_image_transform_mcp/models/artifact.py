"""输出产物模型。

编码后的图像数据加上（可选的）填充长度。填充只在写出时按块生成，
产物本身从不持有完整的填充缓冲区。
"""

import threading
from collections.abc import Iterator
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict, Field

from .constants import TargetFormat, get_mime_type


class OutputArtifact(BaseModel):
    """一次处理的最终输出"""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(description="编码后的图像数据", repr=False)
    format: TargetFormat = Field(description="输出格式")
    extension: str = Field(description="扩展名（不含点）")
    quality_used: int = Field(ge=0, le=100, description="编码质量")
    padding_size: int = Field(0, ge=0, description="追加的填充字节数")

    original_dimensions: tuple[int, int] = Field(description="原始尺寸")
    final_dimensions: tuple[int, int] = Field(description="输出尺寸")
    scale_factor: float | None = Field(None, description="使用的缩放比例")

    @property
    def was_resized(self) -> bool:
        return self.original_dimensions != self.final_dimensions

    @property
    def base_size(self) -> int:
        """未填充的图像字节数"""
        return len(self.data)

    @property
    def size(self) -> int:
        """产物总字节数"""
        return self.base_size + self.padding_size

    @property
    def mime_type(self) -> str | None:
        return get_mime_type(self.format)

    def iter_chunks(self) -> Iterator[bytes | memoryview]:
        """依次产出图像数据与填充块"""
        from ..core.padding import iter_padding_chunks

        yield self.data
        yield from iter_padding_chunks(self.padding_size)

    def write_to(
        self, sink: BinaryIO, cancel_event: threading.Event | None = None
    ) -> int:
        """将完整产物写入可写的二进制对象

        cancel_event 已设置时在下一块填充前停止。

        Returns:
            int: 写入的总字节数

        Raises:
            ProcessError: 写入期间资源耗尽（RESOURCE_EXHAUSTED）或已被取消
        """
        from ..core.padding import write_padding
        from ..exceptions import ProcessError, ProcessErrorKind

        try:
            sink.write(self.data)
        except (MemoryError, OSError) as e:
            raise ProcessError(
                ProcessErrorKind.RESOURCE_EXHAUSTED, f"写入图像数据时出错: {e}"
            ) from e
        written = self.base_size
        written += write_padding(
            sink, self.padding_size, cancel_event=cancel_event
        )
        return written

    def to_bytes(self) -> bytes:
        """在内存中拼出完整产物，只适合较小的填充量"""
        from ..exceptions import ProcessError, ProcessErrorKind

        try:
            return b"".join(self.iter_chunks())
        except MemoryError as e:
            raise ProcessError(
                ProcessErrorKind.RESOURCE_EXHAUSTED, "内存不足，无法拼接完整产物"
            ) from e
