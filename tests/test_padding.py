"""填充写出测试。"""

import threading

import pytest

from py_image_transform_mcp.core.padding import (
    compute_padding_size,
    iter_padding_chunks,
    write_padding,
)
from py_image_transform_mcp.exceptions import ProcessError, ProcessErrorKind
from py_image_transform_mcp.models import DataUnit, ExtraSize, PaddingLimits


MIB = 1024 * 1024


class TestComputePaddingSize:
    """填充量计算测试"""

    @pytest.mark.parametrize(
        ("magnitude", "unit", "expected"),
        [
            (0, DataUnit.KB, 0),
            (1, DataUnit.KB, 1024),
            (500, DataUnit.KB, 512000),
            (999, DataUnit.KB, 999 * 1024),
            (1, DataUnit.MB, MIB),
            (953, DataUnit.MB, 953 * MIB),
            (954, DataUnit.MB, 1_000_000_000),
            (999, DataUnit.MB, 1_000_000_000),
        ],
    )
    def test_units_and_ceiling(self, magnitude, unit, expected):
        """单位换算，超过上限静默截断"""
        assert compute_padding_size(ExtraSize(magnitude=magnitude, unit=unit)) == expected

    @pytest.mark.parametrize("magnitude", [-1, 1000, 10**9])
    def test_out_of_range_magnitude(self, magnitude):
        """超出 0-999 的数值被拒绝"""
        extra = ExtraSize.model_construct(magnitude=magnitude, unit=DataUnit.MB)

        with pytest.raises(ProcessError) as exc_info:
            compute_padding_size(extra)

        assert exc_info.value.kind == ProcessErrorKind.INVALID_POLICY


class TestPaddingChunks:
    """分块生成测试"""

    def test_chunks_are_bounded(self):
        """每块不超过 1 MiB，总量准确"""
        total = 3 * MIB + 123
        chunks = list(iter_padding_chunks(total))

        assert sum(len(c) for c in chunks) == total
        assert max(len(c) for c in chunks) <= PaddingLimits.CHUNK_SIZE
        assert len(chunks) == 4
        assert bytes(chunks[-1]) == bytes(123)

    def test_zero_total(self):
        """总量为 0 不产出任何块"""
        assert list(iter_padding_chunks(0)) == []

    def test_small_total_allocates_small_buffer(self):
        """小于一块时只分配所需大小"""
        chunks = list(iter_padding_chunks(10))

        assert chunks == [bytes(10)]

    def test_chunk_size_cannot_exceed_limit(self):
        """传入更大的块大小也会被限制在 1 MiB"""
        chunks = list(iter_padding_chunks(5 * MIB, chunk_size=64 * MIB))

        assert all(len(c) == MIB for c in chunks)

    def test_buffer_is_reused(self):
        """所有完整块复用同一个缓冲区"""
        chunks = list(iter_padding_chunks(4 * MIB))

        assert all(c is chunks[0] for c in chunks)


class TestWritePadding:
    """写出测试"""

    def test_ceiling_streamed_in_chunks(self, counting_sink):
        """1_000_000_000 字节按块写出，峰值不超过一块"""
        written = write_padding(counting_sink, PaddingLimits.MAX_PADDING_BYTES)

        assert written == counting_sink.written == 1_000_000_000
        assert counting_sink.max_chunk <= MIB
        assert counting_sink.writes == -(-1_000_000_000 // MIB)

    def test_sink_out_of_memory(self):
        """写入时内存不足报告 ResourceExhausted"""

        class ExhaustedSink:
            def __init__(self):
                self.calls = 0

            def write(self, data):
                self.calls += 1
                if self.calls > 2:
                    raise MemoryError
                return len(data)

        with pytest.raises(ProcessError) as exc_info:
            write_padding(ExhaustedSink(), 10 * MIB)

        assert exc_info.value.kind == ProcessErrorKind.RESOURCE_EXHAUSTED

    def test_sink_disk_full(self):
        """磁盘写满同样视为资源耗尽"""

        class FullDisk:
            def write(self, data):
                raise OSError(28, "No space left on device")

        with pytest.raises(ProcessError) as exc_info:
            write_padding(FullDisk(), MIB)

        assert exc_info.value.kind == ProcessErrorKind.RESOURCE_EXHAUSTED

    def test_cancelled_before_first_chunk(self, counting_sink):
        """取消后不再写入任何填充"""
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(ProcessError) as exc_info:
            write_padding(counting_sink, 4 * MIB, cancel_event=cancel_event)

        assert exc_info.value.kind == ProcessErrorKind.RESOURCE_EXHAUSTED
        assert counting_sink.written == 0

    def test_cancelled_between_chunks(self):
        """写入过程中取消，在下一块之前停止"""
        cancel_event = threading.Event()

        class CancellingSink:
            def __init__(self):
                self.written = 0

            def write(self, data):
                self.written += len(data)
                if self.written >= 2 * MIB:
                    cancel_event.set()
                return len(data)

        sink = CancellingSink()
        with pytest.raises(ProcessError):
            write_padding(sink, 10 * MIB, cancel_event=cancel_event)

        assert sink.written == 2 * MIB
