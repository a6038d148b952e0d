"""核心模块包。

解码、策略映射、格式处理、填充写出与变换引擎。
"""

from .decoder import decode, load, read_source
from .formats import FormatProcessor, get_save_parameters
from .padding import compute_padding_size, iter_padding_chunks, write_padding
from .strategy import TransformPlan, TransformStrategy
from .transform_engine import process, process_into


__all__ = [
    "FormatProcessor",
    "TransformPlan",
    "TransformStrategy",
    "compute_padding_size",
    "decode",
    "get_save_parameters",
    "iter_padding_chunks",
    "load",
    "process",
    "process_into",
    "read_source",
    "write_padding",
]
