"""数据模型包。

定义图片处理相关的数据结构和模型。
"""

from .artifact import OutputArtifact
from .constants import (
    CompressionLevel,
    DataUnit,
    ImageFormats,
    PaddingLimits,
    ProcessType,
    QualityDefaults,
    TargetFormat,
    get_extension,
    get_format_alias,
    get_mime_type,
)
from .policy import (
    CompressPolicy,
    EnlargePolicy,
    ExtraSize,
    FormatConvertPolicy,
    ProcessingPolicy,
    build_policy,
)
from .raster import Raster
from .transform_result import BatchResult, TransformResult


__all__ = [
    "BatchResult",
    "CompressPolicy",
    "CompressionLevel",
    "DataUnit",
    "EnlargePolicy",
    "ExtraSize",
    "FormatConvertPolicy",
    "ImageFormats",
    "OutputArtifact",
    "PaddingLimits",
    "ProcessType",
    "ProcessingPolicy",
    "QualityDefaults",
    "Raster",
    "TargetFormat",
    "TransformResult",
    "build_policy",
    "get_extension",
    "get_format_alias",
    "get_mime_type",
]
