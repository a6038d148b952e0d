"""Python 图像变换库。

基于 Pillow 的格式转换、档位压缩与体积增大处理。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "图像格式转换、压缩与体积增大，基于 Pillow"

# 核心功能导出
from .core.decoder import decode, load
from .core.transform_engine import process
from .exceptions import DecodeError, ProcessError, ProcessErrorKind
from .models import (
    BatchResult,
    CompressPolicy,
    EnlargePolicy,
    ExtraSize,
    FormatConvertPolicy,
    OutputArtifact,
    Raster,
    TransformResult,
    build_policy,
)
from .processor import ImageProcessor, transform_image


__all__ = [
    "BatchResult",
    "CompressPolicy",
    "DecodeError",
    "EnlargePolicy",
    "ExtraSize",
    "FormatConvertPolicy",
    "ImageProcessor",
    "OutputArtifact",
    "ProcessError",
    "ProcessErrorKind",
    "Raster",
    "TransformResult",
    "build_policy",
    "decode",
    "get_version",
    "load",
    "process",
    "transform_image",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
