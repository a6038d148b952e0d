"""图像处理相关常量定义。

处理策略的固定数值表：压缩档位、固定质量、扩展名映射与填充上限。
"""

from enum import Enum
from typing import Final


class TargetFormat(str, Enum):
    """支持的输出容器格式"""

    JPEG = "JPEG"
    PNG = "PNG"
    WEBP = "WEBP"


class CompressionLevel(str, Enum):
    """压缩强度档位"""

    LIGHT = "LIGHT"  # 轻度压缩
    NORMAL = "NORMAL"  # 普通压缩
    STRONG = "STRONG"  # 强力压缩
    EXTREME = "EXTREME"  # 极强压缩


class DataUnit(str, Enum):
    """填充数据单位"""

    KB = "KB"
    MB = "MB"


class ProcessType(str, Enum):
    """处理类型"""

    FORMAT_CONVERT = "FORMAT_CONVERT"
    COMPRESS = "COMPRESS"
    ENLARGE = "ENLARGE"


class ImageFormats:
    """输出格式相关映射"""

    # 用户友好的别名
    ALIASES: Final[dict[str, str]] = {
        "JPG": "JPEG",
    }

    EXTENSIONS: Final[dict[TargetFormat, str]] = {
        TargetFormat.JPEG: "jpg",
        TargetFormat.PNG: "png",
        TargetFormat.WEBP: "webp",
    }

    MIME_TYPES: Final[dict[TargetFormat, str]] = {
        TargetFormat.JPEG: "image/jpeg",
        TargetFormat.PNG: "image/png",
        TargetFormat.WEBP: "image/webp",
    }


class QualityDefaults:
    """质量相关固定值"""

    # 档位 -> (缩放比例, 质量)
    COMPRESSION_TABLE: Final[dict[CompressionLevel, tuple[float, int]]] = {
        CompressionLevel.LIGHT: (0.8, 85),
        CompressionLevel.NORMAL: (0.6, 75),
        CompressionLevel.STRONG: (0.4, 60),
        CompressionLevel.EXTREME: (0.2, 40),
    }

    FORMAT_CONVERT: Final[int] = 90
    ENLARGE: Final[int] = 100


class PaddingLimits:
    """体积增大（填充）相关限制"""

    UNIT_BYTES: Final[dict[DataUnit, int]] = {
        DataUnit.KB: 1024,
        DataUnit.MB: 1024 * 1024,
    }

    # 单次请求的数值范围
    MIN_MAGNITUDE: Final[int] = 0
    MAX_MAGNITUDE: Final[int] = 999

    # 填充总量上限，超出部分静默截断
    MAX_PADDING_BYTES: Final[int] = 1_000_000_000

    # 单块最大 1 MiB
    CHUNK_SIZE: Final[int] = 1024 * 1024


# 便捷访问函数
def get_format_alias(format_str: str) -> str:
    """获取格式的标准名称"""
    format_upper = format_str.strip().upper()
    return ImageFormats.ALIASES.get(format_upper, format_upper)


def get_extension(target_format: TargetFormat | str) -> str | None:
    """获取格式的扩展名（不含点），不支持的格式返回 None"""
    try:
        return ImageFormats.EXTENSIONS[TargetFormat(target_format)]
    except ValueError:
        return None


def get_mime_type(target_format: TargetFormat | str) -> str | None:
    """获取格式的 MIME 类型"""
    try:
        return ImageFormats.MIME_TYPES[TargetFormat(target_format)]
    except ValueError:
        return None
