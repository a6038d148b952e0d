"""图像解码模块。

读取源数据并解码为不可变的 Raster，无其他副作用。
"""

from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from PIL import Image, ImageOps

from ..config import get_config
from ..exceptions import DecodeError, handle_image_errors
from ..models.raster import Raster
from ..utils.logging_helpers import get_logger


logger = get_logger()

ImageSource = bytes | bytearray | memoryview | str | Path | BinaryIO


def read_source(source: ImageSource) -> bytes:
    """获取源图像的字节数据

    Args:
        source: 字节数据、文件路径或可读的二进制对象

    Raises:
        DecodeError: 文件不存在或无法读取
    """
    if isinstance(source, bytes):
        return source
    if isinstance(source, (bytearray, memoryview)):
        return bytes(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise DecodeError(DecodeError.NOT_FOUND, str(path))
        try:
            return path.read_bytes()
        except MemoryError as e:
            raise DecodeError(DecodeError.RESOURCE_EXHAUSTED, str(path)) from e
        except OSError as e:
            raise DecodeError(DecodeError.NOT_FOUND, f"{path}: {e}") from e

    try:
        return source.read()
    except MemoryError as e:
        raise DecodeError(DecodeError.RESOURCE_EXHAUSTED, "读取数据流失败") from e


@handle_image_errors("decode")
def decode(data: bytes) -> Raster:
    """将图像字节解码为 Raster

    Raises:
        DecodeError: 数据无法识别或已损坏；超过像素上限或内存不足
    """
    if not data:
        raise DecodeError(DecodeError.CORRUPT, "空数据")

    # 只读取配置的上限，不修改 Pillow 的全局设置；
    # Pillow 自身的 DecompressionBombError 由装饰器转换
    limit = get_config().transform.MAX_IMAGE_PIXELS

    with Image.open(BytesIO(data)) as img:
        source_format = img.format
        if limit and img.width * img.height > limit:
            raise DecodeError(
                DecodeError.RESOURCE_EXHAUSTED,
                f"像素数超过上限: {img.width}x{img.height}",
            )
        img.load()
        # 按EXIF方向摆正，同时得到脱离文件句柄的独立图像
        image = ImageOps.exif_transpose(img)
        if image is img:
            image = img.copy()

    logger.debug(f"解码完成: {source_format} {image.size} {image.mode}")
    return Raster.from_image(image, source_format=source_format)


def load(source: ImageSource) -> Raster:
    """读取并解码"""
    return decode(read_source(source))
