"""图像变换引擎模块。

根据处理策略生成输出产物：选择缩放比例与质量、按需缩放、编码到目标格式，
增大体积时附加填充长度。引擎无状态、无副作用，可在多个线程中并发调用。
"""

from io import BytesIO
from typing import BinaryIO

from PIL import Image

from ..exceptions import handle_image_errors
from ..models.artifact import OutputArtifact
from ..models.policy import CompressPolicy, EnlargePolicy, FormatConvertPolicy
from ..models.raster import Raster
from ..utils.logging_helpers import get_logger
from .formats import FormatProcessor, get_save_parameters
from .strategy import TransformPlan, TransformStrategy


logger = get_logger()

Policy = FormatConvertPolicy | CompressPolicy | EnlargePolicy


def process(raster: Raster, policy: Policy) -> OutputArtifact:
    """处理单个图像。

    Args:
        raster: 已解码的图像
        policy: 处理策略

    Returns:
        OutputArtifact: 输出产物，填充部分在写出时才生成

    Raises:
        ProcessError: UNSUPPORTED_FORMAT / ENCODE_FAILURE /
            RESOURCE_EXHAUSTED / INVALID_POLICY
    """
    plan = TransformStrategy().plan(policy, raster)
    logger.debug(
        f"执行计划: {plan.target_format.value} q={plan.quality} "
        f"resize={plan.target_size} padding={plan.padding_size}"
    )

    final_image, data = _render(raster, plan)

    return OutputArtifact(
        data=data,
        format=plan.target_format,
        extension=plan.extension,
        quality_used=plan.quality,
        padding_size=plan.padding_size,
        original_dimensions=raster.size,
        final_dimensions=final_image.size,
        scale_factor=plan.scale_factor,
    )


def process_into(raster: Raster, policy: Policy, sink: BinaryIO) -> OutputArtifact:
    """处理并直接写入 sink，填充逐块写出

    写入失败时 sink 中可能残留部分数据，由调用方丢弃。
    """
    artifact = process(raster, policy)
    artifact.write_to(sink)
    return artifact


@handle_image_errors("encode")
def _render(raster: Raster, plan: TransformPlan) -> tuple[Image.Image, bytes]:
    """缩放、转换色彩模式并编码"""
    image = raster.image
    if plan.target_size is not None:
        image = _resize_image(image, plan.target_size)

    prepared = FormatProcessor().prepare_for_format(image, plan.target_format)

    buffer = BytesIO()
    prepared.save(buffer, **get_save_parameters(plan.target_format, plan.quality))
    return image, buffer.getvalue()


def _resize_image(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    """平滑缩放；调色板图像先转换以便 LANCZOS 生效"""
    if img.mode == "P":
        img = img.convert("RGBA" if "transparency" in img.info else "RGB")
    elif img.mode == "1":
        img = img.convert("L")
    return img.resize(size, Image.Resampling.LANCZOS)
