"""处理策略模块。

将处理策略映射为具体的执行计划：缩放比例、编码质量、目标格式、填充量。
映射是确定且完备的，每种策略组合只对应一个计划。
"""

import math

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ProcessError, ProcessErrorKind
from ..models.constants import (
    QualityDefaults,
    TargetFormat,
    get_extension,
    get_format_alias,
)
from ..models.policy import (
    CompressPolicy,
    EnlargePolicy,
    FormatConvertPolicy,
)
from ..models.raster import Raster
from ..utils.logging_helpers import get_logger
from .padding import compute_padding_size


logger = get_logger()


class TransformPlan(BaseModel):
    """执行计划"""

    model_config = ConfigDict(frozen=True)

    target_format: TargetFormat = Field(description="输出格式")
    extension: str = Field(description="扩展名（不含点）")
    quality: int = Field(ge=0, le=100, description="编码质量")
    scale_factor: float | None = Field(None, gt=0, le=1, description="缩放比例")
    target_size: tuple[int, int] | None = Field(None, description="缩放后的尺寸")
    padding_size: int = Field(0, ge=0, description="填充字节数")

    @property
    def needs_resize(self) -> bool:
        return self.target_size is not None


class TransformStrategy:
    """策略 -> 执行计划"""

    def plan(
        self,
        policy: FormatConvertPolicy | CompressPolicy | EnlargePolicy,
        raster: Raster,
    ) -> TransformPlan:
        """生成执行计划

        Raises:
            ProcessError: 格式不支持、参数无效
        """
        match policy:
            case FormatConvertPolicy(target_format=fmt):
                target = self._resolve_format(fmt)
                return TransformPlan(
                    target_format=target,
                    extension=self._extension_for(target),
                    quality=QualityDefaults.FORMAT_CONVERT,
                )

            case CompressPolicy(level=level, target_format=fmt):
                target = self._resolve_format(fmt or raster.source_format)
                scale_factor, quality = self._lookup_level(level)
                new_size = self.scaled_size(raster.size, scale_factor)
                if new_size == raster.size:
                    logger.debug(f"缩放后尺寸未变化 {raster.size}，跳过缩放")
                    new_size = None

                return TransformPlan(
                    target_format=target,
                    extension=self._extension_for(target),
                    quality=quality,
                    scale_factor=scale_factor,
                    target_size=new_size,
                )

            case EnlargePolicy(target_format=fmt, extra_size=extra_size):
                target = self._resolve_format(fmt)
                return TransformPlan(
                    target_format=target,
                    extension=self._extension_for(target),
                    quality=QualityDefaults.ENLARGE,
                    padding_size=compute_padding_size(extra_size),
                )

            case _:
                raise ProcessError(
                    ProcessErrorKind.INVALID_POLICY,
                    f"未知的处理策略: {type(policy).__name__}",
                )

    @staticmethod
    def scaled_size(
        size: tuple[int, int], scale_factor: float
    ) -> tuple[int, int]:
        """按比例向下取整计算新尺寸，每边至少 1 像素"""
        width, height = size
        return (
            max(1, math.floor(width * scale_factor)),
            max(1, math.floor(height * scale_factor)),
        )

    @staticmethod
    def _lookup_level(level: object) -> tuple[float, int]:
        try:
            return QualityDefaults.COMPRESSION_TABLE[level]  # type: ignore[index]
        except KeyError as e:
            raise ProcessError(
                ProcessErrorKind.INVALID_POLICY, f"未知的压缩档位: {level}"
            ) from e

    @staticmethod
    def _resolve_format(value: object) -> TargetFormat:
        """只接受 JPEG/PNG/WEBP，不做任何回退"""
        if isinstance(value, TargetFormat):
            return value
        if isinstance(value, str):
            try:
                return TargetFormat(get_format_alias(value))
            except ValueError:
                pass
        raise ProcessError(
            ProcessErrorKind.UNSUPPORTED_FORMAT, f"不支持的目标格式: {value}"
        )

    @staticmethod
    def _extension_for(target: TargetFormat) -> str:
        extension = get_extension(target)
        if extension is None:
            raise ProcessError(
                ProcessErrorKind.UNSUPPORTED_FORMAT, f"没有对应的扩展名: {target}"
            )
        return extension
