"""处理策略模型。

三种处理方式（格式转换 / 压缩 / 增大体积）的不可变参数描述，
以 process_type 为判别字段组成联合类型。
"""

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
)
from pydantic import ValidationError as PydanticValidationError

from .constants import (
    CompressionLevel,
    DataUnit,
    PaddingLimits,
    ProcessType,
    QualityDefaults,
    TargetFormat,
    get_format_alias,
)


def _normalize_format(value: Any) -> Any:
    """接受 "jpg"、"Jpeg" 等写法"""
    if isinstance(value, str) and not isinstance(value, TargetFormat):
        return get_format_alias(value)
    return value


def _normalize_upper(value: Any) -> Any:
    if isinstance(value, str) and not isinstance(value, (CompressionLevel, DataUnit)):
        return value.strip().upper()
    return value


FormatField = Annotated[TargetFormat, BeforeValidator(_normalize_format)]
LevelField = Annotated[CompressionLevel, BeforeValidator(_normalize_upper)]
UnitField = Annotated[DataUnit, BeforeValidator(_normalize_upper)]


class ExtraSize(BaseModel):
    """需要追加的数据量"""

    model_config = ConfigDict(frozen=True)

    magnitude: int = Field(
        ge=PaddingLimits.MIN_MAGNITUDE,
        le=PaddingLimits.MAX_MAGNITUDE,
        description="数值 0-999",
    )
    unit: UnitField = Field(DataUnit.KB, description="单位 KB/MB")

    @property
    def requested_bytes(self) -> int:
        """请求的字节数（未截断）"""
        return self.magnitude * PaddingLimits.UNIT_BYTES[self.unit]


class FormatConvertPolicy(BaseModel):
    """仅格式转换，不改变尺寸"""

    model_config = ConfigDict(frozen=True)

    process_type: Literal[ProcessType.FORMAT_CONVERT] = ProcessType.FORMAT_CONVERT
    target_format: FormatField = Field(description="目标格式")


class CompressPolicy(BaseModel):
    """按档位缩小尺寸并降低质量"""

    model_config = ConfigDict(frozen=True)

    process_type: Literal[ProcessType.COMPRESS] = ProcessType.COMPRESS
    level: LevelField = Field(CompressionLevel.NORMAL, description="压缩档位")
    target_format: FormatField | None = Field(
        None, description="目标格式，None 时沿用源格式"
    )

    @property
    def scale_factor(self) -> float:
        return QualityDefaults.COMPRESSION_TABLE[self.level][0]

    @property
    def quality(self) -> int:
        return QualityDefaults.COMPRESSION_TABLE[self.level][1]


class EnlargePolicy(BaseModel):
    """保持画面不变，追加填充数据增大文件体积"""

    model_config = ConfigDict(frozen=True)

    process_type: Literal[ProcessType.ENLARGE] = ProcessType.ENLARGE
    target_format: FormatField = Field(description="目标格式")
    extra_size: ExtraSize = Field(description="追加的数据量")


ProcessingPolicy = Annotated[
    FormatConvertPolicy | CompressPolicy | EnlargePolicy,
    Field(discriminator="process_type"),
]

POLICY_ADAPTER: TypeAdapter[ProcessingPolicy] = TypeAdapter(ProcessingPolicy)

# 调用方常用的处理类型写法
PROCESS_TYPE_ALIASES: dict[str, ProcessType] = {
    "CONVERT": ProcessType.FORMAT_CONVERT,
    "FORMATCONVERT": ProcessType.FORMAT_CONVERT,
    "FORMAT_CONVERT": ProcessType.FORMAT_CONVERT,
    "COMPRESS": ProcessType.COMPRESS,
    "ENLARGE": ProcessType.ENLARGE,
}


def build_policy(
    process_type: ProcessType | str,
    target_format: TargetFormat | str | None = None,
    compression_level: CompressionLevel | str | None = None,
    data_size: int | None = None,
    data_unit: DataUnit | str | None = None,
) -> FormatConvertPolicy | CompressPolicy | EnlargePolicy:
    """根据调用方的松散参数构建处理策略

    Raises:
        ProcessError: 格式不支持时为 UNSUPPORTED_FORMAT，其余参数问题为 INVALID_POLICY
    """
    # 导入异常（避免循环导入）
    from ..exceptions import ProcessError, ProcessErrorKind

    resolved_type = _resolve_process_type(process_type)
    if resolved_type is None:
        raise ProcessError(
            ProcessErrorKind.INVALID_POLICY, f"未知的处理类型: {process_type}"
        )

    if target_format is not None:
        target_format = _resolve_target_format(target_format)

    payload: dict[str, Any] = {"process_type": resolved_type}
    if target_format is not None:
        payload["target_format"] = target_format

    match resolved_type:
        case ProcessType.COMPRESS:
            if compression_level is not None:
                payload["level"] = compression_level
        case ProcessType.ENLARGE:
            if data_size is not None:
                payload["extra_size"] = {
                    "magnitude": data_size,
                    "unit": data_unit or DataUnit.KB,
                }

    try:
        return POLICY_ADAPTER.validate_python(payload)
    except PydanticValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in e.errors()
        )
        raise ProcessError(
            ProcessErrorKind.INVALID_POLICY, f"处理参数无效 ({fields}): {e}"
        ) from e


def _resolve_process_type(value: ProcessType | str) -> ProcessType | None:
    if isinstance(value, ProcessType):
        return value
    key = str(value).strip().upper().replace("-", "_").replace(" ", "_")
    return PROCESS_TYPE_ALIASES.get(key) or PROCESS_TYPE_ALIASES.get(
        key.replace("_", "")
    )


def _resolve_target_format(value: TargetFormat | str) -> TargetFormat:
    """校验并标准化目标格式，只接受 JPEG/PNG/WEBP"""
    from ..exceptions import ProcessError, ProcessErrorKind

    if isinstance(value, TargetFormat):
        return value
    try:
        return TargetFormat(get_format_alias(str(value)))
    except ValueError as e:
        available = ", ".join(fmt.value for fmt in TargetFormat)
        raise ProcessError(
            ProcessErrorKind.UNSUPPORTED_FORMAT,
            f"不支持的格式: {value}。可用格式: {available}",
        ) from e
