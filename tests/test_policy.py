"""处理策略构建测试。"""

import pytest
from pydantic import ValidationError

from py_image_transform_mcp.exceptions import ProcessError, ProcessErrorKind
from py_image_transform_mcp.models import (
    CompressionLevel,
    CompressPolicy,
    DataUnit,
    EnlargePolicy,
    ExtraSize,
    FormatConvertPolicy,
    ProcessType,
    TargetFormat,
    build_policy,
)


class TestBuildPolicy:
    """调用方参数 -> 策略"""

    def test_format_convert(self):
        policy = build_policy("FORMAT_CONVERT", "webp")

        assert isinstance(policy, FormatConvertPolicy)
        assert policy.target_format == TargetFormat.WEBP

    def test_format_alias(self):
        """jpg 作为 JPEG 的别名"""
        policy = build_policy(ProcessType.FORMAT_CONVERT, "jpg")

        assert policy.target_format == TargetFormat.JPEG

    def test_compress(self):
        policy = build_policy("compress", "PNG", compression_level="strong")

        assert isinstance(policy, CompressPolicy)
        assert policy.level == CompressionLevel.STRONG
        assert policy.quality == 60

    def test_compress_defaults(self):
        """未指定档位默认普通压缩，未指定格式沿用源格式"""
        policy = build_policy("COMPRESS")

        assert policy.level == CompressionLevel.NORMAL
        assert policy.target_format is None

    def test_enlarge(self):
        policy = build_policy("ENLARGE", "PNG", data_size=500, data_unit="kb")

        assert isinstance(policy, EnlargePolicy)
        assert policy.extra_size == ExtraSize(magnitude=500, unit=DataUnit.KB)
        assert policy.extra_size.requested_bytes == 512000

    @pytest.mark.parametrize("process_type", ["formatConvert", "format-convert", "CONVERT"])
    def test_process_type_spellings(self, process_type):
        """处理类型的常见写法"""
        assert build_policy(process_type, "PNG").process_type == ProcessType.FORMAT_CONVERT

    @pytest.mark.parametrize("fmt", ["GIF", "bmp", "tiff", "img"])
    def test_unsupported_format(self, fmt):
        """格式不支持时报告 UnsupportedFormat"""
        with pytest.raises(ProcessError) as exc_info:
            build_policy("FORMAT_CONVERT", fmt)

        assert exc_info.value.kind == ProcessErrorKind.UNSUPPORTED_FORMAT

    @pytest.mark.parametrize("data_size", [-1, 1000, 5000])
    def test_magnitude_out_of_range(self, data_size):
        """数据量超出 0-999 被拒绝"""
        with pytest.raises(ProcessError) as exc_info:
            build_policy("ENLARGE", "PNG", data_size=data_size, data_unit="MB")

        assert exc_info.value.kind == ProcessErrorKind.INVALID_POLICY

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"process_type": "FORMAT_CONVERT"},
            {"process_type": "ENLARGE", "target_format": "PNG"},
            {"process_type": "ENLARGE", "target_format": "PNG", "data_size": 1, "data_unit": "GB"},
            {"process_type": "COMPRESS", "compression_level": "ULTRA"},
            {"process_type": "ROTATE", "target_format": "PNG"},
        ],
    )
    def test_invalid_policy(self, kwargs):
        """缺少或无效的参数报告 InvalidPolicy"""
        with pytest.raises(ProcessError) as exc_info:
            build_policy(**kwargs)

        assert exc_info.value.kind == ProcessErrorKind.INVALID_POLICY


class TestPolicyModels:
    """策略模型测试"""

    def test_policies_are_immutable(self):
        policy = FormatConvertPolicy(target_format="PNG")

        with pytest.raises(ValidationError):
            policy.target_format = TargetFormat.JPEG  # type: ignore[misc]

    def test_extra_size_bounds(self):
        with pytest.raises(ValidationError):
            ExtraSize(magnitude=1000)

    def test_discriminated_union_from_dict(self):
        """从字典按 process_type 选择策略类型"""
        from py_image_transform_mcp.models.policy import POLICY_ADAPTER

        policy = POLICY_ADAPTER.validate_python(
            {
                "process_type": ProcessType.ENLARGE,
                "target_format": "WEBP",
                "extra_size": {"magnitude": 2, "unit": "MB"},
            }
        )

        assert isinstance(policy, EnlargePolicy)
        assert policy.extra_size.requested_bytes == 2 * 1024 * 1024
