"""图像变换 MCP 服务器。

对外提供格式转换、压缩、增大体积三种处理的统一工具。
"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from .config import get_config
from .models.constants import (
    CompressionLevel,
    DataUnit,
    PaddingLimits,
    ProcessType,
    QualityDefaults,
    TargetFormat,
)
from .processor import transform_image as run_transform
from .utils.logging_helpers import configure_logging, get_logger
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPTransformResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result: dict[str, Any] = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def file_error(message: str, file_path: str | None = None) -> dict[str, Any]:
        """构建文件相关错误结果"""
        details = {"file_path": file_path} if file_path else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="file",
            details=details,
        )


logger = get_logger()

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("图像变换服务")


# ============================================================================
# 核心工具
# ============================================================================


@mcp.tool()
def transform_image(
    input_path: str,
    process_type: str = ProcessType.FORMAT_CONVERT.value,
    target_format: str | None = TargetFormat.JPEG.value,
    compression_level: str | None = None,
    data_size: int | None = None,
    data_unit: str | None = None,
    output_dir: str | None = None,
) -> MCPTransformResponse:
    """图像变换工具 - 格式转换 / 压缩 / 增大体积

    Args:
        input_path: 输入图片路径
        process_type: FORMAT_CONVERT、COMPRESS 或 ENLARGE
        target_format: JPEG、PNG 或 WEBP（COMPRESS 时可为空，沿用源格式）
        compression_level: COMPRESS 使用：LIGHT、NORMAL、STRONG、EXTREME
        data_size: ENLARGE 使用：追加的数据量 0-999
        data_unit: ENLARGE 使用：KB 或 MB
        output_dir: 输出目录（可选），文件名为 converted_<时间戳>.<扩展名>

    Returns:
        dict: 处理结果

    使用场景:
        # 🔄 格式转换
        transform_image("photo.png", "FORMAT_CONVERT", "WEBP")

        # 📉 强力压缩
        transform_image("photo.jpg", "COMPRESS", "JPEG", compression_level="STRONG")

        # 📈 增大到 +500KB
        transform_image("photo.png", "ENLARGE", "PNG", data_size=500, data_unit="KB")
    """
    input_path_obj = Path(input_path)
    if not input_path_obj.is_file():
        return MCPResponseBuilder.file_error(
            MessageFormatter.file_not_found(input_path), input_path
        )

    result = run_transform(
        input_path_obj,
        process_type,
        target_format=target_format,
        compression_level=compression_level,
        data_size=data_size,
        data_unit=data_unit,
        output_dir=output_dir,
    )
    response = result.to_dict()
    if not result.success:
        response["error_type"] = result.error_kind
    return response


@mcp.tool()
def list_presets() -> dict[str, Any]:
    """列出处理参数：压缩档位表、固定质量、支持的格式与填充限制"""
    return {
        "process_types": [t.value for t in ProcessType],
        "target_formats": [f.value for f in TargetFormat],
        "compression_levels": {
            level.value: {"scale_factor": scale, "quality": quality}
            for level, (scale, quality) in QualityDefaults.COMPRESSION_TABLE.items()
        },
        "format_convert_quality": QualityDefaults.FORMAT_CONVERT,
        "enlarge_quality": QualityDefaults.ENLARGE,
        "data_units": [u.value for u in DataUnit],
        "max_data_size": PaddingLimits.MAX_MAGNITUDE,
        "max_padding_bytes": PaddingLimits.MAX_PADDING_BYTES,
        "default_compression_level": CompressionLevel.NORMAL.value,
    }


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    configure_logging(get_config().logging)
    logger.info("启动图像变换 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
