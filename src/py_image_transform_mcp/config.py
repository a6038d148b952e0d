"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
压缩档位表、填充上限等固定数值见 models.constants，不在此处配置。
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class TransformDefaults:
    """编码相关的默认配置"""

    # 编码器参数
    PNG_COMPRESS_LEVEL: int = 6
    WEBP_METHOD: int = 4
    JPEG_OPTIMIZE: bool = True

    # 解码上限（像素数），超过视为资源耗尽
    MAX_IMAGE_PIXELS: int = 178_956_970

    def get_format_defaults(self, format_name: str) -> dict[str, Any]:
        """获取格式特定的默认参数"""
        defaults = {
            "JPEG": {"optimize": self.JPEG_OPTIMIZE},
            "WEBP": {"method": self.WEBP_METHOD},
            "PNG": {"compress_level": self.PNG_COMPRESS_LEVEL},
        }
        return defaults.get(format_name, {})


@dataclass(frozen=True)
class ProcessingDefaults:
    """处理相关的默认配置"""

    # 并发设置
    MAX_WORKERS: int = 4

    # 输出目录，None 表示与源文件同目录
    OUTPUT_DIR: Path | None = None
    OUTPUT_PREFIX: str = "converted"


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    # 日志级别
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 文件日志
    ENABLE_FILE_LOGGING: bool = False
    LOG_FILE_PATH: str = "py_image_transform.log"
    LOG_FILE_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT: int = 5


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.transform = TransformDefaults()
        self.processing = ProcessingDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 编码配置
        if png_level := os.getenv("PIC_PNG_COMPRESS_LEVEL"):
            object.__setattr__(self.transform, "PNG_COMPRESS_LEVEL", int(png_level))

        if webp_method := os.getenv("PIC_WEBP_METHOD"):
            object.__setattr__(self.transform, "WEBP_METHOD", int(webp_method))

        if max_pixels := os.getenv("PIC_MAX_IMAGE_PIXELS"):
            object.__setattr__(self.transform, "MAX_IMAGE_PIXELS", int(max_pixels))

        # 处理配置
        if max_workers := os.getenv("PIC_MAX_WORKERS"):
            object.__setattr__(self.processing, "MAX_WORKERS", int(max_workers))

        if output_dir := os.getenv("PIC_OUTPUT_DIR"):
            object.__setattr__(self.processing, "OUTPUT_DIR", Path(output_dir))

        # 日志配置
        if log_level := os.getenv("PIC_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if enable_file_log := os.getenv("PIC_ENABLE_FILE_LOGGING"):
            object.__setattr__(
                self.logging,
                "ENABLE_FILE_LOGGING",
                enable_file_log.lower() in ("true", "1", "yes"),
            )

        if log_file := os.getenv("PIC_LOG_FILE_PATH"):
            object.__setattr__(self.logging, "LOG_FILE_PATH", log_file)


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
