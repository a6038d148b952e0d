"""文件命名工具模块。

提供统一的文件命名策略和路径生成功能。
"""

import itertools
from datetime import datetime
from pathlib import Path


class FileNamingStrategy:
    """文件命名策略类"""

    TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

    @staticmethod
    def generate_output_name(
        extension: str,
        prefix: str = "converted",
        now: datetime | None = None,
    ) -> str:
        """生成带时间戳的输出文件名，如 converted_20240101_120000.jpg

        Args:
            extension: 扩展名（不含点）
            prefix: 文件名前缀
            now: 时间戳来源，默认当前时间

        Returns:
            str: 生成的文件名（不含路径）
        """
        timestamp = (now or datetime.now()).strftime(FileNamingStrategy.TIMESTAMP_FORMAT)
        return f"{prefix}_{timestamp}.{extension.lstrip('.')}"


class PathResolver:
    """路径解析器"""

    @staticmethod
    def resolve_output_path(
        input_path: Path,
        extension: str,
        output_dir: Path | None = None,
        prefix: str = "converted",
        now: datetime | None = None,
    ) -> Path:
        """解析输出路径

        在输出目录（默认源文件目录）下生成时间戳文件名，并保证不覆盖已有文件。
        """
        target_dir = output_dir or input_path.parent
        filename = FileNamingStrategy.generate_output_name(extension, prefix, now)

        return PathResolver.ensure_unique_path(target_dir / filename)

    @staticmethod
    def ensure_unique_path(path: Path) -> Path:
        """确保路径唯一，如果文件已存在则添加数字后缀

        Args:
            path: 原始路径

        Returns:
            Path: 唯一的路径
        """
        if not path.exists():
            return path

        base = path.stem
        suffix = path.suffix
        parent = path.parent

        for counter in itertools.count(1):
            new_path = parent / f"{base}_{counter}{suffix}"
            if not new_path.exists():
                return new_path

        # 理论上永远不会到达这里，但为了类型检查器
        return path  # pragma: no cover
