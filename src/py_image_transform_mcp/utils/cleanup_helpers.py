"""清理工具模块。

提供失败输出的清理和完整性校验功能。
"""

from pathlib import Path
from typing import Any

from .logging_helpers import get_logger


logger = get_logger()


class PartialOutputGuard:
    """部分输出守卫

    包裹一次写文件操作：若期间抛出异常，删除已写入的部分文件，
    保证调用方永远看不到残缺的输出。
    """

    def __init__(self, file_path: Path):
        self.file_path = file_path
        self.committed = False

    def commit(self) -> None:
        """标记写入完成，退出时保留文件"""
        self.committed = True

    def discard(self) -> bool:
        """删除部分文件"""
        try:
            if self.file_path.exists():
                self.file_path.unlink()
                logger.debug(f"已丢弃部分输出: {self.file_path}")
                return True
        except OSError as e:
            logger.warning(f"丢弃部分输出失败 {self.file_path}: {e}")
        return False

    def __enter__(self):
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        del exc_val, exc_tb
        if exc_type is not None or not self.committed:
            self.discard()


def validate_output_integrity(file_path: Path) -> bool:
    """验证输出文件的完整性

    Args:
        file_path: 文件路径

    Returns:
        bool: 文件是否可被正常解码
    """
    if not file_path.exists() or file_path.stat().st_size == 0:
        return False

    from PIL import Image, UnidentifiedImageError

    try:
        with Image.open(file_path) as img:
            img.verify()
        return True
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.debug(f"验证文件完整性失败 {file_path}: {e}")
        return False
