"""处理结果模型。

定义调用层持久化输出后的结果数据结构。
"""

from pathlib import Path
from typing import Any

from humanize import naturalsize
from pydantic import BaseModel, Field


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class TransformResult(BaseResult):
    """单个图片的处理结果"""

    input_path: Path = Field(description="输入文件路径")
    output_path: Path | None = Field(None, description="输出文件路径")
    original_size: int = Field(description="原始文件大小（字节）")
    output_size: int = Field(description="输出文件大小（字节）")

    # 处理参数
    process_type: str | None = Field(None, description="处理类型")
    format_used: str | None = Field(None, description="使用的格式")
    quality_used: int | None = Field(None, description="使用的质量值")
    padding_size: int = Field(0, description="追加的填充字节数")
    error_kind: str | None = Field(None, description="错误类型")

    # 处理信息
    was_resized: bool = Field(False, description="是否调整了尺寸")
    original_dimensions: tuple[int, int] | None = Field(None, description="原始尺寸")
    final_dimensions: tuple[int, int] | None = Field(None, description="最终尺寸")

    def get_size_delta(self) -> int:
        """输出相对原始文件的字节变化（可为负）"""
        return self.output_size - self.original_size

    def get_size_ratio(self) -> float:
        """输出大小占原始大小的百分比"""
        if self.original_size == 0:
            return 0.0
        return (self.output_size / self.original_size) * 100

    def get_original_size_human(self) -> str:
        """人类可读的原始文件大小"""
        return self.format_size(self.original_size)

    def get_output_size_human(self) -> str:
        """人类可读的输出文件大小"""
        return self.format_size(self.output_size)

    def get_summary(self) -> str:
        """处理结果摘要"""
        if not self.success:
            return f"失败: {self.error}"

        return (
            f"{self.get_original_size_human()} → {self.get_output_size_human()} "
            f"({self.get_size_ratio():.1f}%)"
        )

    def to_dict(self) -> dict[str, Any]:
        """转为可序列化的响应字典"""
        data = self.model_dump(mode="json")
        data["summary"] = self.get_summary()
        return data


class BatchResult(BaseResult):
    """批量处理结果"""

    output_dir: Path | None = Field(None, description="输出目录")
    results: list[TransformResult] = Field(description="所有文件的处理结果")

    def get_total_count(self) -> int:
        return len(self.results)

    def get_success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    def get_failure_count(self) -> int:
        return self.get_total_count() - self.get_success_count()

    def get_success_rate(self) -> float:
        """获取成功率（百分比）"""
        total = self.get_total_count()
        if total == 0:
            return 0.0
        return (self.get_success_count() / total) * 100

    def get_total_output_size(self) -> int:
        """总输出大小"""
        return sum(r.output_size for r in self.results if r.success)

    def get_summary(self) -> str:
        """批量处理摘要"""
        if not self.success:
            return f"批量处理失败: {self.error}"

        return (
            f"处理 {self.get_success_count()}/{self.get_total_count()} 个文件 "
            f"(成功率 {self.get_success_rate():.1f}%), "
            f"总输出 {self.format_size(self.get_total_output_size())}"
        )
