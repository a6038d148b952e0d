"""解码后的位图模型。"""

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Raster(BaseModel):
    """已解码的像素数据及其尺寸

    解码后即冻结；处理过程只会生成新图像，不会修改这里的像素。
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    width: int = Field(gt=0, description="宽度")
    height: int = Field(gt=0, description="高度")
    image: Image.Image = Field(description="像素数据", repr=False)
    source_format: str | None = Field(None, description="源容器格式")

    @model_validator(mode="after")
    def validate_dimensions(self) -> "Raster":
        if self.image.size != (self.width, self.height):
            raise ValueError(
                f"尺寸与像素数据不符: {self.width}x{self.height} != {self.image.size}"
            )
        return self

    @classmethod
    def from_image(cls, image: Image.Image, source_format: str | None = None) -> "Raster":
        """从 Pillow 图像构建"""
        return cls(
            width=image.width,
            height=image.height,
            image=image,
            source_format=source_format,
        )

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def mode(self) -> str:
        return self.image.mode

    @property
    def has_transparency(self) -> bool:
        """是否有透明通道"""
        return self.image.mode in ("RGBA", "LA", "PA") or (
            "transparency" in self.image.info
        )
