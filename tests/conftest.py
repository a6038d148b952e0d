"""测试配置文件。

提供测试所需的fixtures和配置。
"""

from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from py_image_transform_mcp.config import reset_config
from py_image_transform_mcp.models.raster import Raster


def _draw_pattern(img: Image.Image) -> Image.Image:
    """绘制带颜色变化的图案，避免纯色图片让编码器退化"""
    draw = ImageDraw.Draw(img)
    width, height = img.size
    for i in range(20):
        x, y = (i * 37) % width, (i * 23) % height
        color = (i * 13 % 256, i * 29 % 256, i * 53 % 256)
        if img.mode == "RGBA":
            color = (*color, 100 + (i * 7) % 155)
        draw.rectangle([x, y, x + width // 5, y + height // 5], fill=color)
    return img


@pytest.fixture
def make_image() -> Callable[..., Image.Image]:
    """创建测试图片的工厂"""

    def _make(size: tuple[int, int] = (120, 80), mode: str = "RGB") -> Image.Image:
        background = (255, 255, 255, 0) if mode == "RGBA" else "white"
        return _draw_pattern(Image.new(mode, size, color=background))

    return _make


@pytest.fixture
def make_image_bytes(make_image) -> Callable[..., bytes]:
    """生成编码后的图片字节"""

    def _make(
        fmt: str = "PNG", size: tuple[int, int] = (120, 80), mode: str = "RGB"
    ) -> bytes:
        buffer = BytesIO()
        make_image(size, mode).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_raster(make_image) -> Callable[..., Raster]:
    """直接构建 Raster，跳过编码解码"""

    def _make(
        size: tuple[int, int] = (120, 80),
        mode: str = "RGB",
        source_format: str | None = "PNG",
    ) -> Raster:
        return Raster.from_image(make_image(size, mode), source_format=source_format)

    return _make


@pytest.fixture
def sample_images(tmp_path: Path, make_image) -> dict[str, Path]:
    """在临时目录中生成各种格式的素材图片"""
    images_dir = tmp_path / "images"
    images_dir.mkdir()

    images = {}
    for name, fmt, size, mode in [
        ("png", "PNG", (200, 150), "RGB"),
        ("jpeg", "JPEG", (320, 240), "RGB"),
        ("webp", "WEBP", (160, 160), "RGB"),
        ("transparent", "PNG", (100, 100), "RGBA"),
    ]:
        path = images_dir / f"{name}.{fmt.lower()}"
        make_image(size, mode).save(path, fmt)
        images[name] = path

    corrupt = images_dir / "corrupt.png"
    corrupt.write_bytes(b"\x89PNG\r\n\x1a\nnot really a png")
    images["corrupt"] = corrupt

    return images


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """输出目录fixture"""
    directory = tmp_path / "output"
    directory.mkdir()
    return directory


@pytest.fixture
def fresh_config(monkeypatch):
    """测试结束后恢复全局配置

    先撤销环境变量再重建配置，避免测试设置的 PIC_* 残留到全局配置中。
    """
    reset_config()
    yield
    monkeypatch.undo()
    reset_config()


class CountingSink:
    """只统计写入量的输出对象"""

    def __init__(self):
        self.written = 0
        self.max_chunk = 0
        self.writes = 0

    def write(self, data) -> int:
        size = len(data)
        self.written += size
        self.max_chunk = max(self.max_chunk, size)
        self.writes += 1
        return size


@pytest.fixture
def counting_sink() -> CountingSink:
    return CountingSink()
