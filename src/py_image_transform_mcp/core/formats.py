"""格式处理器模块。

为 JPEG / PNG / WEBP 准备色彩模式并生成 Pillow 保存参数。
"""

import logging
from typing import Any

from PIL import Image

from ..config import get_config
from ..models.constants import TargetFormat


logger = logging.getLogger(__name__)


class FormatProcessor:
    """格式处理器"""

    def prepare_for_format(
        self, img: Image.Image, target_format: TargetFormat
    ) -> Image.Image:
        """为目标格式准备图片，始终返回新对象或原对象，不修改输入

        Args:
            img: PIL图片对象
            target_format: 目标格式

        Returns:
            Image.Image: 处理后的图片对象
        """
        match target_format:
            case TargetFormat.JPEG:
                return self._prepare_for_jpeg(img)
            case TargetFormat.PNG:
                return self._prepare_for_png(img)
            case TargetFormat.WEBP:
                return self._prepare_for_webp(img)
            case _:
                return img

    def _prepare_for_jpeg(self, img: Image.Image) -> Image.Image:
        """JPEG不支持透明度，合成到背景色上并转为RGB"""
        if img.mode == "P":
            if "transparency" not in img.info:
                return img.convert("RGB")
            img = img.convert("RGBA")

        if img.mode in ("LA", "PA"):
            img = img.convert("RGBA")

        if img.mode == "RGBA":
            background_color = self._get_optimal_background_color(img)
            rgb_img = Image.new("RGB", img.size, background_color)
            rgb_img.paste(img, mask=img.split()[-1])
            return rgb_img

        if img.mode != "RGB":
            # CMYK、灰度、二值及其他模式
            return img.convert("RGB")

        return img

    def _get_optimal_background_color(self, img: Image.Image) -> tuple[int, int, int]:
        """根据不透明的边缘像素选择背景色，默认白色"""
        edge_pixels = self._sample_edge_pixels(img)
        if len(edge_pixels) >= 3:
            return self._calculate_average_color(edge_pixels)
        return (255, 255, 255)

    def _sample_edge_pixels(self, img: Image.Image) -> list[tuple[int, int, int]]:
        """采样图像边缘像素"""
        width, height = img.size
        edge_pixels: list[tuple[int, int, int]] = []

        sample_step = max(1, min(width, height) // 10)  # 自适应采样步长

        points = [(x, y) for x in range(0, width, sample_step) for y in (0, height - 1)]
        points += [(x, y) for y in range(0, height, sample_step) for x in (0, width - 1)]

        for point in points:
            pixel = img.getpixel(point)
            if isinstance(pixel, tuple) and len(pixel) >= 4 and pixel[-1] > 128:
                edge_pixels.append((int(pixel[0]), int(pixel[1]), int(pixel[2])))

        return edge_pixels

    def _calculate_average_color(
        self, edge_pixels: list[tuple[int, int, int]]
    ) -> tuple[int, int, int]:
        """计算边缘像素的平均颜色"""
        count = len(edge_pixels)
        avg_r = sum(p[0] for p in edge_pixels) // count
        avg_g = sum(p[1] for p in edge_pixels) // count
        avg_b = sum(p[2] for p in edge_pixels) // count
        return (avg_r, avg_g, avg_b)

    def _prepare_for_png(self, img: Image.Image) -> Image.Image:
        """PNG支持大多数模式，只转换无法直接保存的模式"""
        if img.mode == "P":
            if "transparency" in img.info:
                return img.convert("RGBA")
            return img.convert("RGB")

        if img.mode == "CMYK":
            return img.convert("RGB")

        if img.mode == "PA":
            return img.convert("RGBA")

        # 1、L、LA、RGB、RGBA、I、I;16 等模式 PNG 都支持
        return img

    def _prepare_for_webp(self, img: Image.Image) -> Image.Image:
        """WebP只支持RGB和RGBA"""
        if img.mode in ("RGB", "RGBA"):
            return img

        has_alpha = img.mode in ("LA", "PA") or (
            img.mode == "P" and "transparency" in img.info
        )
        return img.convert("RGBA" if has_alpha else "RGB")


def get_save_parameters(target_format: TargetFormat, quality: int) -> dict[str, Any]:
    """获取保存参数（含 format）

    Args:
        target_format: 目标格式
        quality: 0-100 的质量值

    Returns:
        dict: 传给 Image.save 的参数
    """
    params: dict[str, Any] = {"format": target_format.value}

    match target_format:
        case TargetFormat.JPEG:
            params.update(get_jpeg_params(quality))
        case TargetFormat.PNG:
            params.update(get_png_params(quality))
        case TargetFormat.WEBP:
            params.update(get_webp_params(quality))

    return params


def get_jpeg_params(quality: int) -> dict[str, Any]:
    """获取JPEG压缩参数

    - quality: 原样使用，100 也不做调整
    - subsampling: 高质量用 4:4:4，中等 4:2:2，其余 4:2:0
    """
    defaults = get_config().transform.get_format_defaults("JPEG")
    params: dict[str, Any] = {"quality": quality, **defaults}

    if quality >= 95:
        params["subsampling"] = 0  # "4:4:4"
    elif quality >= 85:
        params["subsampling"] = 1  # "4:2:2"
    else:
        params["subsampling"] = 2  # "4:2:0"

    return params


def get_png_params(quality: int) -> dict[str, Any]:
    """获取PNG压缩参数

    PNG 为无损格式，质量值不影响输出，只记录在结果里。
    """
    logger.debug(f"PNG无损编码，忽略质量值 {quality}")
    return get_config().transform.get_format_defaults("PNG")


def get_webp_params(quality: int) -> dict[str, Any]:
    """获取WebP有损压缩参数

    alpha_quality 控制透明通道质量，高质量时保持透明通道无损。
    """
    params: dict[str, Any] = {
        "quality": quality,
        **get_config().transform.get_format_defaults("WEBP"),
    }

    if quality >= 85:
        params["alpha_quality"] = 100
    elif quality >= 70:
        params["alpha_quality"] = min(100, quality + 10)
    else:
        params["alpha_quality"] = quality

    return params
