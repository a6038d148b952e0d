"""图像处理器接口。

基于核心变换引擎的文件级接口：读取源文件、执行处理、以时间戳文件名
保存输出，失败时丢弃已写入的部分文件。
"""

import threading
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

from .config import get_config
from .core.decoder import ImageSource, load
from .core.transform_engine import Policy, process
from .engine.concurrent_executor import ConcurrentExecutor
from .exceptions import ErrorHandler, ProcessError, ProcessErrorKind
from .models import (
    BatchResult,
    CompressionLevel,
    DataUnit,
    OutputArtifact,
    ProcessType,
    TargetFormat,
    TransformResult,
    build_policy,
)
from .utils.cleanup_helpers import PartialOutputGuard, validate_output_integrity
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter
from .utils.naming_helpers import PathResolver


logger = get_logger()


class ImageProcessor:
    """图像处理器。

    提供单文件、内存数据和批量三种处理入口。
    """

    def __init__(
        self,
        max_workers: int | None = None,
        output_dir: str | Path | None = None,
        verify_output: bool = True,
    ):
        """初始化处理器。

        Args:
            max_workers: 批量处理时的最大并发数，默认读取配置
            output_dir: 默认输出目录，None 时使用配置或源文件目录
            verify_output: 写出后是否校验输出可被解码
        """
        settings = get_config().processing
        max_workers = max_workers if max_workers is not None else settings.MAX_WORKERS
        if max_workers <= 0:
            raise ValueError("max_workers 必须大于 0")

        self.max_workers = max_workers
        self.output_dir = Path(output_dir) if output_dir else settings.OUTPUT_DIR
        self.output_prefix = settings.OUTPUT_PREFIX
        self.verify_output = verify_output

        logger.debug("初始化图像处理器")

    def transform_bytes(self, source: ImageSource, policy: Policy) -> OutputArtifact:
        """处理内存中的图像，不落盘

        Raises:
            DecodeError: 源数据无法解码
            ProcessError: 处理失败
        """
        return process(load(source), policy)

    def transform_file(
        self,
        input_path: str | Path,
        policy: Policy,
        output_path: str | Path | None = None,
        output_dir: str | Path | None = None,
        cancel_event: threading.Event | None = None,
    ) -> TransformResult:
        """处理单个图像文件并保存。

        Args:
            input_path: 输入文件路径
            policy: 处理策略
            output_path: 输出文件路径（可选，存在则覆盖）
            output_dir: 输出目录（可选），文件名为 converted_<时间戳>.<扩展名>
            cancel_event: 批量超时后由执行器设置；设置后不再写出，已写入的部分删除

        Returns:
            TransformResult: 处理结果，失败时 success 为 False

        Examples:
            >>> processor = ImageProcessor()
            >>> policy = build_policy("COMPRESS", "JPEG", compression_level="STRONG")
            >>> result = processor.transform_file("photo.png", policy)
            >>> print(result.get_summary())
        """
        input_path = Path(input_path)

        try:
            raster = load(input_path)
            artifact = process(raster, policy)
            _check_cancelled(cancel_event)
            target = self._persist(
                artifact, input_path, output_path, output_dir, cancel_event
            )
        except Exception as e:
            return ErrorHandler.handle_transform_error(e, input_path, "图像处理")

        logger.info(MessageFormatter.success(target))
        return TransformResult(
            input_path=input_path,
            output_path=target,
            original_size=input_path.stat().st_size,
            output_size=target.stat().st_size,
            success=True,
            process_type=policy.process_type.value,
            format_used=artifact.format.value,
            quality_used=artifact.quality_used,
            padding_size=artifact.padding_size,
            was_resized=artifact.was_resized,
            original_dimensions=artifact.original_dimensions,
            final_dimensions=artifact.final_dimensions,
        )

    def transform_many(
        self,
        input_paths: Iterable[str | Path],
        policy: Policy,
        output_dir: str | Path | None = None,
        timeout: float | None = None,
    ) -> BatchResult:
        """并发处理多个文件，每个文件独立成败

        Args:
            input_paths: 输入文件列表
            policy: 所有文件共用的处理策略
            output_dir: 输出目录（可选）
            timeout: 整批等待上限（秒），超时的文件记为失败
        """
        paths = [Path(p) for p in input_paths]
        resolved_dir = Path(output_dir) if output_dir else self.output_dir

        if not paths:
            return ErrorHandler.create_error_batch_result(resolved_dir, "没有需要处理的文件")

        cancel_event = threading.Event()
        executor = ConcurrentExecutor(self.max_workers, timeout)
        results = executor.execute_tasks(
            paths,
            lambda path: self.transform_file(
                path, policy, output_dir=resolved_dir, cancel_event=cancel_event
            ),
            cancel_event=cancel_event,
        )

        batch = BatchResult(output_dir=resolved_dir, results=results, success=True)
        logger.info(batch.get_summary())
        return batch

    def _persist(
        self,
        artifact: OutputArtifact,
        input_path: Path,
        output_path: str | Path | None,
        output_dir: str | Path | None,
        cancel_event: threading.Event | None = None,
    ) -> Path:
        """写出产物，返回最终路径"""
        if output_path is not None:
            target = Path(output_path)
            target.parent.mkdir(parents=True, exist_ok=True)
            return self._write(artifact, target, target.open("wb"), cancel_event)

        directory = Path(output_dir) if output_dir else self.output_dir
        directory = directory or input_path.parent
        directory.mkdir(parents=True, exist_ok=True)

        # 以独占方式创建，避免并发任务生成同名文件时互相覆盖
        while True:
            target = PathResolver.resolve_output_path(
                input_path,
                artifact.extension,
                output_dir=directory,
                prefix=self.output_prefix,
            )
            try:
                handle = target.open("xb")
            except FileExistsError:
                continue
            return self._write(artifact, target, handle, cancel_event)

    def _write(
        self,
        artifact: OutputArtifact,
        target: Path,
        handle: BinaryIO,
        cancel_event: threading.Event | None = None,
    ) -> Path:
        """流式写入，失败或取消时删除部分文件"""
        with PartialOutputGuard(target) as guard:
            with handle:
                artifact.write_to(handle, cancel_event)

            if self.verify_output and not validate_output_integrity(target):
                raise ProcessError(
                    ProcessErrorKind.ENCODE_FAILURE, f"输出文件无法解码: {target}"
                )
            _check_cancelled(cancel_event)
            guard.commit()

        return target


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ProcessError(ProcessErrorKind.RESOURCE_EXHAUSTED, "处理超时，已取消")


# 默认处理器实例
_default_processor: ImageProcessor | None = None


def get_processor() -> ImageProcessor:
    """获取默认处理器实例"""
    global _default_processor
    if _default_processor is None:
        _default_processor = ImageProcessor()
    return _default_processor


def transform_image(
    input_path: str | Path,
    process_type: ProcessType | str,
    target_format: TargetFormat | str | None = None,
    compression_level: CompressionLevel | str | None = None,
    data_size: int | None = None,
    data_unit: DataUnit | str | None = None,
    output_path: str | Path | None = None,
    output_dir: str | Path | None = None,
) -> TransformResult:
    """便捷函数：由松散参数构建策略并处理单个文件"""
    try:
        policy = build_policy(
            process_type,
            target_format=target_format,
            compression_level=compression_level,
            data_size=data_size,
            data_unit=data_unit,
        )
    except ProcessError as e:
        return ErrorHandler.handle_transform_error(e, Path(input_path), "参数验证")

    return get_processor().transform_file(
        input_path, policy, output_path=output_path, output_dir=output_dir
    )
