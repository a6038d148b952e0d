"""并发执行器模块。

在线程池中并行执行相互独立的处理任务，每个任务拥有自己的数据，
互不共享可变状态。
"""

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path

from ..exceptions import ErrorHandler, ProcessError, ProcessErrorKind
from ..models.transform_result import TransformResult


logger = logging.getLogger(__name__)


class ConcurrentExecutor:
    """通用并发执行器

    引擎本身不提供取消机制；超时由这里判定，未完成的任务
    记为资源耗尽（超时），并保证它们不会留下输出文件。
    """

    def __init__(self, max_workers: int = 4, timeout: float | None = None):
        """初始化并发执行器

        Args:
            max_workers: 最大并发数
            timeout: 整批任务的等待上限（秒），None 为不限
        """
        self.max_workers = max_workers
        self.timeout = timeout

    def execute_tasks(
        self,
        input_paths: Sequence[Path],
        task_function: Callable[[Path], TransformResult],
        cancel_event: threading.Event | None = None,
    ) -> list[TransformResult]:
        """执行并发任务，结果顺序与输入一致

        Args:
            input_paths: 输入文件列表
            task_function: 处理单个文件的函数
            cancel_event: 超时后设置，通知仍在运行的任务停止写出

        Returns:
            list[TransformResult]: 任务执行结果列表
        """
        if not input_paths:
            return []

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            futures = [executor.submit(task_function, path) for path in input_paths]
            _, not_done = wait(futures, timeout=self.timeout)
            if not_done and cancel_event is not None:
                cancel_event.set()

            results: list[TransformResult] = []
            for path, future in zip(input_paths, futures, strict=True):
                results.append(self._collect_result(path, future))
        finally:
            # 不等待超时的任务；它们会在后台自行结束
            executor.shutdown(wait=False, cancel_futures=True)

        return results

    def _collect_result(self, path: Path, future: Future) -> TransformResult:
        """收集单个任务的结果"""
        if not future.done():
            future.cancel()
            # 已报告为失败的任务若稍后仍写出了文件，完成时删除
            future.add_done_callback(_discard_late_output)
            error = ProcessError(
                ProcessErrorKind.RESOURCE_EXHAUSTED,
                f"处理超时（{self.timeout} 秒）",
            )
            return ErrorHandler.handle_transform_error(error, path, "并发任务处理")

        try:
            result = future.result()
        except Exception as e:
            return ErrorHandler.handle_transform_error(e, path, "并发任务处理")

        if result.success:
            logger.debug(f"处理成功: {path}")
        else:
            logger.warning(f"处理失败: {path} - {result.error}")
        return result


def _discard_late_output(future: Future) -> None:
    """删除超时任务在报告失败之后写出的文件"""
    if future.cancelled() or future.exception() is not None:
        return

    result = future.result()
    if result.success and result.output_path is not None:
        try:
            result.output_path.unlink(missing_ok=True)
            logger.debug(f"已删除超时任务的输出: {result.output_path}")
        except OSError as e:
            logger.warning(f"删除超时任务的输出失败 {result.output_path}: {e}")
