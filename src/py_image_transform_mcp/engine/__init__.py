"""处理执行模块。

包含批量任务的并发执行逻辑。
"""

from .concurrent_executor import ConcurrentExecutor


__all__ = [
    "ConcurrentExecutor",
]
