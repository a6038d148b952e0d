"""消息格式化工具模块。

提供统一的错误消息、成功消息格式化功能。
"""

from pathlib import Path


class MessageFormatter:
    """统一的消息格式化器"""

    # 错误类型 -> 面向用户的提示
    USER_MESSAGES: dict[str, str] = {
        "DecodeError": "无法加载图片",
        "UnsupportedFormat": "不支持的目标格式",
        "EncodeFailure": "图片处理失败",
        "ResourceExhausted": "内存不足，无法增加如此大的数据",
        "InvalidPolicy": "处理参数无效",
    }

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def format_error(operation: str, path: str | Path, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{path}]: {error}"

    @staticmethod
    def user_message(kind: str, error: Exception | None = None) -> str:
        """错误类型对应的用户提示"""
        base = MessageFormatter.USER_MESSAGES.get(kind)
        if base is None:
            return f"转换出错: {error}" if error else "转换出错"
        if error:
            return f"{base}: {error}"
        return base

    @staticmethod
    def success(output_path: str | Path) -> str:
        """处理成功消息"""
        return f"图片处理成功！已保存到：{output_path}"
