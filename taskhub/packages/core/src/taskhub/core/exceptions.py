"""TaskHub 异常体系

未找到记录不属于异常：查询类操作返回 None / False 作为缺失信号。
"""


class TaskHubError(Exception):
    """TaskHub 基础异常"""

    def __init__(self, message: str, recoverable: bool = False) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方重试是否可能成功
        """
        super().__init__(message)
        self.recoverable = recoverable


class InvalidArgumentError(TaskHubError, ValueError):
    """输入参数不合法（必填字段为空、字段超长等）

    在任何存储写入之前抛出，不会产生部分写入。
    """

    def __init__(self, field: str, message: str) -> None:
        """
        Args:
            field: 不合法的字段名
            message: 错误描述
        """
        super().__init__(message, recoverable=False)
        self.field = field


class StoreUnavailableError(TaskHubError):
    """底层存储不可用（连接关闭、磁盘错误、锁超时等）

    写操作失败时事务已回滚。
    """

    def __init__(self, operation: str, original_error: Exception) -> None:
        """
        Args:
            operation: 失败的存储操作名
            original_error: 原始异常
        """
        super().__init__(
            f"任务存储不可用: {operation} -- {original_error}",
            recoverable=True,
        )
        self.operation = operation
        self.original_error = original_error
