"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、任务字段长度限制等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKHUB_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKHUB_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskhub.db"),
    )


# 任务标题最大长度（trim 之后计算）
TITLE_MAX_LENGTH: int = 100

# 任务描述最大长度（trim 之后计算）
DESCRIPTION_MAX_LENGTH: int = 500

# SQLite 忙等待超时（毫秒）
SQLITE_BUSY_TIMEOUT_MS: int = int(
    os.environ.get("TASKHUB_SQLITE_BUSY_TIMEOUT_MS", "5000")
)
