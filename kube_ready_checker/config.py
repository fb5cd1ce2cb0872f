"""
运行配置

默认值可以通过环境变量 (或 .env 文件) 覆盖:

    KREADY_NAMESPACE=kube-system
    KREADY_KUBECTL_CONTEXT=minikube
    KREADY_RETRY_INTERVAL=0.5
    KREADY_BACKOFF_MULTIPLIER=15
    KREADY_MAX_PROBLEM_LINES=5
    KREADY_MIN_LOG_CHECK_TIME=60
    KREADY_WAIT_TIMEOUT=360
    KREADY_LOG_LOOKBACK=400
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .collectors.models import SYSTEM_NAMESPACE

ENV_PREFIX = "KREADY_"

# 两次 API 调用重试之间的基础间隔 (秒)
API_CALL_RETRY_INTERVAL = 0.5
# 发现问题后冷却时间 = 基础间隔 * 倍数
PROBLEM_BACKOFF_MULTIPLIER = 15
# 每个来源最多展示的问题行数
MAX_PROBLEM_LINES = 5
# 日志回看行数: 足够包含失败程序的 usage 输出, 又不至于带出无关的旧问题
LOOKBACK_LINES = 400
# 等待多久之后才开始向控制台输出问题
MIN_LOG_CHECK_TIME = 60
# 每个组件各自的默认等待时间 (6 分钟), 多个组件时总时长按组件数累加
DEFAULT_WAIT_TIMEOUT = 360


class Settings(BaseModel):
    """就绪等待参数"""

    namespace: str = SYSTEM_NAMESPACE
    kubectl_context: Optional[str] = None
    retry_interval: float = Field(API_CALL_RETRY_INTERVAL, gt=0)
    backoff_multiplier: float = Field(PROBLEM_BACKOFF_MULTIPLIER, ge=0)
    max_problem_lines: int = Field(MAX_PROBLEM_LINES, ge=1)
    min_log_check_time: float = Field(MIN_LOG_CHECK_TIME, ge=0)
    wait_timeout: float = Field(DEFAULT_WAIT_TIMEOUT, gt=0)
    log_lookback: int = Field(LOOKBACK_LINES, ge=1)

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """从环境变量加载, 显式传入的参数优先"""
        load_dotenv()

        values = {}
        for name in cls.model_fields:
            raw = os.getenv(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
