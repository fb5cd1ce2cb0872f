"""
轮询等待模块

基于 Tenacity 库按固定间隔重复检查, 直到成功或超时
"""

import logging
import time
from typing import Any, Callable, Optional, Tuple, Type

from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_delay,
    wait_fixed,
)

from .errors import DiagnosticError

logger = logging.getLogger(__name__)

FailureCallback = Callable[[BaseException, float], None]


def poll_until_ready(
    check: Callable[[], Any],
    timeout: float,
    interval: float,
    on_failure: Optional[FailureCallback] = None,
    exceptions: Tuple[Type[BaseException], ...] = (DiagnosticError,),
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """按固定间隔执行 check, 直到不再抛出可重试异常

    Args:
        check: 检查函数, 未就绪时抛出异常
        timeout: 总等待时间 (秒)
        interval: 两次检查之间的间隔 (秒)
        on_failure: 每次检查失败后调用, 参数为 (异常, 已等待秒数)
        exceptions: 视为"尚未就绪"的异常类型, 其他异常立即上抛
        sleep: 等待函数

    Returns:
        check 的返回值

    Raises:
        超时后重新抛出最后一次检查的异常

    Example:
        poll_until_ready(lambda: expected_components_running(client),
                         timeout=360, interval=0.5)
    """

    def _after(retry_state: RetryCallState) -> None:
        if on_failure is None or retry_state.outcome is None:
            return
        error = retry_state.outcome.exception()
        if error is not None:
            on_failure(error, retry_state.seconds_since_start or 0.0)

    retrying = Retrying(
        stop=stop_after_delay(timeout),
        wait=wait_fixed(interval),
        retry=retry_if_exception_type(exceptions),
        after=_after,
        before_sleep=before_sleep_log(logger, logging.DEBUG),
        sleep=sleep,
        reraise=True,
    )
    return retrying(check)
