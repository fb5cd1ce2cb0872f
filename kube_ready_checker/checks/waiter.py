"""
就绪等待引擎

按规范顺序逐个等待调用方选择的组件:
1. apiserver - /healthz 返回 ok
2. system_pods - kube-system 中核心工作负载都有 Running 的 Pod
3. default_sa - default ServiceAccount 已创建

每次检查失败后, 若等待时间已超过 min_log_check_time, 交给问题看门狗
决定是否放慢轮询。
"""

import logging
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, Optional

from ..collectors.command_runner import CommandRunner
from ..collectors.log_sources import Bootstrapper, ContainerRuntime
from ..collectors.models import ClusterConfig
from ..components import (
    APISERVER_WAIT_KEY,
    DEFAULT_SA_WAIT_KEY,
    SYSTEM_PODS_WAIT_KEY,
    ComponentSet,
    enabled_components,
    should_wait,
)
from ..config import Settings
from ..utils.errors import (
    APIServerUnhealthyError,
    DiagnosticError,
    ServiceAccountMissingError,
    WaitTimeoutError,
)
from ..utils.retry import poll_until_ready
from .agent import kubelet_status
from .pods import expected_components_running
from .problems import announce_problems, find_problems

logger = logging.getLogger(__name__)


@dataclass
class WaitReport:
    """各组件就绪耗时 (秒)"""
    durations: Dict[str, float] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return sum(self.durations.values())


def api_server_healthy(client) -> None:
    """apiserver /healthz 必须返回 ok"""
    result = client.get_raw("/healthz")
    if not result.get("success"):
        raise APIServerUnhealthyError(
            "apiserver healthz request failed",
            {"error": result.get("error", "")},
        )
    body = str(result.get("data", "")).strip()
    if body != "ok":
        raise APIServerUnhealthyError(
            "apiserver healthz did not return ok",
            {"body": body[:200]},
        )


def default_sa_exists(client) -> None:
    """default 命名空间下的 default ServiceAccount 必须存在"""
    result = client.get_service_account("default", "default")
    if not result.get("success"):
        raise ServiceAccountMissingError(
            "default service account not found",
            {"error": result.get("error", "")},
        )


def wait_for_components(
    components: ComponentSet,
    client,
    runner: CommandRunner,
    runtime: ContainerRuntime,
    bootstrapper: Bootstrapper,
    cfg: ClusterConfig,
    settings: Optional[Settings] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitReport:
    """等待所选组件全部就绪

    Raises:
        WaitTimeoutError: 某个组件在 wait_timeout 内未就绪
    """
    settings = settings or Settings()
    report = WaitReport()

    if not should_wait(components):
        logger.info("未选择任何等待组件, 跳过就绪检查")
        return report

    checks: Dict[str, Callable[[], None]] = {
        APISERVER_WAIT_KEY: lambda: api_server_healthy(client),
        SYSTEM_PODS_WAIT_KEY: lambda: expected_components_running(client, settings.namespace),
        DEFAULT_SA_WAIT_KEY: lambda: default_sa_exists(client),
    }

    # 静默期从整个等待开始计时, 不随组件重置
    wait_start = time.monotonic()

    def _on_failure(error: BaseException, elapsed: float) -> None:
        logger.info("尚未就绪 (%.1fs): %s", elapsed, error)
        # 本组件已到期, 马上就会超时, 不再冷却
        if elapsed >= settings.wait_timeout:
            return
        if time.monotonic() - wait_start < settings.min_log_check_time:
            return
        announce_problems(
            runtime, bootstrapper, cfg, runner,
            finder=partial(find_problems, lookback=settings.log_lookback),
            max_lines=settings.max_problem_lines,
            retry_interval=settings.retry_interval,
            backoff_multiplier=settings.backoff_multiplier,
            sleep=sleep,
        )

    for name in enabled_components(components):
        logger.info("等待组件 %s ...", name)
        if name == SYSTEM_PODS_WAIT_KEY:
            status = kubelet_status(runner)
            logger.info("kubelet 状态: %s", status.state.value)

        start = time.monotonic()
        try:
            poll_until_ready(
                checks[name],
                timeout=settings.wait_timeout,
                interval=settings.retry_interval,
                on_failure=_on_failure,
                sleep=sleep,
            )
        except DiagnosticError as e:
            raise WaitTimeoutError(name, settings.wait_timeout, e) from e

        report.durations[name] = time.monotonic() - start
        logger.info("组件 %s 已就绪, 耗时 %.1fs", name, report.durations[name])

    return report
