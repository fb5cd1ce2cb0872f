"""
就绪检查模块

- 系统 Pod 检查
- kubelet 状态探测
- 问题看门狗
- 等待引擎
"""

from .pods import expected_components_running, pod_status_msg
from .agent import kubelet_status, parse_agent_state
from .problems import (
    Problem,
    ProblemSource,
    announce_problems,
    find_problems,
    load_patterns,
    output_problems,
)
from .waiter import WaitReport, api_server_healthy, default_sa_exists, wait_for_components

__all__ = [
    # Pod 检查
    "expected_components_running",
    "pod_status_msg",
    # kubelet
    "kubelet_status",
    "parse_agent_state",
    # 问题看门狗
    "Problem",
    "ProblemSource",
    "announce_problems",
    "find_problems",
    "load_patterns",
    "output_problems",
    # 等待引擎
    "WaitReport",
    "api_server_healthy",
    "default_sa_exists",
    "wait_for_components",
]
