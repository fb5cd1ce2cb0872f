"""
系统 Pod 就绪检查

判断 kube-system 中期望的核心工作负载是否都有处于 Running 的 Pod。
只保证最小集合存在,不保证所有 Pod 都健康。
"""

import logging
from typing import List, Set

from ..collectors.models import (
    EXPECTED_WORKLOADS,
    PodObservation,
    PodPhase,
    SYSTEM_NAMESPACE,
    WORKLOAD_LABEL_KEYS,
)
from ..utils.errors import MissingComponentsError

logger = logging.getLogger(__name__)


def expected_components_running(client, namespace: str = SYSTEM_NAMESPACE) -> None:
    """检查期望的核心组件是否都在运行

    Args:
        client: 提供 list_pods(namespace) 的集群客户端
        namespace: 系统命名空间

    Raises:
        ListError: 列举 Pod 失败 (原样上抛)
        MissingComponentsError: 有期望组件没有 Running 的 Pod
    """
    pods = client.list_pods(namespace)

    found: Set[str] = set()
    for pod in pods:
        logger.info("found pod: %s", pod_status_msg(pod))
        if pod.phase != PodPhase.RUNNING.value:
            continue
        for key in WORKLOAD_LABEL_KEYS:
            value = pod.labels.get(key)
            if value:
                found.add(value)

    missing: List[str] = [name for name in EXPECTED_WORKLOADS if name not in found]
    if missing:
        raise MissingComponentsError(missing)


def pod_status_msg(pod: PodObservation) -> str:
    """生成一行可读的 Pod 状态, 用于调试日志

    Example:
        "etcd-node1" [8f2c...] Pending: PodScheduled:Unschedulable (0/1 nodes are available)
    """
    parts = [f'"{pod.name}" [{pod.uid}] {pod.phase}']
    for i, cond in enumerate(pod.conditions):
        if cond.reason:
            parts.append(": " if i == 0 else " / ")
            parts.append(f"{cond.type}:{cond.reason}")
        if cond.message:
            parts.append(f" ({cond.message})")
    return "".join(parts)
