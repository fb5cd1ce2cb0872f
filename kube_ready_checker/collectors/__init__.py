"""
收集器模块 - 集群与节点状态数据来源

提供 kubectl 客户端、节点命令执行器和日志来源
"""

from .k8s_client import get_k8s_client, KubectlWrapper
from .command_runner import CommandRunner, LocalRunner, PrefixRunner, RunResult
from .log_sources import Bootstrapper, ContainerRuntime, CrictlRuntime, KubeadmBootstrapper
from .models import (
    AgentState,
    AgentStatus,
    ClusterConfig,
    PodCondition,
    PodObservation,
    PodPhase,
    EXPECTED_WORKLOADS,
    WORKLOAD_LABEL_KEYS,
    SYSTEM_NAMESPACE,
)

__all__ = [
    # K8s 客户端
    "get_k8s_client",
    "KubectlWrapper",
    # 命令执行
    "CommandRunner",
    "LocalRunner",
    "PrefixRunner",
    "RunResult",
    # 日志来源
    "Bootstrapper",
    "ContainerRuntime",
    "CrictlRuntime",
    "KubeadmBootstrapper",
    # 模型
    "AgentState",
    "AgentStatus",
    "ClusterConfig",
    "PodCondition",
    "PodObservation",
    "PodPhase",
    "EXPECTED_WORKLOADS",
    "WORKLOAD_LABEL_KEYS",
    "SYSTEM_NAMESPACE",
]
