"""
就绪检查数据模型定义

Pod/节点状态使用 dataclass 和枚举,集群配置使用 Pydantic
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel


class PodPhase(str, Enum):
    """Pod 生命周期阶段"""
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


class AgentState(str, Enum):
    """节点服务管理器 (systemd) 报告的 kubelet 状态"""
    RUNNING = "Running"
    STOPPED = "Stopped"
    STARTING = "Starting"
    ERROR = "Error"


@dataclass
class PodCondition:
    type: str
    reason: str = ""
    message: str = ""


@dataclass
class PodObservation:
    """单次轮询中读取到的 Pod 快照"""
    name: str
    uid: str
    phase: str
    labels: Dict[str, str] = field(default_factory=dict)
    conditions: List[PodCondition] = field(default_factory=list)

    @classmethod
    def from_json(cls, item: Dict) -> "PodObservation":
        """从 kubectl -o json 的单个 item 构造"""
        metadata = item.get("metadata", {})
        status = item.get("status", {})

        conditions = [
            PodCondition(
                type=c.get("type", ""),
                reason=c.get("reason", ""),
                message=c.get("message", ""),
            )
            for c in status.get("conditions", []) or []
        ]

        return cls(
            name=metadata.get("name", ""),
            uid=metadata.get("uid", ""),
            phase=status.get("phase", PodPhase.UNKNOWN.value),
            labels=metadata.get("labels", {}) or {},
            conditions=conditions,
        )


@dataclass
class AgentStatus:
    """kubelet 状态探测结果

    ``error`` 非空并不代表 ``state`` 无效: systemctl is-active 对 inactive
    服务返回退出码 3,但输出仍然是合法的状态字符串。
    """
    state: AgentState
    error: Optional[Exception] = None


class ClusterConfig(BaseModel):
    """传给日志收集方的集群上下文"""
    name: str = "cluster"
    kubernetes_version: str = ""
    namespace: str = "kube-system"
    kubectl_context: Optional[str] = None


# 系统命名空间下必须有 Running Pod 的核心工作负载 (顺序决定缺失列表顺序)
EXPECTED_WORKLOADS = (
    "kube-dns",  # coredns
    "etcd",
    "kube-apiserver",
    "kube-controller-manager",
    "kube-proxy",
    "kube-scheduler",
)

# 集群对工作负载身份标签的写法并不统一
WORKLOAD_LABEL_KEYS = ("component", "k8s-app")

SYSTEM_NAMESPACE = "kube-system"
