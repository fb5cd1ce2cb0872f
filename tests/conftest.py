"""
测试公共夹具
"""

from typing import Dict, List, Optional

import pytest

from kube_ready_checker.collectors.command_runner import RunResult
from kube_ready_checker.collectors.models import (
    EXPECTED_WORKLOADS,
    PodCondition,
    PodObservation,
)
from kube_ready_checker.utils.errors import CommandError, ListError


def make_pod(
    name: str,
    phase: str = "Running",
    labels: Optional[Dict[str, str]] = None,
    conditions: Optional[List[PodCondition]] = None,
    uid: str = "uid-1",
) -> PodObservation:
    return PodObservation(
        name=name,
        uid=uid,
        phase=phase,
        labels=labels if labels is not None else {"component": name},
        conditions=conditions or [],
    )


class FakeClient:
    """假的集群客户端, 按预设返回 Pod/healthz/ServiceAccount"""

    def __init__(self, pods=None, list_error=None, healthz=None, sa_found=True):
        self.pods = pods or []
        self.list_error = list_error
        self.healthz = healthz or [{"success": True, "data": "ok"}]
        self.sa_found = sa_found
        self.namespaces = []
        self.sa_calls = 0

    def list_pods(self, namespace):
        self.namespaces.append(namespace)
        if self.list_error:
            raise self.list_error
        return list(self.pods)

    def get_raw(self, path):
        if len(self.healthz) > 1:
            return self.healthz.pop(0)
        return self.healthz[0]

    def get_service_account(self, name, namespace="default"):
        self.sa_calls += 1
        if self.sa_found:
            return {"success": True, "data": {"metadata": {"name": name}}}
        return {"success": False, "error": f'serviceaccounts "{name}" not found'}


class FakeRunner:
    """假的命令执行器

    responses: {命令字符串: (stdout, returncode)}, 未配置的命令返回空输出
    """

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.commands = []

    def run_cmd(self, cmd, timeout=None):
        command = " ".join(cmd)
        self.commands.append(command)
        stdout, returncode = self.responses.get(command, ("", 0))
        result = RunResult(command=command, stdout=stdout, returncode=returncode)
        if returncode != 0:
            raise CommandError(f"Command exited with status {returncode}", result)
        return result


def healthy_pods() -> List[PodObservation]:
    pods = []
    for name in EXPECTED_WORKLOADS:
        if name == "kube-dns":
            pods.append(make_pod("coredns-abc", labels={"k8s-app": "kube-dns"}))
        else:
            pods.append(make_pod(f"{name}-node1", labels={"component": name}))
    return pods


@pytest.fixture
def fake_client():
    return FakeClient(pods=healthy_pods())


@pytest.fixture
def list_failure():
    return ListError("failed to list pods: connection refused", namespace="kube-system")
