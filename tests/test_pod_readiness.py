"""
测试系统 Pod 就绪检查
"""

import logging

import pytest

from conftest import FakeClient, healthy_pods, make_pod
from kube_ready_checker.checks.pods import expected_components_running, pod_status_msg
from kube_ready_checker.collectors.models import EXPECTED_WORKLOADS, PodCondition
from kube_ready_checker.utils.errors import ListError, MissingComponentsError


def test_all_expected_running(fake_client):
    """六个核心组件都有 Running Pod 时检查通过"""
    assert expected_components_running(fake_client) is None
    assert fake_client.namespaces == ["kube-system"]


@pytest.mark.parametrize("removed", EXPECTED_WORKLOADS)
def test_single_missing_component_is_named(removed):
    pods = [
        p for p in healthy_pods()
        if removed not in p.labels.values()
    ]

    with pytest.raises(MissingComponentsError) as exc_info:
        expected_components_running(FakeClient(pods=pods))

    assert exc_info.value.missing == [removed]


@pytest.mark.parametrize("phase", ["Failed", "Pending", "Unknown", "Succeeded"])
def test_non_running_pod_does_not_count(phase):
    pods = [p for p in healthy_pods() if p.labels.get("component") != "etcd"]
    pods.append(make_pod("etcd-node1", phase=phase, labels={"component": "etcd"}))

    with pytest.raises(MissingComponentsError) as exc_info:
        expected_components_running(FakeClient(pods=pods))

    assert exc_info.value.missing == ["etcd"]


def test_partial_cluster_missing_in_expected_order():
    pods = [
        make_pod("kube-apiserver", labels={"component": "kube-apiserver"}),
        make_pod("etcd", labels={"component": "etcd"}),
    ]

    with pytest.raises(MissingComponentsError) as exc_info:
        expected_components_running(FakeClient(pods=pods))

    err = exc_info.value
    assert err.missing == [
        "kube-dns",
        "kube-controller-manager",
        "kube-proxy",
        "kube-scheduler",
    ]
    assert sorted(err.missing) == [
        "kube-controller-manager",
        "kube-dns",
        "kube-proxy",
        "kube-scheduler",
    ]
    assert err.message == (
        "missing components: kube-dns, kube-controller-manager, kube-proxy, kube-scheduler"
    )


def test_unrelated_labels_ignored():
    pods = healthy_pods()
    pods.append(make_pod("nginx", labels={"app": "nginx"}))
    expected_components_running(FakeClient(pods=pods))


def test_list_error_propagates(list_failure):
    with pytest.raises(ListError) as exc_info:
        expected_components_running(FakeClient(list_error=list_failure))

    assert exc_info.value is list_failure


def test_logs_one_line_per_pod(fake_client, caplog):
    with caplog.at_level(logging.INFO, logger="kube_ready_checker.checks.pods"):
        expected_components_running(fake_client)

    found_lines = [r for r in caplog.records if r.getMessage().startswith("found pod:")]
    assert len(found_lines) == len(fake_client.pods)


def test_pod_status_msg_plain():
    pod = make_pod("etcd-node1", uid="1234")
    assert pod_status_msg(pod) == '"etcd-node1" [1234] Running'


def test_pod_status_msg_conditions():
    pod = make_pod(
        "coredns-abc",
        phase="Pending",
        uid="u1",
        conditions=[
            PodCondition(type="PodScheduled", reason="Unschedulable", message="0/1 nodes are available"),
            PodCondition(type="Ready", reason="ContainersNotReady"),
            PodCondition(type="Initialized"),
        ],
    )

    assert pod_status_msg(pod) == (
        '"coredns-abc" [u1] Pending: PodScheduled:Unschedulable (0/1 nodes are available)'
        " / Ready:ContainersNotReady"
    )


def test_pod_status_msg_first_condition_without_reason():
    """第一个条件没有 reason 时, 后续条件仍以 / 分隔"""
    pod = make_pod(
        "etcd-node1",
        phase="Pending",
        uid="u2",
        conditions=[
            PodCondition(type="Initialized", message="waiting"),
            PodCondition(type="Ready", reason="ContainersNotReady"),
        ],
    )

    assert pod_status_msg(pod) == '"etcd-node1" [u2] Pending (waiting) / Ready:ContainersNotReady'
