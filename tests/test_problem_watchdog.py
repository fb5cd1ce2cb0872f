"""
测试问题看门狗
"""

import io
import time

import pytest
from rich.console import Console

from conftest import FakeRunner
from kube_ready_checker.checks.problems import (
    Problem,
    ProblemSource,
    announce_problems,
    find_problems,
    load_patterns,
    output_problems,
)
from kube_ready_checker.collectors.log_sources import CrictlRuntime, KubeadmBootstrapper
from kube_ready_checker.collectors.models import ClusterConfig


class FakeRuntime:
    def __init__(self, containers=None):
        self.containers = containers or {}

    def list_containers(self, name):
        return self.containers.get(name, [])

    def container_log_cmd(self, container_id, lines):
        return ["crictl", "logs", container_id]


class FakeBootstrapper:
    def log_commands(self, cfg, lines):
        return {"kubelet": ["journalctl", "-u", "kubelet"]}


def _quiet_console():
    return Console(file=io.StringIO())


def test_default_patterns_load():
    patterns = load_patterns()

    assert patterns.is_problem("Warning  BackOff  kubelet  CrashLoopBackOff")
    assert patterns.is_problem("listen tcp 0.0.0.0:8443: bind: address already in use")
    assert not patterns.is_problem("error: no objects passed to apply")
    assert not patterns.is_problem("Started kubelet.")
    assert "kube-apiserver" in patterns.important_pods


def test_find_problems_tags_sources():
    runner = FakeRunner({
        "journalctl -u kubelet": ("ok line\nE0101 failed to run Kubelet: misconfig\n", 0),
        "crictl logs abc": ("Error from server: etcdserver timeout\nfine\n", 0),
    })
    runtime = FakeRuntime({"kube-apiserver": ["abc"]})

    problems = find_problems(runtime, FakeBootstrapper(), ClusterConfig(), runner)

    assert problems == [
        Problem(ProblemSource.BOOTSTRAPPER, "kubelet", "E0101 failed to run Kubelet: misconfig"),
        Problem(ProblemSource.RUNTIME, "kube-apiserver [abc]", "Error from server: etcdserver timeout"),
    ]


def test_find_problems_command_failure():
    runner = FakeRunner({"journalctl -u kubelet": ("", 1)})

    problems = find_problems(FakeRuntime(), FakeBootstrapper(), ClusterConfig(), runner)

    assert len(problems) == 1
    assert problems[0].source == ProblemSource.COMMAND
    assert problems[0].component == "kubelet"


def test_find_problems_with_default_adapters():
    runner = FakeRunner({
        "sudo crictl ps -a --quiet --name=etcd": ("e1\n", 0),
        "sudo crictl logs --tail 10 e1": ("panic: exit code 2\n", 0),
    })

    problems = find_problems(
        CrictlRuntime(runner), KubeadmBootstrapper(), ClusterConfig(), runner, lookback=10
    )

    assert [p.component for p in problems] == ["etcd [e1]"]
    assert "sudo journalctl -u kubelet -n 10 --no-pager" in runner.commands


def test_output_problems_caps_lines():
    console = Console(record=True, width=200, file=io.StringIO())
    problems = [
        Problem(ProblemSource.BOOTSTRAPPER, "kubelet", f"error: line {i}")
        for i in range(10)
    ]

    output_problems(problems, max_lines=3, console=console)

    text = console.export_text()
    assert "kubelet" in text
    assert "line 9" in text and "line 7" in text
    assert "line 6" not in text


def test_announce_problems_cooldown():
    """发现问题时至少阻塞 interval * multiplier"""
    found = [Problem(ProblemSource.RUNTIME, "etcd [x]", "CrashLoopBackOff")]

    start = time.monotonic()
    result = announce_problems(
        None, None, ClusterConfig(), None,
        finder=lambda r, bs, cfg, cr: found,
        retry_interval=0.01,
        backoff_multiplier=15,
        console=_quiet_console(),
    )
    elapsed = time.monotonic() - start

    assert result == found
    assert elapsed >= 0.15


def test_announce_problems_no_delay_when_clean(monkeypatch):
    sleeps = []
    monkeypatch.setattr("kube_ready_checker.checks.problems.time.sleep", sleeps.append)

    result = announce_problems(
        None, None, ClusterConfig(), None,
        finder=lambda r, bs, cfg, cr: [],
        retry_interval=10,
    )

    assert result == []
    assert sleeps == []


def test_announce_problems_default_cooldown(monkeypatch):
    sleeps = []
    monkeypatch.setattr("kube_ready_checker.checks.problems.time.sleep", sleeps.append)

    announce_problems(
        None, None, ClusterConfig(), None,
        finder=lambda r, bs, cfg, cr: [Problem(ProblemSource.COMMAND, "kubelet", "boom")],
        console=_quiet_console(),
    )

    assert sleeps == [pytest.approx(7.5)]


def test_announce_problems_uses_given_sleep():
    sleeps = []

    announce_problems(
        None, None, ClusterConfig(), None,
        finder=lambda r, bs, cfg, cr: [Problem(ProblemSource.RUNTIME, "etcd [x]", "panic")],
        retry_interval=2,
        backoff_multiplier=3,
        console=_quiet_console(),
        sleep=sleeps.append,
    )

    assert sleeps == [6]
