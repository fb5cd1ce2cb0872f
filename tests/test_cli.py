"""
测试命令行入口
"""

from unittest.mock import patch

import pytest

from kube_ready_checker.checks.waiter import WaitReport
from kube_ready_checker.cli import main as cli
from kube_ready_checker.config import Settings
from kube_ready_checker.utils.errors import MissingComponentsError, WaitTimeoutError


@patch("kube_ready_checker.cli.main.wait_for_components")
def test_run_ready(mock_wait):
    mock_wait.return_value = WaitReport(durations={"apiserver": 1.0})

    assert cli.run("apiserver", Settings()) == 0

    components = mock_wait.call_args[0][0]
    assert components["apiserver"] is True
    assert components["system_pods"] is False


@patch("kube_ready_checker.cli.main.wait_for_components")
def test_run_timeout(mock_wait):
    mock_wait.side_effect = WaitTimeoutError("system_pods", 360, MissingComponentsError(["etcd"]))

    assert cli.run("all", Settings()) == 1


@patch("kube_ready_checker.cli.main.wait_for_components")
def test_run_uses_node_exec_prefix(mock_wait):
    mock_wait.return_value = WaitReport()

    cli.run("none", Settings(), node_exec="docker exec minikube")

    runner = mock_wait.call_args[0][2]
    assert runner.prefix == ["docker", "exec", "minikube"]


def test_list_components(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["kube-ready-checker", "--list-components"])

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == 0
    out = capsys.readouterr().out
    assert "apiserver" in out and "default_sa" in out
