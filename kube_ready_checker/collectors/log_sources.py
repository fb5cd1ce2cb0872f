"""
日志来源 - 容器运行时与引导器

只负责构造/执行取日志所需的命令,问题识别见 checks.problems
"""

import logging
from typing import Dict, List, Protocol

from .command_runner import CommandRunner
from .models import ClusterConfig

logger = logging.getLogger(__name__)


class ContainerRuntime(Protocol):
    """容器运行时接口"""

    def list_containers(self, name: str) -> List[str]:
        ...

    def container_log_cmd(self, container_id: str, lines: int) -> List[str]:
        ...


class Bootstrapper(Protocol):
    """集群引导器接口

    log_commands 返回 {来源名: 命令}
    """

    def log_commands(self, cfg: ClusterConfig, lines: int) -> Dict[str, List[str]]:
        ...


class CrictlRuntime:
    """基于 crictl 的运行时日志来源 (containerd / cri-o)"""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def list_containers(self, name: str) -> List[str]:
        """按名称列出容器 ID (包括已退出的)

        Raises:
            CommandError: crictl 执行失败
        """
        cmd = ["sudo", "crictl", "ps", "-a", "--quiet", f"--name={name}"]
        result = self.runner.run_cmd(cmd)
        logger.debug("%s 的容器: %s", name, result.stdout.split())
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def container_log_cmd(self, container_id: str, lines: int) -> List[str]:
        return ["sudo", "crictl", "logs", "--tail", str(lines), container_id]


class KubeadmBootstrapper:
    """kubeadm 引导的节点: kubelet 由 systemd 管理"""

    def log_commands(self, cfg: ClusterConfig, lines: int) -> Dict[str, List[str]]:
        return {
            "kubelet": ["sudo", "journalctl", "-u", "kubelet", "-n", str(lines), "--no-pager"],
            "dmesg": [
                "bash", "-c",
                f"sudo dmesg -PH -L=never --level warn,err,crit,alert,emerg | tail -n {lines}",
            ],
        }
