"""
命令执行器 - 在节点上执行 shell 命令

使用策略：
1. LocalRunner - 直接在本机执行 (节点即本机)
2. PrefixRunner - 通过前缀转发到节点,例如 ``docker exec <node>`` 或 ``ssh <host>``
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..utils.errors import CommandError

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    command: str
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


class CommandRunner(Protocol):
    """命令执行接口

    ``run_cmd`` 成功时返回 RunResult;退出码非 0 或无法执行时抛出
    CommandError,异常中携带已捕获的输出。
    """

    def run_cmd(self, cmd: List[str], timeout: Optional[float] = None) -> RunResult:
        ...


class LocalRunner:
    """在本机执行命令"""

    def __init__(self, default_timeout: float = 60):
        self.default_timeout = default_timeout

    def _wrap(self, cmd: List[str]) -> List[str]:
        return list(cmd)

    def run_cmd(self, cmd: List[str], timeout: Optional[float] = None) -> RunResult:
        full_cmd = self._wrap(cmd)
        command = shlex.join(full_cmd)
        logger.debug("执行命令: %s", command)

        try:
            proc = subprocess.run(
                full_cmd,
                capture_output=True,
                text=True,
                timeout=timeout or self.default_timeout
            )
        except subprocess.TimeoutExpired as e:
            result = RunResult(
                command=command,
                stdout=_to_text(e.stdout),
                stderr=_to_text(e.stderr),
                returncode=-1,
            )
            raise CommandError(f"Command timed out after {e.timeout}s", result) from e
        except OSError as e:
            result = RunResult(command=command, stderr=str(e), returncode=-1)
            raise CommandError(f"Command could not be started: {e}", result) from e

        result = RunResult(
            command=command,
            stdout=proc.stdout,
            stderr=proc.stderr,
            returncode=proc.returncode,
        )
        if proc.returncode != 0:
            raise CommandError(
                f"Command exited with status {proc.returncode}: {proc.stderr.strip()}",
                result,
            )
        return result


class PrefixRunner(LocalRunner):
    """在命令前加上转发前缀,在目标节点上执行

    Example:
        runner = PrefixRunner(["docker", "exec", "minikube"])
        runner.run_cmd(["sudo", "systemctl", "is-active", "kubelet"])
    """

    def __init__(self, prefix: Sequence[str], default_timeout: float = 60):
        super().__init__(default_timeout=default_timeout)
        self.prefix = list(prefix)

    def _wrap(self, cmd: List[str]) -> List[str]:
        return self.prefix + list(cmd)


def _to_text(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
