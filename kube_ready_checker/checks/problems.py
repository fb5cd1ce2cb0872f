"""
问题看门狗 - 识别已知故障特征并放慢轮询

设计理念：
- 轮询每隔几秒重试一次, 集群卡在已知的坏状态时会反复打印相同的诊断
- 发现问题时只展示有限行数, 并在返回前插入一次冷却等待
- 没有问题时立即返回
"""

import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, List, Optional, Pattern, Tuple

import yaml
from rich.console import Console
from rich.markup import escape

from ..collectors.command_runner import CommandRunner
from ..collectors.log_sources import Bootstrapper, ContainerRuntime
from ..collectors.models import ClusterConfig
from ..config import (
    API_CALL_RETRY_INTERVAL,
    LOOKBACK_LINES,
    MAX_PROBLEM_LINES,
    PROBLEM_BACKOFF_MULTIPLIER,
)
from ..utils.errors import CommandError

logger = logging.getLogger(__name__)

PATTERNS_FILE = Path(__file__).parent / "patterns.yaml"

_console = Console(stderr=True)


class ProblemSource(str, Enum):
    """问题来源子系统"""
    RUNTIME = "runtime"
    BOOTSTRAPPER = "bootstrapper"
    COMMAND = "command"


@dataclass
class Problem:
    source: ProblemSource
    component: str
    message: str


@dataclass
class ProblemPatterns:
    root_cause: Pattern
    ignore_cause: Optional[Pattern]
    important_pods: List[str]

    def is_problem(self, line: str) -> bool:
        if not self.root_cause.search(line):
            return False
        return not (self.ignore_cause and self.ignore_cause.search(line))


def load_patterns(path: Optional[Path] = None) -> ProblemPatterns:
    """从 YAML 文件加载故障特征

    Args:
        path: 特征文件路径 (默认使用包内 patterns.yaml)
    """
    if path is None:
        return _default_patterns()
    return _load_patterns_file(Path(path))


@lru_cache(maxsize=1)
def _default_patterns() -> ProblemPatterns:
    return _load_patterns_file(PATTERNS_FILE)


def _load_patterns_file(path: Path) -> ProblemPatterns:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}

    root_causes = data.get("root_causes") or []
    ignore_causes = data.get("ignore_causes") or []

    return ProblemPatterns(
        root_cause=re.compile("|".join(root_causes)) if root_causes else re.compile(r"(?!)"),
        ignore_cause=re.compile("|".join(ignore_causes)) if ignore_causes else None,
        important_pods=list(data.get("important_pods") or []),
    )


def log_commands(
    runtime: ContainerRuntime,
    bootstrapper: Bootstrapper,
    cfg: ClusterConfig,
    lines: int,
    important_pods: List[str],
) -> Dict[str, Tuple[ProblemSource, List[str]]]:
    """构建需要检查的日志命令表

    Returns:
        {组件名: (ProblemSource, 命令)}, 先引导器日志后容器日志
    """
    cmds: Dict[str, Tuple[ProblemSource, List[str]]] = {}
    for name, cmd in bootstrapper.log_commands(cfg, lines).items():
        cmds[name] = (ProblemSource.BOOTSTRAPPER, cmd)

    for pod in important_pods:
        try:
            ids = runtime.list_containers(pod)
        except CommandError as e:
            logger.warning("无法列出 %s 的容器: %s", pod, e)
            continue
        if not ids:
            logger.info("未找到匹配 %r 的容器", pod)
            continue
        for container_id in ids:
            cmds[f"{pod} [{container_id}]"] = (
                ProblemSource.RUNTIME,
                runtime.container_log_cmd(container_id, lines),
            )
    return cmds


def find_problems(
    runtime: ContainerRuntime,
    bootstrapper: Bootstrapper,
    cfg: ClusterConfig,
    runner: CommandRunner,
    lookback: int = LOOKBACK_LINES,
    patterns: Optional[ProblemPatterns] = None,
) -> List[Problem]:
    """在引导器与运行时日志中查找已知故障特征

    日志命令本身执行失败时记为一条 COMMAND 来源的问题。
    """
    patterns = patterns or load_patterns()
    problems: List[Problem] = []

    cmds = log_commands(runtime, bootstrapper, cfg, lookback, patterns.important_pods)
    for name, (source, cmd) in cmds.items():
        try:
            result = runner.run_cmd(cmd)
        except CommandError as e:
            logger.warning("failed %s: command: %s %s", name, e.result.command, e)
            problems.append(Problem(
                source=ProblemSource.COMMAND,
                component=name,
                message=f"failed to collect logs: {e.message}",
            ))
            continue

        for line in result.stdout.splitlines():
            if patterns.is_problem(line):
                problems.append(Problem(source=source, component=name, message=line))

    return problems


def output_problems(
    problems: List[Problem],
    max_lines: int = MAX_PROBLEM_LINES,
    console: Optional[Console] = None,
) -> None:
    """按组件分组展示问题, 每组只展示最后 max_lines 行"""
    console = console or _console

    grouped: Dict[str, List[Problem]] = {}
    for problem in problems:
        grouped.setdefault(problem.component, []).append(problem)

    for component, items in grouped.items():
        console.print(f"[red]❗ 在 {escape(component)} 中发现问题:[/red]")
        if len(items) > max_lines:
            items = items[-max_lines:]
        for item in items:
            console.print(f"    [dim]{escape(item.message)}[/dim]")


FindProblems = Callable[[ContainerRuntime, Bootstrapper, ClusterConfig, CommandRunner], List[Problem]]


def announce_problems(
    runtime: ContainerRuntime,
    bootstrapper: Bootstrapper,
    cfg: ClusterConfig,
    runner: CommandRunner,
    finder: FindProblems = find_problems,
    max_lines: int = MAX_PROBLEM_LINES,
    retry_interval: float = API_CALL_RETRY_INTERVAL,
    backoff_multiplier: float = PROBLEM_BACKOFF_MULTIPLIER,
    console: Optional[Console] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> List[Problem]:
    """检查问题, 发现问题时展示并放慢轮询

    Args:
        sleep: 冷却等待函数 (默认 time.sleep)

    Returns:
        本次发现的问题 (只用于诊断, 不是就绪与否的判断依据)
    """
    problems = finder(runtime, bootstrapper, cfg, runner)
    if not problems:
        return problems

    output_problems(problems, max_lines, console=console)
    cooldown = retry_interval * backoff_multiplier
    logger.info("发现 %d 个问题, 冷却 %.1fs 后继续", len(problems), cooldown)
    (sleep or time.sleep)(cooldown)
    return problems
