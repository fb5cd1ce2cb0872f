"""
kubelet 状态探测

通过节点上的 systemctl 查询 kubelet 状态。命令执行失败不是致命错误:
systemctl is-active 对非 active 状态也会返回非 0 退出码,输出仍需解析。
"""

import logging
from typing import Dict

from ..collectors.command_runner import CommandRunner
from ..collectors.models import AgentState, AgentStatus
from ..utils.errors import CommandError

logger = logging.getLogger(__name__)

KUBELET_STATUS_CMD = ["sudo", "systemctl", "is-active", "kubelet"]

_STATE_BY_TOKEN: Dict[str, AgentState] = {
    "active": AgentState.RUNNING,
    "inactive": AgentState.STOPPED,
    "activating": AgentState.STARTING,
}


def parse_agent_state(output: str) -> AgentState:
    """精确匹配状态字符串,未知输出一律视为 ERROR"""
    return _STATE_BY_TOKEN.get(output.strip(), AgentState.ERROR)


def kubelet_status(runner: CommandRunner) -> AgentStatus:
    """检查 kubelet 状态

    Returns:
        AgentStatus: state 为解析出的状态; 命令执行出错时 error 为该异常,
        此时 state 依然是根据已捕获输出得到的结果
    """
    logger.info("检查 kubelet 状态 ...")

    error = None
    try:
        result = runner.run_cmd(list(KUBELET_STATUS_CMD))
    except CommandError as e:
        # 不要直接返回, 输出还需要解析
        logger.warning("%s returned error: %s", e.result.command, e)
        error = e
        result = e.result

    output = (result.stdout or "").strip()
    logger.info("kubelet is-active: %s", output)
    return AgentStatus(state=parse_agent_state(output), error=error)
