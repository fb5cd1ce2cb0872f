"""
Kubernetes 客户端 - 基于 kubectl

只提供就绪检查需要的只读查询: Pod 列表、/healthz、ServiceAccount。
所有调用都是同步阻塞的,不做缓存,失败时不重试 (由等待循环负责)。
"""

import json
import subprocess
from typing import Dict, List, Optional

from ..utils.errors import ListError
from .models import PodObservation, SYSTEM_NAMESPACE


class KubectlWrapper:
    """kubectl 封装"""

    def __init__(self, context: Optional[str] = None, kubectl: str = "kubectl"):
        """
        Args:
            context: kubeconfig context (默认使用 current-context)
            kubectl: kubectl 可执行文件路径
        """
        self.context = context
        self.kubectl_cmd = self._build_kubectl_cmd(kubectl)

    def _build_kubectl_cmd(self, kubectl: str) -> List[str]:
        """构建 kubectl 命令前缀"""
        cmd = [kubectl]
        if self.context:
            cmd.extend(["--context", self.context])
        return cmd

    def run(self, cmd: List[str], timeout: int = 10) -> Dict:
        """
        执行命令并解析结果

        Args:
            cmd: 命令列表
            timeout: 超时时间（秒）

        Returns:
            {"success": bool, "data": any, "error": str}
        """
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout
            )
        except subprocess.TimeoutExpired:
            return {
                "success": False,
                "error": f"Command timed out after {timeout}s",
                "cmd": " ".join(cmd)
            }
        except OSError as e:
            return {
                "success": False,
                "error": str(e),
                "cmd": " ".join(cmd)
            }

        if result.returncode != 0:
            return {
                "success": False,
                "error": result.stderr.strip(),
                "cmd": " ".join(cmd)
            }

        # 尝试解析 JSON
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            # 不是 JSON，返回原始文本
            data = result.stdout.strip()
        return {"success": True, "data": data}

    # === 标准 K8s 资源操作 ===

    def list_pods(self, namespace: str = SYSTEM_NAMESPACE) -> List[PodObservation]:
        """列出命名空间下的所有 Pod

        Raises:
            ListError: kubectl 调用失败或返回内容无法解析
        """
        cmd = self.kubectl_cmd + ["get", "pods", "-n", namespace, "-o", "json"]
        result = self.run(cmd, timeout=15)

        if not result.get("success"):
            raise ListError(
                f"failed to list pods: {result.get('error', '')}",
                namespace=namespace,
            )

        data = result.get("data")
        if not isinstance(data, dict):
            raise ListError("unexpected pod list output", namespace=namespace)

        return [PodObservation.from_json(item) for item in data.get("items", [])]

    def get_raw(self, path: str, timeout: int = 5) -> Dict:
        """直接请求 apiserver 路径, 如 /healthz"""
        cmd = self.kubectl_cmd + ["get", "--raw", path]
        return self.run(cmd, timeout=timeout)

    def get_service_account(self, name: str, namespace: str = "default") -> Dict:
        """获取 ServiceAccount"""
        cmd = self.kubectl_cmd + [
            "get", "serviceaccount", name,
            "-n", namespace,
            "-o", "json"
        ]
        return self.run(cmd, timeout=10)


# 每个 context 一个实例
_clients: Dict[Optional[str], KubectlWrapper] = {}


def get_k8s_client(context: Optional[str] = None) -> KubectlWrapper:
    """获取指定 context 的 K8s 客户端实例"""
    if context not in _clients:
        _clients[context] = KubectlWrapper(context=context)
    return _clients[context]
