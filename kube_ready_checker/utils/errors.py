"""
就绪检查错误类型定义

所有失败都以异常值返回给调用方,核心层不重试、不退出进程
"""

from enum import Enum
from typing import Dict, Any, List, Optional


class DiagnosticErrorCode(Enum):
    """诊断错误码枚举"""

    # 集群 API 类错误
    LIST_FAILED = "LIST_FAILED"
    API_UNHEALTHY = "API_UNHEALTHY"

    # 组件类错误
    MISSING_COMPONENTS = "MISSING_COMPONENTS"
    SERVICE_ACCOUNT_MISSING = "SERVICE_ACCOUNT_MISSING"

    # 命令执行类错误
    COMMAND_FAILED = "COMMAND_FAILED"

    # 等待超时
    TIMEOUT = "TIMEOUT"

    # 配置类错误
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    UNKNOWN = "UNKNOWN"


class DiagnosticError(Exception):
    """诊断异常基类

    Attributes:
        message: 错误消息
        code: 错误码
        details: 额外的错误详情
    """

    def __init__(
        self,
        message: str,
        code: DiagnosticErrorCode = DiagnosticErrorCode.UNKNOWN,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "error": self.message,
            "code": self.code.value,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.value}] {self.message} ({details_str})"
        return f"[{self.code.value}] {self.message}"


class ListError(DiagnosticError):
    """列举集群资源失败 (原样上抛,本层不重试)"""

    def __init__(
        self,
        message: str,
        resource_type: str = "pods",
        namespace: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        all_details = details or {}
        all_details["resource_type"] = resource_type
        if namespace:
            all_details["namespace"] = namespace

        super().__init__(message, DiagnosticErrorCode.LIST_FAILED, all_details)


class MissingComponentsError(DiagnosticError):
    """列举成功,但部分期望的核心组件没有处于 Running 的 Pod

    Attributes:
        missing: 缺失的组件名 (按期望列表顺序)
    """

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            f"missing components: {', '.join(self.missing)}",
            DiagnosticErrorCode.MISSING_COMPONENTS,
        )


class CommandError(DiagnosticError):
    """远程/本地命令执行失败

    退出码非 0 时 ``result`` 仍保留已捕获的输出,调用方可以继续解析。
    传输层失败 (命令无法启动、超时) 时 ``result`` 的 returncode 为 -1。
    """

    def __init__(self, message: str, result: Any):
        self.result = result
        super().__init__(
            message,
            DiagnosticErrorCode.COMMAND_FAILED,
            {"command": result.command, "returncode": result.returncode},
        )


class APIServerUnhealthyError(DiagnosticError):
    """apiserver /healthz 未返回 ok"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, DiagnosticErrorCode.API_UNHEALTHY, details)


class ServiceAccountMissingError(DiagnosticError):
    """default 命名空间下的 default ServiceAccount 尚未创建"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, DiagnosticErrorCode.SERVICE_ACCOUNT_MISSING, details)


class WaitTimeoutError(DiagnosticError):
    """等待某个组件就绪超时

    Attributes:
        component: 超时的组件名
        last_error: 最后一次检查失败的异常
    """

    def __init__(
        self,
        component: str,
        timeout: float,
        last_error: Optional[BaseException] = None
    ):
        self.component = component
        self.last_error = last_error
        details: Dict[str, Any] = {"component": component, "timeout_seconds": timeout}
        if last_error is not None:
            details["last_error"] = str(last_error)
        super().__init__(
            f"timed out waiting for {component}",
            DiagnosticErrorCode.TIMEOUT,
            details,
        )
