#!/usr/bin/env python3
"""
集群就绪检查工具 - 命令行入口

- 输入: 要等待的组件 (--wait)
- 处理: 逐个轮询组件, 卡住时输出已知问题并放慢轮询
- 输出: 就绪结果, 退出码 0 表示就绪
"""

import logging
import shlex
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from kube_ready_checker.checks import wait_for_components
from kube_ready_checker.collectors import (
    ClusterConfig,
    CrictlRuntime,
    KubeadmBootstrapper,
    LocalRunner,
    PrefixRunner,
    get_k8s_client,
)
from kube_ready_checker.components import (
    ALL_COMPONENTS_LIST,
    DEFAULT_WAIT_LIST,
    enabled_components,
    interpret_wait_flag,
)
from kube_ready_checker.config import Settings
from kube_ready_checker.utils.errors import DiagnosticError, WaitTimeoutError


console = Console()


def print_header(title: str):
    """打印标题"""
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))
    console.print()


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def run(wait: str, settings: Settings, node_exec: str = None) -> int:
    """执行就绪等待

    Returns:
        退出码
    """
    components = interpret_wait_flag(wait)
    selected = enabled_components(components)

    print_header("🚀 集群就绪检查")
    console.print(f"[bold]⏳ 等待组件:[/bold] {', '.join(selected) or '无'}")
    console.print(f"[dim]超时: {settings.wait_timeout:.0f}s, 命名空间: {settings.namespace}[/dim]")
    console.print()

    runner = PrefixRunner(shlex.split(node_exec)) if node_exec else LocalRunner()
    client = get_k8s_client(context=settings.kubectl_context)
    cfg = ClusterConfig(
        namespace=settings.namespace,
        kubectl_context=settings.kubectl_context,
    )

    try:
        report = wait_for_components(
            components,
            client,
            runner,
            CrictlRuntime(runner),
            KubeadmBootstrapper(),
            cfg,
            settings,
        )
    except WaitTimeoutError as e:
        console.print(f"[red]❌ 等待 {e.component} 超时[/red]")
        if e.last_error is not None:
            console.print(f"[dim]最后一次错误: {e.last_error}[/dim]")
        console.print()
        return 1
    except DiagnosticError as e:
        console.print(f"[red]❌ 检查失败: {e}[/red]")
        console.print()
        return 1

    if report.durations:
        table = Table()
        table.add_column("组件", style="cyan", no_wrap=True)
        table.add_column("耗时", style="green", justify="right")
        for name, seconds in report.durations.items():
            table.add_row(name, f"{seconds:.1f}s")
        console.print(table)

    console.print("[green]✅ 集群已就绪[/green]")
    console.print()
    return 0


def main():
    """CLI 主入口"""
    import argparse

    parser = argparse.ArgumentParser(
        prog="kube-ready-checker",
        description="集群就绪检查工具",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
可选组件: {', '.join(ALL_COMPONENTS_LIST)}
默认等待: {', '.join(DEFAULT_WAIT_LIST)}

示例:
  %(prog)s --wait all
  %(prog)s --wait apiserver,system_pods --node-exec "docker exec minikube"
  %(prog)s --wait none
        """
    )

    parser.add_argument(
        "--wait",
        default=None,
        help="要等待的组件: all / none / default 或逗号分隔的组件名"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="每个组件的最长等待时间 (秒)"
    )
    parser.add_argument(
        "--context",
        default=None,
        help="kubeconfig context"
    )
    parser.add_argument(
        "--node-exec",
        default=None,
        help="在节点上执行命令的前缀, 例如 \"docker exec minikube\""
    )
    parser.add_argument(
        "--list-components",
        action="store_true",
        help="列出可等待的组件"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="输出详细日志"
    )

    args = parser.parse_args()

    if args.list_components:
        for name in ALL_COMPONENTS_LIST:
            marker = " (默认)" if name in DEFAULT_WAIT_LIST else ""
            console.print(f"{name}{marker}")
        sys.exit(0)

    setup_logging(args.verbose)

    try:
        settings = Settings.from_env(
            wait_timeout=args.timeout,
            kubectl_context=args.context,
        )
    except ValueError as e:
        console.print(f"[red]❌ 配置无效: {e}[/red]")
        sys.exit(1)

    try:
        exit_code = run(args.wait, settings, args.node_exec)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  用户中断[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
