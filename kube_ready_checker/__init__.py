"""
集群就绪检查工具

在集群引导完成后确认 apiserver、系统 Pod 与 default ServiceAccount 已就绪
"""

__version__ = "1.0.0"
