"""
就绪组件注册表

调用方可以等待的三个组件 (apiserver / system_pods / default_sa) 以及
预置的组件集合。所有集合都是只读映射,进程内共享无需加锁。
"""

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

# 组件名 (外部契约,--wait 参数使用)
APISERVER_WAIT_KEY = "apiserver"
SYSTEM_PODS_WAIT_KEY = "system_pods"
DEFAULT_SA_WAIT_KEY = "default_sa"

ComponentSet = Mapping[str, bool]

# 不等待任何组件 (--wait=none / false)
NO_COMPONENTS: ComponentSet = MappingProxyType({
    APISERVER_WAIT_KEY: False,
    SYSTEM_PODS_WAIT_KEY: False,
    DEFAULT_SA_WAIT_KEY: False,
})

# 默认等待的组件
DEFAULT_COMPONENTS: ComponentSet = MappingProxyType({
    APISERVER_WAIT_KEY: True,
    SYSTEM_PODS_WAIT_KEY: True,
})

# 等待所有组件 (--wait=all / true)
ALL_COMPONENTS: ComponentSet = MappingProxyType({
    APISERVER_WAIT_KEY: True,
    SYSTEM_PODS_WAIT_KEY: True,
    DEFAULT_SA_WAIT_KEY: True,
})

DEFAULT_WAIT_LIST = (APISERVER_WAIT_KEY, SYSTEM_PODS_WAIT_KEY)
ALL_COMPONENTS_LIST = (APISERVER_WAIT_KEY, SYSTEM_PODS_WAIT_KEY, DEFAULT_SA_WAIT_KEY)


def should_wait(components: ComponentSet) -> bool:
    """集合中只要有一个已知组件被标记为 True 就需要等待

    未知的键被忽略,缺失的键视为 False。
    """
    for name in ALL_COMPONENTS_LIST:
        if components.get(name, False):
            return True
    return False


def enabled_components(components: ComponentSet) -> List[str]:
    """按规范顺序返回被标记为等待的组件名"""
    return [name for name in ALL_COMPONENTS_LIST if components.get(name, False)]


def interpret_wait_flag(value: Optional[str]) -> ComponentSet:
    """解析 --wait 参数

    支持 all/true、none/false、default,或逗号分隔的组件名列表。
    未知组件名只记录警告,不会报错。

    Example:
        interpret_wait_flag("apiserver,default_sa")
        # {"apiserver": True, "system_pods": False, "default_sa": True}
    """
    if value is None:
        return DEFAULT_COMPONENTS

    normalized = value.strip().lower()
    if normalized in ("all", "true"):
        return ALL_COMPONENTS
    if normalized in ("", "none", "false"):
        return NO_COMPONENTS
    if normalized == "default":
        return DEFAULT_COMPONENTS

    selected = dict(NO_COMPONENTS)
    for item in normalized.split(","):
        name = item.strip()
        if not name:
            continue
        if name not in ALL_COMPONENTS_LIST:
            logger.warning(
                "忽略未知的等待组件 %r, 可选值: %s",
                name, ", ".join(ALL_COMPONENTS_LIST)
            )
            continue
        selected[name] = True

    return MappingProxyType(selected)
