"""
基础设施层包。
提供事件总线等基础设施组件。
"""

# 事件总线
from core.infrastructure.event_bus import InMemoryEventBus

__all__ = [
    'InMemoryEventBus',
]
