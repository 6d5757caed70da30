"""
进程内事件总线。
按事件类型名称注册处理器，发布时在线程池中并发调用同一事件的所有处理器，
等待全部完成后返回。单个处理器失败只记录日志，不影响其他处理器和发布方。
"""
from concurrent.futures import ThreadPoolExecutor, wait
import threading
from typing import Dict, List, Optional

from loguru import logger

from core.domain.events import DomainEvent, EventBus, EventHandler, EventKey, event_key


class InMemoryEventBus(EventBus):
    """
    内存事件总线。
    处理器字典按实例隔离，键为事件类型名称，值为处理器列表。
    """

    def __init__(self, max_workers: int = 4, executor: Optional[ThreadPoolExecutor] = None):
        """
        初始化事件总线。

        Args:
            max_workers: 线程池大小
            executor: 外部提供的线程池，提供时max_workers被忽略
        """
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._lock = threading.Lock()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="event-bus"
        )

    def subscribe(self, event_type: EventKey, handler: EventHandler) -> None:
        key = event_key(event_type)
        with self._lock:
            self._handlers.setdefault(key, []).append(handler)
        logger.debug(f"注册事件处理器: {key} -> {getattr(handler, '__name__', handler)}")

    def unsubscribe(self, event_type: EventKey, handler: EventHandler) -> None:
        key = event_key(event_type)
        with self._lock:
            handlers = self._handlers.get(key)
            if handlers and handler in handlers:
                handlers.remove(handler)
                if not handlers:
                    del self._handlers[key]

    def handlers_for(self, event_type: EventKey) -> List[EventHandler]:
        """
        获取某事件类型的处理器副本。

        Args:
            event_type: 事件类型名称或事件类

        Returns:
            处理器列表
        """
        with self._lock:
            return list(self._handlers.get(event_key(event_type), []))

    def publish(self, event: DomainEvent) -> None:
        """
        发布事件。
        并发调用所有注册到该事件类型的处理器，并等待全部结束。

        Args:
            event: 要发布的事件
        """
        handlers = self.handlers_for(event.event_type)
        if not handlers:
            logger.debug(f"事件没有订阅者: {event.event_type}")
            return

        futures = [self._executor.submit(self._dispatch, handler, event) for handler in handlers]
        wait(futures)

    def _dispatch(self, handler: EventHandler, event: DomainEvent) -> None:
        try:
            handler(event)
        except Exception:
            logger.exception(
                f"事件处理器执行失败: {event.event_type} "
                f"(event_id={event.id}, handler={getattr(handler, '__name__', handler)})"
            )

    def clear_handlers(self) -> None:
        """
        清除所有事件处理器。
        通常用于测试环境的重置。
        """
        with self._lock:
            self._handlers.clear()

    def shutdown(self, wait: bool = True) -> None:
        """关闭自有线程池，外部提供的线程池由调用方管理"""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
