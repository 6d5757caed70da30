"""
库存锁定服务实现。
使用进程内的按商品互斥锁串行化同一商品的库存修改。
"""
from contextlib import contextmanager
import threading
from typing import Any, Dict, Iterator, List, Optional

from loguru import logger

from core.domain.exceptions import LockAcquisitionException
from products.domain import InventoryLockService
from products.domain.config import get_product_setting


class InProcessInventoryLockService(InventoryLockService):
    """
    基于线程锁的库存锁定服务实现。

    每个商品对应一把独立的锁，不同商品的库存修改互不阻塞。
    锁是可重入的，同一线程内嵌套锁定同一商品不会死锁。
    锁按使用者计数，持有和等待的使用者都释放后从注册表中移除。
    """

    def __init__(self, lock_timeout_seconds: Optional[float] = None):
        """
        初始化库存锁定服务。

        Args:
            lock_timeout_seconds: 获取锁的超时时间（秒），默认读取配置
        """
        self._lock_timeout_seconds = lock_timeout_seconds
        # 锁键 -> [锁, 持有或等待该锁的使用者数量]
        self._locks: Dict[str, List[Any]] = {}
        self._registry_lock = threading.Lock()

    @property
    def lock_timeout_seconds(self) -> float:
        if self._lock_timeout_seconds is not None:
            return self._lock_timeout_seconds
        return float(get_product_setting('INVENTORY_LOCK_TIMEOUT'))

    @property
    def active_locks(self) -> int:
        """当前有使用者的商品锁数量"""
        with self._registry_lock:
            return len(self._locks)

    def _checkout(self, lock_key: str) -> threading.RLock:
        with self._registry_lock:
            entry = self._locks.get(lock_key)
            if entry is None:
                entry = [threading.RLock(), 0]
                self._locks[lock_key] = entry
            entry[1] += 1
            return entry[0]

    def _checkin(self, lock_key: str) -> None:
        with self._registry_lock:
            entry = self._locks[lock_key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[lock_key]

    @contextmanager
    def lock_inventory(self, product_id: Any) -> Iterator[None]:
        """
        锁定商品库存的上下文管理器。

        Args:
            product_id: 商品ID

        Yields:
            锁定成功

        Raises:
            LockAcquisitionException: 超时仍无法获取锁
        """
        lock_key = f"inventory_lock:{product_id}"
        lock = self._checkout(lock_key)
        try:
            if not lock.acquire(timeout=self.lock_timeout_seconds):
                logger.warning(f"获取商品库存锁超时: {product_id}")
                raise LockAcquisitionException(
                    f"inventory:{product_id}", f"timed out after {self.lock_timeout_seconds} seconds"
                )
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(lock_key)
