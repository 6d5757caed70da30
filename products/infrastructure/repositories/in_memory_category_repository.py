"""
分类仓储的内存实现。
"""
import threading
from typing import Any, Dict, Iterable, Optional

from loguru import logger

from products.domain import Category, CategoryRepository


class InMemoryCategoryRepository(CategoryRepository):
    """
    基于内存字典的分类仓储实现。
    分类由其他上下文维护，这里只提供注册和按ID读取。
    """

    def __init__(self, categories: Optional[Iterable[Category]] = None):
        """
        初始化分类仓储。

        Args:
            categories: 初始分类
        """
        self._categories: Dict[str, Category] = {}
        self._lock = threading.Lock()
        for category in categories or []:
            self.add(category)

    def add(self, category: Category) -> Category:
        with self._lock:
            self._categories[str(category.id)] = category
        logger.debug(f"注册分类: {category.name} (id={category.id})")
        return category

    def find_by_id(self, id: Any) -> Optional[Category]:
        with self._lock:
            return self._categories.get(str(id))

    def exists(self, id: Any) -> bool:
        return self.find_by_id(id) is not None
