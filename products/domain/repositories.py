"""
商品领域模型中的仓储接口。
定义用于持久化和检索商品聚合根的仓储接口、搜索条件和统计结构，
以及串行化库存修改的库存锁服务接口。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ContextManager, Dict, List, Optional

from core.domain import Money
from core.domain.repositories import ReadOnlyRepository, Repository
from products.domain.aggregates import Product
from products.domain.entities import Category
from products.domain.value_objects import ProductSku, ProductStatus

# 搜索支持的排序字段和方向
SORT_FIELDS = ("name", "sku", "price", "stock", "created_at", "updated_at")
SORT_ORDERS = ("asc", "desc")


@dataclass
class ProductSearchFilters:
    """商品搜索过滤条件，为None的条件不参与过滤"""
    name: Optional[str] = None  # 名称包含，不区分大小写
    sku: Optional[str] = None  # SKU包含，不区分大小写
    category_id: Any = None
    status: Optional[ProductStatus] = None
    min_price: Optional[Money] = None
    max_price: Optional[Money] = None
    in_stock: Optional[bool] = None
    tags: List[str] = field(default_factory=list)  # 包含任一标签


@dataclass
class ProductSearchOptions:
    """商品搜索排序和分页选项"""
    sort_by: str = "name"
    sort_order: str = "asc"
    limit: int = 50
    offset: int = 0


@dataclass
class ProductSearchResult:
    """商品搜索结果"""
    products: List[Product]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.products) < self.total


@dataclass
class ProductStatistics:
    """商品统计信息"""
    total_products: int
    active_products: int
    inactive_products: int
    out_of_stock_products: int
    low_stock_products: int
    average_price: Money
    total_value: Money

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_products": self.total_products,
            "active_products": self.active_products,
            "inactive_products": self.inactive_products,
            "out_of_stock_products": self.out_of_stock_products,
            "low_stock_products": self.low_stock_products,
            "average_price": self.average_price.to_dict(),
            "total_value": self.total_value.to_dict(),
        }


@dataclass
class ProductTrends:
    """时间段内的商品变化趋势"""
    new_products: int
    updated_products: int
    discontinued_products: int
    stock_changes: int


class ProductRepository(Repository[Product]):
    """
    商品仓储接口。
    定义用于持久化和检索商品聚合根的方法。
    除非显式传入include_deleted=True，查询方法都不返回已软删除的商品。
    """

    @abstractmethod
    def find_by_id(self, id: Any, include_deleted: bool = False) -> Optional[Product]:
        """
        根据ID获取商品。

        Args:
            id: 商品ID
            include_deleted: 是否包含已软删除的商品

        Returns:
            找到的商品，如果不存在则返回None
        """
        pass

    @abstractmethod
    def find_by_sku(self, sku: ProductSku, include_deleted: bool = False) -> Optional[Product]:
        pass

    @abstractmethod
    def find_by_barcode(self, barcode: str, include_deleted: bool = False) -> Optional[Product]:
        pass

    @abstractmethod
    def search(
        self,
        filters: ProductSearchFilters,
        options: Optional[ProductSearchOptions] = None,
        include_deleted: bool = False
    ) -> ProductSearchResult:
        """
        搜索商品。

        Args:
            filters: 过滤条件
            options: 排序和分页选项
            include_deleted: 是否包含已软删除的商品

        Returns:
            当前页商品和匹配总数
        """
        pass

    @abstractmethod
    def find_by_category(
        self,
        category_id: Any,
        options: Optional[ProductSearchOptions] = None
    ) -> ProductSearchResult:
        pass

    @abstractmethod
    def find_low_stock_products(
        self,
        threshold: Optional[int] = None,
        options: Optional[ProductSearchOptions] = None
    ) -> ProductSearchResult:
        """
        查找低库存商品。

        Args:
            threshold: 库存阈值；未提供时使用每个商品自身的最低库存水平
            options: 排序和分页选项
        """
        pass

    @abstractmethod
    def find_out_of_stock_products(self, options: Optional[ProductSearchOptions] = None) -> ProductSearchResult:
        pass

    @abstractmethod
    def find_products_requiring_reorder(self) -> List[Product]:
        pass

    @abstractmethod
    def find_products_needing_attention(self) -> List[Product]:
        """待审核、缺货或需要补货的商品"""
        pass

    @abstractmethod
    def exists_by_sku(self, sku: ProductSku) -> bool:
        pass

    @abstractmethod
    def exists_by_barcode(self, barcode: str) -> bool:
        pass

    @abstractmethod
    def count(self, filters: Optional[ProductSearchFilters] = None) -> int:
        pass

    @abstractmethod
    def validate_business_rules(self, product: Product) -> List[str]:
        """
        检查需要访问其他商品才能判断的业务规则。

        Args:
            product: 待检查的商品

        Returns:
            违反规则的错误消息列表，为空表示通过
        """
        pass

    @abstractmethod
    def get_statistics(self) -> ProductStatistics:
        pass

    @abstractmethod
    def get_product_trends(self, date_from: datetime, date_to: datetime) -> ProductTrends:
        pass


class CategoryRepository(ReadOnlyRepository[Category]):
    """
    分类仓储接口。
    商品上下文只需要按ID读取分类。
    """

    @abstractmethod
    def find_by_id(self, id: Any) -> Optional[Category]:
        pass

    @abstractmethod
    def exists(self, id: Any) -> bool:
        """
        判断分类是否存在。

        Args:
            id: 分类ID

        Returns:
            如果分类存在则返回True，否则返回False
        """
        pass


class InventoryLockService(ABC):
    """
    库存锁服务接口。
    用于串行化同一商品的库存修改，不同商品之间互不影响。
    """

    @abstractmethod
    def lock_inventory(self, product_id: Any) -> ContextManager[None]:
        """
        获取商品库存锁，返回上下文管理器，退出时释放锁。

        Args:
            product_id: 商品ID

        Raises:
            LockAcquisitionException: 在超时时间内无法获取锁
        """
        pass
