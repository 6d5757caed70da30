"""
商品仓储的内存实现。
以持久化行数据的形式保存商品，读取时重建聚合根，
调用方拿到的商品与仓储内的数据互不影响。
"""
from datetime import datetime
from decimal import Decimal
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from core.domain import ConcurrencyException, ConflictException, EntityNotFoundException, Money
from products.domain import (
    Product,
    ProductRepository,
    ProductSearchFilters,
    ProductSearchOptions,
    ProductSearchResult,
    ProductSku,
    ProductStatistics,
    ProductStatus,
    ProductTrends,
)
from products.domain.config import get_product_setting

# 排序字段对应的取值函数
SORT_KEYS: Dict[str, Callable[[Product], Any]] = {
    "name": lambda product: product.name.value.lower(),
    "sku": lambda product: product.sku.value,
    "price": lambda product: product.price.amount,
    "stock": lambda product: product.stock_quantity,
    "created_at": lambda product: product.created_at,
    "updated_at": lambda product: product.updated_at,
}


class InMemoryProductRepository(ProductRepository):
    """
    基于内存字典的商品仓储实现。

    所有读写都在同一把可重入锁内完成；update按版本号做乐观锁检查，
    成功后同时递增存储中和调用方商品的版本号。
    """

    def __init__(self):
        self._rows: Dict[str, Dict[str, Any]] = {}
        # 库存变化记录：(变化时间, 商品ID)
        self._stock_changes: List[Tuple[datetime, str]] = []
        self._lock = threading.RLock()

    # ==================== 内部方法 ====================

    @staticmethod
    def _key(id: Any) -> str:
        return str(id)

    def _products(self, include_deleted: bool = False) -> List[Product]:
        with self._lock:
            rows = [dict(row) for row in self._rows.values()]
        products = [Product.from_persistence(row) for row in rows]
        if include_deleted:
            return products
        return [product for product in products if not product.is_deleted]

    def _find_first(self, predicate: Callable[[Dict[str, Any]], bool], include_deleted: bool) -> Optional[Product]:
        with self._lock:
            for row in self._rows.values():
                if row["deleted_at"] is not None and not include_deleted:
                    continue
                if predicate(row):
                    return Product.from_persistence(dict(row))
        return None

    @staticmethod
    def _matches(product: Product, filters: ProductSearchFilters) -> bool:
        if filters.name and filters.name.lower() not in product.name.value.lower():
            return False
        if filters.sku and filters.sku.upper() not in product.sku.value:
            return False
        if filters.category_id is not None and str(product.category_id) != str(filters.category_id):
            return False
        if filters.status is not None and product.status is not filters.status:
            return False
        for bound, accept in ((filters.min_price, Decimal.__ge__), (filters.max_price, Decimal.__le__)):
            if bound is None:
                continue
            if product.currency != bound.currency or not accept(product.price.amount, bound.amount):
                return False
        if filters.in_stock is not None and (product.stock_quantity > 0) != filters.in_stock:
            return False
        if filters.tags:
            wanted = {tag.lower() for tag in filters.tags}
            if not wanted.intersection(tag.lower() for tag in product.tags):
                return False
        return True

    @staticmethod
    def _paginate(products: List[Product], options: Optional[ProductSearchOptions]) -> ProductSearchResult:
        options = options or ProductSearchOptions()
        sort_key = SORT_KEYS.get(options.sort_by, SORT_KEYS["name"])
        ordered = sorted(
            products,
            key=lambda product: (sort_key(product), str(product.id)),
            reverse=options.sort_order == "desc"
        )
        page = ordered[options.offset:options.offset + options.limit]
        return ProductSearchResult(products=page, total=len(ordered), limit=options.limit, offset=options.offset)

    @staticmethod
    def _is_low_stock(product: Product, threshold: Optional[int]) -> bool:
        if not product.track_stock:
            return False
        if threshold is None:
            threshold = product.min_stock_level or get_product_setting('LOW_STOCK_THRESHOLD')
        return product.stock_quantity <= threshold

    def _check_unique(self, key: str, row: Dict[str, Any]) -> None:
        """
        在未删除的其他商品中检查SKU和条形码唯一，调用方需持有锁。

        Raises:
            ConflictException: SKU或条形码已被其他商品使用
        """
        if row["deleted_at"] is not None:
            return
        for other_key, other in self._rows.items():
            if other_key == key or other["deleted_at"] is not None:
                continue
            if other["sku"] == row["sku"]:
                raise ConflictException(f"Product with SKU {row['sku']} already exists", row["sku"])
            if row["barcode"] and other["barcode"] == row["barcode"]:
                raise ConflictException(f"Product with barcode {row['barcode']} already exists", row["barcode"])

    # ==================== 写操作 ====================

    def save(self, product: Product) -> Product:
        """
        保存新商品。

        Raises:
            ConflictException: 相同ID的商品已存在，或SKU、条形码已被其他商品使用
        """
        key = self._key(product.id)
        row = product.to_persistence()
        with self._lock:
            if key in self._rows:
                raise ConflictException(f"Product with ID {key} already exists", key)
            self._check_unique(key, row)
            self._rows[key] = row
        logger.debug(f"保存商品: {product.sku.value} (id={key})")
        return product

    def update(self, product: Product) -> Product:
        """
        更新已存在的商品。

        Raises:
            EntityNotFoundException: 商品不存在
            ConcurrencyException: 存储的版本号与商品加载时的版本号不一致
            ConflictException: SKU或条形码已被其他商品使用
        """
        key = self._key(product.id)
        with self._lock:
            stored = self._rows.get(key)
            if stored is None:
                raise EntityNotFoundException("Product", product.id)
            if stored["version"] != product.version:
                logger.warning(
                    f"商品版本冲突: id={key}, 存储版本={stored['version']}, 提交版本={product.version}"
                )
                raise ConcurrencyException("Product", product.id)
            self._check_unique(key, product.to_persistence())

            if stored["stock_quantity"] != product.stock_quantity:
                self._stock_changes.append((datetime.now(), key))
            product.increment_version()
            self._rows[key] = product.to_persistence()
        logger.debug(f"更新商品: {product.sku.value} (id={key}, version={product.version})")
        return product

    def delete(self, id: Any) -> None:
        """物理删除商品，软删除通过聚合根的delete方法加update完成"""
        key = self._key(id)
        with self._lock:
            if self._rows.pop(key, None) is None:
                raise EntityNotFoundException("Product", id)
        logger.debug(f"物理删除商品: id={key}")

    # ==================== 查询 ====================

    def find_by_id(self, id: Any, include_deleted: bool = False) -> Optional[Product]:
        with self._lock:
            row = self._rows.get(self._key(id))
            if row is None or (row["deleted_at"] is not None and not include_deleted):
                return None
            return Product.from_persistence(dict(row))

    def find_by_sku(self, sku: ProductSku, include_deleted: bool = False) -> Optional[Product]:
        return self._find_first(lambda row: row["sku"] == sku.value, include_deleted)

    def find_by_barcode(self, barcode: str, include_deleted: bool = False) -> Optional[Product]:
        return self._find_first(lambda row: row["barcode"] == barcode, include_deleted)

    def search(
        self,
        filters: ProductSearchFilters,
        options: Optional[ProductSearchOptions] = None,
        include_deleted: bool = False
    ) -> ProductSearchResult:
        matched = [product for product in self._products(include_deleted) if self._matches(product, filters)]
        return self._paginate(matched, options)

    def find_by_category(
        self,
        category_id: Any,
        options: Optional[ProductSearchOptions] = None
    ) -> ProductSearchResult:
        return self.search(ProductSearchFilters(category_id=category_id), options)

    def find_low_stock_products(
        self,
        threshold: Optional[int] = None,
        options: Optional[ProductSearchOptions] = None
    ) -> ProductSearchResult:
        matched = [product for product in self._products() if self._is_low_stock(product, threshold)]
        return self._paginate(matched, options)

    def find_out_of_stock_products(self, options: Optional[ProductSearchOptions] = None) -> ProductSearchResult:
        matched = [product for product in self._products() if product.is_out_of_stock()]
        return self._paginate(matched, options)

    def find_products_requiring_reorder(self) -> List[Product]:
        return [
            product for product in self._products()
            if product.needs_reorder() and product.status is not ProductStatus.DISCONTINUED
        ]

    def find_products_needing_attention(self) -> List[Product]:
        return [
            product for product in self._products()
            if product.status.requires_attention() or product.is_out_of_stock() or product.needs_reorder()
        ]

    def exists(self, id: Any) -> bool:
        return self.find_by_id(id) is not None

    def exists_by_sku(self, sku: ProductSku) -> bool:
        return self.find_by_sku(sku) is not None

    def exists_by_barcode(self, barcode: str) -> bool:
        return self.find_by_barcode(barcode) is not None

    def count(self, filters: Optional[ProductSearchFilters] = None) -> int:
        products = self._products()
        if filters is None:
            return len(products)
        return sum(1 for product in products if self._matches(product, filters))

    # ==================== 业务规则与统计 ====================

    def _others(self, product: Product) -> Iterable[Product]:
        return (other for other in self._products() if other.id != product.id)

    def validate_business_rules(self, product: Product) -> List[str]:
        """
        检查SKU和条形码在其他未删除商品中是否唯一，以及库存水平是否合理。

        Args:
            product: 待检查的商品

        Returns:
            错误消息列表
        """
        errors = []
        others = list(self._others(product))
        if any(other.sku == product.sku for other in others):
            errors.append("SKU already exists")
        if product.barcode and any(other.barcode == product.barcode for other in others):
            errors.append("Barcode already exists")
        if product.max_stock_level and product.reorder_level > product.max_stock_level:
            errors.append("Reorder level cannot exceed maximum stock level")
        return errors

    def get_statistics(self) -> ProductStatistics:
        """
        统计未删除商品。
        平均价格和库存总价值只统计默认货币的商品。
        """
        products = self._products()
        currency = get_product_setting('DEFAULT_CURRENCY')
        priced = [product for product in products if product.currency == currency]

        total_value = Money.zero(currency)
        for product in priced:
            total_value = total_value.add(product.stock_value())
        average_price = Money.zero(currency)
        if priced:
            average_price = Money.create(
                sum((product.price.amount for product in priced), Decimal("0")) / len(priced),
                currency
            )

        return ProductStatistics(
            total_products=len(products),
            active_products=sum(1 for product in products if product.status is ProductStatus.ACTIVE),
            inactive_products=sum(1 for product in products if product.status is ProductStatus.INACTIVE),
            out_of_stock_products=sum(1 for product in products if product.is_out_of_stock()),
            low_stock_products=sum(1 for product in products if self._is_low_stock(product, None)),
            average_price=average_price,
            total_value=total_value,
        )

    def get_product_trends(self, date_from: datetime, date_to: datetime) -> ProductTrends:
        """
        统计时间段内新建、更新、停产的商品数和库存变化次数。

        Args:
            date_from: 开始时间（含）
            date_to: 结束时间（含）
        """
        def in_range(value: Optional[datetime]) -> bool:
            return value is not None and date_from <= value <= date_to

        products = self._products(include_deleted=True)
        with self._lock:
            stock_changes = sum(1 for changed_at, _ in self._stock_changes if in_range(changed_at))

        return ProductTrends(
            new_products=sum(1 for product in products if in_range(product.created_at)),
            updated_products=sum(
                1 for product in products
                if in_range(product.updated_at) and product.updated_at != product.created_at
            ),
            discontinued_products=sum(
                1 for product in products
                if product.status is ProductStatus.DISCONTINUED and in_range(product.updated_at)
            ),
            stock_changes=stock_changes,
        )

    def clear(self) -> None:
        """清空所有数据，用于测试环境的重置"""
        with self._lock:
            self._rows.clear()
            self._stock_changes.clear()
