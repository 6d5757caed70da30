"""
商品领域模型中的聚合根。
商品聚合根管理商品的基本信息、价格、库存和状态，
所有修改都通过业务方法进行，并记录相应的领域事件。
"""
from decimal import Decimal, ROUND_HALF_UP
import json
from typing import Any, Dict, List, Optional

from core.domain import (
    AggregateRoot,
    BusinessRuleViolationException,
    Dimensions,
    InsufficientStockException,
    Money,
    ValidationException,
    Weight,
    parse_entity_id,
)
from products.domain.events import (
    ProductCreatedEvent,
    ProductDeletedEvent,
    ProductStatusChangedEvent,
    ProductUpdatedEvent,
)
from products.domain.value_objects import ProductDescription, ProductName, ProductSku, ProductStatus


def _non_negative_int(value: Any, field_name: str, message: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationException(field_name, message)
    return value


def _positive_int(value: Any, field_name: str, message: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationException(field_name, message)
    return value


def _optional_id(value: Any, field_name: str) -> Any:
    return parse_entity_id(value, field_name) if value is not None else None


def _decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _loads_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return list(json.loads(value))
    return list(value)


class Product(AggregateRoot):
    """
    商品聚合根。
    封装商品的名称、SKU、价格、库存水平和状态，确保商品数据的一致性。

    库存数量和各库存水平均为非负整数；价格和成本使用相同货币。
    已软删除的商品不允许再修改，只能恢复。
    """

    def __init__(
        self,
        id: Any,
        name: ProductName,
        sku: ProductSku,
        price: Money,
        cost: Money,
        barcode: Optional[str] = None,
        description: Optional[ProductDescription] = None,
        short_description: Optional[str] = None,
        category_id: Any = None,
        family_id: Any = None,
        brand_id: Any = None,
        unit_id: Any = None,
        stock_quantity: int = 0,
        min_stock_level: int = 0,
        reorder_level: int = 0,
        max_stock_level: int = 0,
        weight: Optional[Weight] = None,
        dimensions: Optional[Dimensions] = None,
        status: ProductStatus = ProductStatus.ACTIVE,
        is_digital: bool = False,
        track_stock: bool = True,
        image_url: Optional[str] = None,
        images: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
        specifications: Optional[Dict[str, Any]] = None,
        version: int = 0,
        **audit_fields: Any
    ):
        """
        初始化商品聚合根。一般通过create或reconstitute构造。

        Raises:
            ValidationException: 库存数值为负或价格与成本货币不一致
        """
        super().__init__(id, version=version, **audit_fields)
        self._ensure_same_currency(price, cost)

        self._name = name
        self._sku = sku
        self._barcode = barcode
        self._description = description
        self._short_description = short_description
        self._category_id = category_id
        self._family_id = family_id
        self._brand_id = brand_id
        self._unit_id = unit_id
        self._price = price
        self._cost = cost
        self._stock_quantity = _non_negative_int(
            stock_quantity, "stock_quantity", "Stock quantity cannot be negative"
        )
        self._min_stock_level = _non_negative_int(
            min_stock_level, "min_stock_level", "Minimum stock level cannot be negative"
        )
        self._reorder_level = _non_negative_int(
            reorder_level, "reorder_level", "Reorder level cannot be negative"
        )
        self._max_stock_level = _non_negative_int(
            max_stock_level, "max_stock_level", "Maximum stock level cannot be negative"
        )
        self._weight = weight
        self._dimensions = dimensions
        self._status = ProductStatus.create(status)
        self._is_digital = bool(is_digital)
        self._track_stock = bool(track_stock)
        self._image_url = image_url
        self._images = list(images or [])
        self._tags = list(tags or [])
        self._specifications = dict(specifications or {})

    @classmethod
    def create(
        cls,
        name: ProductName,
        sku: ProductSku,
        price: Money,
        cost: Money,
        created_by: Any = None,
        **options: Any
    ) -> "Product":
        """
        创建新商品，分配新的标识并记录商品创建事件。

        Args:
            name: 商品名称
            sku: 商品SKU
            price: 售价
            cost: 成本
            created_by: 创建人ID
            **options: 其他可选字段，未指定状态时为active

        Returns:
            新建的商品
        """
        product = cls(
            None,
            name,
            sku,
            price,
            cost,
            created_by=created_by,
            updated_by=created_by,
            **options
        )
        product.add_domain_event(
            ProductCreatedEvent(product.id, name.value, sku.value, price, created_by)
        )
        return product

    @classmethod
    def reconstitute(cls, id: Any, **props: Any) -> "Product":
        """从已持久化的数据重建商品，不产生领域事件"""
        return cls(id, **props)

    # ==================== 属性 ====================

    @property
    def name(self) -> ProductName:
        return self._name

    @property
    def sku(self) -> ProductSku:
        return self._sku

    @property
    def barcode(self) -> Optional[str]:
        return self._barcode

    @property
    def description(self) -> Optional[ProductDescription]:
        return self._description

    @property
    def short_description(self) -> Optional[str]:
        return self._short_description

    @property
    def category_id(self) -> Any:
        return self._category_id

    @property
    def family_id(self) -> Any:
        return self._family_id

    @property
    def brand_id(self) -> Any:
        return self._brand_id

    @property
    def unit_id(self) -> Any:
        return self._unit_id

    @property
    def price(self) -> Money:
        return self._price

    @property
    def cost(self) -> Money:
        return self._cost

    @property
    def currency(self) -> str:
        return self._price.currency

    @property
    def stock_quantity(self) -> int:
        return self._stock_quantity

    @property
    def min_stock_level(self) -> int:
        return self._min_stock_level

    @property
    def reorder_level(self) -> int:
        return self._reorder_level

    @property
    def max_stock_level(self) -> int:
        return self._max_stock_level

    @property
    def weight(self) -> Optional[Weight]:
        return self._weight

    @property
    def dimensions(self) -> Optional[Dimensions]:
        return self._dimensions

    @property
    def status(self) -> ProductStatus:
        return self._status

    @property
    def is_digital(self) -> bool:
        return self._is_digital

    @property
    def track_stock(self) -> bool:
        return self._track_stock

    @property
    def image_url(self) -> Optional[str]:
        return self._image_url

    @property
    def images(self) -> List[str]:
        return list(self._images)

    @property
    def tags(self) -> List[str]:
        return list(self._tags)

    @property
    def specifications(self) -> Dict[str, Any]:
        return dict(self._specifications)

    # ==================== 内部方法 ====================

    @staticmethod
    def _ensure_same_currency(price: Money, cost: Money) -> None:
        if price.currency != cost.currency:
            raise ValidationException(
                "currency", f"Currency mismatch: {price.currency} vs {cost.currency}"
            )

    def _ensure_not_deleted(self) -> None:
        if self.is_deleted:
            raise BusinessRuleViolationException("product_deleted", "Cannot modify deleted product")

    def _ensure_tracks_stock(self, action: str) -> None:
        if not self._track_stock:
            raise BusinessRuleViolationException(
                "stock_not_tracked", f"Cannot {action} a product that does not track stock"
            )

    def _record_update(self, changes: Dict[str, Any], updated_by: Any) -> None:
        self.touch(updated_by)
        self.add_domain_event(ProductUpdatedEvent(self.id, changes, updated_by))

    # ==================== 库存 ====================

    def add_stock(self, quantity: int, updated_by: Any = None) -> None:
        """
        增加库存。

        Args:
            quantity: 增加数量，必须为正整数
            updated_by: 操作人ID

        Raises:
            ValidationException: 数量不是正整数
            BusinessRuleViolationException: 商品已删除或不跟踪库存
        """
        self._ensure_not_deleted()
        _positive_int(quantity, "quantity", "Quantity to add must be positive")
        self._ensure_tracks_stock("add stock to")

        old_stock = self._stock_quantity
        self._stock_quantity += quantity
        self._record_update(
            {"stock": {"added": quantity, "old_quantity": old_stock, "new_quantity": self._stock_quantity}},
            updated_by
        )

    def remove_stock(self, quantity: int, updated_by: Any = None) -> None:
        """
        减少库存。库存不足时库存保持不变。

        Args:
            quantity: 减少数量，必须为正整数
            updated_by: 操作人ID

        Raises:
            ValidationException: 数量不是正整数
            InsufficientStockException: 库存不足
            BusinessRuleViolationException: 商品已删除或不跟踪库存
        """
        self._ensure_not_deleted()
        _positive_int(quantity, "quantity", "Quantity to remove must be positive")
        self._ensure_tracks_stock("remove stock from")
        if self._stock_quantity < quantity:
            raise InsufficientStockException(self.id, quantity, self._stock_quantity)

        old_stock = self._stock_quantity
        self._stock_quantity -= quantity
        self._record_update(
            {"stock": {"removed": quantity, "old_quantity": old_stock, "new_quantity": self._stock_quantity}},
            updated_by
        )

    def set_stock(self, quantity: int, updated_by: Any = None) -> None:
        """将库存设置为指定数量"""
        self._ensure_not_deleted()
        _non_negative_int(quantity, "quantity", "Stock quantity cannot be negative")
        self._ensure_tracks_stock("set stock for")

        old_stock = self._stock_quantity
        self._stock_quantity = quantity
        self._record_update(
            {"stock": {"old_quantity": old_stock, "new_quantity": quantity}},
            updated_by
        )

    def update_stock_levels(self, stock_quantity: int, min_stock_level: int, updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        _non_negative_int(stock_quantity, "stock_quantity", "Stock quantity cannot be negative")
        _non_negative_int(min_stock_level, "min_stock_level", "Minimum stock level cannot be negative")

        changes = {
            "stock": {
                "quantity": {"old": self._stock_quantity, "new": stock_quantity},
                "min_level": {"old": self._min_stock_level, "new": min_stock_level},
            }
        }
        self._stock_quantity = stock_quantity
        self._min_stock_level = min_stock_level
        self._record_update(changes, updated_by)

    def update_reorder_level(self, reorder_level: int, updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        _non_negative_int(reorder_level, "reorder_level", "Reorder level cannot be negative")
        changes = {"reorder_level": {"old": self._reorder_level, "new": reorder_level}}
        self._reorder_level = reorder_level
        self._record_update(changes, updated_by)

    def update_max_stock_level(self, max_stock_level: int, updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        _non_negative_int(max_stock_level, "max_stock_level", "Maximum stock level cannot be negative")
        changes = {"max_stock_level": {"old": self._max_stock_level, "new": max_stock_level}}
        self._max_stock_level = max_stock_level
        self._record_update(changes, updated_by)

    # ==================== 状态 ====================

    def change_status(self, status: ProductStatus, updated_by: Any = None) -> None:
        """
        修改商品状态。
        迁移是否合法由调用方根据状态迁移表检查；状态相同时不做任何处理。

        Args:
            status: 新状态
            updated_by: 操作人ID
        """
        self._ensure_not_deleted()
        new_status = ProductStatus.create(status)
        if new_status is self._status:
            return

        old_status = self._status
        self._status = new_status
        self.touch(updated_by)
        self.add_domain_event(ProductStatusChangedEvent(self.id, old_status, new_status, updated_by))

    def activate(self, updated_by: Any = None) -> None:
        self.change_status(ProductStatus.ACTIVE, updated_by)

    def deactivate(self, updated_by: Any = None) -> None:
        self.change_status(ProductStatus.INACTIVE, updated_by)

    def discontinue(self, updated_by: Any = None) -> None:
        self.change_status(ProductStatus.DISCONTINUED, updated_by)

    # ==================== 基本信息 ====================

    def update_pricing(self, price: Money, cost: Money, updated_by: Any = None) -> None:
        """
        更新价格和成本。

        Raises:
            ValidationException: 价格和成本货币不一致
        """
        self._ensure_not_deleted()
        self._ensure_same_currency(price, cost)

        changes = {
            "pricing": {
                "price": {"old": self._price, "new": price},
                "cost": {"old": self._cost, "new": cost},
            }
        }
        self._price = price
        self._cost = cost
        self._record_update(changes, updated_by)

    def update_information(
        self,
        name: Optional[ProductName] = None,
        description: Optional[ProductDescription] = None,
        short_description: Optional[str] = None,
        category_id: Any = None,
        tags: Optional[List[str]] = None,
        images: Optional[List[str]] = None,
        specifications: Optional[Dict[str, Any]] = None,
        updated_by: Any = None
    ) -> None:
        """
        部分更新商品信息，值为None的参数表示不修改。
        只在确有变更时记录一个更新事件，列出所有变更的字段。
        """
        self._ensure_not_deleted()

        changes: Dict[str, Any] = {}
        updates = (
            ("name", "_name", name),
            ("description", "_description", description),
            ("short_description", "_short_description", short_description),
            ("category_id", "_category_id", category_id),
            ("tags", "_tags", list(tags) if tags is not None else None),
            ("images", "_images", list(images) if images is not None else None),
            ("specifications", "_specifications", dict(specifications) if specifications is not None else None),
        )
        for field_name, attribute, value in updates:
            if value is None:
                continue
            old_value = getattr(self, attribute)
            if old_value != value:
                changes[field_name] = {"old": old_value, "new": value}
                setattr(self, attribute, value)

        if changes:
            self._record_update(changes, updated_by)

    def update_sku(self, sku: ProductSku, updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        changes = {"sku": {"old": self._sku, "new": sku}}
        self._sku = sku
        self._record_update(changes, updated_by)

    def update_barcode(self, barcode: Optional[str], updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        changes = {"barcode": {"old": self._barcode, "new": barcode}}
        self._barcode = barcode
        self._record_update(changes, updated_by)

    def update_weight(self, weight: Optional[Weight], updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        changes = {"weight": {"old": self._weight, "new": weight}}
        self._weight = weight
        self._record_update(changes, updated_by)

    def update_dimensions(self, dimensions: Optional[Dimensions], updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        changes = {"dimensions": {"old": self._dimensions, "new": dimensions}}
        self._dimensions = dimensions
        self._record_update(changes, updated_by)

    def assign_to_category(self, category_id: Any, updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        changes = {"category": {"old": self._category_id, "new": category_id}}
        self._category_id = category_id
        self._record_update(changes, updated_by)

    def remove_from_category(self, updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        changes = {"category": {"old": self._category_id, "new": None}}
        self._category_id = None
        self._record_update(changes, updated_by)

    def update_images(
        self,
        image_url: Optional[str] = None,
        images: Optional[List[str]] = None,
        updated_by: Any = None
    ) -> None:
        self._ensure_not_deleted()
        self._image_url = image_url
        self._images = list(images or [])
        self._record_update({"images": {"image_url": image_url, "images": list(self._images)}}, updated_by)

    def update_tags(self, tags: List[str], updated_by: Any = None) -> None:
        self._ensure_not_deleted()
        changes = {"tags": {"old": list(self._tags), "new": list(tags)}}
        self._tags = list(tags)
        self._record_update(changes, updated_by)

    # ==================== 删除与恢复 ====================

    def delete(self, deleted_by: Any = None) -> None:
        """
        软删除商品。

        Raises:
            BusinessRuleViolationException: 商品已被删除
        """
        if self.is_deleted:
            raise BusinessRuleViolationException("product_already_deleted", "Product is already deleted")
        self.mark_as_deleted(deleted_by)
        self.add_domain_event(ProductDeletedEvent(self.id, self._sku.value, deleted_by))

    def restore(self, restored_by: Any = None) -> None:
        if not self.is_deleted:
            raise BusinessRuleViolationException("product_not_deleted", "Product is not deleted")
        deleted_at = self.deleted_at
        self.mark_as_restored(restored_by)
        self.add_domain_event(
            ProductUpdatedEvent(self.id, {"deleted_at": {"old": deleted_at, "new": None}}, restored_by)
        )

    # ==================== 业务规则检查 ====================

    def is_available_for_sale(self) -> bool:
        return (
            not self.is_deleted
            and self._status.is_active()
            and (not self._track_stock or self._stock_quantity > 0)
        )

    def is_low_in_stock(self) -> bool:
        return self._track_stock and self._stock_quantity <= self._min_stock_level

    def is_out_of_stock(self) -> bool:
        return self._track_stock and self._stock_quantity == 0

    def needs_reorder(self) -> bool:
        return self._track_stock and self._stock_quantity <= self._reorder_level

    def profit_margin(self) -> Decimal:
        """
        利润率，按成本计算的百分比，保留两位小数；成本为0时返回0。
        """
        if self._cost.amount == 0:
            return Decimal("0")
        margin = (self._price.amount - self._cost.amount) / self._cost.amount * 100
        return margin.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def profit_amount(self) -> Decimal:
        """单件利润，售价低于成本时为负数"""
        return self._price.amount - self._cost.amount

    def stock_value(self) -> Money:
        """按成本计算的库存总价值"""
        return self._cost.multiply(self._stock_quantity)

    def validate(self) -> None:
        """
        校验聚合的不变性规则。

        Raises:
            ValidationException: 任一规则不满足
        """
        self._ensure_same_currency(self._price, self._cost)
        _non_negative_int(self._stock_quantity, "stock_quantity", "Stock quantity cannot be negative")
        _non_negative_int(self._min_stock_level, "min_stock_level", "Minimum stock level cannot be negative")
        _non_negative_int(self._reorder_level, "reorder_level", "Reorder level cannot be negative")
        _non_negative_int(self._max_stock_level, "max_stock_level", "Maximum stock level cannot be negative")

    def check_invariants(self) -> bool:
        try:
            self.validate()
        except ValidationException:
            return False
        return True

    # ==================== 持久化 ====================

    def to_persistence(self) -> Dict[str, Any]:
        """
        导出为持久化行数据，列名与products表一致。

        Returns:
            行数据字典
        """
        return {
            "id": str(self.id),
            "product_name": self._name.value,
            "sku": self._sku.value,
            "barcode": self._barcode,
            "description": self._description.value if self._description else None,
            "short_description": self._short_description,
            "category_id": str(self._category_id) if self._category_id else None,
            "family_id": str(self._family_id) if self._family_id else None,
            "brand_id": str(self._brand_id) if self._brand_id else None,
            "unit_id": str(self._unit_id) if self._unit_id else None,
            "price": self._price.amount,
            "cost": self._cost.amount,
            "currency": self._price.currency,
            "stock_quantity": self._stock_quantity,
            "min_stock_level": self._min_stock_level,
            "reorder_level": self._reorder_level,
            "max_stock_level": self._max_stock_level,
            "weight": self._weight.value if self._weight else None,
            "weight_unit": self._weight.unit if self._weight else None,
            "length": self._dimensions.length if self._dimensions else None,
            "width": self._dimensions.width if self._dimensions else None,
            "height": self._dimensions.height if self._dimensions else None,
            "dimension_unit": self._dimensions.unit if self._dimensions else None,
            "status": self._status.value,
            "is_digital": self._is_digital,
            "track_stock": self._track_stock,
            "image_url": self._image_url,
            "images": json.dumps(self._images) if self._images else None,
            "tags": json.dumps(self._tags) if self._tags else None,
            "specifications": json.dumps(self._specifications) if self._specifications else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "created_by": self.created_by,
            "updated_by": self.updated_by,
            "deleted_at": self.deleted_at,
            "deleted_by": self.deleted_by,
            "version": self.version,
        }

    @classmethod
    def from_persistence(cls, row: Dict[str, Any]) -> "Product":
        """
        从持久化行数据重建商品。

        Args:
            row: to_persistence导出的行数据

        Returns:
            重建的商品
        """
        currency = row.get("currency") or Money.DEFAULT_CURRENCY

        weight = None
        if row.get("weight") is not None:
            weight = Weight(_decimal(row["weight"]), row.get("weight_unit") or Weight.DEFAULT_UNIT)

        dimensions = None
        if row.get("length") is not None:
            dimensions = Dimensions(
                _decimal(row["length"]),
                _decimal(row["width"]),
                _decimal(row["height"]),
                row.get("dimension_unit") or Dimensions.DEFAULT_UNIT,
            )

        specifications = row.get("specifications")
        if isinstance(specifications, str):
            specifications = json.loads(specifications)

        return cls.reconstitute(
            parse_entity_id(row["id"]),
            name=ProductName(row["product_name"]),
            sku=ProductSku(row["sku"]),
            price=Money(_decimal(row["price"]), currency),
            cost=Money(_decimal(row["cost"]), currency),
            barcode=row.get("barcode"),
            description=ProductDescription(row["description"]) if row.get("description") else None,
            short_description=row.get("short_description"),
            category_id=_optional_id(row.get("category_id"), "category_id"),
            family_id=_optional_id(row.get("family_id"), "family_id"),
            brand_id=_optional_id(row.get("brand_id"), "brand_id"),
            unit_id=_optional_id(row.get("unit_id"), "unit_id"),
            stock_quantity=int(row.get("stock_quantity") or 0),
            min_stock_level=int(row.get("min_stock_level") or 0),
            reorder_level=int(row.get("reorder_level") or 0),
            max_stock_level=int(row.get("max_stock_level") or 0),
            weight=weight,
            dimensions=dimensions,
            status=ProductStatus.create(row["status"]),
            is_digital=bool(row.get("is_digital", False)),
            track_stock=bool(row.get("track_stock", True)),
            image_url=row.get("image_url"),
            images=_loads_list(row.get("images")),
            tags=_loads_list(row.get("tags")),
            specifications=specifications or {},
            version=int(row.get("version") or 0),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            created_by=row.get("created_by"),
            updated_by=row.get("updated_by"),
            deleted_at=row.get("deleted_at"),
            deleted_by=row.get("deleted_by"),
        )
