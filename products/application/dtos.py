"""
商品应用服务层的数据传输对象(DTOs)。
定义用例返回给调用方的数据结构。
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from products.domain import Product, ProductSearchResult


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _format_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


class ProductDTO:
    """商品数据传输对象，用于返回商品信息"""

    def __init__(
        self,
        id: str,
        name: str,
        sku: str,
        barcode: Optional[str],
        description: Optional[str],
        short_description: Optional[str],
        category_id: Optional[str],
        family_id: Optional[str],
        brand_id: Optional[str],
        unit_id: Optional[str],
        price: Dict[str, Any],
        cost: Dict[str, Any],
        stock_quantity: int,
        min_stock_level: int,
        reorder_level: int,
        max_stock_level: int,
        weight: Optional[Dict[str, Any]],
        dimensions: Optional[Dict[str, Any]],
        status: str,
        is_digital: bool,
        track_stock: bool,
        image_url: Optional[str],
        images: List[str],
        tags: List[str],
        specifications: Dict[str, Any],
        is_available_for_sale: bool,
        is_low_in_stock: bool,
        created_at: Optional[datetime],
        updated_at: Optional[datetime],
        created_by: Any = None,
        updated_by: Any = None,
        deleted_at: Optional[datetime] = None,
        deleted_by: Any = None,
        version: int = 0
    ):
        """
        初始化商品DTO。
        价格、成本、重量和尺寸使用对应值对象的字典表示。
        """
        self.id = id
        self.name = name
        self.sku = sku
        self.barcode = barcode
        self.description = description
        self.short_description = short_description
        self.category_id = category_id
        self.family_id = family_id
        self.brand_id = brand_id
        self.unit_id = unit_id
        self.price = price
        self.cost = cost
        self.stock_quantity = stock_quantity
        self.min_stock_level = min_stock_level
        self.reorder_level = reorder_level
        self.max_stock_level = max_stock_level
        self.weight = weight
        self.dimensions = dimensions
        self.status = status
        self.is_digital = is_digital
        self.track_stock = track_stock
        self.image_url = image_url
        self.images = images
        self.tags = tags
        self.specifications = specifications
        self.is_available_for_sale = is_available_for_sale
        self.is_low_in_stock = is_low_in_stock
        self.created_at = created_at
        self.updated_at = updated_at
        self.created_by = created_by
        self.updated_by = updated_by
        self.deleted_at = deleted_at
        self.deleted_by = deleted_by
        self.version = version

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @classmethod
    def from_aggregate(cls, product: Product) -> 'ProductDTO':
        """
        从商品聚合根创建DTO。

        Args:
            product: 商品聚合根

        Returns:
            商品DTO
        """
        return cls(
            id=str(product.id),
            name=product.name.value,
            sku=product.sku.value,
            barcode=product.barcode,
            description=product.description.value if product.description else None,
            short_description=product.short_description,
            category_id=_format_id(product.category_id),
            family_id=_format_id(product.family_id),
            brand_id=_format_id(product.brand_id),
            unit_id=_format_id(product.unit_id),
            price=product.price.to_dict(),
            cost=product.cost.to_dict(),
            stock_quantity=product.stock_quantity,
            min_stock_level=product.min_stock_level,
            reorder_level=product.reorder_level,
            max_stock_level=product.max_stock_level,
            weight=product.weight.to_dict() if product.weight else None,
            dimensions=product.dimensions.to_dict() if product.dimensions else None,
            status=product.status.value,
            is_digital=product.is_digital,
            track_stock=product.track_stock,
            image_url=product.image_url,
            images=product.images,
            tags=product.tags,
            specifications=product.specifications,
            is_available_for_sale=product.is_available_for_sale(),
            is_low_in_stock=product.is_low_in_stock(),
            created_at=product.created_at,
            updated_at=product.updated_at,
            created_by=product.created_by,
            updated_by=product.updated_by,
            deleted_at=product.deleted_at,
            deleted_by=product.deleted_by,
            version=product.version,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        将DTO转换为字典。

        Returns:
            字典表示
        """
        return {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "barcode": self.barcode,
            "description": self.description,
            "short_description": self.short_description,
            "category_id": self.category_id,
            "family_id": self.family_id,
            "brand_id": self.brand_id,
            "unit_id": self.unit_id,
            "price": self.price,
            "cost": self.cost,
            "stock_quantity": self.stock_quantity,
            "min_stock_level": self.min_stock_level,
            "reorder_level": self.reorder_level,
            "max_stock_level": self.max_stock_level,
            "weight": self.weight,
            "dimensions": self.dimensions,
            "status": self.status,
            "is_digital": self.is_digital,
            "track_stock": self.track_stock,
            "image_url": self.image_url,
            "images": list(self.images),
            "tags": list(self.tags),
            "specifications": dict(self.specifications),
            "is_available_for_sale": self.is_available_for_sale,
            "is_low_in_stock": self.is_low_in_stock,
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
            "created_by": _format_id(self.created_by),
            "updated_by": _format_id(self.updated_by),
            "deleted_at": _format_datetime(self.deleted_at),
            "deleted_by": _format_id(self.deleted_by),
            "version": self.version,
        }


class ProductListDTO:
    """商品列表DTO"""

    def __init__(self, items: List[ProductDTO], total: int, limit: int, offset: int):
        """
        初始化商品列表DTO。

        Args:
            items: 商品DTO列表
            total: 匹配总数
            limit: 每页数量
            offset: 偏移量
        """
        self.items = items
        self.total = total
        self.limit = limit
        self.offset = offset
        self.has_more = offset + len(items) < total

    @classmethod
    def from_search_result(cls, result: ProductSearchResult) -> 'ProductListDTO':
        return cls(
            items=[ProductDTO.from_aggregate(product) for product in result.products],
            total=result.total,
            limit=result.limit,
            offset=result.offset,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        将DTO转换为字典。

        Returns:
            字典表示
        """
        return {
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
            "has_more": self.has_more,
        }


class StockUpdateDTO:
    """库存调整结果DTO"""

    def __init__(self, product: ProductDTO, previous_stock: int, new_stock: int):
        self.product = product
        self.previous_stock = previous_stock
        self.new_stock = new_stock

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": self.product.to_dict(),
            "previous_stock": self.previous_stock,
            "new_stock": self.new_stock,
        }
