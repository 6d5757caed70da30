"""
商品应用服务层的命令对象。
定义用于修改系统状态的命令。

命令只携带调用方提供的原始数据，校验在用例中完成。
对于可选字段，None表示"未提供"。
重量使用{"value": 2.5, "unit": "kg"}，
尺寸使用{"length": 10, "width": 5, "height": 3, "unit": "cm"}。
"""
from typing import Any, Dict, List, Optional


class CreateProductCommand:
    """创建商品命令"""

    def __init__(
        self,
        name: str,
        category_id: Optional[str],
        price: Any,
        cost: Any,
        sku: Optional[str] = None,
        barcode: Optional[str] = None,
        description: Optional[str] = None,
        short_description: Optional[str] = None,
        currency: Optional[str] = None,
        weight: Optional[Dict[str, Any]] = None,
        dimensions: Optional[Dict[str, Any]] = None,
        stock_quantity: Optional[int] = None,
        min_stock_level: Optional[int] = None,
        reorder_level: Optional[int] = None,
        max_stock_level: Optional[int] = None,
        status: Optional[str] = None,
        is_digital: bool = False,
        track_stock: bool = True,
        image_url: Optional[str] = None,
        images: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
        specifications: Optional[Dict[str, Any]] = None,
        created_by: Optional[str] = None
    ):
        """
        初始化创建商品命令。

        Args:
            name: 商品名称
            category_id: 商品分类ID
            price: 售价
            cost: 成本
            sku: 商品SKU，未提供时根据名称自动生成
            barcode: 条形码
            description: 商品描述
            short_description: 简短描述
            currency: 货币，默认使用配置的默认货币
            weight: 重量
            dimensions: 尺寸
            stock_quantity: 初始库存
            min_stock_level: 最低库存水平
            reorder_level: 补货点
            max_stock_level: 最大库存水平
            status: 初始状态，默认为draft
            is_digital: 是否为数字商品
            track_stock: 是否跟踪库存
            image_url: 主图地址
            images: 图片列表
            tags: 标签列表
            specifications: 商品规格
            created_by: 创建人ID
        """
        self.name = name
        self.category_id = category_id
        self.price = price
        self.cost = cost
        self.sku = sku
        self.barcode = barcode
        self.description = description
        self.short_description = short_description
        self.currency = currency
        self.weight = weight
        self.dimensions = dimensions
        self.stock_quantity = stock_quantity
        self.min_stock_level = min_stock_level
        self.reorder_level = reorder_level
        self.max_stock_level = max_stock_level
        self.status = status
        self.is_digital = is_digital
        self.track_stock = track_stock
        self.image_url = image_url
        self.images = images
        self.tags = tags
        self.specifications = specifications
        self.created_by = created_by


class UpdateProductCommand:
    """更新商品命令，只有提供的字段会被修改"""

    def __init__(
        self,
        id: str,
        name: Optional[str] = None,
        sku: Optional[str] = None,
        barcode: Optional[str] = None,
        description: Optional[str] = None,
        short_description: Optional[str] = None,
        category_id: Optional[str] = None,
        price: Any = None,
        cost: Any = None,
        currency: Optional[str] = None,
        weight: Optional[Dict[str, Any]] = None,
        dimensions: Optional[Dict[str, Any]] = None,
        reorder_level: Optional[int] = None,
        max_stock_level: Optional[int] = None,
        status: Optional[str] = None,
        tags: Optional[List[str]] = None,
        images: Optional[List[str]] = None,
        specifications: Optional[Dict[str, Any]] = None,
        updated_by: Optional[str] = None
    ):
        """
        初始化更新商品命令。

        Args:
            id: 商品ID
            name: 商品名称
            sku: 商品SKU
            barcode: 条形码，空字符串表示清除
            description: 商品描述
            short_description: 简短描述
            category_id: 商品分类ID
            price: 售价
            cost: 成本
            currency: 价格货币，默认沿用商品当前货币
            weight: 重量
            dimensions: 尺寸
            reorder_level: 补货点
            max_stock_level: 最大库存水平
            status: 目标状态
            tags: 标签列表
            images: 图片列表
            specifications: 商品规格
            updated_by: 更新人ID
        """
        self.id = id
        self.name = name
        self.sku = sku
        self.barcode = barcode
        self.description = description
        self.short_description = short_description
        self.category_id = category_id
        self.price = price
        self.cost = cost
        self.currency = currency
        self.weight = weight
        self.dimensions = dimensions
        self.reorder_level = reorder_level
        self.max_stock_level = max_stock_level
        self.status = status
        self.tags = tags
        self.images = images
        self.specifications = specifications
        self.updated_by = updated_by


class UpdateProductStockCommand:
    """更新商品库存命令"""

    # 支持的库存操作
    ADD = "add"
    REMOVE = "remove"
    SET = "set"
    OPERATIONS = (ADD, REMOVE, SET)

    def __init__(
        self,
        product_id: str,
        operation: str,
        quantity: Any,
        reason: Optional[str] = None,
        updated_by: Optional[str] = None
    ):
        """
        初始化更新商品库存命令。

        Args:
            product_id: 商品ID
            operation: 操作类型，add、remove或set
            quantity: 数量
            reason: 调整原因
            updated_by: 操作人ID
        """
        self.product_id = product_id
        self.operation = operation
        self.quantity = quantity
        self.reason = reason
        self.updated_by = updated_by


class DeleteProductCommand:
    """删除商品命令"""

    def __init__(self, id: str, deleted_by: Optional[str] = None, force: bool = False):
        """
        初始化删除商品命令。

        Args:
            id: 商品ID
            deleted_by: 删除人ID
            force: 是否跳过库存和状态检查
        """
        self.id = id
        self.deleted_by = deleted_by
        self.force = force
