"""
商品应用服务层的查询对象。
定义用于查询系统状态的查询。
"""
from typing import Any, List, Optional


class GetProductByIdQuery:
    """根据ID获取单个商品的查询"""

    def __init__(self, id: str, include_deleted: bool = False):
        """
        初始化获取商品查询。

        Args:
            id: 商品ID
            include_deleted: 是否返回已软删除的商品
        """
        self.id = id
        self.include_deleted = include_deleted


class GetProductBySkuQuery:
    """根据SKU获取单个商品的查询"""

    def __init__(self, sku: str, include_deleted: bool = False):
        """
        初始化获取商品查询。

        Args:
            sku: 商品SKU
            include_deleted: 是否返回已软删除的商品
        """
        self.sku = sku
        self.include_deleted = include_deleted


class SearchProductsQuery:
    """搜索商品的查询"""

    def __init__(
        self,
        name: Optional[str] = None,
        sku: Optional[str] = None,
        category_id: Optional[str] = None,
        status: Optional[str] = None,
        min_price: Any = None,
        max_price: Any = None,
        currency: Optional[str] = None,
        in_stock: Optional[bool] = None,
        tags: Optional[List[str]] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        include_deleted: bool = False
    ):
        """
        初始化搜索商品查询。

        Args:
            name: 名称关键词
            sku: SKU关键词
            category_id: 分类ID
            status: 商品状态
            min_price: 最低价格
            max_price: 最高价格
            currency: 价格过滤使用的货币
            in_stock: 是否有库存
            tags: 标签列表，匹配任一标签
            sort_by: 排序字段，name、sku、price、stock、created_at或updated_at
            sort_order: 排序方向，asc或desc
            limit: 每页数量，1到1000
            offset: 偏移量
            include_deleted: 是否包含已软删除的商品
        """
        self.name = name
        self.sku = sku
        self.category_id = category_id
        self.status = status
        self.min_price = min_price
        self.max_price = max_price
        self.currency = currency
        self.in_stock = in_stock
        self.tags = tags
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.limit = limit
        self.offset = offset
        self.include_deleted = include_deleted
