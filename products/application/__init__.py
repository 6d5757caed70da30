"""
商品应用服务层包。
提供商品相关的用例、数据传输对象、命令和查询。
"""

# DTO
from products.application.dtos import (
    ProductDTO,
    ProductListDTO,
    StockUpdateDTO,
)

# 命令
from products.application.commands import (
    CreateProductCommand,
    UpdateProductCommand,
    UpdateProductStockCommand,
    DeleteProductCommand,
)

# 查询
from products.application.queries import (
    GetProductByIdQuery,
    GetProductBySkuQuery,
    SearchProductsQuery,
)

# 用例
from products.application.use_cases import (
    ProductUseCase,
    CreateProductUseCase,
    UpdateProductUseCase,
    UpdateProductStockUseCase,
    DeleteProductUseCase,
    SearchProductsUseCase,
    GetProductByIdUseCase,
    GetProductBySkuUseCase,
)

__all__ = [
    # DTO
    'ProductDTO',
    'ProductListDTO',
    'StockUpdateDTO',

    # 命令
    'CreateProductCommand',
    'UpdateProductCommand',
    'UpdateProductStockCommand',
    'DeleteProductCommand',

    # 查询
    'GetProductByIdQuery',
    'GetProductBySkuQuery',
    'SearchProductsQuery',

    # 用例
    'ProductUseCase',
    'CreateProductUseCase',
    'UpdateProductUseCase',
    'UpdateProductStockUseCase',
    'DeleteProductUseCase',
    'SearchProductsUseCase',
    'GetProductByIdUseCase',
    'GetProductBySkuUseCase',
]
