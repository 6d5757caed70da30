"""
商品领域模型中的服务。
定义需要访问仓储才能完成的商品业务逻辑。
"""
from typing import Optional

from loguru import logger

from core.domain import ConflictException
from products.domain.config import get_product_setting
from products.domain.repositories import ProductRepository
from products.domain.value_objects import ProductSku


class ProductSkuService:
    """
    商品SKU领域服务。
    负责SKU的唯一性检查和自动生成。
    """

    def __init__(self, product_repository: ProductRepository, max_attempts: Optional[int] = None):
        """
        初始化SKU服务。

        Args:
            product_repository: 商品仓储
            max_attempts: 生成SKU时追加序号的最大尝试次数，默认读取配置
        """
        self.product_repository = product_repository
        self._max_attempts = max_attempts

    @property
    def max_attempts(self) -> int:
        if self._max_attempts is not None:
            return self._max_attempts
        return int(get_product_setting('SKU_GENERATION_MAX_ATTEMPTS'))

    def ensure_unique(self, sku: ProductSku) -> ProductSku:
        """
        检查SKU未被其他商品使用。

        Raises:
            ConflictException: SKU已存在
        """
        if self.product_repository.exists_by_sku(sku):
            raise ConflictException(f"Product with SKU {sku.value} already exists", sku.value)
        return sku

    def generate_unique(self, product_name: str, prefix: Optional[str] = None) -> ProductSku:
        """
        根据商品名称生成唯一SKU。
        基础SKU已存在时依次追加-1、-2……直到不冲突或达到最大尝试次数。
        生成基础SKU时按最大尝试次数预留计数后缀的长度。

        Args:
            product_name: 商品名称
            prefix: 可选前缀

        Returns:
            未被使用的SKU

        Raises:
            ConflictException: 达到最大尝试次数仍未找到可用SKU
        """
        max_attempts = self.max_attempts
        base = ProductSku.generate_from_name(product_name, prefix, reserve=len(f"-{max_attempts}"))
        if not self.product_repository.exists_by_sku(base):
            return base

        for counter in range(1, max_attempts + 1):
            candidate = base.with_counter(counter)
            if not self.product_repository.exists_by_sku(candidate):
                logger.debug(f"SKU {base.value} 已存在，使用 {candidate.value}")
                return candidate

        raise ConflictException(
            f"Could not generate unique SKU for product '{product_name}' "
            f"after {max_attempts} attempts",
            base.value
        )
