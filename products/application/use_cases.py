"""
商品用例。
每个用例对应一个业务操作，流程为：
校验请求 -> 构造或加载商品 -> 调用聚合根业务方法 -> 持久化 -> 发布领域事件 -> 返回结果。

用例从不向调用方抛出异常：领域异常转换为对应状态码的失败结果，
其他异常记录日志后返回通用错误消息。
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from loguru import logger

from core.application import ErrorCode, UseCaseResult
from core.domain import (
    BusinessRuleViolationException,
    ConflictException,
    Dimensions,
    DomainException,
    EntityNotFoundException,
    EventBus,
    InvalidStatusTransitionException,
    Money,
    ValidationException,
    Weight,
    parse_entity_id,
)
from products.application.commands import (
    CreateProductCommand,
    DeleteProductCommand,
    UpdateProductCommand,
    UpdateProductStockCommand,
)
from products.application.dtos import ProductDTO, ProductListDTO, StockUpdateDTO
from products.application.queries import GetProductByIdQuery, GetProductBySkuQuery, SearchProductsQuery
from products.domain import (
    CategoryRepository,
    InventoryLockService,
    Product,
    ProductDescription,
    ProductName,
    ProductRepository,
    ProductSearchFilters,
    ProductSearchOptions,
    ProductSku,
    ProductSkuService,
    ProductStatus,
    SORT_FIELDS,
    SORT_ORDERS,
)
from products.domain.config import get_product_setting


# ==================== 请求校验辅助函数 ====================

def is_non_negative_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    try:
        return Decimal(str(value)).is_finite() and value >= 0
    except ArithmeticError:
        return False


def is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def optional_id(value: Any, field_name: str) -> Any:
    return parse_entity_id(value, field_name) if value else None


def validate_weight(weight: Any, errors: List[str]) -> None:
    data = weight if isinstance(weight, dict) else {}
    if not is_non_negative_number(data.get("value")):
        errors.append("Weight value must be a non-negative number")
    if is_blank(data.get("unit")):
        errors.append("Weight unit is required when weight is specified")


def validate_dimensions(dimensions: Any, errors: List[str]) -> None:
    data = dimensions if isinstance(dimensions, dict) else {}
    for axis in ("length", "width", "height"):
        if not is_non_negative_number(data.get(axis)):
            errors.append(f"Dimensions {axis} must be a non-negative number")
    if is_blank(data.get("unit")):
        errors.append("Dimensions unit is required when dimensions are specified")


def validate_status_and_currency(status: Any, currency: Any, errors: List[str]) -> None:
    if status:
        try:
            ProductStatus.create(status)
        except ValidationException:
            errors.append("Invalid product status")
    if currency:
        try:
            Money.create(0, currency)
        except ValidationException:
            errors.append("Invalid currency code")


def build_weight(data: Dict[str, Any]) -> Weight:
    return Weight.create(data["value"], data["unit"])


def build_dimensions(data: Dict[str, Any]) -> Dimensions:
    return Dimensions.create(data["length"], data["width"], data["height"], data["unit"])


def parse_product_id(value: Any) -> Any:
    """
    解析商品ID。

    Raises:
        ValidationException: ID为空或格式无效
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationException("id", "Product ID is required")
    try:
        return parse_entity_id(value, "id")
    except ValidationException:
        raise ValidationException("id", "Invalid product ID format") from None


# ==================== 用例基类 ====================

class ProductUseCase:
    """
    商品用例基类。
    负责异常到结果的转换，以及持久化之后的领域事件发布。
    """

    def __init__(self, product_repository: ProductRepository, event_bus: Optional[EventBus] = None):
        self.product_repository = product_repository
        self.event_bus = event_bus

    def execute(self, request: Any) -> UseCaseResult:
        """
        执行用例。

        Args:
            request: 命令或查询对象

        Returns:
            UseCaseResult: 执行结果
        """
        name = type(self).__name__
        try:
            return self._execute(request)
        except DomainException as e:
            logger.warning(f"{name} 执行失败: {e.message}")
            return UseCaseResult.from_exception(e)
        except Exception as e:
            logger.exception(f"{name} 发生未预期的错误: {e}")
            return UseCaseResult.from_exception(e)

    def _execute(self, request: Any) -> UseCaseResult:
        raise NotImplementedError

    def _load_product(self, product_id: Any) -> Product:
        """加载商品，包括已软删除的商品，由调用方决定如何处理删除状态"""
        product = self.product_repository.find_by_id(product_id, include_deleted=True)
        if product is None:
            raise EntityNotFoundException("Product", product_id)
        return product

    def _publish_events(self, product: Product) -> None:
        """
        取出并发布商品上待发布的领域事件。
        事件发布失败只记录日志，不影响已完成的写入。
        """
        events = product.clear_domain_events()
        if self.event_bus is None:
            return
        for event in events:
            try:
                self.event_bus.publish(event)
            except Exception:
                logger.exception(f"发布领域事件失败: {event.event_type} (product_id={product.id})")


# ==================== 创建 ====================

class CreateProductUseCase(ProductUseCase):
    """创建商品用例"""

    def __init__(
        self,
        product_repository: ProductRepository,
        category_repository: CategoryRepository,
        event_bus: Optional[EventBus] = None,
        sku_service: Optional[ProductSkuService] = None
    ):
        """
        初始化创建商品用例。

        Args:
            product_repository: 商品仓储
            category_repository: 分类仓储
            event_bus: 事件总线
            sku_service: SKU领域服务，未提供时基于商品仓储创建
        """
        super().__init__(product_repository, event_bus)
        self.category_repository = category_repository
        self.sku_service = sku_service or ProductSkuService(product_repository)

    def _validate(self, command: CreateProductCommand) -> List[str]:
        errors: List[str] = []

        if is_blank(command.name):
            errors.append("Product name is required")

        if not command.category_id:
            errors.append("Category ID is required")
        else:
            try:
                category_id = parse_entity_id(command.category_id, "category_id")
            except ValidationException:
                errors.append("Invalid category ID format")
            else:
                if not self.category_repository.exists(category_id):
                    errors.append("Category does not exist")

        if not is_non_negative_number(command.price):
            errors.append("Price must be a non-negative number")
        if not is_non_negative_number(command.cost):
            errors.append("Cost must be a non-negative number")

        levels = (
            (command.stock_quantity, "Stock quantity must be a non-negative number"),
            (command.min_stock_level, "Minimum stock level must be a non-negative number"),
            (command.reorder_level, "Reorder level must be a non-negative number"),
            (command.max_stock_level, "Maximum stock level must be a non-negative number"),
        )
        for value, message in levels:
            if value is not None and not is_non_negative_int(value):
                errors.append(message)

        if command.weight is not None:
            validate_weight(command.weight, errors)
        if command.dimensions is not None:
            validate_dimensions(command.dimensions, errors)

        validate_status_and_currency(command.status, command.currency, errors)
        return errors

    def _execute(self, command: CreateProductCommand) -> UseCaseResult:
        errors = self._validate(command)
        if errors:
            return UseCaseResult.fail(errors=errors, error_code=ErrorCode.VALIDATION)

        name = ProductName.create(command.name)

        if command.sku:
            sku = self.sku_service.ensure_unique(ProductSku.create(command.sku))
        else:
            sku = self.sku_service.generate_unique(command.name)

        if command.barcode and self.product_repository.exists_by_barcode(command.barcode):
            raise ConflictException(f"Product with barcode {command.barcode} already exists", command.barcode)

        currency = command.currency or get_product_setting('DEFAULT_CURRENCY')
        max_stock_level = command.max_stock_level
        if max_stock_level is None:
            max_stock_level = get_product_setting('DEFAULT_MAX_STOCK_LEVEL')

        product = Product.create(
            name,
            sku,
            Money.create(command.price, currency),
            Money.create(command.cost, currency),
            created_by=optional_id(command.created_by, "created_by"),
            barcode=command.barcode or None,
            description=ProductDescription.create(command.description) if command.description else None,
            short_description=command.short_description,
            category_id=parse_entity_id(command.category_id, "category_id"),
            stock_quantity=command.stock_quantity or 0,
            min_stock_level=command.min_stock_level or 0,
            reorder_level=command.reorder_level or 0,
            max_stock_level=max_stock_level,
            weight=build_weight(command.weight) if command.weight is not None else None,
            dimensions=build_dimensions(command.dimensions) if command.dimensions is not None else None,
            status=ProductStatus.create(command.status) if command.status else ProductStatus.DRAFT,
            is_digital=command.is_digital,
            track_stock=command.track_stock,
            image_url=command.image_url,
            images=command.images or [],
            tags=command.tags or [],
            specifications=command.specifications or {},
        )

        rule_errors = self.product_repository.validate_business_rules(product)
        if rule_errors:
            return UseCaseResult.fail(errors=rule_errors, error_code=ErrorCode.VALIDATION)

        self.product_repository.save(product)
        self._publish_events(product)

        logger.info(f"创建商品成功: {product.sku.value} (id={product.id})")
        return UseCaseResult.ok(ProductDTO.from_aggregate(product))


# ==================== 更新 ====================

class UpdateProductUseCase(ProductUseCase):
    """更新商品用例，只修改命令中提供的字段"""

    def __init__(
        self,
        product_repository: ProductRepository,
        category_repository: CategoryRepository,
        event_bus: Optional[EventBus] = None
    ):
        super().__init__(product_repository, event_bus)
        self.category_repository = category_repository

    def _validate(self, command: UpdateProductCommand) -> List[str]:
        errors: List[str] = []

        try:
            parse_product_id(command.id)
        except ValidationException as e:
            errors.append(e.message)

        if command.name is not None and is_blank(command.name):
            errors.append("Product name cannot be empty")

        if command.category_id:
            try:
                category_id = parse_entity_id(command.category_id, "category_id")
            except ValidationException:
                errors.append("Invalid category ID format")
            else:
                if not self.category_repository.exists(category_id):
                    errors.append("Category does not exist")

        if command.price is not None and not is_non_negative_number(command.price):
            errors.append("Price must be a non-negative number")
        if command.cost is not None and not is_non_negative_number(command.cost):
            errors.append("Cost must be a non-negative number")
        if command.reorder_level is not None and not is_non_negative_int(command.reorder_level):
            errors.append("Reorder level must be a non-negative number")
        if command.max_stock_level is not None and not is_non_negative_int(command.max_stock_level):
            errors.append("Maximum stock level must be a non-negative number")

        if command.weight is not None:
            validate_weight(command.weight, errors)
        if command.dimensions is not None:
            validate_dimensions(command.dimensions, errors)

        validate_status_and_currency(command.status, command.currency, errors)
        return errors

    def _execute(self, command: UpdateProductCommand) -> UseCaseResult:
        errors = self._validate(command)
        if errors:
            return UseCaseResult.fail(errors=errors, error_code=ErrorCode.VALIDATION)

        product = self._load_product(parse_product_id(command.id))
        if product.is_deleted:
            raise BusinessRuleViolationException("product_deleted", "Cannot update deleted product")

        updated_by = optional_id(command.updated_by, "updated_by")

        self._apply_information(product, command, updated_by)
        self._apply_pricing(product, command, updated_by)
        self._apply_identifiers(product, command, updated_by)

        if command.weight is not None:
            product.update_weight(build_weight(command.weight), updated_by)
        if command.dimensions is not None:
            product.update_dimensions(build_dimensions(command.dimensions), updated_by)
        if command.reorder_level is not None:
            product.update_reorder_level(command.reorder_level, updated_by)
        if command.max_stock_level is not None:
            product.update_max_stock_level(command.max_stock_level, updated_by)

        if command.status:
            new_status = ProductStatus.create(command.status)
            if new_status is not product.status:
                if not product.status.can_transition_to(new_status):
                    raise InvalidStatusTransitionException(product.status.value, new_status.value)
                product.change_status(new_status, updated_by)

        rule_errors = self.product_repository.validate_business_rules(product)
        if rule_errors:
            return UseCaseResult.fail(errors=rule_errors, error_code=ErrorCode.VALIDATION)

        self.product_repository.update(product)
        self._publish_events(product)

        return UseCaseResult.ok(ProductDTO.from_aggregate(product))

    def _apply_information(self, product: Product, command: UpdateProductCommand, updated_by: Any) -> None:
        product.update_information(
            name=ProductName.create(command.name) if command.name else None,
            description=ProductDescription.create(command.description) if command.description else None,
            short_description=command.short_description,
            category_id=optional_id(command.category_id, "category_id"),
            tags=command.tags,
            images=command.images,
            specifications=command.specifications,
            updated_by=updated_by,
        )

    def _apply_pricing(self, product: Product, command: UpdateProductCommand, updated_by: Any) -> None:
        if command.price is None and command.cost is None:
            return
        currency = command.currency or product.currency
        price = Money.create(command.price, currency) if command.price is not None else product.price
        cost = Money.create(command.cost, currency) if command.cost is not None else product.cost
        product.update_pricing(price, cost, updated_by)

    def _apply_identifiers(self, product: Product, command: UpdateProductCommand, updated_by: Any) -> None:
        if command.sku:
            new_sku = ProductSku.create(command.sku)
            if new_sku != product.sku:
                if self.product_repository.exists_by_sku(new_sku):
                    raise ConflictException(f"Product with SKU {new_sku.value} already exists", new_sku.value)
                product.update_sku(new_sku, updated_by)

        if command.barcode is not None:
            barcode = command.barcode or None
            if barcode and barcode != product.barcode and self.product_repository.exists_by_barcode(barcode):
                raise ConflictException(f"Product with barcode {barcode} already exists", barcode)
            product.update_barcode(barcode, updated_by)


# ==================== 库存 ====================

class UpdateProductStockUseCase(ProductUseCase):
    """
    更新商品库存用例。
    同一商品的"加载-修改-写入"在库存锁内完成，并发调整不会丢失更新。
    """

    def __init__(
        self,
        product_repository: ProductRepository,
        event_bus: Optional[EventBus],
        inventory_lock_service: InventoryLockService
    ):
        """
        初始化更新商品库存用例。

        Args:
            product_repository: 商品仓储
            event_bus: 事件总线
            inventory_lock_service: 库存锁服务
        """
        super().__init__(product_repository, event_bus)
        self.inventory_lock_service = inventory_lock_service

    @staticmethod
    def _validate(command: UpdateProductStockCommand) -> Optional[str]:
        try:
            parse_product_id(command.product_id)
        except ValidationException as e:
            return e.message

        if command.operation not in UpdateProductStockCommand.OPERATIONS:
            return "Invalid operation. Must be one of: add, remove, set"

        quantity = command.quantity
        if (
            isinstance(quantity, bool)
            or not isinstance(quantity, (int, float, Decimal))
            or not Decimal(str(quantity)).is_finite()
        ):
            return "Quantity must be a valid number"
        if quantity < 0:
            return "Quantity cannot be negative"
        if quantity != int(quantity):
            return "Quantity must be a whole number"
        if command.operation in (UpdateProductStockCommand.ADD, UpdateProductStockCommand.REMOVE) and quantity == 0:
            return "Quantity must be greater than 0 for add/remove operations"
        return None

    def _execute(self, command: UpdateProductStockCommand) -> UseCaseResult:
        error = self._validate(command)
        if error:
            return UseCaseResult.fail(error, error_code=ErrorCode.VALIDATION)

        product_id = parse_product_id(command.product_id)
        quantity = int(command.quantity)
        updated_by = optional_id(command.updated_by, "updated_by")

        with self.inventory_lock_service.lock_inventory(product_id):
            product = self._load_product(product_id)
            if product.is_deleted:
                raise BusinessRuleViolationException(
                    "product_deleted", "Cannot update stock for deleted product"
                )
            if product.status not in (ProductStatus.ACTIVE, ProductStatus.OUT_OF_STOCK):
                raise BusinessRuleViolationException(
                    "product_inactive", "Cannot update stock for inactive product"
                )

            previous_stock = product.stock_quantity
            if command.operation == UpdateProductStockCommand.ADD:
                product.add_stock(quantity, updated_by)
            elif command.operation == UpdateProductStockCommand.REMOVE:
                product.remove_stock(quantity, updated_by)
            else:
                product.set_stock(quantity, updated_by)

            self.product_repository.update(product)

        self._publish_events(product)

        logger.debug(
            f"商品库存已更新: {product.sku.value} {command.operation} {quantity} "
            f"({previous_stock} -> {product.stock_quantity})"
            + (f", 原因: {command.reason}" if command.reason else "")
        )
        return UseCaseResult.ok(
            StockUpdateDTO(ProductDTO.from_aggregate(product), previous_stock, product.stock_quantity)
        )


# ==================== 删除 ====================

class DeleteProductUseCase(ProductUseCase):
    """
    删除商品用例（软删除）。
    除非指定force，有库存或处于active状态的商品不允许删除。
    """

    @staticmethod
    def _deletion_errors(product: Product) -> List[str]:
        errors = []
        if product.stock_quantity > 0:
            errors.append("Cannot delete product with stock quantity greater than 0")
        if product.status.is_active():
            errors.append("Cannot delete active product. Change status first")
        return errors

    def _execute(self, command: DeleteProductCommand) -> UseCaseResult:
        product = self._load_product(parse_product_id(command.id))
        if product.is_deleted:
            raise BusinessRuleViolationException("product_already_deleted", "Product is already deleted")

        if not command.force:
            errors = self._deletion_errors(product)
            if errors:
                return UseCaseResult.fail(errors=errors, error_code=ErrorCode.BUSINESS_RULE)

        product.delete(optional_id(command.deleted_by, "deleted_by"))
        self.product_repository.update(product)
        self._publish_events(product)

        logger.info(f"删除商品成功: {product.sku.value} (id={product.id}, force={command.force})")
        return UseCaseResult.ok(ProductDTO.from_aggregate(product))


# ==================== 查询 ====================

class SearchProductsUseCase(ProductUseCase):
    """搜索商品用例，超出范围的分页参数直接拒绝"""

    def __init__(self, product_repository: ProductRepository):
        super().__init__(product_repository)

    @staticmethod
    def _build_filters(query: SearchProductsQuery, errors: List[str]) -> ProductSearchFilters:
        filters = ProductSearchFilters(
            name=query.name or None,
            sku=query.sku or None,
            in_stock=query.in_stock,
            tags=list(query.tags or []),
        )

        if query.category_id:
            try:
                filters.category_id = parse_entity_id(query.category_id, "category_id")
            except ValidationException:
                errors.append("Invalid category ID format")

        if query.status:
            try:
                filters.status = ProductStatus.create(query.status)
            except ValidationException:
                errors.append("Invalid product status")

        currency = query.currency or get_product_setting('DEFAULT_CURRENCY')
        if query.min_price is not None:
            try:
                filters.min_price = Money.create(query.min_price, currency)
            except ValidationException:
                errors.append("Invalid minimum price or currency")
        if query.max_price is not None:
            try:
                filters.max_price = Money.create(query.max_price, currency)
            except ValidationException:
                errors.append("Invalid maximum price or currency")

        return filters

    @staticmethod
    def _build_options(query: SearchProductsQuery, errors: List[str]) -> ProductSearchOptions:
        options = ProductSearchOptions(limit=get_product_setting('SEARCH_DEFAULT_LIMIT'))
        max_limit = get_product_setting('SEARCH_MAX_LIMIT')

        if query.sort_by is not None:
            if query.sort_by not in SORT_FIELDS:
                errors.append(f"Invalid sort field. Must be one of: {', '.join(SORT_FIELDS)}")
            else:
                options.sort_by = query.sort_by

        if query.sort_order is not None:
            if query.sort_order not in SORT_ORDERS:
                errors.append(f"Invalid sort order. Must be one of: {', '.join(SORT_ORDERS)}")
            else:
                options.sort_order = query.sort_order

        if query.limit is not None:
            if not is_non_negative_int(query.limit) or not 1 <= query.limit <= max_limit:
                errors.append(f"Limit must be between 1 and {max_limit}")
            else:
                options.limit = query.limit

        if query.offset is not None:
            if not is_non_negative_int(query.offset):
                errors.append("Offset must be non-negative")
            else:
                options.offset = query.offset

        return options

    def _execute(self, query: SearchProductsQuery) -> UseCaseResult:
        errors: List[str] = []
        filters = self._build_filters(query, errors)
        options = self._build_options(query, errors)
        if errors:
            return UseCaseResult.fail(errors=errors, error_code=ErrorCode.VALIDATION)

        result = self.product_repository.search(filters, options, include_deleted=query.include_deleted)
        return UseCaseResult.ok(
            ProductListDTO.from_search_result(result),
            metadata={"total": result.total, "has_more": result.has_more},
        )


class GetProductByIdUseCase(ProductUseCase):
    """根据ID获取商品用例，已软删除的商品视为不存在"""

    def __init__(self, product_repository: ProductRepository):
        super().__init__(product_repository)

    def _execute(self, query: GetProductByIdQuery) -> UseCaseResult:
        product_id = parse_product_id(query.id)
        product = self.product_repository.find_by_id(product_id, include_deleted=query.include_deleted)
        if product is None:
            raise EntityNotFoundException("Product", product_id)
        return UseCaseResult.ok(ProductDTO.from_aggregate(product))


class GetProductBySkuUseCase(ProductUseCase):
    """根据SKU获取商品用例，已软删除的商品视为不存在"""

    def __init__(self, product_repository: ProductRepository):
        super().__init__(product_repository)

    def _execute(self, query: GetProductBySkuQuery) -> UseCaseResult:
        if is_blank(query.sku):
            raise ValidationException("sku", "Product SKU is required")
        sku = ProductSku.create(query.sku)
        product = self.product_repository.find_by_sku(sku, include_deleted=query.include_deleted)
        if product is None:
            raise EntityNotFoundException("Product", sku.value)
        return UseCaseResult.ok(ProductDTO.from_aggregate(product))
