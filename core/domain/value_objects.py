"""
值对象模块。
包含ValueObject基类和通用值对象实现：金额(Money)、重量(Weight)、尺寸(Dimensions)。

所有值对象在构造时完成校验，构造完成后不可修改；
每个变换操作都返回新的实例。数值统一使用Decimal保存。
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from itertools import permutations
import re
from typing import Any, Dict, List, Optional, Tuple

from core.domain.exceptions import ValidationException


def to_decimal(value: Any, field_name: str, message: str) -> Decimal:
    """
    将数值转换为有限的Decimal。

    Args:
        value: int、float或Decimal
        field_name: 字段名称
        message: 校验失败时的错误消息

    Returns:
        转换后的Decimal

    Raises:
        ValidationException: 非数值、NaN或无穷大
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationException(field_name, message)
    try:
        # repr保证浮点数取最短十进制表示，避免二进制误差被带入
        result = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, ValueError):
        raise ValidationException(field_name, message) from None
    if not result.is_finite():
        raise ValidationException(field_name, message)
    return result


def plain_number(value: Decimal) -> str:
    """去掉多余的尾零，输出不带指数的数字字符串"""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


class ValueObject:
    """
    值对象基类。
    值对象是通过其属性值而非标识定义的不可变对象。
    相同属性值的值对象被视为相等。
    """

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_frozen"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _freeze(self) -> None:
        """构造完成后调用，此后禁止修改属性"""
        self.__dict__["_frozen"] = True

    def _values(self) -> Dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if k != "_frozen"}

    def __eq__(self, other: Any) -> bool:
        """
        判断两个值对象是否相等，通过比较它们的属性值。

        Args:
            other: 另一个值对象

        Returns:
            如果两个值对象的属性值相等，则返回True；否则返回False
        """
        if not isinstance(other, self.__class__):
            return False
        return self._values() == other._values()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._values().items())))

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._values().items())
        return f"{type(self).__name__}({fields})"


class Money(ValueObject):
    """
    金额值对象，表示带有货币单位的金额。
    金额非负，四舍五入保留两位小数；货币必须在白名单内。
    """

    DEFAULT_CURRENCY = "USD"
    VALID_CURRENCIES = ("USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "CNY", "SEK", "NZD")

    _CENT = Decimal("0.01")

    _SYMBOLS = {
        "USD": "$",
        "EUR": "€",
        "GBP": "£",
        "JPY": "¥",
        "AUD": "A$",
        "CAD": "C$",
        "CHF": "CHF",
        "CNY": "¥",
        "SEK": "kr",
        "NZD": "NZ$",
    }

    # 解析时识别的货币符号，按顺序匹配
    _PARSE_SYMBOLS = (("$", "USD"), ("€", "EUR"), ("£", "GBP"), ("¥", "JPY"), ("¤", "USD"))

    _ISO_PREFIX = re.compile(r"^([A-Za-z]{3})\s*(.+)$")
    _ISO_SUFFIX = re.compile(r"^(.+?)\s*([A-Za-z]{3})$")
    _AMOUNT = re.compile(r"^-?(\d+(\.\d*)?|\.\d+)$")

    def __init__(self, amount: Any, currency: str = DEFAULT_CURRENCY):
        """
        初始化金额值对象。

        Args:
            amount: 金额数值
            currency: 货币单位，默认为美元(USD)

        Raises:
            ValidationException: 金额为负数、不是有效数字或货币不受支持
        """
        value = to_decimal(amount, "amount", "Amount must be a valid number")
        if value < 0:
            raise ValidationException("amount", "Amount cannot be negative")

        if not currency or not isinstance(currency, str) or not currency.strip():
            raise ValidationException("currency", "Currency cannot be empty")
        normalized_currency = currency.strip().upper()
        if normalized_currency not in self.VALID_CURRENCIES:
            raise ValidationException(
                "currency",
                f"Invalid currency: {currency}. Valid currencies are: {', '.join(self.VALID_CURRENCIES)}"
            )

        self.amount = value.quantize(self._CENT, rounding=ROUND_HALF_UP)
        self.currency = normalized_currency
        self._freeze()

    @classmethod
    def create(cls, amount: Any, currency: Optional[str] = None) -> "Money":
        """
        创建金额。

        Args:
            amount: 金额数值
            currency: 货币单位，未提供时使用默认货币

        Returns:
            金额值对象
        """
        return cls(amount, currency or cls.DEFAULT_CURRENCY)

    @classmethod
    def zero(cls, currency: Optional[str] = None) -> "Money":
        return cls.create(0, currency)

    @classmethod
    def from_string(cls, value: str, currency: Optional[str] = None) -> "Money":
        """
        从字符串解析金额，例如"123.45"、"$1,234.50"、"EUR 12.00"。

        Args:
            value: 金额字符串
            currency: 显式指定的货币，优先于字符串中识别出的货币

        Returns:
            金额值对象

        Raises:
            ValidationException: 字符串格式无效
        """
        if not value or not isinstance(value, str) or not value.strip():
            raise ValidationException("amount", "Value cannot be empty")

        extracted = currency
        clean = value.strip()

        match = cls._ISO_PREFIX.match(clean) or cls._ISO_SUFFIX.match(clean)
        if match:
            groups = match.groups()
            code, rest = (groups[0], groups[1]) if match.re is cls._ISO_PREFIX else (groups[1], groups[0])
            if code.upper() in cls.VALID_CURRENCIES:
                extracted = extracted or code.upper()
                clean = rest

        for symbol, code in cls._PARSE_SYMBOLS:
            if symbol in clean:
                extracted = extracted or code
                clean = clean.replace(symbol, "", 1)
                break

        clean = re.sub(r"[,\s]", "", clean)
        if not cls._AMOUNT.match(clean):
            raise ValidationException("amount", f"Invalid monetary value: {value}")

        return cls.create(Decimal(clean), extracted)

    @classmethod
    def valid_currencies(cls) -> List[str]:
        return list(cls.VALID_CURRENCIES)

    # ==================== 运算 ====================

    def _ensure_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValidationException(
                "currency", f"Currency mismatch: {self.currency} vs {other.currency}"
            )

    def add(self, other: "Money") -> "Money":
        """
        金额加法运算。

        Raises:
            ValidationException: 当两个金额的货币单位不同时抛出
        """
        self._ensure_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        """
        金额减法运算。

        Raises:
            ValidationException: 货币单位不同或结果为负数
        """
        self._ensure_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise ValidationException("amount", "Subtraction would result in negative amount")
        return Money(result, self.currency)

    def multiply(self, factor: Any) -> "Money":
        value = to_decimal(factor, "factor", "Factor must be a valid number")
        if value < 0:
            raise ValidationException("factor", "Factor cannot be negative")
        return Money(self.amount * value, self.currency)

    def divide(self, divisor: Any) -> "Money":
        value = to_decimal(divisor, "divisor", "Divisor must be a valid number")
        if value <= 0:
            raise ValidationException("divisor", "Divisor must be positive")
        return Money(self.amount / value, self.currency)

    def percentage(self, percent: Any) -> "Money":
        """
        计算金额的百分比部分。

        Args:
            percent: 百分比，例如15表示15%
        """
        value = to_decimal(percent, "percent", "Percentage must be a valid number")
        return self.multiply(value / 100)

    def apply_discount(self, discount_percent: Any) -> "Money":
        value = to_decimal(discount_percent, "discount", "Discount percentage must be a valid number")
        if value < 0 or value > 100:
            raise ValidationException("discount", "Discount percentage must be between 0 and 100")
        return self.subtract(self.percentage(value))

    def apply_tax(self, tax_percent: Any) -> "Money":
        value = to_decimal(tax_percent, "tax", "Tax percentage must be a valid number")
        if value < 0:
            raise ValidationException("tax", "Tax percentage cannot be negative")
        return self.add(self.percentage(value))

    def convert_to(self, target_currency: str, exchange_rate: Any) -> "Money":
        """
        按汇率转换为其他货币。

        Args:
            target_currency: 目标货币
            exchange_rate: 汇率，必须为正数
        """
        if not target_currency:
            raise ValidationException("currency", "Target currency cannot be empty")
        rate = to_decimal(exchange_rate, "exchange_rate", "Exchange rate must be a positive number")
        if rate <= 0:
            raise ValidationException("exchange_rate", "Exchange rate must be a positive number")
        return Money(self.amount * rate, target_currency)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply

    # ==================== 比较 ====================

    def greater_than(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount > other.amount

    def greater_than_or_equal(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount >= other.amount

    def less_than(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount < other.amount

    def less_than_or_equal(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount <= other.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    # ==================== 格式化 ====================

    @property
    def currency_symbol(self) -> str:
        return self._SYMBOLS.get(self.currency, self.currency)

    def format(self, show_currency: bool = True) -> str:
        """
        格式化金额，例如"$1,234.50"。

        Args:
            show_currency: 是否显示货币符号
        """
        formatted = f"{self.amount:,.2f}"
        return f"{self.currency_symbol}{formatted}" if show_currency else formatted

    def format_amount(self) -> str:
        return self.format(show_currency=False)

    def __str__(self) -> str:
        """
        返回金额的字符串表示。

        Returns:
            金额的字符串表示，例如"USD 100.00"
        """
        return f"{self.currency} {self.amount:.2f}"

    def to_dict(self) -> Dict[str, Any]:
        """
        将金额转换为字典表示。

        Returns:
            包含金额和货币单位的字典
        """
        return {
            "amount": str(self.amount),
            "currency": self.currency
        }


class Weight(ValueObject):
    """
    重量值对象。
    数值非负，保留三位小数；比较时统一换算为克，容差0.001克。
    """

    DEFAULT_UNIT = "kg"
    VALID_UNITS = ("kg", "g", "lb", "oz", "ton", "mt")

    # 换算为克的系数
    CONVERSION_TO_GRAMS = {
        "g": Decimal("1"),
        "kg": Decimal("1000"),
        "lb": Decimal("453.592"),
        "oz": Decimal("28.3495"),
        "ton": Decimal("1000000"),
        "mt": Decimal("1000000"),
    }

    UNIT_DISPLAY_NAMES = {
        "g": "grams",
        "kg": "kilograms",
        "lb": "pounds",
        "oz": "ounces",
        "ton": "tons",
        "mt": "metric tons",
    }

    TOLERANCE_GRAMS = Decimal("0.001")

    _PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*([a-zA-Z]+)$")
    _PRECISION = Decimal("0.001")

    def __init__(self, value: Any, unit: str = DEFAULT_UNIT):
        number = to_decimal(value, "weight", "Weight value must be a valid number")
        if number < 0:
            raise ValidationException("weight", "Weight cannot be negative")

        self.value = number.quantize(self._PRECISION, rounding=ROUND_HALF_UP)
        self.unit = self._normalize_unit(unit)
        self._freeze()

    @classmethod
    def _normalize_unit(cls, unit: Any) -> str:
        if not unit or not isinstance(unit, str) or not unit.strip():
            raise ValidationException("unit", "Weight unit cannot be empty")
        normalized = unit.strip().lower()
        if normalized not in cls.VALID_UNITS:
            raise ValidationException(
                "unit", f"Invalid weight unit: {unit}. Valid units are: {', '.join(cls.VALID_UNITS)}"
            )
        return normalized

    @classmethod
    def create(cls, value: Any, unit: Optional[str] = None) -> "Weight":
        return cls(value, unit or cls.DEFAULT_UNIT)

    @classmethod
    def from_string(cls, text: str) -> "Weight":
        """
        从字符串解析重量，例如"2.5kg"、"10 lb"。

        Raises:
            ValidationException: 字符串格式无效
        """
        if not text or not isinstance(text, str) or not text.strip():
            raise ValidationException("weight", "Weight string cannot be empty")

        match = cls._PATTERN.match(text.strip())
        if not match:
            raise ValidationException(
                "weight",
                f'Invalid weight format: {text}. Expected format: "number unit" (e.g., "2.5kg")'
            )
        return cls(Decimal(match.group(1)), match.group(2))

    @classmethod
    def valid_units(cls) -> List[str]:
        return list(cls.VALID_UNITS)

    # ==================== 换算 ====================

    def to_grams(self) -> Decimal:
        return self.value * self.CONVERSION_TO_GRAMS[self.unit]

    def convert_to(self, target_unit: str) -> "Weight":
        """
        换算为指定单位。

        Args:
            target_unit: 目标单位
        """
        normalized = self._normalize_unit(target_unit)
        if normalized == self.unit:
            return self
        return Weight(self.to_grams() / self.CONVERSION_TO_GRAMS[normalized], normalized)

    def to_kilograms(self) -> "Weight":
        return self.convert_to("kg")

    def to_pounds(self) -> "Weight":
        return self.convert_to("lb")

    def to_ounces(self) -> "Weight":
        return self.convert_to("oz")

    # ==================== 运算 ====================

    def add(self, other: "Weight") -> "Weight":
        return Weight(self.value + other.convert_to(self.unit).value, self.unit)

    def subtract(self, other: "Weight") -> "Weight":
        result = self.value - other.convert_to(self.unit).value
        if result < 0:
            raise ValidationException("weight", "Subtraction would result in negative weight")
        return Weight(result, self.unit)

    def multiply(self, factor: Any) -> "Weight":
        value = to_decimal(factor, "factor", "Factor must be a valid number")
        if value < 0:
            raise ValidationException("factor", "Factor cannot be negative")
        return Weight(self.value * value, self.unit)

    def divide(self, divisor: Any) -> "Weight":
        value = to_decimal(divisor, "divisor", "Divisor must be a valid number")
        if value <= 0:
            raise ValidationException("divisor", "Divisor must be positive")
        return Weight(self.value / value, self.unit)

    # ==================== 比较 ====================

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Weight):
            return False
        return abs(self.to_grams() - other.to_grams()) < self.TOLERANCE_GRAMS

    def __hash__(self) -> int:
        # 相等按容差判断，哈希只区分类型
        return hash(Weight)

    def greater_than(self, other: "Weight") -> bool:
        return self.to_grams() > other.to_grams()

    def greater_than_or_equal(self, other: "Weight") -> bool:
        return self.to_grams() >= other.to_grams()

    def less_than(self, other: "Weight") -> bool:
        return self.to_grams() < other.to_grams()

    def less_than_or_equal(self, other: "Weight") -> bool:
        return self.to_grams() <= other.to_grams()

    def is_zero(self) -> bool:
        return self.value == 0

    # ==================== 物流 ====================

    def optimal_unit(self) -> "Weight":
        """按数量级选择合适的显示单位"""
        grams = self.to_grams()
        if grams >= 1000000:
            return self.convert_to("mt")
        if grams >= 1000:
            return self.convert_to("kg")
        return self.convert_to("g")

    def is_suitable_for_shipping(self, max_weight: "Weight") -> bool:
        return self.less_than_or_equal(max_weight)

    def shipping_category(self) -> str:
        kg = self.convert_to("kg").value
        if kg <= Decimal("0.5"):
            return "light"
        if kg <= 2:
            return "standard"
        if kg <= 10:
            return "medium"
        if kg <= 30:
            return "heavy"
        return "oversized"

    def requires_special_handling(self) -> bool:
        # 超过30公斤需要特殊处理
        return self.convert_to("kg").value > 30

    @property
    def unit_display_name(self) -> str:
        return self.UNIT_DISPLAY_NAMES.get(self.unit, self.unit)

    # ==================== 格式化 ====================

    def format(self, decimals: int = 3, show_unit: bool = True) -> str:
        value = plain_number(self.value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP))
        return f"{value}{self.unit}" if show_unit else value

    def __str__(self) -> str:
        return self.format()

    def to_dict(self) -> Dict[str, Any]:
        return {"value": str(self.value), "unit": self.unit}


class Dimensions(ValueObject):
    """
    尺寸值对象，表示长宽高三维尺寸。
    每个维度非负，保留两位小数；比较时统一换算为毫米，每个维度容差0.1毫米。
    """

    DEFAULT_UNIT = "cm"
    VALID_UNITS = ("mm", "cm", "m", "in", "ft")

    # 换算为毫米的系数
    CONVERSION_TO_MM = {
        "mm": Decimal("1"),
        "cm": Decimal("10"),
        "m": Decimal("1000"),
        "in": Decimal("25.4"),
        "ft": Decimal("304.8"),
    }

    UNIT_DISPLAY_NAMES = {
        "mm": "millimeters",
        "cm": "centimeters",
        "m": "meters",
        "in": "inches",
        "ft": "feet",
    }

    TOLERANCE_MM = Decimal("0.1")

    # 物流分级阈值(立方厘米, 厘米)
    SHIPPING_CATEGORIES = (
        ("small", Decimal("1000"), Decimal("20")),
        ("medium", Decimal("5000"), Decimal("40")),
        ("large", Decimal("20000"), Decimal("80")),
        ("extra-large", Decimal("50000"), Decimal("120")),
    )
    MAX_STANDARD_LENGTH_CM = Decimal("150")
    MAX_STANDARD_GIRTH_CM = Decimal("300")

    _PATTERN = re.compile(
        r"^(\d+(?:\.\d+)?)\s*[x×]\s*(\d+(?:\.\d+)?)\s*[x×]\s*(\d+(?:\.\d+)?)\s*([a-zA-Z]+)$"
    )
    _PRECISION = Decimal("0.01")

    def __init__(self, length: Any, width: Any, height: Any, unit: str = DEFAULT_UNIT):
        values = []
        for field_name, raw in (("length", length), ("width", width), ("height", height)):
            message = f"{field_name.capitalize()} must be a non-negative number"
            number = to_decimal(raw, field_name, message)
            if number < 0:
                raise ValidationException(field_name, message)
            values.append(number.quantize(self._PRECISION, rounding=ROUND_HALF_UP))

        self.length, self.width, self.height = values
        self.unit = self._normalize_unit(unit)
        self._freeze()

    @classmethod
    def _normalize_unit(cls, unit: Any) -> str:
        if not unit or not isinstance(unit, str) or not unit.strip():
            raise ValidationException("unit", "Unit cannot be empty")
        normalized = unit.strip().lower()
        if normalized not in cls.VALID_UNITS:
            raise ValidationException(
                "unit", f"Invalid unit: {unit}. Valid units are: {', '.join(cls.VALID_UNITS)}"
            )
        return normalized

    @classmethod
    def create(cls, length: Any, width: Any, height: Any, unit: Optional[str] = None) -> "Dimensions":
        return cls(length, width, height, unit or cls.DEFAULT_UNIT)

    @classmethod
    def create_cube(cls, side: Any, unit: Optional[str] = None) -> "Dimensions":
        return cls.create(side, side, side, unit)

    @classmethod
    def from_string(cls, text: str) -> "Dimensions":
        """
        从字符串解析尺寸，例如"10x5x3cm"、"12 x 8 x 6 in"。

        Raises:
            ValidationException: 字符串格式无效
        """
        if not text or not isinstance(text, str) or not text.strip():
            raise ValidationException("dimensions", "Dimensions string cannot be empty")

        match = cls._PATTERN.match(text.strip())
        if not match:
            raise ValidationException(
                "dimensions",
                f'Invalid dimensions format: {text}. Expected format: "lengthxwidthxheight unit" (e.g., "10x5x3cm")'
            )
        length, width, height, unit = match.groups()
        return cls(Decimal(length), Decimal(width), Decimal(height), unit)

    @classmethod
    def valid_units(cls) -> List[str]:
        return list(cls.VALID_UNITS)

    # ==================== 换算 ====================

    def to_millimeters(self) -> Tuple[Decimal, Decimal, Decimal]:
        factor = self.CONVERSION_TO_MM[self.unit]
        return (self.length * factor, self.width * factor, self.height * factor)

    def convert_to(self, target_unit: str) -> "Dimensions":
        normalized = self._normalize_unit(target_unit)
        if normalized == self.unit:
            return self
        factor = self.CONVERSION_TO_MM[normalized]
        length, width, height = (v / factor for v in self.to_millimeters())
        return Dimensions(length, width, height, normalized)

    def to_centimeters(self) -> "Dimensions":
        return self.convert_to("cm")

    def to_inches(self) -> "Dimensions":
        return self.convert_to("in")

    def to_meters(self) -> "Dimensions":
        return self.convert_to("m")

    # ==================== 计算 ====================

    @property
    def volume(self) -> Decimal:
        return self.length * self.width * self.height

    @property
    def volume_cubic_centimeters(self) -> Decimal:
        return self.to_centimeters().volume

    @property
    def volume_cubic_inches(self) -> Decimal:
        return self.to_inches().volume

    @property
    def surface_area(self) -> Decimal:
        return 2 * (self.length * self.width + self.width * self.height + self.height * self.length)

    @property
    def longest_dimension(self) -> Decimal:
        return max(self.length, self.width, self.height)

    @property
    def shortest_dimension(self) -> Decimal:
        return min(self.length, self.width, self.height)

    @property
    def diagonal(self) -> Decimal:
        return (self.length ** 2 + self.width ** 2 + self.height ** 2).sqrt()

    @property
    def aspect_ratio(self) -> Decimal:
        """长宽比(length:width)，宽度为0时返回0"""
        if self.width == 0:
            return Decimal("0")
        return self.length / self.width

    # ==================== 比较 ====================

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Dimensions):
            return False
        return all(
            abs(mine - theirs) < self.TOLERANCE_MM
            for mine, theirs in zip(self.to_millimeters(), other.to_millimeters())
        )

    def __hash__(self) -> int:
        # 相等按容差判断，哈希只区分类型
        return hash(Dimensions)

    def fits_within(self, container: "Dimensions") -> bool:
        """
        判断能否放入另一个尺寸的容器，尝试全部6种摆放方向。

        Args:
            container: 容器尺寸
        """
        bounds = container.to_millimeters()
        return any(
            all(side <= limit for side, limit in zip(orientation, bounds))
            for orientation in permutations(self.to_millimeters())
        )

    def is_larger_than(self, other: "Dimensions") -> bool:
        return self.volume_cubic_centimeters > other.volume_cubic_centimeters

    def is_valid_for_shipping(self, max_dimensions: "Dimensions") -> bool:
        return self.fits_within(max_dimensions)

    def requires_oversized_shipping(self) -> bool:
        cm = self.to_centimeters()
        girth = cm.length + 2 * (cm.width + cm.height)
        return cm.longest_dimension > self.MAX_STANDARD_LENGTH_CM or girth > self.MAX_STANDARD_GIRTH_CM

    def shipping_category(self) -> str:
        cm = self.to_centimeters()
        volume = cm.volume
        longest = cm.longest_dimension
        for category, max_volume, max_length in self.SHIPPING_CATEGORIES:
            if volume <= max_volume and longest <= max_length:
                return category
        return "oversized"

    def is_cube(self, tolerance: Any = Decimal("0.01")) -> bool:
        limit = to_decimal(tolerance, "tolerance", "Tolerance must be a valid number")
        return self.longest_dimension - self.shortest_dimension <= limit

    def scale(self, factor: Any) -> "Dimensions":
        value = to_decimal(factor, "factor", "Scale factor must be a positive number")
        if value <= 0:
            raise ValidationException("factor", "Scale factor must be a positive number")
        return Dimensions(self.length * value, self.width * value, self.height * value, self.unit)

    @property
    def unit_display_name(self) -> str:
        return self.UNIT_DISPLAY_NAMES.get(self.unit, self.unit)

    # ==================== 格式化 ====================

    def format(self, separator: str = "x", show_unit: bool = True) -> str:
        text = separator.join(plain_number(v) for v in (self.length, self.width, self.height))
        return f"{text}{self.unit}" if show_unit else text

    def __str__(self) -> str:
        return self.format()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "length": str(self.length),
            "width": str(self.width),
            "height": str(self.height),
            "unit": self.unit,
        }
