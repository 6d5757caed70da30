"""
商品领域模型中的值对象。
包含商品名称、SKU、描述和商品状态。
"""
from enum import Enum
import math
import re
import time
from typing import Any, Dict, List, Optional

from core.domain import ValueObject, ValidationException


def _require_text(value: Any, field_name: str, message: str) -> str:
    if not value or not isinstance(value, str):
        raise ValidationException(field_name, message)
    return value


class ProductName(ValueObject):
    """
    商品名称值对象。
    去除首尾空白后长度为1到200，不允许包含HTML特殊字符或可疑脚本片段。
    """

    MIN_LENGTH = 1
    MAX_LENGTH = 200

    _INVALID_CHARS = re.compile(r"[<>\"'&]")
    _SUSPICIOUS_PATTERNS = tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"script",
            r"javascript",
            r"vbscript",
            r"onload",
            r"onerror",
            r"onclick",
            r"style\s*=",
            r"expression",
            r"alert\s*\(",
            r"document\.",
            r"window\.",
            r"eval\s*\(",
        )
    )

    # 标题格式中保持小写的短词（首词除外）
    SMALL_WORDS = frozenset(
        ("a", "an", "and", "as", "at", "but", "by", "for", "if", "in", "of", "on", "or", "the", "to", "up")
    )

    def __init__(self, value: str):
        """
        初始化商品名称。

        Args:
            value: 商品名称

        Raises:
            ValidationException: 名称为空、过长或包含非法内容
        """
        name = _require_text(value, "name", "Product name cannot be empty").strip()

        if len(name) < self.MIN_LENGTH:
            raise ValidationException("name", f"Product name must be at least {self.MIN_LENGTH} character long")
        if len(name) > self.MAX_LENGTH:
            raise ValidationException("name", f"Product name cannot exceed {self.MAX_LENGTH} characters")
        if self._INVALID_CHARS.search(name):
            raise ValidationException("name", "Product name cannot contain invalid characters (<, >, \", ', &)")
        if any(pattern.search(name) for pattern in self._SUSPICIOUS_PATTERNS):
            raise ValidationException("name", "Product name contains potentially harmful content")

        self.value = name
        self._freeze()

    @classmethod
    def create(cls, value: str) -> "ProductName":
        return cls(value)

    @property
    def display_value(self) -> str:
        return self.value

    @property
    def search_value(self) -> str:
        """小写并合并空白，用于搜索匹配"""
        return re.sub(r"\s+", " ", self.value.lower())

    @property
    def slug(self) -> str:
        """
        URL友好的名称，例如"Red Wool Sweater" -> "red-wool-sweater"。
        """
        slug = re.sub(r"[^a-z0-9\s-]", "", self.value.lower())
        slug = re.sub(r"\s+", "-", slug)
        slug = re.sub(r"-+", "-", slug)
        return slug.strip("-")

    @property
    def keywords(self) -> List[str]:
        """长度大于2的小写单词，按出现顺序去重"""
        words = [word for word in self.value.lower().split() if len(word) > 2]
        return list(dict.fromkeys(words))

    @property
    def word_count(self) -> int:
        return len(self.value.split())

    def contains(self, term: str) -> bool:
        return term.lower() in self.search_value

    def starts_with(self, prefix: str) -> bool:
        return self.search_value.startswith(prefix.lower())

    def ends_with(self, suffix: str) -> bool:
        return self.search_value.endswith(suffix.lower())

    def abbreviated(self, max_length: int = 50) -> str:
        """
        获取缩写名称，超长时以"..."结尾。

        Args:
            max_length: 最大长度
        """
        if len(self.value) <= max_length:
            return self.value
        return self.value[:max_length - 3] + "..."

    def capitalize(self) -> "ProductName":
        """每个单词首字母大写"""
        return ProductName(re.sub(r"\b\w", lambda match: match.group().upper(), self.value.lower()))

    def to_title_case(self) -> "ProductName":
        """标题格式，常见短词保持小写，首词总是大写"""
        words = [
            word if word in self.SMALL_WORDS else word[:1].upper() + word[1:]
            for word in self.value.lower().split(" ")
        ]
        title = " ".join(words)
        return ProductName(title[:1].upper() + title[1:])

    def __str__(self) -> str:
        return self.value


class ProductSku(ValueObject):
    """
    商品SKU值对象。
    统一转为大写，只允许大写字母、数字、下划线和连字符，
    不能以特殊字符开头或结尾，不能包含连续的特殊字符。
    """

    MIN_LENGTH = 1
    MAX_LENGTH = 100

    # 自动生成的时间戳后缀长度
    TIMESTAMP_SUFFIX_LENGTH = 6

    _SKU_PATTERN = re.compile(r"^[A-Z0-9_-]+$")
    _CONSECUTIVE_SPECIALS = re.compile(r"[-_]{2}")

    def __init__(self, value: str):
        """
        初始化SKU。

        Args:
            value: SKU字符串，会被去除空白并转为大写

        Raises:
            ValidationException: SKU格式无效
        """
        sku = _require_text(value, "sku", "Product SKU cannot be empty").strip().upper()

        if len(sku) < self.MIN_LENGTH:
            raise ValidationException("sku", f"Product SKU must be at least {self.MIN_LENGTH} character long")
        if len(sku) > self.MAX_LENGTH:
            raise ValidationException("sku", f"Product SKU cannot exceed {self.MAX_LENGTH} characters")
        if not self._SKU_PATTERN.match(sku):
            raise ValidationException(
                "sku", "Product SKU can only contain uppercase letters, numbers, underscores, and hyphens"
            )
        if sku.startswith("-") or sku.endswith("-"):
            raise ValidationException("sku", "Product SKU cannot start or end with a hyphen")
        if sku.startswith("_") or sku.endswith("_"):
            raise ValidationException("sku", "Product SKU cannot start or end with an underscore")
        if self._CONSECUTIVE_SPECIALS.search(sku):
            raise ValidationException("sku", "Product SKU cannot contain consecutive special characters")

        self.value = sku
        self._freeze()

    @classmethod
    def create(cls, value: str) -> "ProductSku":
        return cls(value)

    @classmethod
    def generate_from_name(
        cls,
        product_name: str,
        prefix: Optional[str] = None,
        timestamp: Optional[int] = None,
        reserve: int = 0
    ) -> "ProductSku":
        """
        根据商品名称生成SKU，格式为[PREFIX-]NAME-123456。
        名称去除特殊字符、空白转为连字符，后缀取毫秒时间戳的后6位。
        名称部分过长时截断，保证结果不超过最大长度。

        Args:
            product_name: 商品名称
            prefix: 可选前缀
            timestamp: 毫秒时间戳，默认为当前时间
            reserve: 在最大长度内额外预留的字符数，供之后追加计数后缀

        Returns:
            生成的SKU

        Raises:
            ValidationException: 名称为空或不包含字母数字
        """
        name = _require_text(product_name, "sku", "Product name is required for SKU generation")

        clean_name = re.sub(r"[^A-Z0-9\s]", "", name.upper())
        clean_name = re.sub(r"\s+", "-", clean_name.strip())
        clean_name = re.sub(r"-+", "-", clean_name).strip("-")
        if not clean_name:
            raise ValidationException("sku", "Product name must contain letters or digits for SKU generation")

        millis = timestamp if timestamp is not None else int(time.time() * 1000)
        suffix = str(millis)[-cls.TIMESTAMP_SUFFIX_LENGTH:].zfill(cls.TIMESTAMP_SUFFIX_LENGTH)

        head = f"{prefix.strip().upper()}-" if prefix and prefix.strip() else ""
        room = cls.MAX_LENGTH - reserve - len(head) - len(suffix) - 1
        if room < 1:
            raise ValidationException("sku", f"SKU prefix is too long: {prefix}")
        main_part = clean_name[:room].rstrip("-")

        return cls(f"{head}{main_part}-{suffix}")

    @classmethod
    def generate_with_category(cls, category: str, sequence: int) -> "ProductSku":
        """
        按分类和序号生成SKU，例如("Electronics", 1) -> "ELEC-000001"。
        """
        code = _require_text(category, "sku", "Category is required for SKU generation")
        if isinstance(sequence, bool) or not isinstance(sequence, int) or sequence < 1:
            raise ValidationException("sku", "Sequence must be a positive number")
        return cls(f"{code.upper()[:4]}-{sequence:06d}")

    @property
    def display_value(self) -> str:
        return self.value

    @property
    def search_value(self) -> str:
        return self.value.lower()

    @property
    def parts(self) -> List[str]:
        return self.value.split("-")

    @property
    def prefix(self) -> Optional[str]:
        """第一个连字符之前的部分，没有连字符时为None"""
        parts = self.parts
        return parts[0] if len(parts) > 1 else None

    @property
    def suffix(self) -> Optional[str]:
        """最后一个连字符之后的部分，没有连字符时为None"""
        parts = self.parts
        return parts[-1] if len(parts) > 1 else None

    @property
    def main_part(self) -> str:
        parts = self.parts
        if len(parts) <= 2:
            return parts[0]
        return "-".join(parts[1:-1])

    @property
    def barcode_value(self) -> str:
        return re.sub(r"[-_]", "", self.value)

    def matches_pattern(self, pattern: str) -> bool:
        """
        通配符匹配，*匹配任意字符串，?匹配单个字符，不区分大小写。
        """
        regex = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
        return re.fullmatch(regex, self.value, re.IGNORECASE) is not None

    def belongs_to_category(self, category_prefix: str) -> bool:
        prefix = self.prefix
        return prefix is not None and prefix.lower() == category_prefix.lower()

    def has_numeric_suffix(self) -> bool:
        suffix = self.suffix
        return suffix is not None and suffix.isdigit()

    def numeric_suffix(self) -> Optional[int]:
        return int(self.suffix) if self.has_numeric_suffix() else None

    def create_variant(self, variant_suffix: str) -> "ProductSku":
        """替换最后一段，生成变体SKU"""
        parts = self.parts
        parts[-1] = variant_suffix.upper()
        return ProductSku("-".join(parts))

    def create_next(self) -> "ProductSku":
        """
        数字后缀加一，保持原有的补零宽度。

        Raises:
            ValidationException: 当前SKU没有数字后缀
        """
        current = self.numeric_suffix()
        if current is None:
            raise ValidationException(
                "sku", "Cannot create next SKU: current SKU does not have numeric suffix"
            )
        parts = self.parts
        parts[-1] = str(current + 1).zfill(len(parts[-1]))
        return ProductSku("-".join(parts))

    def with_counter(self, counter: int) -> "ProductSku":
        """追加"-N"计数后缀，用于生成SKU冲突时重试"""
        return ProductSku(f"{self.value}-{counter}")

    def follows_standard_convention(self) -> bool:
        """标准格式: 字母前缀-主体-数字序号"""
        parts = self.parts
        if len(parts) < 2:
            return False
        return bool(re.fullmatch(r"[A-Z]+", parts[0])) and parts[-1].isdigit()

    def __str__(self) -> str:
        return self.value


class ProductDescription(ValueObject):
    """
    商品描述值对象。
    去除首尾空白后长度为1到2000，不允许包含脚本片段。
    """

    MIN_LENGTH = 1
    MAX_LENGTH = 2000
    WORDS_PER_MINUTE = 200

    # SEO推荐范围
    SEO_MIN_CHARS = 120
    SEO_MAX_CHARS = 320
    SEO_MIN_WORDS = 20
    SEO_MAX_WORDS = 60

    _INVALID_PATTERNS = tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"<script",
            r"</script>",
            r"javascript:",
            r"vbscript:",
            r"onload\s*=",
            r"onerror\s*=",
            r"onclick\s*=",
        )
    )

    STOP_WORDS = frozenset((
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
        "to", "was", "were", "will", "with", "this", "these", "they",
        "them", "their", "have", "had", "can", "could", "should", "would",
    ))

    def __init__(self, value: str):
        description = _require_text(value, "description", "Product description cannot be empty").strip()

        if len(description) < self.MIN_LENGTH:
            raise ValidationException(
                "description", f"Product description must be at least {self.MIN_LENGTH} character long"
            )
        if len(description) > self.MAX_LENGTH:
            raise ValidationException(
                "description", f"Product description cannot exceed {self.MAX_LENGTH} characters"
            )
        if any(pattern.search(description) for pattern in self._INVALID_PATTERNS):
            raise ValidationException("description", "Product description contains potentially harmful content")

        self.value = description
        self._freeze()

    @classmethod
    def create(cls, value: str) -> "ProductDescription":
        return cls(value)

    @property
    def plain_text(self) -> str:
        """去除HTML标签后的文本"""
        return re.sub(r"<[^>]*>", "", self.value)

    @property
    def word_count(self) -> int:
        return len(self.plain_text.split())

    @property
    def character_count(self) -> int:
        return len(self.plain_text)

    @property
    def reading_time(self) -> int:
        """预计阅读时间（分钟），向上取整"""
        return math.ceil(self.word_count / self.WORDS_PER_MINUTE)

    @property
    def summary(self) -> str:
        """第一句话（不超过200字符），否则截断到100字符"""
        match = re.match(r"^[^.!?]*[.!?]", self.plain_text)
        if match and len(match.group(0)) <= 200:
            return match.group(0).strip()
        return self.truncated(100)

    @property
    def keywords(self) -> List[str]:
        text = re.sub(r"[^\w\s]", " ", self.plain_text.lower())
        words = [
            word for word in text.split()
            if len(word) > 2 and word not in self.STOP_WORDS and not word.isdigit()
        ]
        return list(dict.fromkeys(words))

    def truncated(self, max_length: int = 150) -> str:
        """
        截断为预览文本。
        截断位置之前80%以后有空格时在单词边界截断。

        Args:
            max_length: 最大长度（不含省略号）
        """
        text = self.plain_text
        if len(text) <= max_length:
            return text
        cut = text[:max_length]
        last_space = cut.rfind(" ")
        if last_space > max_length * 0.8:
            return cut[:last_space] + "..."
        return cut + "..."

    def contains(self, term: str) -> bool:
        return term.lower() in self.plain_text.lower()

    def search_score(self, term: str) -> float:
        """
        计算搜索词的相关度分数，范围0到1。
        包含得0.5分，每个完整单词匹配加0.2分，出现位置靠前再加分。
        """
        text = self.plain_text.lower()
        needle = term.lower()
        if not needle or needle not in text:
            return 0.0

        score = 0.5
        score += len(re.findall(rf"\b{re.escape(needle)}\b", text)) * 0.2

        first_index = text.index(needle)
        if first_index < 50:
            score += 0.3
        elif first_index < 150:
            score += 0.1

        return min(score, 1.0)

    def format_as(self, output_format: str = "plain") -> str:
        """
        按指定格式输出描述。

        Args:
            output_format: html、markdown或plain
        """
        if output_format == "html":
            body = self.value.replace("\n\n", "</p><p>").replace("\n", "<br>")
            return f"<p>{body}</p>"
        if output_format == "markdown":
            return self.value
        if output_format == "plain":
            return self.plain_text
        raise ValidationException("format", f"Unsupported description format: {output_format}")

    def is_seo_friendly(self) -> bool:
        chars = self.character_count
        words = self.word_count
        return (
            self.SEO_MIN_CHARS <= chars <= self.SEO_MAX_CHARS
            and self.SEO_MIN_WORDS <= words <= self.SEO_MAX_WORDS
        )

    def seo_recommendations(self) -> List[str]:
        recommendations = []
        chars = self.character_count
        words = self.word_count

        if chars < self.SEO_MIN_CHARS:
            recommendations.append("Description is too short for good SEO (recommended: 120-320 characters)")
        if chars > self.SEO_MAX_CHARS:
            recommendations.append("Description is too long for good SEO (recommended: 120-320 characters)")
        if words < self.SEO_MIN_WORDS:
            recommendations.append("Add more descriptive content (recommended: 20-60 words)")
        if words > self.SEO_MAX_WORDS:
            recommendations.append("Consider shortening the description (recommended: 20-60 words)")
        if len(self.keywords) < 3:
            recommendations.append("Include more relevant keywords")

        return recommendations

    def __str__(self) -> str:
        return self.value


class ProductStatus(str, Enum):
    """
    商品状态枚举。
    状态之间的合法迁移见STATUS_TRANSITIONS。
    """
    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    OUT_OF_STOCK = "out_of_stock"

    @classmethod
    def create(cls, value: Any) -> "ProductStatus":
        """
        从字符串创建商品状态，忽略大小写和首尾空白。

        Raises:
            ValidationException: 状态为空或不是有效状态
        """
        if isinstance(value, ProductStatus):
            return value
        text = _require_text(value, "status", "Product status cannot be empty")
        normalized = text.strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationException(
                "status",
                f"Invalid product status: {value}. Valid statuses are: {', '.join(cls.values())}"
            ) from None

    @classmethod
    def values(cls) -> List[str]:
        return [status.value for status in cls]

    def __str__(self) -> str:
        return self.value

    # ==================== 状态迁移 ====================

    def can_transition_to(self, target: "ProductStatus") -> bool:
        return ProductStatus.create(target) in STATUS_TRANSITIONS[self]

    def next_possible_statuses(self) -> List["ProductStatus"]:
        return list(STATUS_TRANSITIONS[self])

    # ==================== 显示属性 ====================

    @property
    def display_value(self) -> str:
        """例如pending_approval -> Pending Approval"""
        return " ".join(word.capitalize() for word in self.value.split("_"))

    @property
    def color(self) -> str:
        return _STATUS_METADATA[self]["color"]

    @property
    def icon(self) -> str:
        return _STATUS_METADATA[self]["icon"]

    @property
    def priority(self) -> int:
        """排序优先级，数值越小越靠前"""
        return _STATUS_METADATA[self]["priority"]

    @property
    def description(self) -> str:
        return _STATUS_METADATA[self]["description"]

    def requires_attention(self) -> bool:
        return self in (ProductStatus.PENDING_APPROVAL, ProductStatus.OUT_OF_STOCK, ProductStatus.DRAFT)

    # ==================== 状态判断 ====================

    def is_active(self) -> bool:
        return self is ProductStatus.ACTIVE

    def is_inactive(self) -> bool:
        return self is ProductStatus.INACTIVE

    def is_discontinued(self) -> bool:
        return self is ProductStatus.DISCONTINUED

    def is_draft(self) -> bool:
        return self is ProductStatus.DRAFT

    def is_pending_approval(self) -> bool:
        return self is ProductStatus.PENDING_APPROVAL

    def is_out_of_stock(self) -> bool:
        return self is ProductStatus.OUT_OF_STOCK

    def is_available_for_sale(self) -> bool:
        return self.is_active()

    def is_visible_to_customers(self) -> bool:
        return self.is_active() or self.is_out_of_stock()

    def can_be_edited(self) -> bool:
        return not self.is_discontinued()

    def can_be_ordered(self) -> bool:
        return self.is_active()


# 商品状态迁移表，discontinued为终止状态
STATUS_TRANSITIONS: Dict[ProductStatus, frozenset] = {
    ProductStatus.DRAFT: frozenset(
        (ProductStatus.PENDING_APPROVAL, ProductStatus.ACTIVE, ProductStatus.INACTIVE)
    ),
    ProductStatus.PENDING_APPROVAL: frozenset(
        (ProductStatus.ACTIVE, ProductStatus.INACTIVE, ProductStatus.DRAFT)
    ),
    ProductStatus.ACTIVE: frozenset(
        (ProductStatus.INACTIVE, ProductStatus.DISCONTINUED, ProductStatus.OUT_OF_STOCK)
    ),
    ProductStatus.INACTIVE: frozenset(
        (ProductStatus.ACTIVE, ProductStatus.DISCONTINUED, ProductStatus.DRAFT)
    ),
    ProductStatus.OUT_OF_STOCK: frozenset(
        (ProductStatus.ACTIVE, ProductStatus.INACTIVE, ProductStatus.DISCONTINUED)
    ),
    ProductStatus.DISCONTINUED: frozenset(),
}

_STATUS_METADATA: Dict[ProductStatus, Dict[str, Any]] = {
    ProductStatus.ACTIVE: {
        "color": "green", "icon": "✅", "priority": 1,
        "description": "Product is active and available for sale",
    },
    ProductStatus.OUT_OF_STOCK: {
        "color": "orange", "icon": "\U0001F4E6", "priority": 2,
        "description": "Product is currently out of stock",
    },
    ProductStatus.PENDING_APPROVAL: {
        "color": "yellow", "icon": "⏳", "priority": 3,
        "description": "Product is waiting for approval",
    },
    ProductStatus.DRAFT: {
        "color": "blue", "icon": "\U0001F4DD", "priority": 4,
        "description": "Product is in draft state and not yet published",
    },
    ProductStatus.INACTIVE: {
        "color": "gray", "icon": "⏸️", "priority": 5,
        "description": "Product is temporarily unavailable",
    },
    ProductStatus.DISCONTINUED: {
        "color": "red", "icon": "\U0001F6AB", "priority": 6,
        "description": "Product has been permanently discontinued",
    },
}
