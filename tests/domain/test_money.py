from decimal import Decimal

import pytest

from core.domain import Money, ValidationException


class TestMoneyCreation:
    def test_amount_is_rounded_half_up_to_cents(self):
        assert Money(10.005).amount == Decimal("10.01")
        assert Money(Decimal("1.234")).amount == Decimal("1.23")
        assert Money(7).amount == Decimal("7.00")

    def test_default_currency_is_usd(self):
        assert Money.create(5).currency == "USD"

    def test_currency_is_normalised(self):
        assert Money(1, " eur ").currency == "EUR"

    def test_unknown_currency_is_rejected(self):
        with pytest.raises(ValidationException) as exc:
            Money(1, "XYZ")
        assert "Invalid currency: XYZ" in exc.value.message

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValidationException) as exc:
            Money(-0.01)
        assert exc.value.message == "Amount cannot be negative"

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), "12", None, True])
    def test_non_numeric_amount_is_rejected(self, amount):
        with pytest.raises(ValidationException):
            Money(amount)

    def test_is_immutable(self):
        money = Money(10)
        with pytest.raises(AttributeError):
            money.amount = Decimal("20")

    def test_equality_and_hash_are_value_based(self):
        assert Money(10) == Money(Decimal("10.00"))
        assert hash(Money(10)) == hash(Money(Decimal("10.00")))
        assert Money(10, "USD") != Money(10, "EUR")

    def test_valid_currencies(self):
        assert Money.valid_currencies() == ["USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "CNY", "SEK", "NZD"]


class TestMoneyArithmetic:
    def test_add_same_currency(self):
        assert Money(10.5).add(Money(2.25)) == Money(12.75)
        assert Money(1) + Money(2) == Money(3)

    def test_add_currency_mismatch(self):
        with pytest.raises(ValidationException) as exc:
            Money(1, "USD").add(Money(1, "EUR"))
        assert exc.value.message == "Currency mismatch: USD vs EUR"

    def test_subtract(self):
        assert Money(10) - Money(4) == Money(6)

    def test_subtract_below_zero_is_rejected(self):
        with pytest.raises(ValidationException) as exc:
            Money(5).subtract(Money(6))
        assert exc.value.message == "Subtraction would result in negative amount"

    def test_multiply_and_divide(self):
        assert Money(10) * 3 == Money(30)
        assert Money(10).divide(3) == Money(Decimal("3.33"))

    def test_multiply_by_negative_factor_is_rejected(self):
        with pytest.raises(ValidationException):
            Money(10).multiply(-1)

    def test_divide_by_zero_is_rejected(self):
        with pytest.raises(ValidationException):
            Money(10).divide(0)

    def test_percentage_discount_and_tax(self):
        assert Money(200).percentage(15) == Money(30)
        assert Money(100).apply_discount(10) == Money(90)
        assert Money(100).apply_tax(8.25) == Money(Decimal("108.25"))

    def test_discount_outside_range_is_rejected(self):
        with pytest.raises(ValidationException):
            Money(100).apply_discount(101)

    def test_convert_to(self):
        assert Money(100).convert_to("EUR", 0.9) == Money(90, "EUR")

    def test_convert_with_non_positive_rate_is_rejected(self):
        with pytest.raises(ValidationException):
            Money(100).convert_to("EUR", 0)

    def test_comparisons(self):
        assert Money(10).greater_than(Money(5))
        assert Money(10).greater_than_or_equal(Money(10))
        assert Money(5).less_than(Money(10))
        assert Money(5).less_than_or_equal(Money(5))
        assert Money.zero().is_zero()
        assert Money(1).is_positive()

    def test_comparison_currency_mismatch(self):
        with pytest.raises(ValidationException):
            Money(1, "USD").greater_than(Money(1, "GBP"))


class TestMoneyFormatting:
    def test_str(self):
        assert str(Money(12.5)) == "USD 12.50"

    def test_format(self):
        assert Money(1234.5).format() == "$1,234.50"
        assert Money(1234.5).format_amount() == "1,234.50"
        assert Money(5, "EUR").format() == "€5.00"

    def test_to_dict(self):
        assert Money(12.5, "GBP").to_dict() == {"amount": "12.50", "currency": "GBP"}

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("$1,234.50", Money(Decimal("1234.50"), "USD")),
            ("EUR 12.00", Money(12, "EUR")),
            ("12.00 GBP", Money(12, "GBP")),
            ("£5", Money(5, "GBP")),
            ("¤3", Money(3, "USD")),
            ("42", Money(42, "USD")),
        ],
    )
    def test_from_string(self, text, expected):
        assert Money.from_string(text) == expected

    def test_from_string_explicit_currency_wins(self):
        assert Money.from_string("10", "CAD") == Money(10, "CAD")

    @pytest.mark.parametrize("text", ["", "abc", "$1.2.3"])
    def test_from_string_rejects_malformed_values(self, text):
        with pytest.raises(ValidationException):
            Money.from_string(text)

    @pytest.mark.parametrize("money", [Money(0), Money(12.5), Money(Decimal("1234567.89"), "JPY")])
    def test_str_parses_back(self, money):
        assert Money.from_string(str(money)) == money
