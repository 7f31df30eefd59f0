from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union


class FormattingUtils:
    """
    Money formatting for API responses

    Features:
    - Whole-unit price display (storefront style, no cents)
    - Cents <-> currency unit conversion for query filters
    """

    CURRENCY_SYMBOLS = {
        'USD': '$',
        'EUR': '€',
        'GBP': '£',
    }

    @classmethod
    def format_currency(cls, value: Union[int, float, str, Decimal], currency: str = 'USD') -> str:
        """
        Format an amount in whole currency units with no fraction digits

        Examples:
            format_currency(1234.56) -> "$1,235"
            format_currency("9999") -> "$9,999"
        """
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Cannot format {value!r} as currency")

        rounded = amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        symbol = cls.CURRENCY_SYMBOLS.get(currency.upper(), '')
        sign = '-' if rounded < 0 else ''
        formatted = f"{sign}{symbol}{abs(rounded):,.0f}"
        return formatted if symbol else f"{formatted} {currency.upper()}"

    @staticmethod
    def cents_to_units(amount_cents: int) -> Decimal:
        """1999 -> Decimal('19.99')"""
        return Decimal(amount_cents) / 100

    @staticmethod
    def units_to_cents(amount: Union[int, float, str, Decimal]) -> int:
        """Round a whole-unit amount (e.g. a price filter) to integer cents"""
        return int((Decimal(str(amount)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    @classmethod
    def format_cents(cls, amount_cents: int, currency: str = 'USD') -> str:
        return cls.format_currency(cls.cents_to_units(amount_cents), currency)


format_currency = FormattingUtils.format_currency
