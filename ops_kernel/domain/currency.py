"""Currency -- ISO 4217 registry with display symbols and minor-unit precision."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str
    symbol: str | None = None

    @property
    def quantum(self) -> Decimal:
        """Exponent for Decimal.quantize() at this currency's precision."""
        return Decimal(1).scaleb(-self.decimal_places)


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies the hub trades in."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        # South Asia
        "INR": CurrencyInfo("INR", 2, "Indian Rupee", "₹"),
        "NPR": CurrencyInfo("NPR", 2, "Nepalese Rupee"),
        "LKR": CurrencyInfo("LKR", 2, "Sri Lanka Rupee"),
        "BDT": CurrencyInfo("BDT", 2, "Bangladeshi Taka", "৳"),
        "PKR": CurrencyInfo("PKR", 2, "Pakistan Rupee"),
        "BTN": CurrencyInfo("BTN", 2, "Bhutanese Ngultrum"),
        # Gulf (common supplier and customer base)
        "AED": CurrencyInfo("AED", 2, "UAE Dirham"),
        "SAR": CurrencyInfo("SAR", 2, "Saudi Riyal"),
        "QAR": CurrencyInfo("QAR", 2, "Qatari Riyal"),
        "OMR": CurrencyInfo("OMR", 3, "Omani Rial"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
        "BHD": CurrencyInfo("BHD", 3, "Bahraini Dinar"),
        # Major currencies
        "USD": CurrencyInfo("USD", 2, "US Dollar", "$"),
        "EUR": CurrencyInfo("EUR", 2, "Euro", "€"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling", "£"),
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen", "¥"),
        "CNY": CurrencyInfo("CNY", 2, "Chinese Yuan"),
        "SGD": CurrencyInfo("SGD", 2, "Singapore Dollar"),
        "AUD": CurrencyInfo("AUD", 2, "Australian Dollar"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc"),
        "KRW": CurrencyInfo("KRW", 0, "South Korean Won", "₩"),
    }

    # Default decimal places for unknown currencies
    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is registered."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Get decimal places for a currency."""
        info = cls.get_info(code)
        return info.decimal_places if info else cls.DEFAULT_DECIMAL_PLACES

    @classmethod
    def validate(cls, code: str) -> str:
        """Validate and normalize a currency code."""
        if not code or not isinstance(code, str):
            raise ValueError(f"Invalid currency code: {code!r}")

        normalized = code.upper().strip()

        if len(normalized) != 3:
            raise ValueError(f"Currency code must be 3 characters: {code!r}")

        if normalized not in cls._CURRENCIES:
            raise ValueError(f"Unsupported ISO 4217 currency code: {code!r}")

        return normalized

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all registered currency codes."""
        return frozenset(cls._CURRENCIES.keys())
