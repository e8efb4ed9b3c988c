"""
Currency registry -- the ISO 4217 codes suppliers quote in.

Only codes listed here are accepted as a proposal currency, a line-item
currency tag or a hotel currency option.  Decimal places drive the
presentation rounding of Money; amounts are never converted.
"""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    decimal_places: int
    name: str


def _table(decimal_places: int, entries: dict[str, str]) -> dict[str, CurrencyInfo]:
    return {code: CurrencyInfo(code, decimal_places, name) for code, name in entries.items()}


class CurrencyRegistry:
    """Lookup of known currencies; every method accepts untrimmed, any-case codes."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        **_table(2, {
            "USD": "US Dollar",
            "EUR": "Euro",
            "GBP": "Pound Sterling",
            "TRY": "Turkish Lira",
            "AED": "UAE Dirham",
            "SAR": "Saudi Riyal",
            "QAR": "Qatari Riyal",
            "EGP": "Egyptian Pound",
            "CHF": "Swiss Franc",
            "CAD": "Canadian Dollar",
            "AUD": "Australian Dollar",
            "NZD": "New Zealand Dollar",
            "CNY": "Chinese Yuan",
            "INR": "Indian Rupee",
            "PKR": "Pakistani Rupee",
            "MYR": "Malaysian Ringgit",
            "SGD": "Singapore Dollar",
            "THB": "Thai Baht",
            "IDR": "Indonesian Rupiah",
            "RUB": "Russian Ruble",
            "AZN": "Azerbaijan Manat",
            "GEL": "Georgian Lari",
            "MAD": "Moroccan Dirham",
            "ZAR": "South African Rand",
            "SEK": "Swedish Krona",
            "NOK": "Norwegian Krone",
            "DKK": "Danish Krone",
            "PLN": "Polish Zloty",
            "CZK": "Czech Koruna",
            "HUF": "Hungarian Forint",
            "BRL": "Brazilian Real",
            "MXN": "Mexican Peso",
        }),
        **_table(0, {
            "JPY": "Japanese Yen",
            "KRW": "South Korean Won",
            "VND": "Vietnamese Dong",
            "ISK": "Icelandic Krona",
        }),
        **_table(3, {
            "BHD": "Bahraini Dinar",
            "KWD": "Kuwaiti Dinar",
            "OMR": "Omani Rial",
            "JOD": "Jordanian Dinar",
            "TND": "Tunisian Dinar",
        }),
    }

    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @staticmethod
    def _normalize(code: object) -> str:
        return code.upper().strip() if isinstance(code, str) else ""

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        return cls._CURRENCIES.get(cls._normalize(code))

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return cls.get_info(code) is not None

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        info = cls.get_info(code)
        return info.decimal_places if info else cls.DEFAULT_DECIMAL_PLACES

    @classmethod
    def validate(cls, code: str) -> str:
        """
        Return the normalized code.

        Raises:
            ValueError: for blank, malformed or unknown codes.
        """
        normalized = cls._normalize(code)
        if len(normalized) != 3:
            raise ValueError(f"Currency code must be 3 characters: {code!r}")
        if normalized not in cls._CURRENCIES:
            raise ValueError(f"Invalid ISO 4217 currency code: {code!r}")
        return normalized
