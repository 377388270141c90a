"""
Display formatting for amounts on rendered documents.

Used only for display.  Internal math never consumes these strings.

    format_currency(Decimal("157528"))        -> "₹1,57,528.00"
    format_currency(Decimal("1234.5"), "USD") -> "$1,234.50"
    amount_in_words(Decimal("156940"))        -> "One Lakh Fifty Six Thousand Nine Hundred Forty"
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ops_kernel.domain.currency import CurrencyRegistry
from ops_kernel.domain.validation import to_decimal

_ONES = (
    "", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
    "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen",
    "seventeen", "eighteen", "nineteen",
)
_TENS = (
    "", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety",
)

# Indian numbering system, largest first.
_SCALES = (
    (10_000_000, "crore"),
    (100_000, "lakh"),
    (1_000, "thousand"),
    (100, "hundred"),
)

_PAISE_QUANTUM = Decimal("0.01")


def _require_decimal(amount) -> Decimal:
    value = to_decimal(amount)
    if value is None:
        raise ValueError(f"Cannot format non-numeric amount {amount!r}")
    return value


def _group_indian(digits: str) -> str:
    """12345678 -> 1,23,45,678"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def _group_western(digits: str) -> str:
    return f"{int(digits):,}"


def format_currency(amount, currency: str = "INR") -> str:
    """
    Format an amount with the currency symbol and digit grouping.

    Rounds half-up to the currency's decimal places.  INR uses Indian
    grouping (lakh, crore); everything else groups by thousands.  Currencies
    without a registered symbol are prefixed with their code.

    Raises:
        ValueError: For an unknown currency or a non-numeric amount.
    """
    code = CurrencyRegistry.validate(currency)
    info = CurrencyRegistry.get_info(code)
    value = _require_decimal(amount).quantize(info.quantum, rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    text = f"{abs(value):f}"
    integer_part, _, fraction = text.partition(".")

    grouped = _group_indian(integer_part) if code == "INR" else _group_western(integer_part)
    body = f"{grouped}.{fraction}" if fraction else grouped
    prefix = info.symbol if info.symbol else f"{code} "
    return f"{sign}{prefix}{body}"


def _integer_words(n: int) -> list[str]:
    if n == 0:
        return []
    for scale, name in _SCALES:
        if n >= scale:
            return _integer_words(n // scale) + [name] + _integer_words(n % scale)
    if n < 20:
        return [_ONES[n]]
    words = [_TENS[n // 10]]
    if n % 10:
        words.append(_ONES[n % 10])
    return words


def amount_in_words(amount) -> str:
    """
    Spell out an amount in the Indian numbering system, title case.

    Fractions are rounded half-up to paise.  Negative amounts are prefixed
    with ``Minus``; zero is ``Zero``.

    Raises:
        ValueError: For a non-numeric amount.
    """
    value = _require_decimal(amount).quantize(_PAISE_QUANTUM, rounding=ROUND_HALF_UP)
    if value == 0:
        return "Zero"

    words: list[str] = []
    if value < 0:
        words.append("minus")
        value = -value

    rupees = int(value)
    paise = int((value - rupees) * 100)

    words.extend(_integer_words(rupees))
    if paise:
        if rupees:
            words.append("and")
        words.extend(_integer_words(paise))
        words.append("paise")

    return " ".join(word.capitalize() for word in words)
