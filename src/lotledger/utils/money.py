"""Amount parsing and formatting utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re


CENT = Decimal("0.01")

# Most decimal places a lot value, quantity or price may carry
VALUE_PLACES = 4


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "123.45 ج.م" or "EGP 123.45" (currency markers are dropped)
    - Arabic-Indic digits ("١٢٣٫٤٥")

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Arabic-Indic digits and separators
    amount_str = amount_str.translate(_ARABIC_DIGITS)

    amount_str = re.sub(r"EGP|ج\.م|[$€£]", "", amount_str, flags=re.IGNORECASE)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def decimal_places(amount: Decimal) -> int:
    """Number of significant decimal places, ignoring trailing zeros.

    >>> decimal_places(Decimal("100.0100"))
    2
    """
    exponent = amount.normalize().as_tuple().exponent
    return max(0, -exponent)


def format_currency(amount: Decimal, symbol: str = "") -> str:
    """Format an amount with thousands separators and two decimals.

    >>> format_currency(Decimal("1234.5"))
    '1,234.50'
    """
    quantized = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    text = f"{quantized:,.2f}"
    if symbol:
        return f"{text} {symbol}"
    return text


_ARABIC_DIGITS = str.maketrans("٠١٢٣٤٥٦٧٨٩٫٬", "0123456789.,")
