"""
Line pricing shared by the stock-line form, the editor and the services.

Every money or quantity value that comes from a form goes through
``to_number`` so the browser-side recompute and the server-side
validation agree on how "10,000" or an empty box is read.
"""

from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Callable, Dict, Optional

THOUSANDS_SEPARATORS = (",",)
CENTS = Decimal("0.01")
# Stored amounts are DECIMAL(15, 2).
MAX_INTEGER_DIGITS = 13
# Wide enough for the product of two in-range amounts.
TOTALS_CONTEXT = Context(prec=2 * (MAX_INTEGER_DIGITS + 2) + 2)

PRODUCT_FIELD = "product_id"
QUANTITY_FIELD = "stock"
INITIAL_PRICE_FIELD = "initial_price"
SELLING_PRICE_FIELD = "selling_price"
TOTAL_INITIAL_FIELD = "total_initial_price"
TOTAL_SELLING_FIELD = "total_selling_price"

LIVE_FIELDS = (PRODUCT_FIELD, QUANTITY_FIELD, INITIAL_PRICE_FIELD, SELLING_PRICE_FIELD)


def strip_separators(value: Any) -> str:
    text = "" if value is None else str(value)
    for separator in THOUSANDS_SEPARATORS:
        text = text.replace(separator, "")
    return text.strip()


def to_number(value: Any) -> Decimal:
    """
    Parse a masked money/quantity input; blank, garbage and amounts too
    large to store read as zero.
    """
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(strip_separators(value))
        except (InvalidOperation, ValueError):
            return Decimal("0")
    if not number.is_finite() or number.adjusted() >= MAX_INTEGER_DIGITS:
        return Decimal("0")
    return number


def _round_cents(number: Decimal) -> Decimal:
    return number.quantize(CENTS, rounding=ROUND_HALF_UP, context=TOTALS_CONTEXT)


def to_money(value: Any) -> Decimal:
    return _round_cents(to_number(value))


def line_total(price: Any, quantity: Any) -> Decimal:
    return _round_cents(TOTALS_CONTEXT.multiply(to_number(price), to_number(quantity)))


def line_totals(initial_price: Any, selling_price: Any, quantity: Any) -> Dict[str, Decimal]:
    return {
        TOTAL_INITIAL_FIELD: line_total(initial_price, quantity),
        TOTAL_SELLING_FIELD: line_total(selling_price, quantity),
    }


def recompute(state: Dict[str, Any],
              changed: str,
              find_product: Optional[Callable[[Any], Any]] = None) -> Dict[str, Any]:
    """
    Return the fields to overwrite after ``changed`` was edited in ``state``.

    Picking a product only copies its default prices; totals follow the
    next quantity or price change.
    """
    if changed == PRODUCT_FIELD:
        product = find_product(state.get(PRODUCT_FIELD)) if find_product else None
        if product is None:
            return {}
        return {
            INITIAL_PRICE_FIELD: product.initial_price,
            SELLING_PRICE_FIELD: product.selling_price,
        }

    quantity = state.get(QUANTITY_FIELD)

    if changed == QUANTITY_FIELD:
        return line_totals(
            state.get(INITIAL_PRICE_FIELD), state.get(SELLING_PRICE_FIELD), quantity
        )

    if changed == INITIAL_PRICE_FIELD:
        return {TOTAL_INITIAL_FIELD: line_total(state.get(INITIAL_PRICE_FIELD), quantity)}

    if changed == SELLING_PRICE_FIELD:
        return {TOTAL_SELLING_FIELD: line_total(state.get(SELLING_PRICE_FIELD), quantity)}

    return {}


def format_money(value: Any, currency: str) -> str:
    return f"{currency} {to_money(value):,.2f}"
