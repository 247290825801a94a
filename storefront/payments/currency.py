"""
Helpers d'affichage des montants (Stripe travaille en cents).
Formats alignés sur l'affichage en-US du front: "$1,234.50", "-€3.00".
"""
import math
from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CAD": "CA$",
    "AUD": "A$",
    "MXN": "MX$",
}

def format_currency(amount: int, currency: str = "USD") -> str:
    """Formate un montant en cents (2 décimales minimum)."""
    code = (currency or "USD").upper()
    value = (Decimal(amount) / 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{digits}"
    return f"{sign}{code} {digits}"

def format_price(price: int) -> str:
    return format_currency(price, "USD")

def to_cents(dollars: float) -> int:
    # Arrondi .5 vers le haut, comme côté front
    return int(math.floor(dollars * 100 + 0.5))

def to_dollars(cents: int) -> str:
    return f"{cents / 100:.2f}"
