"""
Module 'payments' (feature-first): point d'entrée public.
Réunit logique panier, helpers de montants, catalogue des formules,
client Stripe, repository BD et cas d'usage.
"""

from .cart import aggregate_quantities, unit_amount, to_line_items, creator_ids
from .currency import format_currency, format_price, to_cents, to_dollars
from .plans import PRODUCTS, get_product_by_id, get_product_by_price_id, plan_display_name
from .stripe_client import require_stripe, create_checkout_session, retrieve_account
from .service import (
    create_checkout,
    cancel_subscription,
    create_stripe_customer,
    sync_product,
    check_stripe_connection,
)

__all__ = [
    # cart
    "aggregate_quantities",
    "unit_amount",
    "to_line_items",
    "creator_ids",
    # currency
    "format_currency",
    "format_price",
    "to_cents",
    "to_dollars",
    # plans
    "PRODUCTS",
    "get_product_by_id",
    "get_product_by_price_id",
    "plan_display_name",
    # stripe
    "require_stripe",
    "create_checkout_session",
    "retrieve_account",
    # services
    "create_checkout",
    "cancel_subscription",
    "create_stripe_customer",
    "sync_product",
    "check_stripe_connection",
]
