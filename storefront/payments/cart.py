"""
Panier -> line_items Stripe.
Les prix produits sont stockés en cents (colonnes price / discount_price).
"""
from typing import Any, Dict, List

CURRENCY = "usd"

# module storefront.payments.cart
def aggregate_quantities(cart_items: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Agrège les quantités par productId (doublons additionnés).
    Une quantité absente ou nulle compte pour 1.
    """
    quantities: Dict[str, int] = {}
    for it in cart_items or []:
        product_id = str(it.get("productId") or "").strip()
        if not product_id:
            continue
        qty = int(it.get("quantity") or 1)
        quantities[product_id] = quantities.get(product_id, 0) + qty
    return quantities

def unit_amount(product: Dict[str, Any]) -> int:
    """Prix remisé s'il existe (non nul), sinon prix catalogue."""
    try:
        return int(product.get("discount_price") or product.get("price") or 0)
    except (TypeError, ValueError):
        return 0

def to_line_items(products: List[Dict[str, Any]], quantities: Dict[str, int]) -> List[Dict[str, Any]]:
    line_items: List[Dict[str, Any]] = []
    for product in products:
        product_id = str(product.get("id"))
        line_items.append({
            "price_data": {
                "currency": CURRENCY,
                "product_data": {
                    "name": product.get("name"),
                    "metadata": {
                        "product_id": product_id,
                        "product_type": product.get("type"),
                        "creator_id": product.get("creator_id"),
                    },
                },
                "unit_amount": unit_amount(product),
            },
            "quantity": quantities.get(product_id) or 1,
        })
    return line_items

def creator_ids(products: List[Dict[str, Any]]) -> List[str]:
    """Créateurs distincts, dans l'ordre d'apparition."""
    seen: List[str] = []
    for product in products:
        cid = product.get("creator_id")
        if cid and cid not in seen:
            seen.append(cid)
    return seen
