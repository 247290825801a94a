"""
Catalogue des formules d'abonnement (produits/prix Stripe de la plateforme).
"""
from typing import Any, Dict, Optional

PRODUCTS: Dict[str, Dict[str, Any]] = {
    "enterprise": {
        "id": "prod_SIzYJkHCZkpKEC",
        "priceId": "price_1RONZoPxt4iTvCogJ8DdA4IG",
        "name": "Enterprise Package",
        "description": "For established businesses and power users - Unlimited everything - Custom reporting - Dedicated support - Unlimited bandwidth - Custom domain - Affiliate program",
        "price": 19900,
        "mode": "subscription",
    },
    "professional": {
        "id": "prod_SIzYuYW0t6WnsQ",
        "priceId": "price_1RONYyPxt4iTvCog3dFiZYa3",
        "name": "Professional Package",
        "description": "For growing creators and businesses - Unlimited digital products - Advanced analytics - Priority support - 2 TB bandwidth - Custom domain - Affiliate program",
        "price": 7900,
        "mode": "subscription",
    },
    "starter": {
        "id": "prod_SIzWn1uMI8LM8h",
        "priceId": "price_1RONXUPxt4iTvCogaHEffHjp",
        "name": "Starter Package",
        "description": "Perfect for creators just getting started - 5 digital products - Basic analytics - Email support - 500 GB bandwidth - Custom domain - Affiliate program",
        "price": 2900,
        "mode": "subscription",
    },
}

def get_product_by_id(product_id: str) -> Optional[Dict[str, Any]]:
    return next((p for p in PRODUCTS.values() if p["id"] == product_id), None)

def get_product_by_price_id(price_id: str) -> Optional[Dict[str, Any]]:
    return next((p for p in PRODUCTS.values() if p["priceId"] == price_id), None)

def plan_display_name(plan: str) -> str:
    """"starter" -> "Starter Plan" (nom du produit Stripe créé à l'inscription)."""
    plan = plan or ""
    return f"{plan[:1].upper()}{plan[1:]} Plan"
