"""
Accès aux données pour la feature 'payments' (client service-role, bypass RLS).
- Lectures "best-effort": erreurs loguées, retour vide/None.
- Écritures dont l'échec doit remonter: l'exception est propagée à l'appelant.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

import storefront.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def _first(res) -> Optional[Dict[str, Any]]:
    rows = getattr(res, "data", None) or []
    if isinstance(rows, list):
        return rows[0] if rows else None
    return rows or None

# --- Produits / créateurs ---

def fetch_products_by_ids(ids: List[str]) -> List[Dict[str, Any]]:
    """
    Produits du panier (table 'products').
    - Retourne [] si ids vide ou en cas d'erreur.
    """
    if not ids:
        return []
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("products")
            .select("id, name, price, discount_price, type, creator_id")
            .in_("id", [str(i) for i in ids])
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("payments.repository.fetch_products_by_ids failed ids=%s", ids)
        return []

def fetch_creators_by_ids(ids: List[str]) -> Optional[List[Dict[str, Any]]]:
    """Créateurs (table 'creators'); None en cas d'erreur, [] si aucun."""
    if not ids:
        return []
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("creators")
            .select("id, stripe_connected_account_id, store_name")
            .in_("id", ids)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("payments.repository.fetch_creators_by_ids failed ids=%s", ids)
        return None

def get_creator(creator_id: str) -> Optional[Dict[str, Any]]:
    """Ligne créateur (social_links contient la clé Stripe du créateur)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("creators")
            .select("social_links")
            .eq("id", creator_id)
            .limit(1)
            .execute()
        )
        return _first(res)
    except Exception:
        logger.exception("payments.repository.get_creator failed creator_id=%s", creator_id)
        return None

# --- Abonnements ---

def get_subscription_by_price_id(price_id: str) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("stripe_subscriptions")
            .select("subscription_id, customer_id")
            .eq("price_id", price_id)
            .limit(1)
            .execute()
        )
        return _first(res)
    except Exception:
        logger.exception("payments.repository.get_subscription_by_price_id failed price_id=%s", price_id)
        return None

def get_customer_user_id(customer_id: str) -> Optional[str]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("stripe_customers")
            .select("user_id")
            .eq("customer_id", customer_id)
            .limit(1)
            .execute()
        )
        row = _first(res)
        return (row or {}).get("user_id")
    except Exception:
        logger.exception("payments.repository.get_customer_user_id failed customer_id=%s", customer_id)
        return None

def mark_subscription_cancel_at_period_end(subscription_id: str) -> None:
    (
        supabase_client.get_service_supabase()
        .table("stripe_subscriptions")
        .update({"cancel_at_period_end": True, "updated_at": _now_iso()})
        .eq("subscription_id", subscription_id)
        .execute()
    )

# --- Utilisateurs ---

def update_user_billing(*, user_id: str, customer_id: str, payment_method_id: str, trial_ends_at: str) -> None:
    (
        supabase_client.get_service_supabase()
        .table("users")
        .update({
            "stripe_customer_id": customer_id,
            "stripe_payment_method": payment_method_id,
            "trial_ends_at": trial_ends_at,
        })
        .eq("id", user_id)
        .execute()
    )

# --- Correspondance produit boutique <-> Stripe ---

def get_product_metadata(product_id: str) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("product_metadata")
            .select("stripe_product_id, stripe_price_id")
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        return _first(res)
    except Exception:
        logger.exception("payments.repository.get_product_metadata failed product_id=%s", product_id)
        return None

def update_product_price_id(product_id: str, stripe_price_id: str) -> None:
    (
        supabase_client.get_service_supabase()
        .table("product_metadata")
        .update({"stripe_price_id": stripe_price_id, "updated_at": _now_iso()})
        .eq("product_id", product_id)
        .execute()
    )

def insert_product_metadata(*, product_id: str, stripe_product_id: str, stripe_price_id: str) -> None:
    now = _now_iso()
    (
        supabase_client.get_service_supabase()
        .table("product_metadata")
        .insert({
            "product_id": product_id,
            "stripe_product_id": stripe_product_id,
            "stripe_price_id": stripe_price_id,
            "created_at": now,
            "updated_at": now,
        })
        .execute()
    )
