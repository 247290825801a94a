"""
Accès aux données pour la feature 'stores' (contacts d'une boutique).
Les erreurs Supabase remontent: le service les traduit en réponses 500.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import storefront.infra.supabase_client as supabase_client

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def _first(res) -> Optional[Dict[str, Any]]:
    rows = getattr(res, "data", None) or []
    return rows[0] if isinstance(rows, list) and rows else None

def find_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table("users")
        .select("id, email")
        .eq("email", email)
        .limit(1)
        .execute()
    )
    return _first(res)

def insert_invitation(creator_id: str, email: str) -> List[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table("store_invitations")
        .insert({
            "creator_id": creator_id,
            "email": email,
            "message": "You've been added as a contact by a creator.",
            "created_at": _now_iso(),
        })
        .execute()
    )
    return res.data or []

def find_store_user(user_id: str, creator_id: str) -> Optional[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table("store_users")
        .select("id")
        .eq("user_id", user_id)
        .eq("creator_id", creator_id)
        .limit(1)
        .execute()
    )
    return _first(res)

def insert_store_user(user_id: str, creator_id: str) -> List[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table("store_users")
        .insert({
            "user_id": user_id,
            "creator_id": creator_id,
            "created_at": _now_iso(),
            "is_subscribed": True,
        })
        .execute()
    )
    return res.data or []

def update_user_full_name(user_id: str, full_name: str) -> None:
    (
        supabase_client.get_service_supabase()
        .table("users")
        .update({"full_name": full_name})
        .eq("id", user_id)
        .execute()
    )
