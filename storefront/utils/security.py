from fastapi import Request
from typing import Any, Dict

import storefront.infra.supabase_client as supabase_client
from storefront.utils.errors import FunctionError, failure_body

def bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization") or ""
    if not auth_header:
        raise FunctionError(401, failure_body("Authorization header is required"))
    return auth_header.replace("Bearer ", "", 1).strip()

def get_user_from_token(token: str) -> Dict[str, Any]:
    """Récupère et normalise l'utilisateur via supabase.auth.get_user(token)."""
    res = supabase_client.get_service_supabase().auth.get_user(token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "user_metadata": getattr(user, "user_metadata", None),
        }
    return user or {}

def require_user(request: Request) -> Dict[str, Any]:
    """
    Dépendance: utilisateur Supabase authentifié via l'en-tête Bearer.
    - 401 "Authorization header is required" si l'en-tête est absent
    - 401 "Unauthorized" si le token est invalide/expiré
    """
    token = bearer_token(request)
    try:
        user = get_user_from_token(token)
    except Exception:
        user = {}
    if not user.get("id"):
        raise FunctionError(401, failure_body("Unauthorized"))
    return user
