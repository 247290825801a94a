from typing import Any, Dict
from urllib.parse import urlparse

from storefront.config import SUPABASE_URL, SUPABASE_SERVICE_KEY, STRIPE_SECRET_KEY
import storefront.infra.supabase_client as supabase_client

def _check_table(client, name: str) -> Dict[str, Any]:
    try:
        res = client.table(name).select("*").limit(1).execute()
        return {"ok": True, "rows": len(res.data or [])}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info() -> Dict[str, Any]:
    parsed = urlparse(SUPABASE_URL) if SUPABASE_URL else None
    info: Dict[str, Any] = {
        "supabase_url": SUPABASE_URL,
        "hostname": parsed.hostname if parsed else None,
        "service_key_set": bool(SUPABASE_SERVICE_KEY),
        "stripe_key_set": bool(STRIPE_SECRET_KEY),
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = supabase_client.get_service_supabase()
        for t in ["products", "creators", "stripe_subscriptions"]:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info
