"""
Erreur métier des fonctions HTTP: porte le code HTTP et le corps JSON exact
attendu par le front (les formats diffèrent d'une fonction à l'autre).
"""
from typing import Any, Dict, Optional
from fastapi import HTTPException


class FunctionError(HTTPException):
    def __init__(self, status_code: int, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None):
        detail = payload.get("message") or payload.get("error") or str(payload)
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.payload = payload


def error_body(message: str, **extra: Any) -> Dict[str, Any]:
    """Format {"error": ...} (create-checkout, sync-product-to-stripe)."""
    return {"error": message, **extra}


def failure_body(message: str) -> Dict[str, Any]:
    """Format {"success": false, "message": ...} (cancel, test connection, contacts)."""
    return {"success": False, "message": message}


def wrapped_failure_body(message: str) -> Dict[str, Any]:
    """Format {"data": {"success": false, ...}} (create-stripe-customer)."""
    return {"data": failure_body(message)}
