from typing import Callable, Type

from fastapi import Request
from pydantic import BaseModel, ValidationError

from storefront.utils.errors import FunctionError

async def parse_body(request: Request, model: Type[BaseModel], on_error: Callable[[str], FunctionError]):
    """
    Lit et valide le JSON du corps.
    Un corps illisible ou mal typé produit l'erreur propre à la fonction.
    """
    try:
        body = await request.json()
        return model.model_validate(body or {})
    except ValidationError as e:
        raise on_error(f"Invalid request body: {e.error_count()} validation error(s)")
    except Exception as e:
        raise on_error(str(e) or "Invalid JSON body")
