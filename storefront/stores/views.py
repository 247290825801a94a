import logging
from typing import Any, Dict

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from storefront.utils.validators import parse_body
from storefront.utils.errors import FunctionError, failure_body
from .models import AddStoreUserRequest
from .service import add_existing_user_to_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/functions/v1", tags=["Stores"])

@router.post("/add-existing-user-to-store")
async def add_existing_user(request: Request) -> Dict[str, Any]:
    """
    Entrée JSON: {"creatorId", "email", "fullName"?}
    Retour: {"success", "message", "invitation" | "storeUser"}
    """
    req = await parse_body(request, AddStoreUserRequest, lambda msg: FunctionError(500, failure_body(msg)))
    if not req.creatorId or not req.email:
        raise FunctionError(400, failure_body("Missing required data"))
    try:
        return await run_in_threadpool(add_existing_user_to_store, req.creatorId, req.email, req.fullName)
    except FunctionError:
        raise
    except Exception as e:
        logger.exception("stores.add_existing_user failed")
        raise FunctionError(500, failure_body(str(e)))
