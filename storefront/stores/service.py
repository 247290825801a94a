"""
Cas d'usage 'stores': ajout d'un utilisateur existant aux contacts d'un créateur.
"""
from typing import Any, Dict, Optional
import logging

from storefront.utils.errors import FunctionError, failure_body
from . import repository

logger = logging.getLogger(__name__)

def add_existing_user_to_store(creator_id: str, email: str, full_name: Optional[str] = None) -> Dict[str, Any]:
    """
    - Email inconnu: crée une invitation (store_invitations)
    - Déjà contact: 400
    - Sinon: lie l'utilisateur au créateur (store_users) et met à jour
      son nom si fourni (échec logué, non bloquant)
    """
    try:
        user = repository.find_user_by_email(email)
    except Exception:
        logger.exception("stores.add_existing_user_to_store user lookup failed email=%s", email)
        raise FunctionError(500, failure_body("Error checking user existence"))

    if not user:
        try:
            invitation = repository.insert_invitation(creator_id, email)
        except Exception:
            logger.exception("stores.add_existing_user_to_store invitation failed email=%s", email)
            raise FunctionError(500, failure_body("Error creating invitation"))
        return {"success": True, "message": "Invitation sent to user", "invitation": invitation}

    try:
        existing = repository.find_store_user(user["id"], creator_id)
    except Exception:
        logger.exception("stores.add_existing_user_to_store association lookup failed user_id=%s", user["id"])
        raise FunctionError(500, failure_body("Error checking store association"))
    if existing:
        raise FunctionError(400, failure_body("User is already a contact"))

    try:
        store_user = repository.insert_store_user(user["id"], creator_id)
    except Exception:
        logger.exception("stores.add_existing_user_to_store insert failed user_id=%s", user["id"])
        raise FunctionError(500, failure_body("Error adding user to store"))

    if full_name:
        try:
            repository.update_user_full_name(user["id"], full_name)
        except Exception:
            logger.exception("stores.add_existing_user_to_store full_name update failed user_id=%s", user["id"])

    return {"success": True, "message": "User added to contacts successfully", "storeUser": store_user}
