import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from storefront.utils.errors import (
    FunctionError,
    error_body,
    failure_body,
    wrapped_failure_body,
)
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import require_user
from storefront.utils.validators import parse_body
from . import service
from .models import (
    CancelSubscriptionRequest,
    CheckoutRequest,
    CreateCustomerRequest,
    StripeKeysRequest,
    SyncProductRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/functions/v1", tags=["Payments"])

# module storefront.payments.views
@router.post("/create-checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_checkout(request: Request) -> Dict[str, Any]:
    """
    Crée une session Checkout Stripe pour le panier.
    - Entrée JSON: {"cartItems": [{"productId", "quantity"}], "userId"?, "successUrl"?, "cancelUrl"?}
    - URLs par défaut: <Origin>/checkout/success et <Origin>/cart
    - Retour: {"id", "url"}; erreurs: 400 {"error": ...}
    """
    req = await parse_body(request, CheckoutRequest, lambda msg: FunctionError(400, error_body(msg)))
    try:
        return await run_in_threadpool(service.create_checkout, req, request.headers.get("origin"))
    except FunctionError:
        raise
    except Exception as e:
        logger.exception("payments.create_checkout failed")
        raise FunctionError(400, error_body(str(e)))

@router.post("/cancel-subscription")
async def cancel_subscription(request: Request) -> Dict[str, Any]:
    """
    Annule en fin de période un abonnement de l'utilisateur authentifié.
    - Entrée JSON: {"subscriptionId": "<price_id>"}
    - Sécurité: Bearer Supabase (401 sinon); propriété vérifiée (403)
    """
    req = await parse_body(request, CancelSubscriptionRequest, lambda msg: FunctionError(500, failure_body(msg)))
    if not req.subscriptionId:
        raise FunctionError(400, failure_body("Subscription ID is required"))
    user = await run_in_threadpool(require_user, request)
    try:
        return await run_in_threadpool(service.cancel_subscription, req.subscriptionId, user.get("id"))
    except FunctionError:
        raise
    except Exception as e:
        logger.exception("payments.cancel_subscription failed")
        raise FunctionError(500, failure_body(str(e) or "Failed to cancel subscription"))

@router.post("/create-stripe-customer")
async def create_stripe_customer(request: Request) -> Dict[str, Any]:
    """
    Crée le client Stripe et l'abonnement d'essai (14 jours) d'un créateur.
    - Entrée JSON: {"userId", "email", "name"?, "paymentMethodId", "plan", "price"}
    - Retour: {"data": {"success", "customerId", "subscriptionId", "trialEnd"}}
    """
    req = await parse_body(request, CreateCustomerRequest, lambda msg: FunctionError(500, wrapped_failure_body(msg)))
    if not req.userId or not req.email or not req.paymentMethodId:
        raise FunctionError(400, wrapped_failure_body("Missing required data"))
    try:
        data = await run_in_threadpool(service.create_stripe_customer, req)
    except FunctionError:
        raise
    except Exception as e:
        logger.exception("payments.create_stripe_customer failed user_id=%s", req.userId)
        raise FunctionError(500, wrapped_failure_body(str(e) or "Failed to create Stripe customer"))
    return {"data": data}

@router.post("/sync-product-to-stripe")
async def sync_product_to_stripe(request: Request) -> Dict[str, Any]:
    """
    Synchronise un produit boutique vers le compte Stripe de son créateur.
    - Entrée JSON: {"product": {"id", "name", "price", "creator_id", ...}}
    - Retour: {"success", "stripeProductId", "stripePriceId"}; erreurs: 400 {"error": ...}
    """
    req = await parse_body(request, SyncProductRequest, lambda msg: FunctionError(400, error_body(msg)))
    if not req.product or not req.product.id:
        raise FunctionError(400, error_body("Missing product data"))
    try:
        return await run_in_threadpool(service.sync_product, req.product)
    except FunctionError:
        raise
    except Exception as e:
        logger.exception("payments.sync_product failed product_id=%s", req.product.id)
        raise FunctionError(400, error_body(str(e)))

@router.post("/test-stripe-connection", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def stripe_connection_test(request: Request) -> Dict[str, Any]:
    """
    Vérifie une paire de clés Stripe (format pk_/sk_ puis appel Account).
    - Retour: {"success": true, "message", "accountId"}; erreurs: 400/500 {"success": false, "message"}
    """
    req = await parse_body(request, StripeKeysRequest, lambda msg: FunctionError(500, failure_body(msg)))
    try:
        return await run_in_threadpool(service.check_stripe_connection, req.publishableKey, req.secretKey)
    except FunctionError:
        raise
    except Exception as e:
        logger.exception("payments.stripe_connection_test failed")
        raise FunctionError(500, failure_body(str(e) or "An unexpected error occurred"))
