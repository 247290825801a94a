"""
Cas d'usage 'payments': orchestre repository, cart, stripe_client.
Chaque fonction lève FunctionError avec le corps JSON attendu par le front.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from storefront.utils.errors import FunctionError, error_body, failure_body
from . import repository
from . import cart as cart_logic
from . import stripe_client
from .stripe_client import field
from .plans import plan_display_name
from .currency import to_cents
from .models import CheckoutRequest, CreateCustomerRequest, ProductPayload

logger = logging.getLogger(__name__)

TRIAL_PERIOD_DAYS = 14

def create_checkout(req: CheckoutRequest, origin: Optional[str]) -> Dict[str, Any]:
    """
    Crée une session Checkout pour un panier.
    - 400 "Missing cart items" si le panier est vide
    - 400 "Could not fetch products" si aucun produit trouvé
    - 400 "Could not fetch creator data" si la lecture des créateurs échoue
    Retour: {"id", "url"}
    """
    if not req.cartItems:
        raise FunctionError(400, error_body("Missing cart items"))

    quantities = cart_logic.aggregate_quantities([item.model_dump() for item in req.cartItems])
    products = repository.fetch_products_by_ids(list(quantities.keys()))
    if not products:
        raise FunctionError(400, error_body("Could not fetch products"))

    creators = repository.fetch_creators_by_ids(cart_logic.creator_ids(products))
    if creators is None:
        raise FunctionError(400, error_body("Could not fetch creator data"))

    user_id = req.userId or "guest"
    success_url = req.successUrl or f"{origin}/checkout/success"
    cancel_url = req.cancelUrl or f"{origin}/cart"

    return stripe_client.create_checkout_session(
        line_items=cart_logic.to_line_items(products, quantities),
        success_url=success_url,
        cancel_url=cancel_url,
        user_id=user_id,
    )

def cancel_subscription(subscription_id: str, user_id: str) -> Dict[str, Any]:
    """
    Annule en fin de période l'abonnement (identifié par son price_id) du user.
    - 404 si l'abonnement est introuvable, 403 si le client Stripe n'est pas au user
    """
    subscription = repository.get_subscription_by_price_id(subscription_id)
    if not subscription:
        raise FunctionError(404, failure_body("Subscription not found"))

    owner_id = repository.get_customer_user_id(subscription.get("customer_id"))
    if not owner_id or owner_id != user_id:
        raise FunctionError(403, failure_body("Unauthorized to cancel this subscription"))

    stripe_subscription_id = subscription.get("subscription_id")
    if stripe_subscription_id:
        stripe_client.cancel_at_period_end(stripe_subscription_id)

    repository.mark_subscription_cancel_at_period_end(stripe_subscription_id)
    return {
        "success": True,
        "message": "Subscription cancelled successfully. You will still have access until the end of your current billing period.",
    }

def create_stripe_customer(req: CreateCustomerRequest) -> Dict[str, Any]:
    """
    Client Stripe + produit/prix mensuel de la formule + abonnement avec essai.
    Les erreurs Stripe/BD remontent (la vue renvoie 500).
    """
    customer = stripe_client.create_customer(
        email=req.email,
        name=req.name,
        payment_method_id=req.paymentMethodId,
        user_id=req.userId,
    )
    product = stripe_client.create_plan_product(name=plan_display_name(req.plan), user_id=req.userId)
    price = stripe_client.create_monthly_price(
        product_id=field(product, "id"),
        unit_amount=to_cents(req.price),
    )
    subscription = stripe_client.create_trial_subscription(
        customer_id=field(customer, "id"),
        price_id=field(price, "id"),
        user_id=req.userId,
        trial_period_days=TRIAL_PERIOD_DAYS,
    )

    trial_end = datetime.fromtimestamp(int(field(subscription, "trial_end") or 0), tz=timezone.utc)
    trial_end_iso = trial_end.isoformat().replace("+00:00", "Z")
    repository.update_user_billing(
        user_id=req.userId,
        customer_id=field(customer, "id"),
        payment_method_id=req.paymentMethodId,
        trial_ends_at=trial_end_iso,
    )
    return {
        "success": True,
        "customerId": field(customer, "id"),
        "subscriptionId": field(subscription, "id"),
        "trialEnd": trial_end_iso,
    }

def _product_fields(product: ProductPayload) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "name": product.name,
        "description": product.description,
        "metadata": {
            "product_id": product.id,
            "creator_id": product.creator_id,
            "product_type": product.type,
        },
        "active": bool(product.published_at),
    }
    if product.thumbnail:
        fields["images"] = [product.thumbnail]
    return fields

def sync_product(product: ProductPayload) -> Dict[str, Any]:
    """
    Crée ou met à jour le produit Stripe d'un produit boutique, avec la clé
    Stripe du créateur. Un prix Stripe n'étant pas modifiable, un nouveau prix
    est créé quand le montant change (ou quand aucun prix n'existe).
    """
    creator = repository.get_creator(product.creator_id)
    if creator is None:
        raise FunctionError(400, error_body("Could not fetch creator data"))

    api_key = (creator.get("social_links") or {}).get("stripe_secret_key")
    if not api_key:
        raise FunctionError(400, error_body("Stripe secret key not configured for this creator"))

    metadata = repository.get_product_metadata(product.id) or {}
    stripe_product_id = metadata.get("stripe_product_id")
    stripe_price_id = metadata.get("stripe_price_id")

    if stripe_product_id:
        stripe_product = stripe_client.update_product(api_key, stripe_product_id, **_product_fields(product))
        stripe_price = None
        if stripe_price_id:
            current = stripe_client.retrieve_price(api_key, stripe_price_id)
            if field(current, "unit_amount") == product.price:
                stripe_price = current
        if stripe_price is None:
            stripe_price = stripe_client.create_price(
                api_key,
                product_id=field(stripe_product, "id"),
                unit_amount=product.price,
                store_product_id=product.id,
            )
            repository.update_product_price_id(product.id, field(stripe_price, "id"))
            logger.info("payments.sync_product new price product_id=%s price=%s", product.id, field(stripe_price, "id"))
    else:
        stripe_product = stripe_client.create_product(api_key, **_product_fields(product))
        stripe_price = stripe_client.create_price(
            api_key,
            product_id=field(stripe_product, "id"),
            unit_amount=product.price,
            store_product_id=product.id,
        )
        repository.insert_product_metadata(
            product_id=product.id,
            stripe_product_id=field(stripe_product, "id"),
            stripe_price_id=field(stripe_price, "id"),
        )

    return {
        "success": True,
        "stripeProductId": field(stripe_product, "id"),
        "stripePriceId": field(stripe_price, "id"),
    }

def check_stripe_connection(publishable_key: Optional[str], secret_key: Optional[str]) -> Dict[str, Any]:
    """
    Vérifie le format des clés puis leur validité (lecture du compte Stripe).
    """
    if not publishable_key or not secret_key:
        raise FunctionError(400, failure_body("Both publishable key and secret key are required"))
    if not publishable_key.startswith("pk_"):
        raise FunctionError(400, failure_body("Invalid publishable key format. It should start with 'pk_'"))
    if not secret_key.startswith("sk_"):
        raise FunctionError(400, failure_body("Invalid secret key format. It should start with 'sk_'"))

    try:
        account = stripe_client.retrieve_account(secret_key)
    except Exception as e:
        logger.warning("payments.check_stripe_connection stripe error: %s", e)
        raise FunctionError(400, failure_body(getattr(e, "user_message", None) or str(e) or "Failed to connect to Stripe API"))

    return {
        "success": True,
        "message": "Stripe connection successful",
        "accountId": field(account, "id"),
    }
