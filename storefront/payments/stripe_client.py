"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
- Les appels "plateforme" utilisent STRIPE_SECRET_KEY (stripe.api_key global).
- Les appels "créateur" (sync produit, test de connexion) passent api_key=...
  par requête, sans toucher à la clé globale.
"""
import stripe
from typing import Any, Dict, List, Optional

from storefront.config import STRIPE_API_VERSION

# module storefront.payments.stripe_client
def require_stripe() -> stripe:
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels Stripe échoueront côté SDK (ex: No API key provided).
    """
    from storefront.config import STRIPE_SECRET_KEY
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    stripe.api_version = STRIPE_API_VERSION
    return stripe

def field(obj: Any, name: str, default: Any = None) -> Any:
    """Lit un champ d'un objet Stripe (StripeObject, dict ou objet simple)."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)

# --- Checkout ---

def create_checkout_session(
    *,
    line_items: List[Dict[str, Any]],
    success_url: str,
    cancel_url: str,
    user_id: str,
) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout en mode paiement.
    user_id est reporté dans client_reference_id et dans les metadata de la
    session et du PaymentIntent (rapprochement côté webhook).
    Retour: {"id": "cs_test_...", "url": "https://..."}
    """
    require_stripe()
    session = stripe.checkout.Session.create(
        payment_method_types=["card"],
        line_items=line_items,
        mode="payment",
        success_url=success_url,
        cancel_url=cancel_url,
        client_reference_id=user_id,
        metadata={"user_id": user_id},
        payment_intent_data={"metadata": {"user_id": user_id}},
    )
    return {"id": field(session, "id"), "url": field(session, "url")}

# --- Abonnements ---

def cancel_at_period_end(subscription_id: str):
    """L'abonnement reste actif jusqu'à la fin de la période en cours."""
    require_stripe()
    return stripe.Subscription.modify(subscription_id, cancel_at_period_end=True)

def create_customer(*, email: str, name: Optional[str], payment_method_id: str, user_id: str):
    require_stripe()
    return stripe.Customer.create(
        email=email,
        name=name,
        payment_method=payment_method_id,
        invoice_settings={"default_payment_method": payment_method_id},
        metadata={"user_id": user_id},
    )

def create_plan_product(*, name: str, user_id: str):
    require_stripe()
    return stripe.Product.create(name=name, metadata={"user_id": user_id})

def create_monthly_price(*, product_id: str, unit_amount: int, currency: str = "usd"):
    require_stripe()
    return stripe.Price.create(
        product=product_id,
        unit_amount=unit_amount,
        currency=currency,
        recurring={"interval": "month"},
    )

def create_trial_subscription(*, customer_id: str, price_id: str, user_id: str, trial_period_days: int = 14):
    require_stripe()
    return stripe.Subscription.create(
        customer=customer_id,
        items=[{"price": price_id}],
        trial_period_days=trial_period_days,
        payment_settings={
            "payment_method_types": ["card"],
            "save_default_payment_method": "on_subscription",
        },
        metadata={"user_id": user_id},
    )

# --- Catalogue (clé du créateur) ---

def create_product(api_key: str, **fields: Any):
    return stripe.Product.create(api_key=api_key, stripe_version=STRIPE_API_VERSION, **fields)

def update_product(api_key: str, product_id: str, **fields: Any):
    return stripe.Product.modify(product_id, api_key=api_key, stripe_version=STRIPE_API_VERSION, **fields)

def retrieve_price(api_key: str, price_id: str):
    return stripe.Price.retrieve(price_id, api_key=api_key, stripe_version=STRIPE_API_VERSION)

def create_price(api_key: str, *, product_id: str, unit_amount: int, store_product_id: str, currency: str = "usd"):
    return stripe.Price.create(
        api_key=api_key,
        stripe_version=STRIPE_API_VERSION,
        product=product_id,
        unit_amount=unit_amount,
        currency=currency,
        metadata={"product_id": store_product_id},
    )

def retrieve_account(api_key: str):
    """Appel minimal servant de test de validité d'une clé secrète."""
    return stripe.Account.retrieve(api_key=api_key, stripe_version=STRIPE_API_VERSION)
