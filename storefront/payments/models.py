"""
Corps de requête des fonctions de paiement (noms camelCase envoyés par le front).
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CartItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    productId: str
    quantity: Optional[int] = Field(default=1)


class CheckoutRequest(BaseModel):
    cartItems: List[CartItem] = Field(default_factory=list)
    userId: Optional[str] = "guest"
    successUrl: Optional[str] = None
    cancelUrl: Optional[str] = None


class CancelSubscriptionRequest(BaseModel):
    subscriptionId: Optional[str] = None


class CreateCustomerRequest(BaseModel):
    userId: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    paymentMethodId: Optional[str] = None
    plan: str = ""
    price: float = 0


class ProductPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    price: int = 0
    type: Optional[str] = None
    creator_id: Optional[str] = None
    published_at: Optional[str] = None


class SyncProductRequest(BaseModel):
    product: Optional[ProductPayload] = None


class StripeKeysRequest(BaseModel):
    publishableKey: Optional[str] = None
    secretKey: Optional[str] = None
