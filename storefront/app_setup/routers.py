"""
Registre central des routers.
- Fonctions: payments (checkout, abonnements, produits, test Stripe), stores (contacts)
- Health
"""
from fastapi import FastAPI
from storefront.payments import views as payments_views
from storefront.stores import views as stores_views
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(payments_views.router)
    app.include_router(stores_views.router)
    app.include_router(health_router)
