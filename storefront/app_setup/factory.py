"""
Factory d'application pour les entrypoints (ex: storefront.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_headers
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares CORS/TrustedHost et en-têtes de sécurité
      - gestionnaires d'exceptions (corps JSON propres aux fonctions)
      - tous les routers (fonctions, health)
    """
    app = FastAPI(title="Storefront Functions", lifespan=lifespan)
    register_security_headers(app)
    register_exception_handlers(app)
    register_routers(app)
    # CORS ajouté en dernier pour s'exécuter en premier (préflight OPTIONS)
    register_basic_middlewares(app)
    return app
