"""
Factory d'application pour les entrypoints (boutique.asgi, python -m boutique).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import (
    register_basic_middlewares,
    register_security_middleware,
    register_no_cache_middleware,
    register_force_https_middleware,
)
from .exceptions import register_exception_handlers
from .routers import register_routers
from boutique.config import FORCE_HTTPS

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares de base, sécurité/CSRF, no-cache (et HTTPS forcé si FORCE_HTTPS)
      - gestionnaires d'exceptions (taxonomie StorefrontError)
      - tous les routers (panier, commandes, paiements, webhooks, devises, health)
    """
    app = FastAPI(title="Boutique Montres", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    if FORCE_HTTPS:
        register_force_https_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
