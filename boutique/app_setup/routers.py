"""
Registre central des routers.
- API boutique: cart, orders, payments, webhooks, currencies
- Health: health_router
"""
from fastapi import FastAPI
from boutique.cart import views as cart_views
from boutique.orders import views as orders_views
from boutique.payments import views as payments_views
from boutique.webhooks import views as webhooks_views
from boutique.currency import views as currency_views
from boutique.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(cart_views.router)
    app.include_router(orders_views.router)
    app.include_router(payments_views.router)
    app.include_router(webhooks_views.router)
    app.include_router(currency_views.router)
    # Health & monitoring
    app.include_router(health_router)
