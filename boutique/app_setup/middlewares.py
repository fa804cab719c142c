"""
Middlewares transverses de la boutique.

Ordre d'exécution (le dernier enregistré passe en premier):
force_https -> no-cache -> sécurité/CSRF -> proxy headers -> TrustedHost -> CORS.

CSRF: double-submit (cookie csrf_token lisible par le front + en-tête X-CSRF-Token),
exigé seulement pour une requête mutative portant la session navigateur sb_access.
Un client API en Bearer n'est pas concerné; les webhooks sont authentifiés par signature.
"""
import logging
import secrets
from typing import List
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from boutique.config import ALLOWED_HOSTS, COOKIE_SECURE, CORS_ORIGINS, SUPABASE_URL
from boutique.utils.security import COOKIE_NAME

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_EXEMPT_PREFIXES = ("/api/webhook/",)
NO_CACHE_PREFIXES = ("/api/cart", "/api/orders")
MUTATING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

# Passerelles chargées par le checkout (Stripe.js, popup Paystack)
GATEWAY_ORIGINS = ["https://js.stripe.com", "https://api.stripe.com", "https://api.paystack.co", "https://checkout.paystack.com"]
DOCS_CDNS = ["https://cdn.jsdelivr.net"]

def _content_security_policy() -> str:
    connect: List[str] = ["'self'"] + GATEWAY_ORIGINS
    if SUPABASE_URL:
        connect.append(SUPABASE_URL)
    return "; ".join([
        "default-src 'self'",
        "base-uri 'self'",
        "object-src 'none'",
        "frame-ancestors 'none'",
        "img-src 'self' data: https:",
        f"script-src 'self' 'unsafe-inline' {' '.join(DOCS_CDNS + GATEWAY_ORIGINS[:1])}",
        f"style-src 'self' 'unsafe-inline' {' '.join(DOCS_CDNS)}",
        "frame-src https://js.stripe.com https://checkout.paystack.com",
        f"connect-src {' '.join(connect)}",
    ])

def _csrf_required(request: Request) -> bool:
    return (
        request.method.upper() in MUTATING_METHODS
        and bool(request.cookies.get(COOKIE_NAME))
        and not request.url.path.startswith(CSRF_EXEMPT_PREFIXES)
    )

def _csrf_valid(request: Request) -> bool:
    cookie = request.cookies.get(CSRF_COOKIE_NAME) or ""
    header = request.headers.get(CSRF_HEADER_NAME) or ""
    return bool(cookie) and bool(header) and secrets.compare_digest(cookie, header)

def register_basic_middlewares(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    hosts = list(ALLOWED_HOSTS)
    if "*" in CORS_ORIGINS:
        hosts.append("*")
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=hosts)
    # X-Forwarded-* du reverse proxy (IP client pour le rate limiting, schéma pour HTTPS)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

def register_security_middleware(app: FastAPI) -> None:
    csp = _content_security_policy()

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        if _csrf_required(request) and not _csrf_valid(request):
            logger.info("csrf rejected %s %s", request.method, request.url.path)
            return JSONResponse(status_code=403, content={"error": "CSRF verification failed"})

        response = await call_next(request)
        headers = response.headers
        headers.setdefault("X-Frame-Options", "DENY")
        headers.setdefault("X-Content-Type-Options", "nosniff")
        headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=(), payment=(self)")
        headers["Content-Security-Policy"] = csp
        if COOKIE_SECURE:
            headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains")

        if not request.cookies.get(CSRF_COOKIE_NAME):
            response.set_cookie(
                key=CSRF_COOKIE_NAME,
                value=secrets.token_urlsafe(32),
                httponly=False,
                secure=COOKIE_SECURE,
                samesite="Lax",
                max_age=60 * 60,
                path="/",
            )
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    """Panier et commandes dépendent du propriétaire: jamais servis depuis un cache."""
    @app.middleware("http")
    async def no_cache_for_owner_data(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(NO_CACHE_PREFIXES):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
        return response

def register_force_https_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "http":
            return RedirectResponse(str(request.url.replace(scheme="https")), status_code=301)
        return await call_next(request)
