"""
Limitation de débit des endpoints coûteux (création de commande, initiation de paiement).

Le compteur est tenu par propriétaire du panier (jeton utilisateur ou cookie invité,
hachés) et par chemin; l'adresse IP ne sert qu'en dernier recours.
- fastapi-limiter (Redis) quand le lifespan l'a initialisé
- fenêtre glissante en mémoire si LOCAL_RATE_LIMIT_FALLBACK=1 (mono-processus)
- aucune limite si le limiter est désactivé (tests, Redis indisponible)
"""
from typing import Any, Dict, List
import hashlib
import logging
import os
import time
from fastapi import HTTPException, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from boutique.utils.owner import CART_SESSION_COOKIE
from boutique.utils.security import COOKIE_NAME

logger = logging.getLogger(__name__)

def _client_key(req: Request) -> str:
    owner = req.cookies.get(COOKIE_NAME) or req.cookies.get(CART_SESSION_COOKIE)
    if owner:
        digest = hashlib.sha256(owner.encode("utf-8")).hexdigest()[:16]
        return f"owner:{digest}:{req.url.path}"
    host = req.client.host if req.client else "local"
    return f"ip:{host}:{req.url.path}"

async def _owner_identifier(req: Request) -> str:
    return _client_key(req)

def _local_hit(request: Request, times: int, seconds: int) -> None:
    windows: Dict[str, List[float]] = getattr(request.app.state, "local_rate_windows", None) or {}
    key = _client_key(request)
    now = time.time()
    recent = [t for t in windows.get(key, []) if now - t < seconds]
    if len(recent) >= times:
        logger.info("rate limit reached key=%s", key)
        raise HTTPException(status_code=429, detail="Too Many Requests")
    windows[key] = recent + [now]
    request.app.state.local_rate_windows = windows

def optional_rate_limit(times: int, seconds: int):
    """Dépendance FastAPI: `times` requêtes par fenêtre de `seconds` secondes."""
    limiter = RateLimiter(times=times, seconds=seconds, identifier=_owner_identifier)

    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            _local_hit(request, times, seconds)
            return
        if not getattr(request.app.state, "rate_limit_enabled", False):
            return
        try:
            await limiter(request, response)
        except HTTPException:
            raise
        except Exception as e:
            # Redis tombé en cours de route: on laisse passer plutôt que de bloquer le checkout
            logger.warning("rate limiter unavailable, request allowed: %s", e)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    ready = getattr(FastAPILimiter, "redis", None) is not None
    return {
        "enabled": None if enabled is None else bool(enabled),
        "ready": ready,
        "backend": "redis" if ready else None,
    }
