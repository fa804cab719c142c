"""
Cycle de vie de l'application: connexion du limiteur de débit au démarrage, fermeture à l'arrêt.

app.state.rate_limit_enabled reflète l'état effectif (lu par utils.rate_limit et /health/config).
Variables d'environnement:
- DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: aucun limiteur (tests)
- USE_FAKE_REDIS_FOR_TESTS=1: fakeredis en mémoire
- RATE_LIMIT_REDIS_URL: Redis (redis://127.0.0.1:6379/0 par défaut)
- LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre locale si Redis est injoignable
"""
import logging
import os
from contextlib import asynccontextmanager
import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

try:
    from fakeredis.aioredis import FakeRedis  # extra [test]
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")

def _open_redis():
    if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
        if FakeRedis is None:
            raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 requires fakeredis (pip install .[test])")
        return FakeRedis(decode_responses=True)
    url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
    return aioredis.from_url(url, encoding="utf-8", decode_responses=True)

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.rate_limit_enabled = False
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        logger.info("boutique: rate limiting disabled for tests")
        yield
        return

    connected = False
    try:
        await FastAPILimiter.init(_open_redis())
        connected = True
        app.state.rate_limit_enabled = True
        logger.info("boutique: rate limiting enabled (redis)")
    except Exception as e:
        fallback = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        app.state.rate_limit_enabled = fallback
        logger.warning("boutique: redis unavailable (%s), rate limiting %s", e, "local" if fallback else "off")

    yield

    if connected:
        try:
            await FastAPILimiter.close()
        except Exception as e:
            logger.warning("boutique: FastAPILimiter close failed: %s", e)
