"""
Lifespan de l'app des fonctions: rate limiting Redis (fastapi-limiter).

Sélection du client Redis, par ordre de priorité:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: aucune init, limites désactivées
  - USE_FAKE_REDIS_FOR_TESTS=1: fakeredis en mémoire (scripts Lua via fakeredis[lua])
  - sinon RATE_LIMIT_REDIS_URL (défaut redis://127.0.0.1:6379/0)
Si l'init échoue, LOCAL_RATE_LIMIT_FALLBACK=1 garde des limites en mémoire;
sans fallback les limites sont coupées. Le client est fermé à l'arrêt.
"""
import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://127.0.0.1:6379/0"

def _limiter_redis() -> redis.Redis:
    if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
        from fakeredis.aioredis import FakeRedis
        return FakeRedis(decode_responses=True)
    url = os.getenv("RATE_LIMIT_REDIS_URL", DEFAULT_REDIS_URL)
    return redis.from_url(url, encoding="utf-8", decode_responses=True)

async def _init_rate_limiting(app: FastAPI) -> Optional[redis.Redis]:
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("rate_limit disabled (DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS)")
        return None

    client = None
    try:
        client = _limiter_redis()
        await FastAPILimiter.init(client)
    except Exception as e:
        FastAPILimiter.redis = None
        if client is not None:
            await client.aclose()
        fallback = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        app.state.rate_limit_enabled = fallback
        logger.warning("rate_limit redis init failed (%s), %s", e, "in-memory fallback" if fallback else "limits off")
        return None

    app.state.rate_limit_enabled = True
    logger.info("rate_limit enabled on redis")
    return client

@asynccontextmanager
async def lifespan(app: FastAPI):
    client = await _init_rate_limiting(app)
    try:
        yield
    finally:
        if client is not None:
            FastAPILimiter.redis = None
            await client.aclose()
