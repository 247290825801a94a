from typing import Dict, Any
from fastapi import Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.exceptions import RedisError
import logging
import math
import os
import time
import hashlib

from storefront.utils.errors import FunctionError, error_body

logger = logging.getLogger(__name__)

def _client_key(req: Request) -> str:
    # Priorité: token Bearer (hashé) puis IP, par chemin
    path = req.url.path
    auth_header = req.headers.get("Authorization") or ""
    token = auth_header.replace("Bearer ", "", 1).strip()
    if token:
        h = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"token:{h}:{path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{path}"

async def _identifier(req: Request) -> str:
    return _client_key(req)

async def _too_many_requests(request: Request, response: Response, pexpire: int):
    # Même corps que le fallback mémoire, avec Retry-After en secondes
    retry_after = str(max(1, math.ceil(pexpire / 1000)))
    raise FunctionError(429, error_body("Too Many Requests"), headers={"Retry-After": retry_after})

def optional_rate_limit(times: int, seconds: int):
    limiter = RateLimiter(times=times, seconds=seconds, identifier=_identifier, callback=_too_many_requests)

    async def _dep(request: Request, response: Response):
        # Fallback mémoire (dev/tests) si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise FunctionError(429, error_body("Too Many Requests"))
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        if FastAPILimiter.redis is None:
            # Lifespan non exécuté (app de test, init Redis absente): pas de limite
            logger.debug("rate_limit skipped, FastAPILimiter not initialised path=%s", request.url.path)
            return

        try:
            await limiter(request, response)
        except RedisError:
            # Redis indisponible: la requête passe, l'incident est tracé
            logger.exception("rate_limit redis error path=%s", request.url.path)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None

    return {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": "redis" if limiter_ready else None,
    }
