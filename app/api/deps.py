# app/api/deps.py
from fastapi import Request
from app.db.redis import get_redis
from app.domain.services.recommendation_svc import RecoContext

# Dependency for injecting the recommendation context built at startup
def reco_context(request: Request) -> RecoContext:
    return request.app.state.reco

# Dependency for injecting the Redis client into endpoints/services
def redis_dep():
    return get_redis()
