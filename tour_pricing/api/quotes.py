"""Pricing quote endpoints with Redis caching"""
import json
import hashlib
import logging
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tour_pricing.schemas.quote import ErrorResponse, PricingRequest, QuoteResponse, VehicleAlternative
from tour_pricing.services.pricing import price_quote, list_vehicle_options
from tour_pricing.services.rates import RateRepository, SqlRateRepository
from tour_pricing.core.redis import get_redis
from tour_pricing.core.config import settings
from tour_pricing.core.enums import QuoteOutcome
from tour_pricing.core.metrics import cache_hits, cache_misses, quotes_total
from tour_pricing.db.session import get_db

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/pricing", tags=["pricing"])

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def get_rate_repository(db: AsyncSession = Depends(get_db)) -> RateRepository:
    return SqlRateRepository(db)


def _generate_cache_key(req: PricingRequest) -> str:
    params_str = json.dumps(req.model_dump(mode="json"), sort_keys=True)
    return f"quote:{hashlib.sha256(params_str.encode()).hexdigest()}"


@router.post("/calculate", response_model=QuoteResponse, responses=ERROR_RESPONSES)
async def calculate_pricing(
    req: PricingRequest,
    repo: RateRepository = Depends(get_rate_repository),
):
    cache_key = _generate_cache_key(req)
    redis = get_redis() if settings.PRICE_CACHE_TTL > 0 else None

    if redis is not None:
        try:
            cached = await redis.get(cache_key)
            if cached:
                cache_hits.labels(cache_key="quote").inc()
                quotes_total.labels(outcome=str(QuoteOutcome.CACHED)).inc()
                return QuoteResponse.model_validate(json.loads(cached))
            cache_misses.labels(cache_key="quote").inc()
        except Exception as e:
            logger.warning(f"Cache retrieval failed: {e}")

    result = await price_quote(req, repo)

    if redis is not None:
        try:
            await redis.set(
                cache_key,
                result.model_dump_json(),
                ex=settings.PRICE_CACHE_TTL
            )
        except Exception as e:
            logger.warning(f"Cache write failed: {e}")

    return result


@router.get("/vehicles", response_model=List[VehicleAlternative])
async def available_vehicles(
    travelers: int = Query(..., ge=1),
    city: str = Query(settings.DEFAULT_CITY, min_length=1),
    service_type: str = Query(settings.DEFAULT_TRANSPORTATION_SERVICE, min_length=1),
    repo: RateRepository = Depends(get_rate_repository),
):
    return await list_vehicle_options(repo, city, service_type, travelers)
