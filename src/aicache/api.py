"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

FastAPI service exposing cache statistics and cleanup for monitoring.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .cache.base import CacheInfo, CacheStats
from .cache.registry import FeatureCacheRegistry
from .errors import AICacheError
from .runtime.sweeper import ExpirySweeper

logger = logging.getLogger("aicache.api")


class CacheStatsHostError(AICacheError):
    """Raised for invalid stats service setup."""


class OverallStatsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hit_rate: str = Field(alias="hitRate")
    total_hits: int = Field(alias="totalHits")
    total_requests: int = Field(alias="totalRequests")
    estimated_savings: str = Field(alias="estimatedSavings")
    savings_per_month: str = Field(alias="savingsPerMonth")


class FeatureStatsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hits: int
    misses: int
    size: int
    max_size: int = Field(alias="maxSize")
    hit_rate: str = Field(alias="hitRate")
    estimated_savings: str = Field(alias="estimatedSavings")
    cache_size: str = Field(alias="cacheSize")


class CacheStatsResponse(BaseModel):
    overall: OverallStatsModel
    caches: dict[str, FeatureStatsModel]
    recommendations: list[str]


class EntryInfoModel(BaseModel):
    key: str
    hits: int
    age: str


class CacheInfoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    feature: str
    stats: FeatureStatsModel
    top_entries: list[EntryInfoModel] = Field(alias="topEntries")


class CleanupResponse(BaseModel):
    removed: dict[str, int]
    total: int


def _percent(rate: float) -> str:
    return f"{rate * 100:.1f}%"


def _dollars(amount: float, places: int = 4) -> str:
    return f"${amount:.{places}f}"


def _feature_stats(stats: CacheStats) -> FeatureStatsModel:
    return FeatureStatsModel(
        hits=stats.hits,
        misses=stats.misses,
        size=stats.size,
        max_size=stats.max_size,
        hit_rate=_percent(stats.hit_rate),
        estimated_savings=_dollars(stats.estimated_savings),
        cache_size=f"{stats.size}/{stats.max_size}",
    )


def build_stats_response(registry: FeatureCacheRegistry) -> CacheStatsResponse:
    summary = registry.summarize()
    return CacheStatsResponse(
        overall=OverallStatsModel(
            hit_rate=_percent(summary.hit_rate),
            total_hits=summary.total_hits,
            total_requests=summary.total_requests,
            estimated_savings=_dollars(summary.estimated_savings),
            savings_per_month=_dollars(summary.savings_per_month, 2),
        ),
        caches={name: _feature_stats(row) for name, row in summary.caches.items()},
        recommendations=summary.recommendations,
    )


def build_info_response(feature: str, info: CacheInfo) -> CacheInfoResponse:
    return CacheInfoResponse(
        feature=feature,
        stats=_feature_stats(info.stats),
        top_entries=[
            EntryInfoModel(key=row.key, hits=row.hits, age=row.age)
            for row in info.top_entries
        ],
    )


class CacheStatsHost:
    """Expose registry statistics and cleanup via FastAPI endpoints."""

    def __init__(
        self,
        registry: FeatureCacheRegistry,
        *,
        service_name: str = "aicache-stats",
        sweep_interval_s: float | None = None,
    ) -> None:
        if sweep_interval_s is not None and sweep_interval_s <= 0:
            raise CacheStatsHostError("sweep_interval_s must be > 0")
        self.registry = registry
        self.service_name = service_name
        self.sweep_interval_s = sweep_interval_s

    def create_app(self):
        """Create and return FastAPI app exposing cache endpoints."""
        try:
            from fastapi import FastAPI, HTTPException
        except Exception as exc:  # pragma: no cover - optional runtime path
            raise CacheStatsHostError(
                "FastAPI is required to host cache statistics endpoints"
            ) from exc

        @asynccontextmanager
        async def lifespan(_app):
            sweeper: ExpirySweeper | None = None
            if self.sweep_interval_s is not None:
                sweeper = ExpirySweeper(self.registry, interval_s=self.sweep_interval_s)
                await sweeper.start()
            try:
                yield
            finally:
                if sweeper is not None:
                    await sweeper.shutdown()

        app = FastAPI(title=self.service_name, lifespan=lifespan)

        @app.get("/health")
        async def health() -> dict[str, Any]:
            return {"status": "ok", "caches": len(self.registry.features())}

        @app.get("/cache/stats")
        async def cache_stats() -> dict[str, Any]:
            try:
                response = build_stats_response(self.registry)
            except Exception as exc:
                logger.exception("Failed to build cache statistics")
                raise HTTPException(
                    status_code=500, detail="Failed to fetch cache statistics"
                ) from exc
            return response.model_dump(by_alias=True)

        @app.get("/cache/{feature}/info")
        async def cache_info(feature: str) -> dict[str, Any]:
            if feature not in self.registry:
                raise HTTPException(
                    status_code=404, detail=f"Unknown cache feature '{feature}'"
                )
            info = self.registry.get(feature).get_info()
            return build_info_response(feature, info).model_dump(by_alias=True)

        @app.post("/cache/cleanup")
        async def cleanup() -> dict[str, Any]:
            removed = self.registry.clear_all_expired()
            total = sum(removed.values())
            logger.info("Cache cleanup endpoint removed %d entries", total)
            return CleanupResponse(removed=removed, total=total).model_dump()

        return app

    def run(self, *, host: str = "127.0.0.1", port: int = 8085, **kwargs: Any) -> None:
        """Serve the stats app with uvicorn."""
        try:
            import uvicorn
        except ImportError:
            raise ImportError(
                "uvicorn is required to run CacheStatsHost. "
                "Install it with: pip install uvicorn"
            )

        uvicorn.run(self.create_app(), host=host, port=port, **kwargs)
