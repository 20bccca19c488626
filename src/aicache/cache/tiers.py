"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache tiers grouped by usage pattern.

- frequent: high-volume, lower-cost operations (bullets, summary)
- standard: medium-volume operations (cover letter, quantifier, scoring)
- expensive: low-volume, higher-cost operations (ATS, tailoring)
- stable: rarely-changing data with a long TTL (skills, LinkedIn)
- high_volume: very frequent, very cheap operations (writing assistant)
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class CacheTierConfig:
    """Sizing, TTL and cost settings shared by every cache of one tier."""

    max_size: int
    ttl_days: float
    cost_per_request: float


CACHE_TIERS = MappingProxyType(
    {
        "frequent": CacheTierConfig(max_size=500, ttl_days=7, cost_per_request=0.001),
        "standard": CacheTierConfig(max_size=200, ttl_days=7, cost_per_request=0.002),
        "expensive": CacheTierConfig(max_size=100, ttl_days=1, cost_per_request=0.05),
        "stable": CacheTierConfig(max_size=200, ttl_days=30, cost_per_request=0.001),
        "high_volume": CacheTierConfig(
            max_size=1000, ttl_days=14, cost_per_request=0.0005
        ),
    }
)

DEFAULT_TIER = "standard"

FEATURE_CACHE_TIER = MappingProxyType(
    {
        "bullet_points": "frequent",
        "summary": "frequent",
        "cover_letter": "standard",
        "quantifier": "standard",
        "resume_scoring": "standard",
        "interview_prep": "standard",
        "ats": "expensive",
        "tailor_resume": "expensive",
        "skills": "stable",
        "linkedin_optimizer": "stable",
        "writing_assistant": "high_volume",
    }
)


def get_cache_config(feature: str) -> CacheTierConfig:
    """Resolve the tier config for a feature; unknown features use `standard`."""
    tier = FEATURE_CACHE_TIER.get(feature, DEFAULT_TIER)
    return CACHE_TIERS[tier]


def ttl_days_to_minutes(days: float) -> float:
    return days * 24 * 60


def ttl_days_to_seconds(days: float) -> float:
    return days * 24 * 60 * 60
