"""
UAS Bot - Economy Analyzer Service
==================================

Wealth statistics and a health rating for a guild's economy.

DESIGN:
    Balances are wallet + bank, excluding developers and off-economy
    users. Health is a 0-100 score from four factors:

    - Poor share (30): < 60% -> 30, < 75% -> 20, < 85% -> 10
    - House edge (40): casino game edge, 0 when no game stats are known
    - User count (20): > 100 -> 20, > 50 -> 15, > 20 -> 10, > 5 -> 5
    - Inflation (10): < 5% -> 10, < 15% -> 5

    Results are cached per guild for a few minutes.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from src.core.logger import logger
from src.core.config import get_config
from src.core.database import get_db
from src.core.constants import (
    ANALYSIS_CACHE_TTL,
    WEALTH_MIDDLE_MAX,
    WEALTH_POOR_MAX,
    WEALTH_RICH_MAX,
    WEALTH_WEALTHY_MAX,
)


BUCKETS = ("poor", "middle", "rich", "wealthy", "elite")

HEALTH_EMOJIS: Dict[str, str] = {
    "EXCELLENT": "🟢",
    "GOOD": "🟢",
    "FAIR": "🟡",
    "POOR": "🟠",
    "CRITICAL": "🔴",
    "UNKNOWN": "⚪",
}


# =============================================================================
# Data Types
# =============================================================================

@dataclass
class BucketShare:
    count: int
    percentage: float


@dataclass
class Recommendation:
    type: str
    category: str
    message: str
    action: str


@dataclass
class EconomyAnalysis:
    """Snapshot of a guild's economy."""

    guild_id: int
    timestamp: float
    total_users: int = 0
    total_wealth: int = 0
    average_balance: float = 0.0
    median_balance: float = 0.0
    distribution: Dict[str, BucketShare] = field(default_factory=dict)
    gini: float = 0.0
    health_score: int = 0
    health: str = "UNKNOWN"
    inflation_rate: float = 0.0
    recommendations: List[Recommendation] = field(default_factory=list)

    @property
    def critical_count(self) -> int:
        return sum(1 for r in self.recommendations if r.type == "CRITICAL")


# =============================================================================
# Pure Calculations
# =============================================================================

def bucket_for(balance: float) -> str:
    if balance < WEALTH_POOR_MAX:
        return "poor"
    if balance < WEALTH_MIDDLE_MAX:
        return "middle"
    if balance < WEALTH_RICH_MAX:
        return "rich"
    if balance < WEALTH_WEALTHY_MAX:
        return "wealthy"
    return "elite"


def wealth_distribution(balances: List[float]) -> Dict[str, BucketShare]:
    """Count and percentage of users per wealth bucket."""
    counts = {name: 0 for name in BUCKETS}
    for balance in balances:
        counts[bucket_for(balance)] += 1

    total = len(balances)
    if total == 0:
        return {name: BucketShare(0, 100.0 if name == "poor" else 0.0) for name in BUCKETS}
    return {name: BucketShare(count, count / total * 100) for name, count in counts.items()}


def gini_coefficient(balances: Iterable[float]) -> float:
    """
    Gini coefficient of the balances.

    0 is perfect equality; values approach 1 as wealth concentrates.
    """
    values = sorted(balances)
    n = len(values)
    total = sum(values)
    if n == 0 or total == 0:
        return 0.0

    weighted = sum((2 * i - n - 1) * v for i, v in enumerate(values, start=1))
    return weighted / (n * total)


def median(values: List[float]) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2


def health_score(
    distribution: Dict[str, BucketShare],
    total_users: int,
    avg_house_edge: float = 0.0,
    inflation_rate: float = 0.0,
) -> int:
    score = 0

    poor = distribution["poor"].percentage
    if poor < 60:
        score += 30
    elif poor < 75:
        score += 20
    elif poor < 85:
        score += 10

    if avg_house_edge > 15:
        score += 40
    elif avg_house_edge > 10:
        score += 35
    elif avg_house_edge > 5:
        score += 25
    elif avg_house_edge > 2:
        score += 15
    elif avg_house_edge > -5:
        score += 5

    if total_users > 100:
        score += 20
    elif total_users > 50:
        score += 15
    elif total_users > 20:
        score += 10
    elif total_users > 5:
        score += 5

    if inflation_rate < 5:
        score += 10
    elif inflation_rate < 15:
        score += 5

    return score


def health_label(score: int) -> str:
    if score >= 80:
        return "EXCELLENT"
    if score >= 65:
        return "GOOD"
    if score >= 50:
        return "FAIR"
    if score >= 35:
        return "POOR"
    return "CRITICAL"


def build_recommendations(distribution: Dict[str, BucketShare], gini: float) -> List[Recommendation]:
    recommendations = []

    if distribution["poor"].percentage > 80:
        recommendations.append(Recommendation(
            type="CRITICAL",
            category="WEALTH_DISTRIBUTION",
            message="Too many poor players - increase earning opportunities or reduce game difficulty",
            action="INCREASE_PAYOUTS",
        ))

    if gini > 0.75:
        recommendations.append(Recommendation(
            type="WARNING",
            category="INEQUALITY",
            message=f"Very high wealth inequality (Gini {gini:.3f}) - consider a wealth tax or stimulus",
            action="REDISTRIBUTE",
        ))

    if distribution["elite"].percentage > 10:
        recommendations.append(Recommendation(
            type="WARNING",
            category="WEALTH_DISTRIBUTION",
            message="Large elite share - review high-payout games and income sources",
            action="REDUCE_MULTIPLIERS",
        ))

    return recommendations


# =============================================================================
# Analyzer
# =============================================================================

class EconomyAnalyzer:
    """Runs and caches per-guild economy analyses."""

    def __init__(self) -> None:
        self.config = get_config()
        self.db = get_db()
        self.cache: Dict[int, EconomyAnalysis] = {}

    def analyze(self, guild_id: int, use_cache: bool = True) -> EconomyAnalysis:
        cached = self.cache.get(guild_id)
        if use_cache and cached and time.time() - cached.timestamp < ANALYSIS_CACHE_TTL:
            return cached

        excluded = self.config.all_developer_ids
        rows = [
            r for r in self.db.get_guild_balances(guild_id, include_off_economy=False)
            if r["user_id"] not in excluded
        ]
        balances = [float((r["wallet"] or 0) + (r["bank"] or 0)) for r in rows]

        analysis = EconomyAnalysis(guild_id=guild_id, timestamp=time.time())
        analysis.distribution = wealth_distribution(balances)

        if balances:
            analysis.total_users = len(balances)
            analysis.total_wealth = int(sum(balances))
            analysis.average_balance = sum(balances) / len(balances)
            analysis.median_balance = median(balances)
            analysis.gini = gini_coefficient(balances)
            analysis.health_score = health_score(analysis.distribution, analysis.total_users)
            analysis.health = health_label(analysis.health_score)
            analysis.recommendations = build_recommendations(analysis.distribution, analysis.gini)
        else:
            logger.warning("No Users For Economy Analysis", [("Guild ID", str(guild_id))])

        self.cache[guild_id] = analysis

        logger.tree("Economy Analysis Complete", [
            ("Guild ID", str(guild_id)),
            ("Users", str(analysis.total_users)),
            ("Health", f"{analysis.health} ({analysis.health_score})"),
            ("Gini", f"{analysis.gini:.3f}"),
        ], emoji="📊")

        return analysis

    def get_cached(self, guild_id: int) -> Optional[EconomyAnalysis]:
        return self.cache.get(guild_id)

    def clear_cache(self, guild_id: Optional[int] = None) -> None:
        if guild_id is None:
            self.cache.clear()
        else:
            self.cache.pop(guild_id, None)


__all__ = [
    "EconomyAnalyzer",
    "EconomyAnalysis",
    "BucketShare",
    "Recommendation",
    "HEALTH_EMOJIS",
    "bucket_for",
    "wealth_distribution",
    "gini_coefficient",
    "median",
    "health_score",
    "health_label",
    "build_recommendations",
]
