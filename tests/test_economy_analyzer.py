"""
UAS Bot - Economy Analyzer Tests
================================
"""

import pytest

from src.services.economy_analyzer import (
    BucketShare,
    EconomyAnalyzer,
    bucket_for,
    build_recommendations,
    gini_coefficient,
    health_label,
    health_score,
    median,
    wealth_distribution,
)
from tests.conftest import DEVELOPER_ID, GUILD_ID


class TestCalculations:
    """Tests for distribution, Gini and median."""

    @pytest.mark.parametrize("balance,bucket", [
        (0, "poor"),
        (49_999, "poor"),
        (50_000, "middle"),
        (500_000, "rich"),
        (2_000_000, "wealthy"),
        (10_000_000, "elite"),
    ])
    def test_bucket_boundaries(self, balance, bucket):
        assert bucket_for(balance) == bucket

    def test_distribution_percentages(self):
        dist = wealth_distribution([100, 200, 60_000, 20_000_000])
        assert dist["poor"] == BucketShare(2, 50.0)
        assert dist["middle"].count == 1
        assert dist["elite"].percentage == 25.0

    def test_empty_distribution_is_all_poor(self):
        assert wealth_distribution([])["poor"].percentage == 100.0

    def test_gini(self):
        assert gini_coefficient([5, 5, 5, 5]) == 0.0
        assert gini_coefficient([0, 0, 0, 100]) == pytest.approx(0.75)
        assert gini_coefficient([]) == 0.0

    def test_median(self):
        assert median([3, 1, 2]) == 2.0
        assert median([4, 1, 3, 2]) == 2.5
        assert median([]) == 0.0


class TestHealth:
    """Tests for health scoring and recommendations."""

    def test_score_factors(self):
        dist = wealth_distribution([100_000] * 150)
        # poor 0% -> 30, no edge -> 5, 150 users -> 20, no inflation -> 10
        assert health_score(dist, 150) == 65
        assert health_score(dist, 150, avg_house_edge=12) == 95

    def test_labels(self):
        assert health_label(80) == "EXCELLENT"
        assert health_label(65) == "GOOD"
        assert health_label(50) == "FAIR"
        assert health_label(35) == "POOR"
        assert health_label(34) == "CRITICAL"

    def test_mostly_poor_is_critical(self):
        dist = wealth_distribution([1000] * 10)
        score = health_score(dist, 10)
        assert health_label(score) == "CRITICAL"

        recs = build_recommendations(dist, gini=0.1)
        assert [r.type for r in recs] == ["CRITICAL"]
        assert recs[0].action == "INCREASE_PAYOUTS"

    def test_inequality_and_elite_warnings(self):
        dist = wealth_distribution([0] * 5 + [50_000_000] * 2)
        recs = build_recommendations(dist, gini=0.8)
        assert {r.category for r in recs} == {"INEQUALITY", "WEALTH_DISTRIBUTION"}


class TestAnalyzer:
    """Tests for EconomyAnalyzer against the database."""

    def test_excludes_developers_and_off_economy(self, test_db):
        for user_id in range(1, 11):
            test_db.ensure_balance(user_id, GUILD_ID)
        test_db.adjust_balance(DEVELOPER_ID, GUILD_ID, 10**12, "bank")
        test_db.adjust_balance(11, GUILD_ID, 10**12, "bank")
        test_db.set_off_economy(11, GUILD_ID, True)

        analysis = EconomyAnalyzer().analyze(GUILD_ID)

        assert analysis.total_users == 10
        assert analysis.total_wealth == 10 * test_db.default_wallet
        assert analysis.gini == 0.0
        assert analysis.health == "CRITICAL"
        assert analysis.critical_count == 1

    def test_cache(self, test_db):
        test_db.ensure_balance(1, GUILD_ID)
        analyzer = EconomyAnalyzer()

        first = analyzer.analyze(GUILD_ID)
        test_db.ensure_balance(2, GUILD_ID)

        assert analyzer.analyze(GUILD_ID) is first
        assert analyzer.analyze(GUILD_ID, use_cache=False).total_users == 2
        assert analyzer.get_cached(GUILD_ID).total_users == 2

    def test_empty_guild(self, test_db):
        analysis = EconomyAnalyzer().analyze(GUILD_ID)
        assert analysis.total_users == 0
        assert analysis.health == "UNKNOWN"
