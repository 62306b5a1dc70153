import pytest

from esg_scoring.scoring.benchmark_scorer import (
    BenchmarkScorer,
    category_performance,
    esg_rating,
    normalize_metric_score,
)

MINING_GHG = {"median": 2.5, "top25": 1.8}
MINING_BOARD = {"median": 25, "top25": 40}


class TestNormalizeMetricScore:
    @pytest.mark.parametrize("value,expected", [(1.0, 90), (1.8, 90), (2.5, 70), (3.75, 50), (4.0, 30)])
    def test_lower_better(self, value, expected):
        assert normalize_metric_score(value, MINING_GHG, "lower_better") == expected

    @pytest.mark.parametrize("value,expected", [(45, 90), (40, 90), (30, 70), (17.5, 50), (10, 30)])
    def test_higher_better(self, value, expected):
        assert normalize_metric_score(value, MINING_BOARD, "higher_better") == expected

    @pytest.mark.parametrize("value,expected", [(100, 90), (115, 70), (125, 50), (150, 30), (60, 30)])
    def test_balanced(self, value, expected):
        assert normalize_metric_score(value, {"median": 100, "top25": 80}, "balanced") == expected

    def test_balanced_zero_median_is_neutral(self):
        assert normalize_metric_score(5, {"median": 0, "top25": 0}, "balanced") == 50

    def test_unknown_direction(self):
        with pytest.raises(ValueError):
            normalize_metric_score(1, MINING_GHG, "sideways")


class TestBenchmarkScorer:
    @pytest.fixture
    def scorer(self, config):
        return BenchmarkScorer(config)

    def test_category_and_overall_scores(self, scorer):
        result = scorer.score(
            {"ghgEmissions": 2.0, "workplaceSafety": 1.0, "boardDiversity": 45},
            company_id="acme",
        )

        assert result.categories["environmental"].score == 55
        assert result.categories["social"].score == 60
        assert result.categories["governance"].score == 60
        assert result.overall_score == 58
        assert result.rating == "BBB"
        assert result.industry == "mining"

    def test_recommendation_names_weakest_metric(self, scorer):
        result = scorer.score({"ghgEmissions": 2.0, "workplaceSafety": 1.0, "boardDiversity": 45})
        assert len(result.recommendations) == 1
        assert result.recommendations[0]["category"] == "Environmental"
        assert "energyIntensity" in result.recommendations[0]["action"]
        assert result.risks == []

    def test_unknown_industry_uses_default_benchmarks(self, scorer):
        metrics = {"ghgEmissions": 2.0}
        unknown = scorer.score(metrics, industry="aerospace")
        mining = scorer.score(metrics, industry="mining")
        assert unknown.categories["environmental"].score == mining.categories["environmental"].score

    def test_industry_changes_bands(self, scorer):
        result = scorer.score({"ghgEmissions": 2.0}, industry="manufacturing")
        assert result.categories["environmental"].metrics["ghgEmissions"].normalized_score == 50

    def test_low_scores_raise_risk_flags(self):
        scorer = BenchmarkScorer({
            "benchmark_scoring": {
                "metric_models": {"governance": {"boardDiversity": {"weight": 1.0, "direction": "higher_better"}}},
            }
        })
        result = scorer.score({"boardDiversity": 5})
        assert result.categories["governance"].score == 30
        assert [f["type"] for f in result.risks] == ["Governance"]

    def test_non_numeric_metric_warns(self, scorer):
        with pytest.warns(UserWarning, match="boardDiversity"):
            result = scorer.score({"boardDiversity": "unknown"})
        assert result.categories["governance"].metrics["boardDiversity"].value == 0.0

    def test_json_shape(self, scorer):
        data = scorer.score({"ghgEmissions": 2.0}, company_id="acme").to_dict()
        assert set(data) == {
            "companyId",
            "industry",
            "overallScore",
            "rating",
            "categoryScores",
            "recommendations",
            "riskAssessment",
        }
        ghg = data["categoryScores"]["environmental"]["metrics"]["ghgEmissions"]
        assert ghg["normalizedScore"] == 70
        assert ghg["contribution"] == pytest.approx(17.5)


@pytest.mark.parametrize(
    "score,rating",
    [(85, "AAA"), (80, "AAA"), (75, "AA"), (65, "A"), (55, "BBB"), (45, "BB"), (35, "B"), (29.9, "CCC")],
)
def test_esg_rating(score, rating):
    assert esg_rating(score) == rating


def test_category_performance():
    assert category_performance(80) == "Leading"
    assert category_performance(60) == "Above Average"
    assert category_performance(40) == "Average"
    assert category_performance(10) == "Below Average"
