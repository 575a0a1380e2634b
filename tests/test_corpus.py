"""Tests for corpus analysis and brand reports."""

import pytest

from threadpulse.corpus import (
    analyze_corpus,
    analyze_corpus_concurrently,
    analyze_thread,
    generate_brand_report,
)
from threadpulse.models import Grade, PainCategory, SentimentCategory


@pytest.fixture
def brand_threads(make_thread):
    """Two happy posts from one author, one angry post from another."""
    return [
        make_thread(
            "Love this app, works great", author="alice", subreddit="apps",
            score=150, comments=30, created_at="2025-01-01T00:00:00Z",
        ),
        make_thread(
            "Really good support team", author="alice", subreddit="apps",
            score=20, comments=5, created_at="2025-01-04T12:00:00Z",
        ),
        make_thread(
            "Sync is broken and slow, I hate it", author="bob", subreddit="productivity",
            score=10, comments=2,
        ),
    ]


class TestAnalyzeThread:
    """Test single-thread analysis."""

    def test_rant(self, rant_thread):
        analysis = analyze_thread(rant_thread)
        assert analysis.sentiment.category == SentimentCategory.NEGATIVE
        assert [e.pattern for e in analysis.pain_events] == ["broken"]

    def test_accepts_dict(self):
        analysis = analyze_thread({"title": "Great tool", "text": None, "score": "n/a"})
        assert analysis.sentiment.category == SentimentCategory.POSITIVE
        assert analysis.pain_events == []


class TestAnalyzeCorpus:
    """Test corpus-level analysis."""

    def test_breakdown(self, brand_threads):
        corpus = analyze_corpus(brand_threads)
        assert corpus.sentiment_breakdown.positive == 2
        assert corpus.sentiment_breakdown.negative == 1
        assert corpus.sentiment_breakdown.neutral == 0

    def test_top_pain_points(self, brand_threads):
        corpus = analyze_corpus(brand_threads)
        assert [(p.pattern, p.total_score) for p in corpus.top_pain_points] == [
            ("broken_feature", 8),
            ("broken", 6),
            ("slow", 6),
        ]
        assert [g.category for g in corpus.pain_groups] == [
            PainCategory.FAILURE,
            PainCategory.INEFFICIENCY,
            PainCategory.SPECIFIC_PROBLEM,
        ]

    def test_no_report_card_without_brand(self, brand_threads):
        assert analyze_corpus(brand_threads).report_card is None

    def test_report_card_with_brand(self, brand_threads):
        corpus = analyze_corpus(brand_threads, brand="Acme")
        assert corpus.report_card is not None
        assert corpus.report_card.overall == Grade.C

    def test_deterministic(self, brand_threads):
        first = analyze_corpus(brand_threads, brand="Acme")
        second = analyze_corpus(brand_threads, brand="Acme")
        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)

    def test_systemic_pattern(self, make_thread):
        threads = [make_thread("I'm so frustrated with this") for _ in range(3)]
        corpus = analyze_corpus(threads)
        descriptions = [p.description for p in corpus.patterns]
        assert "Multiple frustration issues detected (3 instances)" in descriptions
        assert corpus.recommendations[0].priority == "high"

    def test_empty(self):
        corpus = analyze_corpus([])
        assert corpus.sentiment_breakdown.total == 0
        assert corpus.top_pain_points == []
        assert corpus.report_card is None

    def test_malformed_records(self):
        corpus = analyze_corpus([
            {"title": "bad", "text": None, "score": "abc", "comments": None},
            None,
            42,
        ])
        assert corpus.sentiment_breakdown.total == 1
        assert corpus.sentiment_breakdown.negative == 1

    @pytest.mark.parametrize(
        "fields",
        [
            {"score": "inf"},
            {"score": "1e999", "comments": float("inf")},
            {"comments": float("nan")},
            {"created_at": float("nan")},
            {"created_at": 10**20},
            {"created": "not a date"},
        ],
    )
    def test_malformed_fields_never_raise(self, fields):
        corpus = analyze_corpus([{"title": "broken app", **fields}], brand="Acme")
        assert corpus.sentiment_breakdown.negative == 1
        assert corpus.top_pain_points[0].pattern == "broken"
        assert corpus.report_card is not None

    def test_camel_case_json(self, brand_threads):
        data = analyze_corpus(brand_threads, brand="Acme").model_dump(by_alias=True)
        assert set(data) == {
            "sentimentBreakdown", "painGroups", "topPainPoints",
            "patterns", "recommendations", "reportCard",
        }
        assert "totalScore" in data["topPainPoints"][0]


class TestConcurrentAnalysis:
    """Test the trio variant."""

    @pytest.mark.trio
    async def test_matches_sequential(self, brand_threads):
        concurrent = await analyze_corpus_concurrently(brand_threads, brand="Acme", workers=3)
        assert concurrent == analyze_corpus(brand_threads, brand="Acme")

    @pytest.mark.trio
    async def test_single_worker(self, make_thread):
        threads = [make_thread(f"post {i} is broken") for i in range(10)]
        concurrent = await analyze_corpus_concurrently(threads, workers=1)
        assert concurrent == analyze_corpus(threads)

    @pytest.mark.trio
    async def test_empty(self):
        corpus = await analyze_corpus_concurrently([])
        assert corpus.sentiment_breakdown.total == 0


class TestBrandReport:
    """Test the full brand report."""

    def test_overview(self, brand_threads):
        report = generate_brand_report("Acme", brand_threads, domain="acme.io")
        assert report.status == "ok"
        assert report.domain == "acme.io"
        assert report.overview.total_mentions == 3
        assert report.overview.unique_authors == 2
        assert report.overview.total_engagement == 217
        assert report.overview.avg_engagement == 72

    def test_time_range(self, brand_threads):
        time_range = generate_brand_report("Acme", brand_threads).overview.time_range
        assert time_range.start == "2025-01-01"
        assert time_range.end == "2025-01-04"
        assert time_range.days == 4

    def test_mixed_naive_and_epoch_timestamps(self, make_thread):
        threads = [
            make_thread("Sync is broken", created_at="2025-01-01T00:00:00"),
            make_thread("Still broken", created_at=1735689600 + 2 * 86400),
        ]
        time_range = generate_brand_report("Acme", threads).overview.time_range
        assert (time_range.start, time_range.end, time_range.days) == ("2025-01-01", "2025-01-03", 2)
        assert analyze_corpus(threads, brand="Acme").report_card is not None

    def test_sentiment(self, brand_threads):
        sentiment = generate_brand_report("Acme", brand_threads).sentiment
        assert sentiment.overall == pytest.approx(1 / 3)
        assert [p.title for p in sentiment.top_positive] == ["Love this app, works great", "Really good support team"]
        assert [p.title for p in sentiment.top_negative] == ["Sync is broken and slow, I hate it"]

    def test_engagement(self, brand_threads):
        engagement = generate_brand_report("Acme", brand_threads).engagement
        assert engagement.top_subreddits["apps"].count == 2
        assert engagement.top_subreddits["apps"].total_engagement == 205
        assert engagement.top_subreddits["productivity"].sentiment.negative == 1
        assert [p.engagement for p in engagement.viral_posts] == [180]

    def test_topics(self, brand_threads):
        topics = generate_brand_report("Acme", brand_threads).topics
        assert topics.features == {"mobile": 1, "support": 1, "performance": 1}
        assert topics.main_themes == {"product_quality": 1}
        assert topics.pain_points[0].pattern == "broken_feature"

    def test_influencers(self, brand_threads):
        influencers = generate_brand_report("Acme", brand_threads).influencers
        assert [i.author for i in influencers.top_contributors] == ["alice"]
        assert [i.author for i in influencers.brand_advocates] == ["alice"]
        assert influencers.critics == []
        assert influencers.top_contributors[0].avg_engagement == 103

    def test_insights(self, brand_threads):
        report = generate_brand_report("Acme", brand_threads)
        assert [o.type for o in report.opportunities] == ["amplification", "advocacy", "content"]
        assert [(r.type, r.severity, r.description) for r in report.risks] == [
            ("reputation", "medium", "33.3% negative sentiment"),
        ]
        assert [r.category for r in report.recommendations] == ["product", "marketing"]
        assert report.recommendations[0].steps[0] == "Fix: sync is broken"
        assert report.recommendations[1].description == "Focus on r/apps for maximum impact"

    def test_report_card(self, brand_threads):
        card = generate_brand_report("Acme", brand_threads).report_card
        assert card.breakdown == {
            "sentiment": Grade.B,
            "engagement": Grade.B,
            "reputation": Grade.C,
            "advocacy": Grade.D,
        }
        assert card.overall == Grade.C
        assert card.summary == (
            "Acme has positive sentiment with 3 mentions. Average engagement is 72. "
            "Main concerns: broken_feature and broken. 1 advocates and 0 critics identified."
        )
        assert card.metrics["sentiment"] == "33.3%"

    def test_competitors(self, make_thread):
        threads = [make_thread("Switched from Notion, better than notion")]
        report = generate_brand_report("Acme", threads)
        assert report.competitors.mentioned == {"notion": 1, "switched from": 1, "better than": 1}
        assert report.competitors.sentiment["notion"].neutral == 1
        assert "positioning" in [r.category for r in report.recommendations]

    def test_no_data(self):
        report = generate_brand_report("Nobody", [])
        assert report.status == "no_data"
        assert report.overview.total_mentions == 0
        assert report.overview.time_range is None
        assert report.sentiment.overall == 0.0
        assert report.report_card.breakdown["reputation"] == Grade.A
        assert report.report_card.overall == Grade.D
