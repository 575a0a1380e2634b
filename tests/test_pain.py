"""Tests for pain point extraction and aggregation."""

import pytest

from threadpulse.models import PainCategory, PainEvent
from threadpulse.pain import (
    PAIN_PATTERNS,
    analyze_pain_points,
    calculate_severity,
    extract,
    extract_context,
    generate_pain_point_report,
    group_pain_points,
    identify_patterns,
    overall_sentiment,
    rank_pain_points,
)


def make_event(category="failure", pattern="broken", severity=5, **overrides) -> PainEvent:
    """Create a PainEvent with defaults."""
    return PainEvent(category=category, pattern=pattern, severity=severity, **overrides)


class TestExtractContext:
    """Test context snippets."""

    def test_short_text_has_no_ellipsis(self):
        assert extract_context("it is broken", "broken") == "it is broken"

    def test_long_text_is_windowed(self):
        text = "a" * 100 + "bug" + "b" * 100
        context = extract_context(text, "bug")
        assert context == "..." + "a" * 50 + "bug" + "b" * 50 + "..."

    def test_only_trailing_ellipsis(self):
        text = "bug" + " x" * 60
        context = extract_context(text, "bug", window=10)
        assert context.startswith("bug")
        assert context.endswith("...")

    def test_missing_pattern(self):
        assert extract_context("all good here", "broken") == ""


class TestCalculateSeverity:
    """Test severity scoring."""

    def test_plain_text_is_base(self):
        assert calculate_severity("it works fine", "works") == 5

    def test_emotional_word(self):
        assert calculate_severity("i never want to see it again", "never") == 6

    def test_exclamations_capped(self):
        assert calculate_severity("slow!!!!!!!!", "slow") == 8

    def test_caps_words_count(self):
        assert calculate_severity("it is SO SLOW", "slow") == 7

    def test_shouted_words_capped_at_two(self):
        assert calculate_severity("This is BROKEN SO BAD", "broken") == 7

    def test_clamped_to_ten(self):
        assert calculate_severity("URGENT: this is BROKEN, please help!!!!", "broken") == 10

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "fine",
            "HELP URGENT ASAP EMERGENCY!!!!!! I hate it, terrible, awful, worst, never again",
            "please help, need help, right now, critical",
        ],
    )
    def test_bounds(self, text):
        assert 0 <= calculate_severity(text, "x") <= 10


class TestExtract:
    """Test per-thread pain extraction."""

    def test_rant(self, rant_thread):
        events = extract(rant_thread)
        assert len(events) == 1
        event = events[0]
        assert event.category == PainCategory.FAILURE
        assert event.pattern == "broken"
        assert event.severity == 10
        assert event.context == "i hate this app, it's terrible and broken!!!"
        assert event.source_thread.title == rant_thread.title
        assert event.source_thread.permalink == rant_thread.permalink

    def test_no_pain(self, make_thread):
        assert extract(make_thread("Love the new release, great job")) == []

    def test_category_scan_and_phrase_rules_both_fire(self, make_thread):
        thread = make_thread("The sync is broken", "I can't export anything. Is there a way to fix this?")
        events = extract(thread)

        assert [(e.category, e.pattern) for e in events] == [
            (PainCategory.FAILURE, "broken"),
            (PainCategory.FAILURE, "can't"),
            (PainCategory.SPECIFIC_PROBLEM, "broken_feature"),
            (PainCategory.SPECIFIC_PROBLEM, "inability"),
            (PainCategory.UNMET_NEED, "solution_seeking"),
        ]
        table_categories = {e.category for e in events if e.pattern in PAIN_PATTERNS.get(e.category, ())}
        assert len(events) > len(table_categories)

    def test_phrase_rule_context_is_the_match(self, make_thread):
        events = extract(make_thread("The sync is broken", "I can't export anything. Is there a way to fix this?"))
        contexts = {e.pattern: e.context for e in events}
        assert contexts["broken_feature"] == "the sync is broken"
        assert contexts["inability"] == "can't export anything"
        assert contexts["solution_seeking"] == "is there a way to fix this"

    def test_phrase_rule_fires_per_match(self, make_thread):
        events = extract(make_thread("Problem with login. Problem with billing."))
        assert [e.context for e in events] == ["problem with login", "problem with billing"]
        assert all(e.severity == 6 for e in events)

    def test_stated_need(self, make_thread):
        events = extract(make_thread("I want a dark mode."))
        assert len(events) == 1
        assert events[0].category == PainCategory.UNMET_NEED
        assert events[0].context == "want a dark mode"
        assert events[0].severity == 5

    def test_urgent_stated_need(self, make_thread):
        events = extract(make_thread("Need a fix ASAP."))
        assert [(e.pattern, e.severity) for e in events] == [("stated_need", 9)]

    def test_knowledge_gap(self, make_thread):
        events = extract(make_thread("How do I export my notes?"))
        assert [(e.pattern, e.severity) for e in events] == [("knowledge_gap", 4)]

    def test_same_severity_for_every_table_match(self, make_thread):
        thread = make_thread("Sync is broken and slow, I hate it")
        severities = {e.severity for e in extract(thread) if e.pattern in ("broken", "slow")}
        assert severities == {6}

    def test_context_window_from_config(self, make_thread):
        from threadpulse.analysis_config import AnalysisConfig

        thread = make_thread("x" * 40 + " broken " + "y" * 40)
        events = extract(thread, AnalysisConfig(context_window=5))
        assert events[0].context.startswith("...")
        assert events[0].context.endswith("...")

    def test_severity_bounds(self, make_thread):
        thread = make_thread("URGENT HELP!!!!!!", "I HATE this terrible awful broken app, never again, please help ASAP")
        assert all(0 <= e.severity <= 10 for e in extract(thread))


class TestPainEvent:
    """Test the event record."""

    def test_unknown_category_is_general(self):
        event = make_event(category="weird")
        assert event.category == PainCategory.GENERAL

    def test_unknown_category_groups_under_general(self):
        groups = group_pain_points([make_event(category="weird"), make_event(category="other")])
        assert len(groups) == 1
        assert groups[0].category == PainCategory.GENERAL
        assert len(groups[0].events) == 2


class TestGrouping:
    """Test grouping and severity bands."""

    def test_groups_sorted_by_severity(self):
        events = [make_event(severity=5), make_event(severity=9), make_event(severity=7)]
        groups = group_pain_points(events)
        assert [e.severity for e in groups[0].events] == [9, 7, 5]

    def test_groups_keep_first_seen_order(self):
        events = [make_event(category="cost"), make_event(category="failure"), make_event(category="cost")]
        assert [g.category for g in group_pain_points(events)] == [PainCategory.COST, PainCategory.FAILURE]

    def test_severity_band_boundaries(self):
        analysis = analyze_pain_points([make_event(severity=s) for s in (8, 7, 5, 4)])
        assert [e.severity for e in analysis.by_severity.high] == [8]
        assert [e.severity for e in analysis.by_severity.medium] == [7, 5]
        assert [e.severity for e in analysis.by_severity.low] == [4]


class TestRanking:
    """Test top pain point ranking."""

    def test_ranked_by_total_severity(self):
        events = [
            make_event("failure", "broken", 8),
            make_event("cost", "price", 5),
            make_event("failure", "broken", 7),
            make_event("difficulty", "hard", 9),
        ]
        ranked = rank_pain_points(events)
        assert [(r.pattern, r.total_score, r.frequency) for r in ranked] == [
            ("broken", 15, 2),
            ("hard", 9, 1),
            ("price", 5, 1),
        ]

    def test_first_event_represents_pair(self):
        events = [
            make_event("failure", "broken", 8, context="first"),
            make_event("failure", "broken", 7, context="second"),
        ]
        ranked = rank_pain_points(events)
        assert ranked[0].context == "first"
        assert ranked[0].severity == 8

    def test_ties_keep_first_seen(self):
        events = [make_event("cost", "price", 5), make_event("failure", "broken", 5)]
        assert [r.pattern for r in rank_pain_points(events)] == ["price", "broken"]

    def test_limit(self):
        events = [make_event(pattern=f"p{i}", severity=i + 1) for i in range(7)]
        ranked = rank_pain_points(events)
        assert len(ranked) == 5
        assert ranked[0].pattern == "p6"

    def test_top_pain_points_from_config(self):
        from threadpulse.analysis_config import AnalysisConfig

        events = [make_event(pattern=f"p{i}") for i in range(7)]
        analysis = analyze_pain_points(events, AnalysisConfig(top_pain_points=2))
        assert len(analysis.top_pain_points) == 2


class TestPatterns:
    """Test cross-cutting pattern detection."""

    def test_systemic_from_threads(self, make_thread):
        events = []
        for _ in range(3):
            events.extend(extract(make_thread("I'm so frustrated with this")))

        patterns = identify_patterns(events)
        systemic = [p for p in patterns if p.type == "systemic"]
        assert len(systemic) == 1
        assert systemic[0].category == PainCategory.FRUSTRATION
        assert systemic[0].description == "Multiple frustration issues detected (3 instances)"
        assert systemic[0].severity == "high"

    def test_below_systemic_threshold(self):
        patterns = identify_patterns([make_event(), make_event()])
        assert not [p for p in patterns if p.type == "systemic"]

    def test_user_experience_friction(self):
        patterns = identify_patterns([make_event("difficulty", "hard"), make_event("frustration", "annoying")])
        assert [p.type for p in patterns] == ["user_experience"]

    def test_competitive(self):
        patterns = identify_patterns([make_event("comparison", "prefer")])
        assert [p.type for p in patterns] == ["competitive"]

    def test_empty(self):
        assert identify_patterns([]) == []


class TestRecommendations:
    """Test recommendation generation."""

    def test_fixed_priority_order(self):
        events = [
            make_event("cost", "price", 4),
            *[make_event("missing_features", "needs", 4) for _ in range(3)],
            *[make_event("failure", "broken", 5) for _ in range(3)],
            make_event("failure", "crash", 9),
        ]
        recommendations = analyze_pain_points(events).recommendations
        assert [(r.priority, r.action) for r in recommendations] == [
            ("critical", "Address high-severity issues immediately"),
            ("high", "Develop comprehensive solutions for systemic issues"),
            ("medium", "Consider feature development"),
            ("medium", "Review pricing strategy"),
        ]

    def test_feature_and_cost_events_keyed_separately(self):
        features = [make_event("missing_features", "needs", 4) for _ in range(3)]
        costs = [make_event("cost", "price", 4)]
        by_action = {r.action: r for r in analyze_pain_points(features + costs).recommendations}
        feature_rec = by_action["Consider feature development"]
        pricing_rec = by_action["Review pricing strategy"]
        assert feature_rec.features == features
        assert feature_rec.pain_points == []
        assert pricing_rec.concerns == costs
        assert pricing_rec.pain_points == []
        data = pricing_rec.model_dump(by_alias=True)
        assert len(data["concerns"]) == 1

    def test_critical_lists_at_most_three(self):
        events = [make_event(severity=9, pattern=f"p{i}") for i in range(5)]
        critical = analyze_pain_points(events).recommendations[0]
        assert critical.description == "5 critical pain points require urgent attention"
        assert len(critical.pain_points) == 3

    def test_two_feature_requests_not_enough(self):
        events = [make_event("missing_features", "needs", 4) for _ in range(2)]
        assert analyze_pain_points(events).recommendations == []

    def test_empty_corpus(self):
        analysis = analyze_pain_points([])
        assert analysis.total_pain_points == 0
        assert analysis.top_pain_points == []
        assert analysis.patterns == []
        assert analysis.recommendations == []


class TestPainPointReport:
    """Test the executive pain point report."""

    @pytest.mark.parametrize(
        "severities,expected",
        [
            ([], "neutral"),
            ([8, 8], "very negative"),
            ([5, 6], "negative"),
            ([3, 4], "mixed"),
            ([1, 2], "neutral"),
        ],
    )
    def test_overall_sentiment(self, severities, expected):
        assert overall_sentiment([make_event(severity=s) for s in severities]) == expected

    def test_report(self):
        events = [
            make_event("missing_features", "needs", 6, context="needs offline mode"),
            make_event("failure", "crash", 9, context="crashes on launch"),
            make_event("difficulty", "hard", 3),
        ]
        report = generate_pain_point_report(events)

        summary = report.executive_summary
        assert summary.total_issues == 3
        assert summary.critical_issues == 1
        assert summary.main_categories == [
            PainCategory.MISSING_FEATURES,
            PainCategory.FAILURE,
            PainCategory.DIFFICULTY,
        ]
        assert summary.user_sentiment == "negative"

        assert [(a.priority, a.description) for a in report.action_items] == [
            (1, "Fix: crashes on launch"),
            (2, "Add feature: needs offline mode"),
        ]
        assert [o.type for o in report.content_opportunities] == ["tutorial", "troubleshooting", "faq"]

    def test_strategic_action_for_systemic_category(self):
        events = [make_event("cost", "price", 3) for _ in range(3)]
        report = generate_pain_point_report(events)
        assert [(a.priority, a.description) for a in report.action_items] == [(3, "Overhaul cost experience")]
