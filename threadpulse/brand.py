"""Brand and keyword reports: who talks about it, how, and how it grades.

Works on threads that were already analyzed one by one (see corpus.py);
nothing here rescans sentiment or pain except through those results.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType

from .analysis_config import AnalysisConfig
from .grading import build_report_card
from .models import (
    RankedPainPoint,
    Record,
    ReportCard,
    SentimentBreakdown,
    SentimentCategory,
    SentimentResult,
    Thread,
)

logger = logging.getLogger(__name__)

CONTRIBUTOR_ENGAGEMENT = 100  # total engagement that makes a one-post author a contributor
ADVOCATE_SENTIMENT = 0.3
CRITIC_SENTIMENT = -0.3
INFLUENTIAL_CRITIC_ENGAGEMENT = 50
LOW_ENGAGEMENT = 10

FEATURE_KEYWORDS = MappingProxyType({
    "user interface": ("ui", "interface", "design", "layout", "theme"),
    "performance": ("speed", "fast", "slow", "performance", "lag"),
    "pricing": ("price", "cost", "expensive", "cheap", "free", "subscription"),
    "support": ("support", "help", "customer service", "response"),
    "features": ("feature", "function", "capability", "tool"),
    "integration": ("integrate", "integration", "connect", "api", "plugin"),
    "mobile": ("mobile", "app", "ios", "android", "phone"),
    "security": ("security", "privacy", "secure", "safe", "data"),
})

THEME_KEYWORDS = MappingProxyType({
    "product_quality": ("quality", "reliable", "stable", "buggy", "broken"),
    "user_experience": ("easy", "difficult", "intuitive", "confusing", "simple"),
    "value": ("worth", "value", "roi", "investment", "waste"),
    "innovation": ("innovative", "new", "cutting edge", "outdated", "modern"),
    "comparison": ("better than", "worse than", "alternative", "competitor", "vs"),
})


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# ---------------------------------------------------------------------------
# Report records
# ---------------------------------------------------------------------------


class TimeRange(Record):
    start: str
    end: str
    days: int


class Overview(Record):
    total_mentions: int = 0
    unique_authors: int = 0
    total_engagement: int = 0
    avg_engagement: int = 0
    time_range: TimeRange | None = None


class PostRef(Record):
    title: str
    url: str = ""
    engagement: int = 0
    score: float = 0.0  # sentiment score where relevant
    subreddit: str = ""


class BrandSentiment(Record):
    overall: float = 0.0
    breakdown: SentimentBreakdown = SentimentBreakdown()
    top_positive: list[PostRef] = []
    top_negative: list[PostRef] = []


class SubredditStats(Record):
    count: int
    total_engagement: int
    sentiment: SentimentBreakdown


class BrandEngagement(Record):
    top_subreddits: dict[str, SubredditStats] = {}
    viral_posts: list[PostRef] = []


class BrandTopics(Record):
    main_themes: dict[str, int] = {}
    features: dict[str, int] = {}
    pain_points: list[RankedPainPoint] = []


class CompetitorMentions(Record):
    mentioned: dict[str, int] = {}
    sentiment: dict[str, SentimentBreakdown] = {}


class Influencer(Record):
    author: str
    posts: int
    total_engagement: int
    avg_engagement: int
    sentiment: float


class Influencers(Record):
    top_contributors: list[Influencer] = []
    brand_advocates: list[Influencer] = []
    critics: list[Influencer] = []


class Opportunity(Record):
    type: str
    priority: str
    description: str
    action: str


class Risk(Record):
    type: str
    severity: str
    description: str
    mitigation: str


class BrandRecommendation(Record):
    category: str
    action: str
    description: str
    steps: list[str] = []


class BrandReport(Record):
    brand: str
    domain: str | None = None
    status: str = "ok"  # ok | no_data
    message: str = ""
    overview: Overview = Overview()
    sentiment: BrandSentiment = BrandSentiment()
    engagement: BrandEngagement = BrandEngagement()
    topics: BrandTopics = BrandTopics()
    competitors: CompetitorMentions = CompetitorMentions()
    influencers: Influencers = Influencers()
    opportunities: list[Opportunity] = []
    risks: list[Risk] = []
    recommendations: list[BrandRecommendation] = []
    report_card: ReportCard | None = None  # graded last, from the other sections


# ---------------------------------------------------------------------------
# Section builders
# ---------------------------------------------------------------------------


def _breakdown(counts: Counter) -> SentimentBreakdown:
    return SentimentBreakdown(
        positive=counts[SentimentCategory.POSITIVE],
        negative=counts[SentimentCategory.NEGATIVE],
        neutral=counts[SentimentCategory.NEUTRAL],
    )


def get_time_range(threads: list[Thread]) -> TimeRange | None:
    dates = [t.created_at for t in threads if t.created_at is not None]
    if not dates:
        return None

    oldest, newest = min(dates), max(dates)
    return TimeRange(
        start=oldest.date().isoformat(),
        end=newest.date().isoformat(),
        days=math.ceil((newest - oldest).total_seconds() / 86400),
    )


def count_keywords(text: str, table: MappingProxyType, counts: Counter) -> None:
    """Add one to a topic for every one of its keywords present in `text`."""
    for topic, keywords in table.items():
        for keyword in keywords:
            if keyword in text:
                counts[topic] += 1


@dataclass
class _AuthorStats:
    posts: int = 0
    total_engagement: int = 0
    sentiments: list[float] = field(default_factory=list)


def identify_influencers(threads: list[Thread], sentiments: list[SentimentResult]) -> Influencers:
    """Frequent or high-engagement authors, split by how they feel."""
    stats: dict[str, _AuthorStats] = {}
    for thread, sentiment in zip(threads, sentiments):
        author = stats.setdefault(thread.author, _AuthorStats())
        author.posts += 1
        author.total_engagement += thread.engagement
        author.sentiments.append(sentiment.score)

    contributors, advocates, critics = [], [], []
    for name, author in stats.items():
        if author.posts < 2 and author.total_engagement <= CONTRIBUTOR_ENGAGEMENT:
            continue

        average = sum(author.sentiments) / len(author.sentiments)
        influencer = Influencer(
            author=name,
            posts=author.posts,
            total_engagement=author.total_engagement,
            avg_engagement=round_half_up(author.total_engagement / author.posts),
            sentiment=average,
        )
        contributors.append(influencer)
        if average > ADVOCATE_SENTIMENT:
            advocates.append(influencer)
        elif average < CRITIC_SENTIMENT:
            critics.append(influencer)

    def by_engagement(items: list[Influencer]) -> list[Influencer]:
        return sorted(items, key=lambda i: i.total_engagement, reverse=True)

    return Influencers(
        top_contributors=by_engagement(contributors)[:10],
        brand_advocates=by_engagement(advocates)[:5],
        critics=by_engagement(critics)[:5],
    )


def identify_opportunities(report: BrandReport) -> list[Opportunity]:
    opportunities = []

    if report.sentiment.overall > 0.3:
        opportunities.append(Opportunity(
            type="amplification", priority="high",
            description="Strong positive sentiment - amplify success stories",
            action="Collect testimonials and case studies from positive mentions",
        ))

    if report.influencers.brand_advocates:
        opportunities.append(Opportunity(
            type="advocacy", priority="medium",
            description=f"{len(report.influencers.brand_advocates)} brand advocates identified",
            action="Engage with advocates for testimonials or partnerships",
        ))

    if report.engagement.viral_posts:
        opportunities.append(Opportunity(
            type="content", priority="high",
            description="Viral discussions provide content inspiration",
            action="Create content addressing viral topics",
        ))

    if report.competitors.mentioned:
        opportunities.append(Opportunity(
            type="positioning", priority="medium",
            description="Users comparing to competitors",
            action="Create comparison content highlighting advantages",
        ))

    return opportunities


def negative_ratio(report: BrandReport) -> float:
    mentions = report.overview.total_mentions
    return report.sentiment.breakdown.negative / mentions if mentions else 0.0


def identify_risks(report: BrandReport) -> list[Risk]:
    risks = []

    ratio = negative_ratio(report)
    if ratio > 0.3:
        risks.append(Risk(
            type="reputation",
            severity="high" if ratio > 0.5 else "medium",
            description=f"{ratio * 100:.1f}% negative sentiment",
            mitigation="Address negative feedback publicly and implement fixes",
        ))

    critics = report.influencers.critics
    if critics and critics[0].total_engagement > INFLUENTIAL_CRITIC_ENGAGEMENT:
        risks.append(Risk(
            type="influencer", severity="medium",
            description="Influential critics spreading negative sentiment",
            mitigation="Engage directly with critics to address concerns",
        ))

    if len(report.topics.pain_points) > 5:
        risks.append(Risk(
            type="product", severity="high",
            description=f"{len(report.topics.pain_points)} significant pain points identified",
            mitigation="Prioritize fixing top pain points",
        ))

    if report.overview.avg_engagement < LOW_ENGAGEMENT:
        risks.append(Risk(
            type="awareness", severity="low",
            description="Low engagement suggests limited brand awareness",
            mitigation="Increase marketing and community engagement",
        ))

    return risks


def generate_recommendations(report: BrandReport) -> list[BrandRecommendation]:
    recommendations = []

    if report.sentiment.overall < 0:
        recommendations.append(BrandRecommendation(
            category="urgent",
            action="Crisis Management",
            description="Address negative sentiment immediately",
            steps=[
                "Respond to top negative threads",
                "Create FAQ addressing common complaints",
                "Implement quick fixes for top pain points",
            ],
        ))

    if report.topics.pain_points:
        recommendations.append(BrandRecommendation(
            category="product",
            action="Product Improvement",
            description="Fix identified pain points",
            steps=[f"Fix: {p.context}" for p in report.topics.pain_points[:3]],
        ))

    subreddits = report.engagement.top_subreddits
    if subreddits:
        # max() keeps the first-seen subreddit on ties
        top = max(subreddits, key=lambda name: subreddits[name].count)
        recommendations.append(BrandRecommendation(
            category="marketing",
            action="Community Engagement",
            description=f"Focus on r/{top} for maximum impact",
            steps=[
                "Create subreddit-specific content",
                "Engage with community members",
                "Host AMA or community event",
            ],
        ))

    if len(report.competitors.mentioned) > 2:
        recommendations.append(BrandRecommendation(
            category="positioning",
            action="Competitive Differentiation",
            description="Clarify unique value proposition",
            steps=[
                "Create comparison content",
                "Highlight unique features",
                "Address switching concerns",
            ],
        ))

    return recommendations


def summarize(report: BrandReport) -> str:
    overall = report.sentiment.overall
    if overall > 0.1:
        tone = "positive"
    elif overall < -0.1:
        tone = "negative"
    else:
        tone = "neutral"

    top_issues = " and ".join(p.pattern for p in report.topics.pain_points[:2])
    advocates = len(report.influencers.brand_advocates)
    critics = len(report.influencers.critics)

    return (
        f"{report.brand} has {tone} sentiment with {report.overview.total_mentions} mentions. "
        f"Average engagement is {report.overview.avg_engagement}. "
        + (f"Main concerns: {top_issues}. " if top_issues else "")
        + f"{advocates} advocates and {critics} critics identified."
    )


def generate_report_card(report: BrandReport, config: AnalysisConfig) -> ReportCard:
    """Grade sentiment, engagement, reputation and advocacy, then combine."""
    overall = report.sentiment.overall
    return build_report_card(
        metrics={
            "sentiment": overall,
            "engagement": report.overview.avg_engagement,
            "reputation": 1 - negative_ratio(report),
            "advocacy": len(report.influencers.brand_advocates),
        },
        thresholds=config.thresholds,
        summary=summarize(report),
        display={
            "mentions": report.overview.total_mentions,
            "sentiment": f"{overall * 100:.1f}%",
            "engagement": report.overview.avg_engagement,
            "advocates": len(report.influencers.brand_advocates),
            "critics": len(report.influencers.critics),
        },
    )


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def compile_brand_report(
    brand: str,
    threads: list[Thread],
    sentiments: list[SentimentResult],
    pain_points: list[RankedPainPoint],
    config: AnalysisConfig,
    domain: str | None = None,
) -> BrandReport:
    """Build the full brand report from per-thread results.

    Args:
        brand: Brand or keyword the corpus was collected for.
        threads: The corpus, in collection order.
        sentiments: Sentiment of each thread, aligned with `threads`.
        pain_points: Top ranked pain points across the corpus.
        config: Grading thresholds and competitor watch list.
        domain: Optional brand domain, echoed into the report.
    """
    authors = set()
    total_engagement = 0
    categories: Counter = Counter()
    positive_posts, negative_posts, viral_posts = [], [], []
    subreddit_counts: dict[str, list] = {}  # name -> [count, engagement, Counter]
    features: Counter = Counter()
    themes: Counter = Counter()
    mentioned: Counter = Counter()
    competitor_sentiment: dict[str, Counter] = {}

    for thread, sentiment in zip(threads, sentiments):
        authors.add(thread.author)
        engagement = thread.engagement
        total_engagement += engagement
        categories[sentiment.category] += 1

        ref = PostRef(
            title=thread.title, url=thread.permalink, engagement=engagement,
            score=sentiment.score, subreddit=thread.subreddit,
        )
        if sentiment.category == SentimentCategory.POSITIVE:
            positive_posts.append(ref)
        elif sentiment.category == SentimentCategory.NEGATIVE:
            negative_posts.append(ref)
        if engagement > config.viral_engagement:
            viral_posts.append(ref)

        sub = subreddit_counts.setdefault(thread.subreddit, [0, 0, Counter()])
        sub[0] += 1
        sub[1] += engagement
        sub[2][sentiment.category] += 1

        text = thread.full_text.lower()
        count_keywords(text, FEATURE_KEYWORDS, features)
        count_keywords(text, THEME_KEYWORDS, themes)

        for competitor in config.competitors:
            if competitor in text:
                mentioned[competitor] += 1
                competitor_sentiment.setdefault(competitor, Counter())[sentiment.category] += 1

    def by_engagement(posts: list[PostRef], limit: int) -> list[PostRef]:
        return sorted(posts, key=lambda p: p.engagement, reverse=True)[:limit]

    mentions = len(threads)
    overall = sum(s.score for s in sentiments) / len(sentiments) if sentiments else 0.0

    report = BrandReport(
        brand=brand,
        domain=domain,
        status="ok" if mentions else "no_data",
        message="" if mentions else "No mentions found for this brand",
        overview=Overview(
            total_mentions=mentions,
            unique_authors=len(authors),
            total_engagement=total_engagement,
            avg_engagement=round_half_up(total_engagement / mentions) if mentions else 0,
            time_range=get_time_range(threads),
        ),
        sentiment=BrandSentiment(
            overall=overall,
            breakdown=_breakdown(categories),
            top_positive=by_engagement(positive_posts, 5),
            top_negative=by_engagement(negative_posts, 5),
        ),
        engagement=BrandEngagement(
            top_subreddits={
                name: SubredditStats(count=count, total_engagement=eng, sentiment=_breakdown(counts))
                for name, (count, eng, counts) in subreddit_counts.items()
            },
            viral_posts=by_engagement(viral_posts, 10),
        ),
        topics=BrandTopics(main_themes=dict(themes), features=dict(features), pain_points=pain_points),
        competitors=CompetitorMentions(
            mentioned=dict(mentioned),
            sentiment={name: _breakdown(counts) for name, counts in competitor_sentiment.items()},
        ),
        influencers=identify_influencers(threads, sentiments),
    )

    report = report.model_copy(update={
        "opportunities": identify_opportunities(report),
        "risks": identify_risks(report),
        "recommendations": generate_recommendations(report),
    })
    report = report.model_copy(update={"report_card": generate_report_card(report, config)})

    logger.info(
        f"Brand report for {brand!r}: {mentions} mentions, grade {report.report_card.overall.value}"
    )
    return report
