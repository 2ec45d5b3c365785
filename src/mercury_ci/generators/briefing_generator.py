"""Daily intelligence briefing generation."""

import logging
import uuid
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

from ..interfaces.generator import IContentSource
from ..models.records import Kpi, StoredBriefing
from .content_source import RandomContentSource
from .templating import create_environment


logger = logging.getLogger(__name__)

DEFAULT_SOURCES = ["news", "market", "social", "economic"]
DEFAULT_COMPANY = "your organisation"
BRIEFING_TEMPLATE = "briefing.md.j2"
DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")
MAX_INSIGHTS = 4

MARKET_CONDITIONS = [
    "mixed signals with technology stocks leading gains",
    "positive momentum across most sectors",
    "volatility in traditional sectors with growth in emerging markets",
    "stabilising trends following recent market adjustments",
]

ECONOMIC_OUTLOOKS = [
    "continued growth momentum with inflation remaining within target ranges",
    "cautious optimism with some sector-specific challenges",
    "strong fundamentals supporting sustained growth",
    "mixed signals requiring careful monitoring of key indicators",
]

FOCUS_AREAS = {
    "news": "regulatory updates",
    "market": "market performance",
    "social": "sentiment analysis",
    "economic": "economic indicators",
}
DEFAULT_FOCUS_AREAS = ["market performance", "economic indicators"]

SOURCE_DEVELOPMENTS = {
    "news": ("Regulatory Updates", "New compliance requirements affecting digital businesses"),
    "market": ("Market Performance", "Technology sector showing strong momentum with AI investments"),
    "social": ("Social Sentiment", "Positive sentiment trends in key customer segments"),
    "economic": ("Economic Indicators", "Employment figures stable with inflation within target ranges"),
}
GENERAL_DEVELOPMENTS = [
    ("Technology Sector", "AI and cloud computing stocks showing significant gains"),
    ("Energy Markets", "Renewable energy investments continuing to grow"),
    ("Global Trade", "Supply chain improvements across major manufacturing sectors"),
]

RISKS = [
    ("Medium", "Potential interest rate adjustments in the coming quarter"),
    ("Low", "Stable employment figures across key markets"),
    ("High", "Geopolitical tensions affecting certain trade routes"),
]

STRATEGIC_RECOMMENDATIONS = [
    "Consider increasing exposure to technology and renewable energy sectors",
    "Review data compliance procedures in light of new regulations",
    "Monitor supply chain resilience for critical business operations",
    "Evaluate hedging strategies for currency fluctuations",
    "Assess opportunities in emerging market segments",
]

UP, FLAT, DOWN = "↗️", "→", "↘️"

# (metric, values, changes, trends); one shared index picks a column
KPI_TEMPLATES = [
    ("Market Sentiment", ["Positive", "Neutral", "Cautious"], ["+3%", "+5%", "+2%"], [UP, FLAT, UP]),
    ("Volatility Index", ["18.2", "15.8", "22.1"], ["-2.1", "-1.5", "+0.8"], [DOWN, DOWN, UP]),
    ("Sector Performance", ["Tech +3.2%", "Energy +1.8%", "Finance +2.1%"], ["+1.8%", "+0.9%", "+1.2%"], [UP, UP, UP]),
    ("Economic Confidence", ["78%", "82%", "75%"], ["+4%", "+2%", "+6%"], [UP, UP, UP]),
]

BASE_INSIGHTS = [
    "Technology sector showing strong momentum with AI investments driving growth",
    "Renewable energy sector continues to attract significant capital inflows",
    "Supply chain resilience improving across major manufacturing sectors",
    "Data protection regulations creating new compliance requirements for digital businesses",
]
SOURCE_INSIGHTS = {
    "news": "News sentiment analysis indicates positive market outlook",
    "social": "Social media sentiment trending positive for key industry sectors",
    "economic": "Economic indicators suggest continued growth momentum",
}


def parse_briefing_date(value) -> date:
    """
    Parse a briefing date.

    Accepts ``date``/``datetime`` objects or strings in ``YYYY-MM-DD`` or
    ``DD/MM/YYYY`` form.

    Raises:
        ValueError: If the string matches neither format.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised briefing date '{value}'. Use YYYY-MM-DD or DD/MM/YYYY.")


def format_long_date(value: date) -> str:
    """Format as ``D Month YYYY``, e.g. ``5 March 2025``."""
    return f"{value.day} {value.strftime('%B %Y')}"


class BriefingGenerator:
    """
    Generates daily intelligence briefings.

    Template choices go through an IContentSource so tests can fix them
    with a seed.
    """

    def __init__(
        self,
        content_source: Optional[IContentSource] = None,
        template_dir: Optional[str] = None,
        default_sources: Optional[Sequence[str]] = None,
    ):
        self._source = content_source or RandomContentSource()
        self._env = create_environment(template_dir)
        self._default_sources = list(default_sources or DEFAULT_SOURCES)

    def generate(
        self,
        briefing_date,
        company: Optional[str] = None,
        sources: Optional[Sequence[str]] = None,
    ) -> StoredBriefing:
        """
        Generate a briefing for a date.

        Args:
            briefing_date: Date of the briefing (``YYYY-MM-DD``,
                ``DD/MM/YYYY`` or a ``date``).
            company: Company the briefing is written for.
            sources: Intelligence sources to draw on. Defaults to news,
                market, social and economic.

        Returns:
            A new StoredBriefing (not yet persisted).
        """
        day = parse_briefing_date(briefing_date)
        active_sources = [s.lower() for s in (sources or self._default_sources)]
        company_name = company or DEFAULT_COMPANY
        formatted_date = format_long_date(day)
        title = f"Daily Intelligence Briefing - {formatted_date}"

        kpis = self.generate_kpis()
        body = self._env.get_template(BRIEFING_TEMPLATE).render(
            title=title,
            weekday=day.strftime("%A"),
            company=company_name,
            formatted_date=formatted_date,
            market_condition=self._source.choose(MARKET_CONDITIONS),
            economic_outlook=self._source.choose(ECONOMIC_OUTLOOKS),
            focus_areas=self.focus_areas(active_sources),
            kpis=kpis,
            developments=self.key_developments(active_sources),
            risks=RISKS,
            recommendations=STRATEGIC_RECOMMENDATIONS,
            sources=active_sources,
        )

        logger.info(f"Generated briefing for {company_name} on {day.isoformat()}")
        return StoredBriefing(
            id=uuid.uuid4().hex,
            date=day.isoformat(),
            briefing=body,
            title=title,
            company=company,
            sources=active_sources,
            kpis=kpis,
            insights=self.generate_insights(active_sources),
        )

    def generate_kpis(self) -> List[Kpi]:
        kpis = []
        for metric, values, changes, trends in KPI_TEMPLATES:
            i = self._source.index(len(values))
            kpis.append(Kpi(metric=metric, value=values[i], change=changes[i], trend=trends[i]))
        return kpis

    @staticmethod
    def focus_areas(sources: Sequence[str]) -> List[str]:
        areas = [FOCUS_AREAS[s] for s in sources if s in FOCUS_AREAS]
        return areas or list(DEFAULT_FOCUS_AREAS)

    @staticmethod
    def key_developments(sources: Sequence[str]) -> List[Tuple[str, str]]:
        developments = [SOURCE_DEVELOPMENTS[s] for s in sources if s in SOURCE_DEVELOPMENTS]
        return developments or list(GENERAL_DEVELOPMENTS)

    @staticmethod
    def generate_insights(sources: Sequence[str]) -> List[str]:
        extra = [SOURCE_INSIGHTS[s] for s in sources if s in SOURCE_INSIGHTS]
        return (BASE_INSIGHTS + extra)[:MAX_INSIGHTS]
