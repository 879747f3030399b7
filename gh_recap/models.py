"""Recap data model: yearly statistics, comparison, personality, response envelope.

Records are plain dataclasses. ``to_dict()`` produces the camelCase JSON shape
the frontend consumes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

ALL_TIME = 0


@dataclass(frozen=True)
class LanguageShare:
    name: str
    percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "percent": self.percent}


@dataclass(frozen=True)
class HighlightRepository:
    name: str = "-"
    description: str = ""
    stars_gained: int = 0
    merged_prs: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "starsGained": self.stars_gained,
            "mergedPRs": self.merged_prs,
        }


@dataclass(frozen=True)
class ContributionDay:
    date: str
    count: int
    level: int

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "count": self.count, "level": self.level}


@dataclass(frozen=True)
class AccountProfile:
    avatar_url: str
    created_at: str
    created_year: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avatarUrl": self.avatar_url,
            "createdAt": self.created_at,
            "createdYear": self.created_year,
        }


@dataclass(frozen=True)
class YearlyStatistics:
    """Canonical statistics for one account over one year (or all time when year == 0)."""
    year: int
    handle: str
    display_name: str
    commits: int = 0
    pull_requests: int = 0
    merged_prs: int = 0
    issues: int = 0
    reviews: int = 0
    stars_gained: int = 0
    active_days: int = 0
    max_streak_days: int = 0
    night_owl_rate: float = 0.0
    weekend_rate: float = 0.0
    top_languages: Tuple[LanguageShare, ...] = ()
    highlight_repo: HighlightRepository = field(default_factory=HighlightRepository)
    contribution_calendar: Optional[Tuple[ContributionDay, ...]] = None
    profile: Optional[AccountProfile] = None

    @property
    def is_all_time(self) -> bool:
        return self.year == ALL_TIME

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "year": self.year,
            "handle": self.handle,
            "displayName": self.display_name,
            "commits": self.commits,
            "pullRequests": self.pull_requests,
            "mergedPRs": self.merged_prs,
            "issues": self.issues,
            "reviews": self.reviews,
            "starsGained": self.stars_gained,
            "activeDays": self.active_days,
            "maxStreakDays": self.max_streak_days,
            "nightOwlRate": self.night_owl_rate,
            "weekendRate": self.weekend_rate,
            "topLanguages": [lang.to_dict() for lang in self.top_languages],
            "highlightRepo": self.highlight_repo.to_dict(),
        }
        if self.contribution_calendar is not None:
            data["contributionCalendar"] = [day.to_dict() for day in self.contribution_calendar]
        if self.profile is not None:
            data["profile"] = self.profile.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "YearlyStatistics":
        """Rebuild a record from its JSON shape.

        Raises:
            ValueError: if a required field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError("stats must be a JSON object")
        try:
            highlight = data.get("highlightRepo") or {}
            calendar = data.get("contributionCalendar")
            profile = data.get("profile")
            return cls(
                year=int(data.get("year", ALL_TIME)),
                handle=str(data["handle"]),
                display_name=str(data.get("displayName") or data["handle"]),
                commits=int(data.get("commits", 0)),
                pull_requests=int(data.get("pullRequests", 0)),
                merged_prs=int(data.get("mergedPRs", 0)),
                issues=int(data.get("issues", 0)),
                reviews=int(data.get("reviews", 0)),
                stars_gained=int(data.get("starsGained", 0)),
                active_days=int(data.get("activeDays", 0)),
                max_streak_days=int(data.get("maxStreakDays", 0)),
                night_owl_rate=float(data.get("nightOwlRate", 0.0)),
                weekend_rate=float(data.get("weekendRate", 0.0)),
                top_languages=tuple(
                    LanguageShare(name=str(lang["name"]), percent=float(lang["percent"]))
                    for lang in data.get("topLanguages", [])
                ),
                highlight_repo=HighlightRepository(
                    name=str(highlight.get("name", "-")),
                    description=str(highlight.get("description") or ""),
                    stars_gained=int(highlight.get("starsGained", 0)),
                    merged_prs=int(highlight.get("mergedPRs", 0)),
                ),
                contribution_calendar=None if calendar is None else tuple(
                    ContributionDay(date=str(d["date"]), count=int(d["count"]), level=int(d["level"]))
                    for d in calendar
                ),
                profile=None if profile is None else AccountProfile(
                    avatar_url=str(profile.get("avatarUrl", "")),
                    created_at=str(profile.get("createdAt", "")),
                    created_year=int(profile.get("createdYear", 0)),
                ),
            )
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            raise ValueError(f"Invalid stats payload: {e}")


@dataclass(frozen=True)
class YearChanges:
    """Fractional year-over-year change per comparable counter (0.3 == +30%)."""
    commits: float
    pull_requests: float
    issues: float
    reviews: float
    active_days: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "commits": self.commits,
            "pullRequests": self.pull_requests,
            "issues": self.issues,
            "reviews": self.reviews,
            "activeDays": self.active_days,
        }


@dataclass(frozen=True)
class YearComparison:
    current: YearlyStatistics
    previous: Optional[YearlyStatistics] = None
    changes: Optional[YearChanges] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict(),
            "previous": self.previous.to_dict() if self.previous else None,
            "changes": self.changes.to_dict() if self.changes else None,
        }


@dataclass(frozen=True)
class PersonalityResult:
    tag: str
    codename: str
    one_liner: str
    why: Tuple[str, ...]
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "codename": self.codename,
            "oneLiner": self.one_liner,
            "why": list(self.why),
            "signature": self.signature,
        }


@dataclass
class RecapMeta:
    source: str
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "warnings": list(self.warnings)}


@dataclass
class RecapResponse:
    stats: YearlyStatistics
    comparison: Optional[YearComparison]
    meta: RecapMeta

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "comparison": self.comparison.to_dict() if self.comparison else None,
            "meta": self.meta.to_dict(),
        }
