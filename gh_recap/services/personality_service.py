"""Archetype matching: score yearly statistics against a fixed catalog of personas.

Each archetype is a small strategy object with a weighted score over two or
three normalized signals plus the text that describes it. The catalog is built
once at import time and never mutated.
"""

from typing import List, Tuple

from gh_recap.models import PersonalityResult, YearlyStatistics
from gh_recap.utils.math import clamp01, normalize, safe_ratio

# Stand-ins for signals REST mode cannot supply (reported as 0).
NIGHT_FALLBACK = 0.22
WEEKEND_FALLBACK = 0.15


def _pct(rate):
    return f"{rate * 100:.0f}%"


def _night(stats):
    return stats.night_owl_rate if stats.night_owl_rate > 0 else NIGHT_FALLBACK


def _weekend(stats):
    return stats.weekend_rate if stats.weekend_rate > 0 else WEEKEND_FALLBACK


def _merge_rate(stats):
    return clamp01(safe_ratio(stats.merged_prs, stats.pull_requests))


class Archetype:
    """Base persona. Subclasses set key/tag/codename and override the hooks."""

    key = ""
    tag = ""
    codename = ""

    def score(self, stats: YearlyStatistics) -> float:
        raise NotImplementedError

    def one_liner(self, stats: YearlyStatistics) -> str:
        raise NotImplementedError

    def why(self, stats: YearlyStatistics) -> List[str]:
        raise NotImplementedError

    def signature(self, stats: YearlyStatistics) -> str:
        raise NotImplementedError

    def describe(self, stats: YearlyStatistics) -> PersonalityResult:
        return PersonalityResult(
            tag=self.tag,
            codename=self.codename,
            one_liner=self.one_liner(stats),
            why=tuple(self.why(stats)),
            signature=self.signature(stats),
        )

    def __repr__(self):
        return f"<{type(self).__name__} {self.key}>"


class NightBuilder(Archetype):
    key = "night_builder"
    tag = "Night Builder"
    codename = "NEON: AFTERHOURS"

    def score(self, stats):
        return (0.55 * _night(stats)
                + 0.25 * normalize(stats.commits, 50, 3000)
                + 0.2 * normalize(stats.max_streak_days, 3, 60))

    def one_liner(self, stats):
        return "When the world goes quiet, your systems get louder."

    def why(self, stats):
        return [
            f"Night owl rate {_pct(stats.night_owl_rate)}: the late hours are your build cache.",
            f"Longest streak {stats.max_streak_days} days: steady rhythm, steady output.",
            f"{stats.commits:,} commits: ideas land the moment they arrive.",
        ]

    def signature(self, stats):
        return "No sleep tonight, steadier tomorrow."


class MergeConductor(Archetype):
    key = "merge_conductor"
    tag = "Merge Conductor"
    codename = "MERGE: CONDUCTOR"

    def score(self, stats):
        return (0.45 * _merge_rate(stats)
                + 0.35 * normalize(stats.reviews, 10, 500)
                + 0.2 * normalize(stats.pull_requests, 5, 220))

    def one_liner(self, stats):
        return "You don't just write code, you set the tempo of collaboration."

    def why(self, stats):
        return [
            f"PR merge rate {_pct(safe_ratio(stats.merged_prs, stats.pull_requests))}: shipping is what counts.",
            f"{stats.reviews} code reviews: keeping the whole team on the same track.",
            f"{stats.pull_requests} pull requests: you turn ideas into deliveries.",
        ]

    def signature(self, stats):
        return "Squeeze the uncertainty into main."


class BugHunter(Archetype):
    key = "bug_hunter"
    tag = "Bug Hunter"
    codename = "DEBUG: HUNTER"

    def score(self, stats):
        return (0.45 * normalize(stats.issues, 5, 160)
                + 0.25 * normalize(stats.reviews, 10, 500)
                + 0.3 * normalize(stats.active_days, 30, 300))

    def one_liner(self, stats):
        return "You find the real anomaly inside the noise."

    def why(self, stats):
        return [
            f"{stats.issues} issues: you face problems head on.",
            f"{stats.active_days} active days: fixes come from persistence, not bursts.",
            f"{stats.reviews} reviews: you spot the risk hiding in edge cases.",
        ]

    def signature(self, stats):
        return "Keep the system polite even at the extremes."


class CraftTinkerer(Archetype):
    key = "craft_tinkerer"
    tag = "Neon Tinkerer"
    codename = "PATCH: ARTISAN"

    def score(self, stats):
        return (0.35 * clamp01(len(stats.top_languages) / 6)
                + 0.45 * normalize(stats.commits, 50, 2800)
                + 0.2 * _weekend(stats))

    def one_liner(self, stats):
        return "You break the complex into small pieces, then polish each one."

    def why(self, stats):
        return [
            f"{len(stats.top_languages)} languages in your stack: wherever the work is.",
            f"{stats.commits:,} commits: attention to detail, every day.",
            f"Weekend activity {_pct(stats.weekend_rate)}: you start when inspiration hits.",
        ]

    def signature(self, stats):
        return "Small changes stack into big leaps."


class OpenSourceEvangelist(Archetype):
    key = "open_source_evangelist"
    tag = "Open Source Evangelist"
    codename = "OPEN: EVANGELIST"

    def score(self, stats):
        return (0.5 * normalize(stats.stars_gained, 10, 1000)
                + 0.25 * normalize(len(stats.top_languages), 2, 8)
                + 0.25 * normalize(stats.pull_requests, 10, 200))

    def one_liner(self, stats):
        return "You believe code should be seen, used and improved."

    def why(self, stats):
        return [
            f"{stats.stars_gained:,} stars: your code is helping other people.",
            f"{len(stats.top_languages)} languages: breadth sets the radius of your impact.",
            f"{stats.pull_requests} pull requests: open source is an ensemble, not a solo.",
        ]

    def signature(self, stats):
        return "Let good code flow freely."


class WeekendWarrior(Archetype):
    key = "weekend_warrior"
    tag = "Weekend Warrior"
    codename = "WEEKEND: WARRIOR"

    def score(self, stats):
        return (0.55 * _weekend(stats)
                + 0.3 * normalize(stats.commits, 30, 1500)
                + 0.15 * normalize(stats.max_streak_days, 2, 30))

    def one_liner(self, stats):
        return "While others rest, you build the future."

    def why(self, stats):
        return [
            f"Weekend activity {_pct(stats.weekend_rate)}: weekends are your main stage.",
            f"{stats.commits:,} commits: professional work built in spare time.",
            f"{stats.max_streak_days}-day streak: passion doesn't need a workday.",
        ]

    def signature(self, stats):
        return "The weekend is a starting line, not a finish."


class FullstackExplorer(Archetype):
    key = "fullstack_explorer"
    tag = "Full-Stack Explorer"
    codename = "STACK: EXPLORER"

    def score(self, stats):
        return (0.45 * normalize(len(stats.top_languages), 3, 10)
                + 0.3 * normalize(stats.commits, 50, 2000)
                + 0.25 * normalize(stats.active_days, 30, 250))

    def one_liner(self, stats):
        return "Frontend to backend, database to deploy, you want to try it all."

    def why(self, stats):
        return [
            f"{len(stats.top_languages)} languages: full stack is a habit, not a slogan.",
            f"{stats.active_days} active days: always exploring, always growing.",
            f"{stats.commits:,} commits: your footprints are on every layer.",
        ]

    def signature(self, stats):
        return "The edge of the stack is the next target."


class ConsistencyMachine(Archetype):
    key = "consistency_machine"
    tag = "Consistency Machine"
    codename = "STEADY: ENGINE"

    def score(self, stats):
        return (0.4 * normalize(stats.max_streak_days, 14, 120)
                + 0.35 * normalize(stats.active_days, 100, 350)
                + 0.25 * normalize(stats.commits, 100, 2500))

    def one_liner(self, stats):
        return "You don't chase bursts, you show up every day."

    def why(self, stats):
        return [
            f"Longest streak {stats.max_streak_days} days: consistency is the most underrated superpower.",
            f"{stats.active_days} active days: coding {round(stats.active_days / 365 * 100)}% of the year.",
            f"{stats.commits:,} commits: compounding pays off over time.",
        ]

    def signature(self, stats):
        return "One step a day, none of them wasted."


class CodeReviewer(Archetype):
    key = "code_reviewer"
    tag = "Code Guardian"
    codename = "REVIEW: GUARDIAN"

    def score(self, stats):
        return (0.55 * normalize(stats.reviews, 20, 600)
                + 0.25 * _merge_rate(stats)
                + 0.2 * normalize(stats.pull_requests, 5, 150))

    def one_liner(self, stats):
        return "You are the team's last line of defense for code quality."

    def why(self, stats):
        return [
            f"{stats.reviews} reviews: every line deserves a careful read.",
            f"{stats.pull_requests} pull requests: you know what good code looks like.",
            f"{stats.merged_prs} merged PRs: quality and speed can coexist.",
        ]

    def signature(self, stats):
        return "Good code is reviewed into existence."


class IssueCloser(Archetype):
    key = "issue_closer"
    tag = "Issue Terminator"
    codename = "ISSUE: TERMINATOR"

    def score(self, stats):
        return (0.5 * normalize(stats.issues, 10, 200)
                + 0.3 * normalize(stats.commits, 50, 1500)
                + 0.2 * normalize(stats.active_days, 30, 200))

    def one_liner(self, stats):
        return "Problems don't disappear unless you make them."

    def why(self, stats):
        return [
            f"{stats.issues} issues handled: bugs fear you.",
            f"{stats.commits:,} commits: find it, fix it, in one motion.",
            f"{stats.active_days} active days: no issue stays overnight.",
        ]

    def signature(self, stats):
        return "There are no unfixable bugs, only causes not yet found."


# Declaration order is the tie-break order.
ARCHETYPES: Tuple[Archetype, ...] = (
    NightBuilder(),
    MergeConductor(),
    BugHunter(),
    CraftTinkerer(),
    OpenSourceEvangelist(),
    WeekendWarrior(),
    FullstackExplorer(),
    ConsistencyMachine(),
    CodeReviewer(),
    IssueCloser(),
)


def rank_personalities(stats, archetypes=ARCHETYPES):
    """All archetypes with their scores, best first (stable on ties)."""
    scored = [(archetype, archetype.score(stats)) for archetype in archetypes]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def match_personality(stats, archetypes=ARCHETYPES):
    """Describe the highest-scoring archetype for these statistics."""
    ranked = rank_personalities(stats, archetypes)
    return ranked[0][0].describe(stats)
