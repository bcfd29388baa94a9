from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

MAX_SCORE = 10
METRIC_POINTS_CAP = 2
OPTIMIZED_MESSAGE = (
    "Your page is optimized. Share it in proposals and DMs to increase response rates."
)


@dataclass(frozen=True)
class StrengthItem:
    key: str
    label: str
    points: int
    complete: bool
    earned: int
    suggestion: str


@dataclass(frozen=True)
class PageStrength:
    items: List[StrengthItem]
    score: int
    percent: int
    next_best_step: str

    def to_dict(self):
        return {
            "score": self.score,
            "max_score": MAX_SCORE,
            "percent": self.percent,
            "next_best_step": self.next_best_step,
            "items": [
                {
                    "key": item.key,
                    "label": item.label,
                    "points": item.points,
                    "earned": item.earned,
                    "complete": item.complete,
                }
                for item in self.items
            ],
        }


def _item(key, label, points, complete, suggestion, earned=None) -> StrengthItem:
    if earned is None:
        earned = points if complete else 0
    return StrengthItem(
        key=key,
        label=label,
        points=points,
        complete=complete,
        earned=earned,
        suggestion=suggestion,
    )


def score_page_strength(
    *,
    title: Optional[str],
    headline: Optional[str],
    bio: Optional[str],
    status: str,
    work_example_count: int,
    work_examples_with_metric: int,
    testimonial_count: int,
) -> PageStrength:
    """
    Score how complete a proof page is, out of 10.

    The metric-text item earns one point per work example with metric
    text, capped at two, and only counts as complete at the cap. The
    next best step is the cheapest incomplete item, declaration order
    breaking ties.
    """
    metric_points = min(work_examples_with_metric, METRIC_POINTS_CAP)

    items = [
        _item("title", "Title is present", 1, bool((title or "").strip()),
              "Add a clear page title."),
        _item("headline", "Headline is present", 1, bool((headline or "").strip()),
              "Add a concise, outcome-focused headline."),
        _item("bio", "Bio is present", 1, bool((bio or "").strip()),
              "Add a short bio with your niche and value."),
        _item("work_examples", "At least 2 work examples", 2, work_example_count >= 2,
              "Add one more work example to improve credibility."),
        _item("work_metrics", "Work examples include metric text (up to 2)", 2,
              metric_points >= METRIC_POINTS_CAP,
              "Add metric text to your work examples (for example, +32% conversion).",
              earned=metric_points),
        _item("testimonials", "At least 2 testimonials", 2, testimonial_count >= 2,
              "Add one more testimonial to strengthen trust."),
        _item("published", "Page is published", 1, status == "published",
              "Publish your page when content is ready."),
    ]

    score = sum(item.earned for item in items)
    percent = round(score / MAX_SCORE * 100)

    incomplete = sorted((item for item in items if not item.complete), key=lambda item: item.points)
    next_best_step = incomplete[0].suggestion if incomplete else OPTIMIZED_MESSAGE

    return PageStrength(items=items, score=score, percent=percent, next_best_step=next_best_step)
