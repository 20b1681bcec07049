from __future__ import annotations

import html
from dataclasses import dataclass, field
from datetime import date
from typing import Dict
from urllib.parse import urlencode

from dateutil.relativedelta import relativedelta

STEP_UNITS = {
    "day": "days",
    "days": "days",
    "week": "weeks",
    "weeks": "weeks",
    "month": "months",
    "months": "months",
    "year": "years",
    "years": "years",
}

DEFAULT_LABELS = {
    "next_small": "Next",
    "next_large": "Next Page",
    "prev_small": "Previous",
    "prev_large": "Previous Page",
}


def parse_step(step: str) -> relativedelta:
    parts = str(step or "").strip().lower().split()
    if len(parts) != 2:
        raise ValueError(f"Invalid pagination step: {step!r}")
    amount_raw, unit = parts
    try:
        amount = int(amount_raw)
    except ValueError:
        raise ValueError(f"Invalid pagination step: {step!r}")
    if unit not in STEP_UNITS:
        raise ValueError(f"Unknown pagination unit: {unit!r}")
    return relativedelta(**{STEP_UNITS[unit]: amount})


@dataclass
class PaginationArgs:
    small: str = "1 day"
    large: str = "1 week"
    labels: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_LABELS))


def pagination_targets(today: date, args: PaginationArgs) -> dict[str, date]:
    small = parse_step(args.small)
    large = parse_step(args.large)
    return {
        "prev_large": today - large,
        "prev_small": today - small,
        "next_small": today + small,
        "next_large": today + large,
    }


def _link(base_url: str, mode: str, target: date, label: str, css_class: str) -> str:
    query = urlencode({"mode": mode, "cd": target.isoformat()})
    return (
        f'<a class="{css_class}" href="{html.escape(base_url)}?{html.escape(query)}">'
        f"{html.escape(label)}</a>"
    )


def render_pagination(
    today: date,
    mode: str,
    args: PaginationArgs,
    base_url: str = "",
    current: date | None = None,
) -> str:
    targets = pagination_targets(today, args)
    labels = {**DEFAULT_LABELS, **(args.labels or {})}
    links = [
        _link(base_url, mode, targets["prev_large"], labels["prev_large"], "prev-page large"),
        _link(base_url, mode, targets["prev_small"], labels["prev_small"], "prev-page small"),
    ]
    if current is not None:
        links.append(_link(base_url, mode, current, "Today", "today-page"))
    links.extend([
        _link(base_url, mode, targets["next_small"], labels["next_small"], "next-page small"),
        _link(base_url, mode, targets["next_large"], labels["next_large"], "next-page large"),
    ])
    return f'<div class="tablenav-pages">{" ".join(links)}</div>'
