"""
Shareable HTML reports and inline SVG charts.

Reports are rendered from Jinja2 templates with autoescaping, so message
text and notes coming from users or upstream APIs is always escaped. Charts
are built here as SVG markup and handed to the templates as Markup.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from jinja2 import Environment, PackageLoader, select_autoescape
from loguru import logger
from markupsafe import Markup, escape

from yelp_insights.config import settings
from yelp_insights.models.conversation import Conversation, Message

CHART_WIDTH = 600
CHART_HEIGHT = 400
CHART_PADDING = 60
BAR_GAP = 10
ACCENT = "#d32323"

TLDR_LIMIT = 4
TLDR_MAX_CHARS = 150
CHART_KEYWORDS = ("plot", "graph", "chart", "trend")
PRIORITY_LEVELS = ("high", "medium", "low")


def _nl2br(value: str) -> Markup:
    return Markup("<br>").join(escape(line) for line in str(value).split("\n"))


_env = Environment(
    loader=PackageLoader("yelp_insights", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["nl2br"] = _nl2br


# ── Charts ───────────────────────────────────────────────

def _axes() -> str:
    bottom = CHART_HEIGHT - CHART_PADDING
    return (
        f'<line x1="{CHART_PADDING}" y1="{CHART_PADDING}" x2="{CHART_PADDING}" y2="{bottom}" '
        f'stroke="#ccc" stroke-width="2"/>'
        f'<line x1="{CHART_PADDING}" y1="{bottom}" x2="{CHART_WIDTH - CHART_PADDING}" y2="{bottom}" '
        f'stroke="#ccc" stroke-width="2"/>'
    )


def _svg(title: str, body: str) -> str:
    return (
        f'<svg width="{CHART_WIDTH}" height="{CHART_HEIGHT}" xmlns="http://www.w3.org/2000/svg">'
        f'<text x="{CHART_WIDTH / 2:g}" y="30" text-anchor="middle" font-size="18" font-weight="bold" '
        f'fill="#333">{escape(title)}</text>'
        f"{_axes()}{body}</svg>"
    )


def _value_scale(data: List[dict]) -> float:
    max_value = max(float(d["value"]) for d in data)
    if max_value <= 0:
        return 0.0
    return (CHART_HEIGHT - 2 * CHART_PADDING) / max_value


def generate_bar_chart_svg(data: List[dict], title: str) -> str:
    bar_width = (CHART_WIDTH - 2 * CHART_PADDING) / len(data) - BAR_GAP
    scale = _value_scale(data)
    bottom = CHART_HEIGHT - CHART_PADDING

    bars, labels = [], []
    for index, item in enumerate(data):
        x = CHART_PADDING + index * (bar_width + BAR_GAP)
        bar_height = float(item["value"]) * scale
        y = bottom - bar_height
        center = x + bar_width / 2
        bars.append(
            f'<rect x="{x:g}" y="{y:g}" width="{bar_width:g}" height="{bar_height:g}" fill="{ACCENT}" rx="4"/>'
            f'<text x="{center:g}" y="{y - 5:g}" text-anchor="middle" font-size="14" fill="#333">'
            f'{escape(item["value"])}</text>'
        )
        labels.append(
            f'<text x="{center:g}" y="{bottom + 20:g}" text-anchor="middle" font-size="12" fill="#666">'
            f'{escape(item["label"])}</text>'
        )
    return _svg(title, "".join(bars) + "".join(labels))


def generate_line_chart_svg(data: List[dict], title: str) -> str:
    scale_x = (CHART_WIDTH - 2 * CHART_PADDING) / (len(data) - 1) if len(data) > 1 else 0.0
    scale_y = _value_scale(data)
    bottom = CHART_HEIGHT - CHART_PADDING

    path, points, labels = [], [], []
    for index, item in enumerate(data):
        x = CHART_PADDING + index * scale_x
        y = bottom - float(item["value"]) * scale_y
        path.append(f"{'M' if index == 0 else 'L'} {x:g} {y:g}")
        points.append(
            f'<circle cx="{x:g}" cy="{y:g}" r="5" fill="{ACCENT}"/>'
            f'<text x="{x:g}" y="{y - 10:g}" text-anchor="middle" font-size="12" fill="#333">'
            f'{escape(item["value"])}</text>'
        )
        labels.append(
            f'<text x="{x:g}" y="{bottom + 20:g}" text-anchor="middle" font-size="12" fill="#666">'
            f'{escape(item["label"])}</text>'
        )
    line = f'<path d="{" ".join(path)}" stroke="{ACCENT}" stroke-width="3" fill="none"/>'
    return _svg(title, line + "".join(points) + "".join(labels))


def generate_chart_svg(chart: Dict[str, Any]) -> str:
    """Render a {type, title, data:[{label, value}]} chart; unknown types render nothing."""
    try:
        chart_type = chart.get("type")
        if chart_type == "bar":
            return generate_bar_chart_svg(chart["data"], chart.get("title", ""))
        if chart_type == "line":
            return generate_line_chart_svg(chart["data"], chart.get("title", ""))
        return ""
    except Exception as e:
        logger.error(f"Chart generation error: {e}")
        return "<p><em>Chart could not be generated</em></p>"


def wants_chart(messages: List[Message]) -> bool:
    """True when the owner asked for a plot, graph, chart or trend."""
    return any(
        m.role == "user" and any(k in m.content.lower() for k in CHART_KEYWORDS)
        for m in messages
    )


def build_rating_chart(reviews: List[dict]) -> Optional[Dict[str, Any]]:
    """Bar chart of how many recent reviews gave each star level."""
    counts = Counter(int(r["rating"]) for r in reviews if r.get("rating") is not None)
    if not counts:
        return None
    return {
        "type": "bar",
        "title": "Recent Reviews by Star Rating",
        "data": [{"label": f"{stars}★", "value": counts.get(stars, 0)} for stars in range(1, 6)],
    }


# ── Report text ──────────────────────────────────────────

def generate_tldr(messages: List[Message]) -> List[str]:
    insights = [m.content for m in messages if m.role == "assistant"][:TLDR_LIMIT]
    tldr = [i[:TLDR_MAX_CHARS] + "..." if len(i) > TLDR_MAX_CHARS else i for i in insights]
    return tldr or ["No insights generated yet."]


def _priority_level(item: Dict[str, Any]) -> str:
    level = str(item.get("priority", "")).lower()
    return level if level in PRIORITY_LEVELS else "medium"


def _base_context(
    conversation: Conversation,
    business_name: str,
    charts: Optional[List[Dict[str, Any]]],
) -> Dict[str, Any]:
    return {
        "app_name": settings.APP_NAME,
        "business_name": business_name,
        "report_date": conversation.display_date(),
        "tldr": generate_tldr(conversation.messages),
        "messages": conversation.messages,
        "charts": [Markup(generate_chart_svg(c)) for c in charts or []],
    }


def format_shareable_conversation(
    conversation: Conversation,
    business_name: str,
    charts: Optional[List[Dict[str, Any]]] = None,
) -> str:
    template = _env.get_template("conversation_report.html")
    return template.render(**_base_context(conversation, business_name, charts)).strip()


def format_shareable_priority_report(
    conversation: Conversation,
    priorities: List[Dict[str, Any]],
    business_name: str,
    additional_notes: str = "",
    charts: Optional[List[Dict[str, Any]]] = None,
) -> str:
    template = _env.get_template("priority_report.html")
    context = _base_context(conversation, business_name, charts)
    context.update(
        priorities=[
            {
                "level": _priority_level(p),
                "title": p.get("title", ""),
                "action": p.get("action", ""),
            }
            for p in priorities
        ],
        additional_notes=additional_notes,
    )
    return template.render(**context).strip()


def generated_at() -> str:
    return datetime.now(timezone.utc).isoformat()
