"""Render the analytics dashboard digest using Jinja2 templates."""
from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from feedback_analytics.analytics.models import AnalyticsResult
from feedback_analytics.reporting.context import build_dashboard_context

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Markdown templates don’t need HTML escaping – it breaks apostrophes etc.
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_dashboard(result: AnalyticsResult) -> str:
    """Render a Markdown digest of *result*."""

    context = build_dashboard_context(result)
    template = _env.get_template("dashboard.md.j2")
    text = template.render(**context.to_dict())
    logger.debug("Dashboard digest rendered (len=%d)", len(text))
    return text
