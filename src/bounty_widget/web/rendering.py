"""Renders the widget, the embed-instructions page and the embed script.

Templates live next to this module and are rendered with Jinja2. Only the
HTML templates are autoescaped; the script template relies on ``tojson``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Mapping

from jinja2 import Environment, FileSystemLoader, select_autoescape

from bounty_widget.core.config import WidgetConfig
from bounty_widget.domain.models import Theme

TEMPLATES_DIR = Path(__file__).parent / "templates"

STATS_PATH = "/api/stats"
WIDGET_PATH = "/widget"
SCRIPT_PATH = "/embed.js"
CONTAINER_ID = "bounty-stats-widget"
FRAME_WIDTH = 520
FRAME_HEIGHT = 380

_jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


@dataclass(frozen=True)
class ThemePalette:
    background: str
    card_background: str
    text: str
    text_muted: str
    border: str
    accent: str = "#6C5CE7"
    positive: str = "#00B894"


PALETTES: Mapping[Theme, ThemePalette] = {
    Theme.DARK: ThemePalette(
        background="#1A1A2E",
        card_background="#16213E",
        text="#E8E8F0",
        text_muted="#9090A8",
        border="#2A2A40",
    ),
    Theme.LIGHT: ThemePalette(
        background="#FFFFFF",
        card_background="#F8F9FA",
        text="#1A1A2E",
        text_muted="#6C757D",
        border="#E9ECEF",
    ),
}


class WidgetRenderer:
    """Produces the presentation documents for a given configuration."""

    def __init__(self, config: WidgetConfig) -> None:
        self._config = config
        self._public_url = config.public_url.rstrip("/")

    def widget_html(self, theme: Theme) -> str:
        return _jinja_env.get_template("widget.html").render(
            theme=theme.value,
            palette=asdict(PALETTES[theme]),
            stats_path=STATS_PATH,
            board_url=self._config.board_url,
            refresh_interval_ms=self._config.cache_ttl_seconds * 1000,
        )

    def embed_page_html(self) -> str:
        return _jinja_env.get_template("embed.html").render(
            **self._common_context(),
            themes=[Theme.DARK, Theme.LIGHT],
            public_url=self._public_url,
            widget_path=WIDGET_PATH,
            script_path=SCRIPT_PATH,
            stats_path=STATS_PATH,
        )

    def embed_js(self) -> str:
        return _jinja_env.get_template("embed.js").render(
            **self._common_context(),
            widget_url=f"{self._public_url}{WIDGET_PATH}",
        )

    def _common_context(self) -> dict:
        return {
            "default_theme": self._config.theme,
            "container_id": CONTAINER_ID,
            "frame_width": FRAME_WIDTH,
            "frame_height": FRAME_HEIGHT,
        }
