"""Bundled demo catalog used when no external catalog is configured."""

from __future__ import annotations

from ..domain.models import Asset
from .catalog import StaticCatalog

_DEMO_ROWS: tuple[tuple[str, str, str, str, str], ...] = (
    ("Summer launch hero", "/demo/drive/summer-launch-hero.jpg", "16/9", "campaigns_2025", "orange"),
    ("Summer launch square", "/demo/drive/summer-launch-square.jpg", "1/1", "campaigns_2025", "yellow"),
    ("Spring promo banner", "/demo/drive/spring-promo-banner.jpg", "16/9", "campaigns_2024", "green"),
    ("Holiday portrait", "/demo/drive/holiday-portrait.jpg", "3/4", "campaigns_2024", "red"),
    ("Team offsite", "/demo/drive/team-offsite.jpg", "4/3", "social_instagram", "blue"),
    ("Coffee break", "/demo/drive/coffee-break.jpg", "1/1", "social_instagram", "neutral"),
    ("Hiring post", "/demo/drive/hiring%20post.jpg", "4/3", "social_linkedin", "blue"),
    ("Primary logo light", "/demo/drive/logo-primary-light.png", "1/1", "logos_primary", "neutral"),
    ("Primary logo dark", "/demo/drive/logo-primary-dark.png", "1/1", "logos_primary", "purple"),
    ("Symbol mark", "/demo/drive/symbol-mark.png", "1/1", "logos_symbol", "pink"),
    ("Tone of voice cover", "/demo/drive/tone-of-voice.jpg", "3/4", "guidelines_tone", "yellow"),
    ("Button states", "/demo/drive/button-states.png", "4/3", "ui_components", "purple"),
    ("Dashboard screen", "/demo/drive/dashboard-screen.png", "16/9", "ui_screens", "blue"),
    ("Onboarding screen", "/demo/drive/onboarding-screen.png", "3/4", "ui_screens", "green"),
    ("Mountain lake", "/demo/drive/mountain-lake.jpg", "16/9", "", "green"),
    ("City at night", "/demo/drive/city-night.jpg", "3/4", "", "purple"),
)


def demo_assets() -> list[Asset]:
    return [
        Asset(
            id=index,
            title=title,
            src=src,
            ratio=ratio,
            folder_id=folder_id or None,
            color=color,
        )
        for index, (title, src, ratio, folder_id, color) in enumerate(_DEMO_ROWS, start=1)
    ]


def demo_catalog() -> StaticCatalog:
    return StaticCatalog(demo_assets())


__all__ = ["demo_assets", "demo_catalog"]
