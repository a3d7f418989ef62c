"""Icon prompt template."""

from __future__ import annotations

ICON_PROMPT_TEMPLATE = (
    "Create a {theme} style app icon for '{app_name}'. "
    "The icon should be simple, clear, and suitable for an iOS app. "
    "Do not include any text in the icon."
)


def build_icon_prompt(app_name: str, theme: str) -> str:
    return ICON_PROMPT_TEMPLATE.format(theme=theme, app_name=app_name)
