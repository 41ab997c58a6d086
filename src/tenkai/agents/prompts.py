"""Prompt loader: fixed instruction templates from the templates/ directory."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load the markdown template for ``name``.

    Raises ``FileNotFoundError`` if the template does not exist.
    """
    path = TEMPLATES_DIR / f"{name}.md"
    text = path.read_text(encoding="utf-8").strip()
    logger.debug("Prompt loaded: name=%s path=%s", name, path)
    return text


def render_prompt(name: str, text: str) -> str:
    """Return the template for ``name`` followed by a blank line and ``text``."""
    return f"{load_prompt(name)}\n\n{text}"
