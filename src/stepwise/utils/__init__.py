"""Shared helpers."""

from stepwise.utils.polling import poll_until
from stepwise.utils.text import (
    collapse_whitespace,
    extract_keyword,
    first_quoted,
    fuzzy_ratio,
    quoted_values,
    selector_literal,
    strip_keyword,
    strip_quotes,
)

__all__ = [
    "collapse_whitespace",
    "extract_keyword",
    "first_quoted",
    "fuzzy_ratio",
    "poll_until",
    "quoted_values",
    "selector_literal",
    "strip_keyword",
    "strip_quotes",
]
