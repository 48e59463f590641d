"""Previous/next page links that keep the caller's filter, sort and limit."""

from typing import Iterable, Optional, Tuple
from urllib.parse import urlencode

PAGE_PARAM = "page"


def build_page_link(base_path: str, params: Iterable[Tuple[str, str]], page: int) -> str:
    """
    Link to ``page`` preserving every other original parameter.

    Parameters keep their original names, values and order; ``page`` is
    always appended last.
    """
    preserved = [(key, value) for key, value in params if key != PAGE_PARAM]
    preserved.append((PAGE_PARAM, str(page)))
    return f"{base_path}?{urlencode(preserved)}"


def build_page_links(
    base_path: str,
    params: Iterable[Tuple[str, str]],
    prev_page: Optional[int],
    next_page: Optional[int],
    has_prev_page: bool,
    has_next_page: bool,
) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(prev_link, next_link)``; a missing neighbour yields None."""
    params = list(params)
    prev_link = build_page_link(base_path, params, prev_page) if has_prev_page and prev_page else None
    next_link = build_page_link(base_path, params, next_page) if has_next_page and next_page else None
    return prev_link, next_link
