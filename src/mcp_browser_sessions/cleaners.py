# mcp_browser_sessions/cleaners.py

import re
from typing import Dict, Tuple

import bs4
from bs4 import Comment, NavigableString


NOISE_TAGS = ("noscript", "template", "canvas", "svg", "meta", "source", "track")
WHITESPACE_SENSITIVE = {"pre", "code", "textarea"}


def approx_token_count(text: str) -> int:
    # Fast heuristic: ~4 chars per token
    return max(0, (len(text) // 4))


def _remove_comments(soup, pruned_counts: Dict[str, int]) -> None:
    for c in soup.find_all(string=lambda t: isinstance(t, Comment)):
        c.extract()
        pruned_counts["comments"] += 1


def _remove_scripts_and_styles(soup, pruned_counts: Dict[str, int]) -> None:
    """
    Remove non-content tags: scripts, styles and the usual noise (svg, meta, ...).

    <link> elements are dropped too, except rel=canonical.
    """
    for tag_name in ("script", "style") + NOISE_TAGS:
        removed = soup.find_all(tag_name)
        key = tag_name if tag_name in ("script", "style") else "noise"
        pruned_counts[key] += len(removed)
        for t in removed:
            t.decompose()

    for link in soup.find_all("link"):
        rel = link.get("rel")
        rels = [s.lower() for s in rel] if isinstance(rel, (list, tuple)) else ([str(rel).lower()] if rel else [])
        if "canonical" in rels:
            continue
        pruned_counts["noise"] += 1
        link.decompose()


def _normalize_whitespace(soup) -> str:
    for t in soup.find_all(string=True):
        parent_name = (getattr(t.parent, "name", "") or "").lower()
        if parent_name in WHITESPACE_SENSITIVE:
            continue
        new_text = re.sub(r"\s+", " ", str(t))
        if new_text != str(t):
            t.replace_with(NavigableString(new_text))

    # Text nodes are already collapsed; pre/code/textarea must stay untouched
    return str(soup).strip()


def clean_html(html: str, collapse_whitespace: bool = True) -> Tuple[str, Dict[str, int]]:
    """
    Strip comments, scripts, styles and non-content tags from raw HTML.

    Args:
        html: Raw HTML string
        collapse_whitespace: Collapse runs of whitespace outside <pre>/<code>/<textarea>

    Returns:
        (cleaned_html, pruned_counts)
    """
    pruned_counts = {"script": 0, "style": 0, "noise": 0, "comments": 0}

    soup = bs4.BeautifulSoup(html or "", "html.parser")
    _remove_comments(soup, pruned_counts)
    _remove_scripts_and_styles(soup, pruned_counts)

    if collapse_whitespace:
        return _normalize_whitespace(soup), pruned_counts
    return str(soup), pruned_counts


__all__ = [
    "approx_token_count",
    "clean_html",
]
