"""
String normalization for category and tag comparison.

Every comparison between a selected category and an event's tags goes
through `normalize_token`, so free-text admin labels ("Food & Drinks") and
slug-style filters ("food-and-drinks", "Food_Drinks") meet on common ground.
"""
from __future__ import annotations

import re
from typing import Any, List

_ws_re = re.compile(r"\s+")
_amp_entity_re = re.compile(r"&amp;", re.IGNORECASE)
_dash_re = re.compile(r"[-_]+")
_split_re = re.compile(r"[,|/]")
_non_slug_re = re.compile(r"[^\w-]+")


def normalize_token(s: Any) -> str:
    """
    Canonical comparison form of a label:
    - trimmed and lowercased
    - `&amp;` and `&` spelled out as "and"
    - whitespace runs collapsed to one space
    - runs of "-" / "_" collapsed to a single "-"

    Never raises; empty or missing input gives "".
    """
    if not s:
        return ""
    s = str(s).strip().lower()
    s = _amp_entity_re.sub("and", s)
    s = s.replace("&", "and")
    s = _ws_re.sub(" ", s)
    s = _dash_re.sub("-", s)
    return s.strip()


def extract_types(raw: Any) -> List[str]:
    """Split a comma/pipe/slash delimited label into unique tokens, in order."""
    if not raw:
        return []
    out: List[str] = []
    for part in _split_re.split(str(raw)):
        token = normalize_token(part)
        if token and token not in out:
            out.append(token)
    return out


def slugify(name: Any) -> str:
    token = normalize_token(name)
    token = _non_slug_re.sub("-", token)
    return _dash_re.sub("-", token).strip("-")
