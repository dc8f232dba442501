"""
Category filtering over event cards.

Pure and stateless: takes a list of event-like items (mappings or objects)
plus a category label/slug and returns which items are visible. Nothing here
mutates its input.

Tag resolution reads these named sources, in order, and unions the tokens:

    event_slug  -> delimited slug string, e.g. "music,live-music"
    type        -> delimited label string, e.g. "Music, Concert"
    genre       -> delimited label string
    genre_tags  -> visible tag labels, each taken whole
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Sequence, Set, Tuple

from services.normalize import extract_types, normalize_token

# (source name, split on delimiters?)
TAG_SOURCES: Tuple[Tuple[str, bool], ...] = (
    ("event_slug", True),
    ("type", True),
    ("genre", True),
    ("genre_tags", False),
)

SHOW_ALL = frozenset({"", "all", "all-events"})


def _read(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def category_slug(chip: Any) -> str:
    """Token for a category chip: explicit slug, then genre, then its label."""
    if not chip:
        return ""
    for name in ("category_slug", "genre", "label"):
        value = _read(chip, name)
        if value:
            return normalize_token(value)
    return ""


def event_types(item: Any, sources: Sequence[Tuple[str, bool]] = TAG_SOURCES) -> List[str]:
    tokens: List[str] = []
    for name, delimited in sources:
        value = _read(item, name)
        if not value:
            continue
        if delimited:
            found = extract_types(value)
        else:
            labels = list(value) if isinstance(value, (list, tuple, set, frozenset)) else [value]
            found = [normalize_token(label) for label in labels]
        for token in found:
            if token and token not in tokens:
                tokens.append(token)
    return tokens


def collect_event_tokens(item: Any, sources: Sequence[Tuple[str, bool]] = TAG_SOURCES) -> Set[str]:
    return set(event_types(item, sources))


def matches(event_tokens: Iterable[str], category: Any) -> bool:
    """
    Empty / "all" / "all-events" shows everything. Otherwise an exact token
    match or a substring either way ("music" ~ "live-music").
    """
    wanted = normalize_token(category)
    if wanted in SHOW_ALL:
        return True
    return any(
        token == wanted or wanted in token or token in wanted
        for token in event_tokens
        if token
    )


@dataclass
class FilterResult:
    visible: List[Any] = field(default_factory=list)
    hidden: List[Any] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.visible)


def filter_events(items: Iterable[Any], category: Any) -> FilterResult:
    wanted = normalize_token(category)
    result = FilterResult()
    for item in items:
        if matches(collect_event_tokens(item), wanted):
            result.visible.append(item)
        else:
            result.hidden.append(item)
    return result
