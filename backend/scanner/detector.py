"""Legacy-system reference detection.

Two rules run over a page's visible text:

``CougarWeb``
    A product name, matched case-insensitively with or without the internal
    space.  Every match is kept.

``Colleague``
    Also an everyday English word, so a bare match is not enough.  A match is
    kept only when the window around it mentions a system/operations term
    such as "student", "registration" or "payroll".  Plain conversational
    uses ("ask a colleague") are dropped.

Each kept match becomes a :class:`ReferenceSnippet`: a bounded window of
whitespace-collapsed text, deduplicated by exact text within the page.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from backend.config import settings
from backend.scanner.models import ReferenceSnippet

_DIRECT_PATTERN = re.compile(r"\b(cougar\s*web)\b", re.IGNORECASE)
_AMBIGUOUS_PATTERN = re.compile(r"\bcolleague\b", re.IGNORECASE)

# Any legacy term, used when rewriting snippets locally.
LEGACY_TERM_PATTERN = re.compile(r"\b(cougar\s*web|colleague)\b", re.IGNORECASE)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class DetectorConfig:
    """Window sizes and the disambiguation vocabulary."""

    context_terms: tuple[str, ...]
    direct_before: int = 80
    direct_after: int = 120
    context_window: int = 100
    min_snippet_length: int = 20

    @classmethod
    def from_settings(cls) -> DetectorConfig:
        return cls(context_terms=tuple(settings.legacy_context_terms))

    def context_pattern(self) -> re.Pattern[str]:
        alternatives = "|".join(re.escape(term) for term in self.context_terms)
        return re.compile(rf"\b({alternatives})\b", re.IGNORECASE)


def _clean(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def detect(
    text: str,
    source_url: str = "",
    config: DetectorConfig | None = None,
) -> list[ReferenceSnippet]:
    """Return the legacy-system snippets found in *text*.

    Direct matches come first, then disambiguated ``colleague`` matches,
    each group in text order.
    """
    config = config or DetectorConfig.from_settings()
    snippets: list[ReferenceSnippet] = []
    seen: set[str] = set()

    def _keep(window: str, term: str) -> None:
        snippet = _clean(window)
        if len(snippet) > config.min_snippet_length and snippet not in seen:
            seen.add(snippet)
            snippets.append(
                ReferenceSnippet(text=snippet, matched_term=term, source_url=source_url)
            )

    for match in _DIRECT_PATTERN.finditer(text):
        start = max(0, match.start() - config.direct_before)
        end = min(len(text), match.start() + config.direct_after)
        _keep(text[start:end], match.group(0))

    if config.context_terms:
        context = config.context_pattern()
        for match in _AMBIGUOUS_PATTERN.finditer(text):
            start = max(0, match.start() - config.context_window)
            end = min(len(text), match.start() + config.context_window)
            window = text[start:end]
            if context.search(window):
                _keep(window, match.group(0))

    if snippets:
        print(f"[DETECT] {len(snippets)} reference(s) in {source_url or '(text)'}")
    return snippets


def replace_legacy_terms(text: str, replacement: str = "Workday") -> str:
    """Substitute every legacy term in *text* with *replacement*."""
    return LEGACY_TERM_PATTERN.sub(replacement, text)
