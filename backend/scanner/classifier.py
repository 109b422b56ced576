"""Per-snippet classification and rewrite via the completion collaborator.

One request is sent per snippet.  The response goes through three tiers,
strictly in order:

1. **Parse** — decode the first ``{...}`` object in the response text.
2. **Validate** — keep each field only if it is present and, for the closed
   sets, one of the allowed values; otherwise substitute a generic default.
   A defaulted classification field forces ``confidence = low``.
3. **Total fallback** — when nothing decodable comes back, or the call
   itself fails, build the finding locally: legacy terms in the snippet are
   replaced with "Workday", every category is generic, confidence is
   ``low`` and ``notes`` names the cause.

``classify`` therefore never raises; one bad response costs one
low-confidence finding and nothing more.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterable, TypeVar

from backend.config import settings
from backend.scanner.completion import CompletionFn, chat_completion
from backend.scanner.detector import replace_legacy_terms
from backend.scanner.models import (
    Audience,
    Confidence,
    Finding,
    ReferenceSnippet,
    ReferenceType,
    TaskCategory,
)

DEFAULT_FEATURE = "Workday – unified cloud-based system"
GENERIC_REWRITE = (
    "Workday is the college's new system for managing your information and services"
)
MIN_KEYWORDS = 3
MAX_KEYWORDS = 6
_BASE_KEYWORDS = ("Workday", "Workday login", "Workday self-service")

_E = TypeVar("_E", bound=Enum)
_decoder = json.JSONDecoder()


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------

def _options(enum_cls: type[Enum]) -> str:
    return " | ".join(f'"{member.value}"' for member in enum_cls)


def build_prompt(
    snippet: str,
    work_stream_areas: Iterable[str] = (),
    keywords: Iterable[str] = (),
) -> str:
    """Return the single user message sent for *snippet*."""
    areas = [a for a in work_stream_areas if a]
    extra = [k for k in keywords if k]
    hints = []
    if areas:
        hints.append(
            f"The college provided these work stream areas to consider: {', '.join(areas)}."
        )
    if extra:
        hints.append(f"Additional keywords to consider: {', '.join(extra)}.")
    hint_block = "\n".join(hints)

    return (
        "You are analyzing college web content for a Workday migration. "
        "The college is moving from CougarWeb and Colleague to Workday.\n\n"
        f"{hint_block}\n\n"
        "RULES:\n"
        "1. Use ONLY the page content provided. Do not invent URLs or internal feature names.\n"
        "2. Map legacy terms (CougarWeb, Colleague, \"student portal,\" etc.) to Workday "
        "or Workday features only when clearly inferable.\n"
        "3. If context is unclear, use generic \"Workday\" and set confidence to \"low\".\n\n"
        "STEP 1 – Detect: The snippet below has already been flagged as containing a "
        "CougarWeb or Colleague reference. Confirm it is a SYSTEM reference "
        "(not plain English \"colleague\").\n\n"
        "STEP 2 – Classify:\n"
        f"- primary_audience: one of {_options(Audience)} (use lexical cues: student, "
        "enrollment, financial aid, employee, payroll, HR, etc.)\n"
        f"- task_category: one of {_options(TaskCategory)}\n"
        f"- reference_type: one of {_options(ReferenceType)}\n\n"
        "STEP 3 – Map to Workday (e.g. registration + students → \"Workday Student – "
        "academic planning and registration\"). Emit workday_feature and set confidence: "
        f"{_options(Confidence)}.\n\n"
        "STEP 4 – Rewrite: Provide proposed_replacement (full suggested replacement text "
        "for the snippet). Preserve intent and tone. No fabricated URLs.\n\n"
        f"STEP 5 – Suggest {MIN_KEYWORDS}–{MAX_KEYWORDS} Workday keywords for SEO "
        "(include \"Workday\", task and audience).\n\n"
        f"STEP 6 – If unsure, use generic \"{GENERIC_REWRITE}\" and confidence \"low\" "
        "with brief notes.\n\n"
        "Snippet to analyze:\n"
        f'"""\n{snippet}\n"""\n\n'
        "Respond with ONLY a single JSON object (no markdown, no other text):\n"
        "{\n"
        f'  "primary_audience": {_options(Audience)},\n'
        '  "task_category": "one of the task_category values above",\n'
        f'  "reference_type": {_options(ReferenceType)},\n'
        '  "workday_feature": "short label e.g. Workday Student – academic planning and registration",\n'
        '  "proposed_replacement": "full replacement text for the snippet",\n'
        '  "suggested_keywords": ["Workday", "keyword2", ...],\n'
        f'  "confidence": {_options(Confidence)},\n'
        '  "notes": "optional brief note if low confidence"\n'
        "}"
    )


# ---------------------------------------------------------------------------
# Tier 1: parse
# ---------------------------------------------------------------------------

def parse_response(text: str) -> dict[str, Any] | None:
    """Decode the first JSON object embedded in *text*, or return ``None``."""
    start = text.find("{") if text else -1
    while start != -1:
        try:
            payload, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        return payload if isinstance(payload, dict) else None
    return None


# ---------------------------------------------------------------------------
# Tier 2: validate
# ---------------------------------------------------------------------------

def _choice(value: Any, enum_cls: type[_E]) -> _E | None:
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            return None
    return None


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _keywords(value: Any) -> list[str]:
    """Trim, deduplicate (case-insensitively) and bound the keyword list."""
    keywords: list[str] = []
    seen: set[str] = set()

    def _add(item: Any) -> None:
        if not isinstance(item, str) or not item.strip():
            return
        key = item.strip().lower()
        if key not in seen and len(keywords) < MAX_KEYWORDS:
            seen.add(key)
            keywords.append(item.strip())

    for item in value if isinstance(value, list) else []:
        _add(item)
    for item in _BASE_KEYWORDS:
        if len(keywords) >= MIN_KEYWORDS:
            break
        _add(item)
    return keywords


def finding_from_payload(payload: dict[str, Any], snippet: ReferenceSnippet) -> Finding:
    """Build a :class:`Finding` from a decoded response, defaulting bad fields."""
    audience = _choice(payload.get("primary_audience"), Audience)
    category = _choice(payload.get("task_category"), TaskCategory)
    reference_type = _choice(payload.get("reference_type"), ReferenceType)
    confidence = _choice(payload.get("confidence"), Confidence) or Confidence.LOW
    notes = _text(payload.get("notes"))

    defaulted = [
        name
        for name, value in (
            ("primary_audience", audience),
            ("task_category", category),
            ("reference_type", reference_type),
        )
        if value is None
    ]
    if defaulted:
        confidence = Confidence.LOW
        extra = f"Defaulted invalid or missing fields: {', '.join(defaulted)}"
        notes = f"{notes} ({extra})" if notes else extra

    return Finding(
        html_context=snippet.text,
        primary_audience=audience or Audience.MIXED,
        task_category=category or TaskCategory.GENERIC,
        reference_type=reference_type or ReferenceType.INFORMATIONAL,
        workday_feature=_text(payload.get("workday_feature")) or DEFAULT_FEATURE,
        proposed_replacement=_text(payload.get("proposed_replacement")) or snippet.text,
        suggested_keywords=_keywords(payload.get("suggested_keywords")),
        confidence=confidence,
        notes=notes,
    )


# ---------------------------------------------------------------------------
# Tier 3: total fallback
# ---------------------------------------------------------------------------

def fallback_finding(snippet: ReferenceSnippet, note: str) -> Finding:
    """Build a generic low-confidence finding without the model."""
    return Finding(
        html_context=snippet.text,
        primary_audience=Audience.MIXED,
        task_category=TaskCategory.GENERIC,
        reference_type=ReferenceType.INFORMATIONAL,
        workday_feature=DEFAULT_FEATURE,
        proposed_replacement=replace_legacy_terms(snippet.text),
        suggested_keywords=_keywords([]),
        confidence=Confidence.LOW,
        notes=note or "Analysis failed",
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify(
    snippet: ReferenceSnippet,
    work_stream_areas: Iterable[str] = (),
    keywords: Iterable[str] = (),
    complete: CompletionFn | None = None,
    temperature: float | None = None,
) -> Finding:
    """Classify *snippet* and propose replacement copy.

    Args:
        snippet: The detected reference.
        work_stream_areas: Caller-supplied organisational areas (hints).
        keywords: Caller-supplied keywords (hints).
        complete: Completion function; defaults to :func:`chat_completion`.
        temperature: Sampling temperature; defaults to
            ``settings.classifier_temperature``.

    Returns:
        A :class:`Finding`.  Never raises.
    """
    complete = complete or chat_completion
    temperature = (
        temperature if temperature is not None else settings.classifier_temperature
    )
    prompt = build_prompt(snippet.text, work_stream_areas, keywords)

    try:
        response = complete([{"role": "user", "content": prompt}], temperature)
    except Exception as exc:  # noqa: BLE001
        print(f"[CLASSIFY] ✗ Completion failed for {snippet.source_url!r}: {exc}")
        return fallback_finding(snippet, f"Analysis failed: {exc}")

    payload = parse_response(response or "")
    if payload is None:
        print(f"[CLASSIFY] ✗ Unparseable response for {snippet.source_url!r}")
        return fallback_finding(snippet, "AI response could not be parsed")

    return finding_from_payload(payload, snippet)
