"""Centralised settings for the website scanner backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_CONTEXT_TERMS = (
    "student,system,ERP,SIS,Banner,registration,HR,finance,payroll,portal,information"
)


def _csv_env(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Chat / classification model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "openai")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_MODEL", "gpt-4.1-mini")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    classifier_temperature: float = field(
        default_factory=lambda: float(os.environ.get("CLASSIFIER_TEMPERATURE", "0.2"))
    )
    completion_max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("COMPLETION_MAX_TOKENS", "4000"))
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "SCANNER_USER_AGENT",
            "Mozilla/5.0 (compatible; Workday Website Scanner)",
        )
    )
    crawl_timeout: float = field(
        default_factory=lambda: float(os.environ.get("CRAWL_TIMEOUT", "10.0"))
    )
    crawl_max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("CRAWL_MAX_REDIRECTS", "5"))
    )
    analyze_timeout: float = field(
        default_factory=lambda: float(os.environ.get("ANALYZE_TIMEOUT", "20.0"))
    )
    analyze_max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("ANALYZE_MAX_REDIRECTS", "10"))
    )
    page_text_limit: int = field(
        default_factory=lambda: int(os.environ.get("PAGE_TEXT_LIMIT", "30000"))
    )

    # ------------------------------------------------------------------
    # Operation caps
    # ------------------------------------------------------------------
    operation_timeout: float = field(
        default_factory=lambda: float(os.environ.get("OPERATION_TIMEOUT", "300"))
    )
    max_scan_urls: int = field(
        default_factory=lambda: int(os.environ.get("MAX_SCAN_URLS", "300"))
    )
    max_scan_depth: int = field(
        default_factory=lambda: int(os.environ.get("MAX_SCAN_DEPTH", "5"))
    )
    max_analyze_urls: int = field(
        default_factory=lambda: int(os.environ.get("MAX_ANALYZE_URLS", "500"))
    )

    # ------------------------------------------------------------------
    # Reference detection
    # ------------------------------------------------------------------
    legacy_context_terms: list[str] = field(
        default_factory=lambda: _csv_env("LEGACY_CONTEXT_TERMS", _DEFAULT_CONTEXT_TERMS)
    )


# Module-level singleton, import this everywhere:
#   from backend.config import settings
settings = Settings()
