"""
Extraction adapter: raw report text + country hint -> ParsedProfile.

One request per report through a TextGenerator (GeminiClient in production,
any object with generate(prompt) -> str in tests). The adapter is stateless
apart from its generator, so concurrent extractions are allowed; limiting
"one request in flight" is a UI policy, not an engine rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from credit_passport.config.settings import Settings, get_settings
from credit_passport.core.exceptions import ExtractionParseError
from credit_passport.extraction.gemini_client import GeminiClient
from credit_passport.extraction.parser import parse_extraction_response
from credit_passport.extraction.prompt import build_extraction_prompt
from credit_passport.passport_logging import get_logger
from credit_passport.profiles.models import FieldDefaultingNotice, ParsedProfile

logger = get_logger(__name__)


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class ExtractionResult:
    """ParsedProfile plus the fields that had to be defaulted (degraded confidence)."""

    profile: ParsedProfile
    notices: tuple[FieldDefaultingNotice, ...] = field(default_factory=tuple)

    @property
    def defaulted_fields(self) -> list[str]:
        return [n.field for n in self.notices]

    def to_dict(self) -> dict[str, Any]:
        out = self.profile.to_dict()
        out["defaultedFields"] = self.defaulted_fields
        return out


class ExtractionAdapter:
    """Builds the extraction prompt, calls the generator once, parses and defaults the answer."""

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    def extract(self, report_text: str, country_hint: str | None = None) -> ExtractionResult:
        """
        Raises TransportError when the generator fails and ExtractionParseError
        when its answer is not a JSON object. Missing fields are defaulted.
        """
        prompt = build_extraction_prompt(report_text, country_hint)
        logger.info(
            "extraction_started",
            report_chars=len(report_text),
            country_hint=country_hint or "auto",
        )
        response_text = self._generator.generate(prompt)
        try:
            profile, notices = parse_extraction_response(
                response_text,
                report_text=report_text,
                country_hint=country_hint,
            )
        except ExtractionParseError:
            logger.warning("extraction_parse_failed", response_chars=len(response_text or ""))
            raise
        logger.info(
            "extraction_completed",
            country=profile.country,
            score_max=profile.score.max,
            defaulted_fields=len(notices),
        )
        return ExtractionResult(profile=profile, notices=tuple(notices))


def build_gemini_adapter(settings: Settings | None = None, **client_kwargs: Any) -> ExtractionAdapter:
    """ExtractionAdapter backed by GeminiClient. ConfigurationError when GEMINI_API_KEY is missing."""
    settings = settings or get_settings()
    return ExtractionAdapter(GeminiClient(settings, **client_kwargs))
