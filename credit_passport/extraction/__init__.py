"""
Extraction package: free-text credit report -> canonical ParsedProfile.

The prompt module owns the extraction contract sent to the model, the parser
turns whatever JSON comes back into a fully defaulted profile, and the
adapter wires both around a text-generation transport.
"""

from credit_passport.extraction.adapter import (
    ExtractionAdapter,
    ExtractionResult,
    TextGenerator,
    build_gemini_adapter,
)
from credit_passport.extraction.gemini_client import GeminiClient
from credit_passport.extraction.parser import (
    decode_extraction_json,
    parse_extraction_response,
    profile_from_payload,
    strip_code_fence,
)
from credit_passport.extraction.prompt import (
    build_extraction_prompt,
    build_instruction_block,
    resolve_country,
)

__all__ = [
    "ExtractionAdapter",
    "ExtractionResult",
    "TextGenerator",
    "build_gemini_adapter",
    "GeminiClient",
    "decode_extraction_json",
    "parse_extraction_response",
    "profile_from_payload",
    "strip_code_fence",
    "build_extraction_prompt",
    "build_instruction_block",
    "resolve_country",
]
