"""
Request, result and record types shared by the routes and services.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

LANGUAGE_ENGLISH = 'en'
LANGUAGE_JAPANESE = 'ja'

DEFAULT_RATING = '3'
DEFAULT_LANGUAGE = LANGUAGE_ENGLISH


def _text(payload: Mapping[str, Any], key: str) -> str:
    """Return payload[key] as a string, or '' when missing."""
    value = payload.get(key)
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


def _optional_text(payload: Mapping[str, Any], key: str) -> Optional[str]:
    """Return payload[key] as a string, or None when missing."""
    value = payload.get(key)
    if value is None:
        return None
    return _text(payload, key)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2025-01-31T09:15:00.123Z"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class CaptionRequest:
    draft_caption: str = ''
    # None when the client omitted the field, so results can leave it out
    content_type: Optional[str] = None
    content_theme: Optional[str] = None
    additional_notes: str = ''
    language: str = LANGUAGE_ENGLISH

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]], language: str) -> 'CaptionRequest':
        """
        Build a request from a JSON body using the form's camelCase field names.

        Args:
            payload: Decoded JSON body (may be None).
            language: Language selected by the endpoint ('en' or 'ja').
        """
        payload = payload or {}
        return cls(
            draft_caption=_text(payload, 'draftCaption'),
            content_type=_optional_text(payload, 'contentType'),
            content_theme=_optional_text(payload, 'contentTheme'),
            additional_notes=_text(payload, 'additionalNotes'),
            language=language,
        )


@dataclass(frozen=True)
class CaptionResult:
    caption: str
    original: Optional[str] = None
    content_type: Optional[str] = None
    content_theme: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Serialise with camelCase keys, omitting fields that are not set."""
        data = {
            'caption': self.caption,
            'original': self.original,
            'contentType': self.content_type,
            'contentTheme': self.content_theme,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class ComposedPrompt:
    system_instruction: str
    user_instruction: str


@dataclass(frozen=True)
class CompletionOptions:
    model: str
    max_tokens: int
    temperature: float = 0.7


@dataclass(frozen=True)
class FeedbackRecord:
    """
    One line of the feedback log. Never modified after it is written.
    """
    original_draft: str
    generated_caption: str
    feedback: str
    rating: str = DEFAULT_RATING
    language: str = DEFAULT_LANGUAGE
    timestamp: str = ''

    REQUIRED_FIELDS = ('originalDraft', 'generatedCaption', 'feedback')

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], timestamp: Optional[str] = None) -> 'FeedbackRecord':
        """
        Build a record from the feedback form body, applying rating/language defaults.
        Required fields are checked by the caller.
        """
        return cls(
            original_draft=_text(payload, 'originalDraft'),
            generated_caption=_text(payload, 'generatedCaption'),
            feedback=_text(payload, 'feedback'),
            rating=_text(payload, 'rating') or DEFAULT_RATING,
            language=_text(payload, 'language') or DEFAULT_LANGUAGE,
            timestamp=timestamp or utc_timestamp(),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            'timestamp': self.timestamp,
            'originalDraft': self.original_draft,
            'generatedCaption': self.generated_caption,
            'feedback': self.feedback,
            'rating': self.rating,
            'language': self.language,
        }
