"""
Caption generation and feedback services.
"""
from caption_studio.services.reference_store import (
    ReferenceStore,
    CsvReferenceStore,
    CachingReferenceStore,
    build_reference_store,
    load_captions_from_csv
)
from caption_studio.services.llm_client import CompletionGateway
from caption_studio.services.feedback_logger import FeedbackLogger
from caption_studio.services.caption_service import CaptionService

__all__ = [
    'ReferenceStore',
    'CsvReferenceStore',
    'CachingReferenceStore',
    'build_reference_store',
    'load_captions_from_csv',
    'CompletionGateway',
    'FeedbackLogger',
    'CaptionService'
]
