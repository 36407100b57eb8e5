"""
Caption service - coordinates one caption generation.
Loads reference captions, composes the prompt and calls the completion gateway.
"""
import csv
import logging
import time

from caption_studio.errors import DataError
from caption_studio.models import CaptionRequest, CaptionResult
from caption_studio.services import prompt_composer
from caption_studio.services.llm_client import CompletionGateway
from caption_studio.services.reference_store import ReferenceStore

logger = logging.getLogger(__name__)


class CaptionService:
    """
    Generates brand-voice captions from drafts.

    Args:
        reference_store: Source of reference captions (read once per request).
        gateway: Completion gateway used for the model call.
        model: Model identifier passed to the gateway.
    """

    def __init__(self, reference_store: ReferenceStore, gateway: CompletionGateway, model: str):
        self.reference_store = reference_store
        self.gateway = gateway
        self.model = model

    def _load_references(self) -> list:
        try:
            return self.reference_store.load_references()
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise DataError(f"Could not load reference captions: {e}") from e

    def _generate(self, request: CaptionRequest) -> str:
        start_time = time.time()

        # Reject invalid input before touching the disk or the API
        prompt_composer.check_request(request)

        references = self._load_references()
        prompt = prompt_composer.compose(request, references)
        options = prompt_composer.completion_options(request, self.model)

        logger.info(
            f"Generating {request.language} caption: {len(references)} references available, "
            f"draft={len(request.draft_caption)} chars"
        )
        caption = self.gateway.complete(
            prompt.system_instruction,
            prompt.user_instruction,
            options,
        )

        duration = time.time() - start_time
        logger.info(f"Caption generated: language={request.language}, duration={duration:.2f}s")
        return caption

    def generate_caption(self, request: CaptionRequest) -> CaptionResult:
        """
        Standard (English) generation. The model output is returned unmodified.

        Raises:
            DataError: Reference file unreadable or not UTF-8.
            UpstreamError: Completion call failed.
        """
        return CaptionResult(caption=self._generate(request))

    def generate_japanese_caption(self, request: CaptionRequest) -> CaptionResult:
        """
        Japanese generation. Echoes the draft and metadata back with the trimmed caption.

        Raises:
            ValidationError: Empty draft caption.
            DataError: Reference file unreadable or not UTF-8.
            UpstreamError: Completion call failed.
        """
        caption = self._generate(request).strip()
        return CaptionResult(
            caption=caption,
            original=request.draft_caption,
            content_type=request.content_type,
            content_theme=request.content_theme,
        )
