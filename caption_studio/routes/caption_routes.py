from flask import Blueprint, current_app, jsonify, render_template, request
import logging

from caption_studio.errors import CaptionStudioError, ValidationError
from caption_studio.models import (
    LANGUAGE_ENGLISH,
    LANGUAGE_JAPANESE,
    CaptionRequest,
    FeedbackRecord,
)

caption_bp = Blueprint('captions', __name__)
logger = logging.getLogger(__name__)

EXTENSION_KEY = 'caption_studio'
FEEDBACK_REQUIRED_MESSAGE = 'Original draft, generated caption, and feedback are required'


def _services():
    """Services registered on the app by create_app()"""
    return current_app.extensions[EXTENSION_KEY]


def _json_body():
    """Decoded JSON object body; anything else (invalid JSON, arrays, scalars) reads as empty"""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@caption_bp.route('/')
def index():
    """Serve the caption form"""
    return render_template('index.html')


@caption_bp.route('/health')
def health():
    """Health check; does not touch the reference file or the completion API"""
    return jsonify({'status': 'ok'}), 200


@caption_bp.route('/api/generate-caption', methods=['POST'])
def generate_caption():
    """Generate a standard (English) caption. No input validation on this path."""
    try:
        caption_request = CaptionRequest.from_payload(_json_body(), LANGUAGE_ENGLISH)
        result = _services()['caption_service'].generate_caption(caption_request)
        return jsonify(result.to_dict())
    except Exception:
        logger.exception("Error generating caption")
        return jsonify({'error': 'Failed to generate caption'}), 500


@caption_bp.route('/api/japanese-caption', methods=['POST'])
def japanese_caption():
    """Generate a Japanese caption from the client's reference examples"""
    try:
        caption_request = CaptionRequest.from_payload(_json_body(), LANGUAGE_JAPANESE)
        result = _services()['caption_service'].generate_japanese_caption(caption_request)
        return jsonify(result.to_dict())
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except CaptionStudioError as e:
        logger.error(f"Error generating Japanese caption: {type(e).__name__} - {e}")
        return jsonify({
            'error': 'Failed to generate Japanese caption',
            'message': str(e)
        }), e.status_code
    except Exception as e:
        logger.exception("Unexpected error generating Japanese caption")
        return jsonify({
            'error': 'Failed to generate Japanese caption',
            'message': str(e)
        }), 500


@caption_bp.route('/api/caption-feedback', methods=['POST'])
def caption_feedback():
    """Record user feedback on a generated caption"""
    try:
        payload = _json_body()

        if not all(payload.get(field) for field in FeedbackRecord.REQUIRED_FIELDS):
            return jsonify({'error': FEEDBACK_REQUIRED_MESSAGE}), 400

        entry = FeedbackRecord.from_payload(payload)

        # Write outcome is not reported to the client; failures are logged by the logger
        _services()['feedback_logger'].record(entry)

        return jsonify({
            'success': True,
            'message': 'Feedback recorded successfully'
        })
    except Exception as e:
        logger.exception("Error in feedback route")
        return jsonify({
            'error': 'Failed to record feedback',
            'message': str(e)
        }), 500
