from flask import Flask
import logging
from dotenv import load_dotenv

from caption_studio.config import Settings
from caption_studio.routes.caption_routes import EXTENSION_KEY, caption_bp
from caption_studio.services import (
    CaptionService,
    CompletionGateway,
    FeedbackLogger,
    build_reference_store
)

# Load environment variables before settings are read
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )


def create_app(settings=None, reference_store=None, gateway=None, feedback_logger=None):
    """
    Build the Flask app and wire the caption services.

    Args:
        settings: Settings instance (defaults to Settings.from_env()).
        reference_store: Override for the reference caption store.
        gateway: Override for the completion gateway.
        feedback_logger: Override for the feedback logger.

    Returns:
        Configured Flask application.
    """
    if settings is None:
        settings = Settings.from_env()

    # Templates and static assets live inside the caption_studio package
    app = Flask('caption_studio', static_folder='static', template_folder='templates')
    app.config['SETTINGS'] = settings

    # Served behind a platform reverse proxy in production
    from werkzeug.middleware.proxy_fix import ProxyFix
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    if reference_store is None:
        reference_store = build_reference_store(
            settings.captions_csv_path,
            cache_ttl=settings.reference_cache_ttl
        )
    if gateway is None:
        gateway = CompletionGateway(api_key=settings.openai_api_key)
    if feedback_logger is None:
        feedback_logger = FeedbackLogger(settings.feedback_log_path)

    app.extensions[EXTENSION_KEY] = {
        'caption_service': CaptionService(reference_store, gateway, model=settings.openai_model),
        'feedback_logger': feedback_logger,
    }

    app.register_blueprint(caption_bp)

    logger.info(
        f"Caption studio initialized: model={settings.openai_model}, "
        f"references={settings.captions_csv_path}, feedback={settings.feedback_log_path}, "
        f"api_key_set={bool(settings.openai_api_key)}"
    )
    return app


settings = Settings.from_env()
configure_logging(settings)
app = create_app(settings)

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=settings.port)
