"""
Application settings captured from the environment once at startup.
"""
import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'gpt-4'
DEFAULT_PORT = 3000
DEFAULT_CAPTIONS_CSV_PATH = 'client_captions.csv'
DEFAULT_FEEDBACK_LOG_PATH = os.path.join('feedback', 'caption_feedback.jsonl')


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    """
    Read an integer variable, falling back to the default when unset or invalid.
    """
    raw = env.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}={raw!r}, using default {default}")
        return default


@dataclass(frozen=True)
class Settings:
    """
    Immutable configuration passed to the app factory and services.

    Attributes:
        openai_api_key: Credential for the completion API (None if unset).
        openai_model: Model identifier sent with every completion request.
        port: HTTP port the server listens on.
        captions_csv_path: Path to the reference caption CSV.
        feedback_log_path: Path to the JSON-lines feedback file.
        reference_cache_ttl: Seconds to cache parsed references; 0 re-reads every request.
        server_threads: Worker threads for waitress.
        log_level: Root logging level name.
    """
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_MODEL
    port: int = DEFAULT_PORT
    captions_csv_path: str = DEFAULT_CAPTIONS_CSV_PATH
    feedback_log_path: str = DEFAULT_FEEDBACK_LOG_PATH
    reference_cache_ttl: int = 0
    server_threads: int = 4
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'Settings':
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ).

        Returns:
            Settings instance.
        """
        if env is None:
            env = os.environ

        return cls(
            openai_api_key=env.get('OPENAI_API_KEY') or None,
            openai_model=env.get('OPENAI_MODEL') or DEFAULT_MODEL,
            port=_int_from_env(env, 'PORT', DEFAULT_PORT),
            captions_csv_path=env.get('CAPTIONS_CSV_PATH') or DEFAULT_CAPTIONS_CSV_PATH,
            feedback_log_path=env.get('FEEDBACK_LOG_PATH') or DEFAULT_FEEDBACK_LOG_PATH,
            reference_cache_ttl=max(0, _int_from_env(env, 'REFERENCE_CACHE_TTL', 0)),
            server_threads=max(1, _int_from_env(env, 'SERVER_THREADS', 4)),
            log_level=(env.get('LOG_LEVEL') or 'INFO').upper(),
        )
