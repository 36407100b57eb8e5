"""
Feedback Logger Service
Appends user feedback on generated captions to a JSON-lines file
"""
import os
import json
import logging

from caption_studio.models import FeedbackRecord

logger = logging.getLogger(__name__)


class FeedbackLogger:
    """Service for recording caption feedback to an append-only log file"""

    def __init__(self, log_path):
        self.log_path = log_path

    def _ensure_directory(self):
        """
        Create the log directory if it does not exist.

        Returns:
            bool: True if the directory exists or was created, False otherwise
        """
        directory = os.path.dirname(self.log_path)
        if not directory or os.path.isdir(directory):
            return True
        try:
            os.makedirs(directory, exist_ok=True)
            return True
        except OSError as e:
            logger.error(f"Error creating feedback directory {directory}: {e}")
            return False

    @staticmethod
    def _to_line(entry: FeedbackRecord):
        """
        Serialise a record as one JSON line, keeping non-ASCII text readable.
        Text that is not valid UTF-8 (lone surrogates) is written \\u-escaped instead.
        """
        data = entry.to_dict()
        line = json.dumps(data, ensure_ascii=False) + '\n'
        try:
            line.encode('utf-8')
        except UnicodeEncodeError:
            line = json.dumps(data) + '\n'
        return line

    def record(self, entry: FeedbackRecord):
        """
        Append one feedback record as a single JSON line.

        Failures are logged and swallowed; the record is dropped and not retried.

        Args:
            entry: The feedback record to write

        Returns:
            bool: True if the line was written, False otherwise
        """
        if not self._ensure_directory():
            return False

        try:
            line = self._to_line(entry)
            # One write() per record in append mode keeps lines from interleaving
            with open(self.log_path, 'a', encoding='utf-8') as f:
                f.write(line)
        except (OSError, ValueError) as e:
            logger.error(f"Error saving feedback: {e}")
            return False

        logger.info(
            f"Feedback saved successfully: rating={entry.rating}, language={entry.language}"
        )
        return True
