"""In-memory, single-slot storage of the current resume.

Only one resume is held at a time; a new upload replaces the previous one
along with its extraction.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from models.schemas.resume import StructuredResume
from services.errors import NoExtractionError, NoResumeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResumeRecord:
    file_name: str
    raw_text: str
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    structured: StructuredResume | None = None

    def preview(self, length: int) -> str:
        return self.raw_text[:length] + "..."


class ResumeStore:
    def __init__(self) -> None:
        self._record: ResumeRecord | None = None
        self._lock = threading.Lock()

    def store(self, record: ResumeRecord) -> None:
        with self._lock:
            self._record = record
        logger.info("Resume stored: %s (%d chars)", record.file_name, len(record.raw_text))

    def get(self) -> ResumeRecord | None:
        with self._lock:
            return self._record

    def has_resume(self) -> bool:
        return self.get() is not None

    def clear(self) -> None:
        with self._lock:
            self._record = None
        logger.info("Resume cleared from memory")

    def require_resume(self) -> ResumeRecord:
        record = self.get()
        if record is None:
            raise NoResumeError()
        return record

    def require_structured(self) -> StructuredResume:
        record = self.require_resume()
        if record.structured is None:
            raise NoExtractionError()
        return record.structured

    def attach_extraction(self, raw_text: str, structured: StructuredResume) -> ResumeRecord:
        """Attach ``structured`` to the stored resume it was extracted from.

        The extraction is dropped when the resume was replaced or cleared
        while the model was running.
        """
        with self._lock:
            current = self._record
            if current is None:
                raise NoResumeError()
            if current.raw_text != raw_text:
                logger.warning("Resume changed during extraction; discarding stale result")
                return current
            self._record = replace(current, structured=structured)
            return self._record


_store = ResumeStore()


def get_store() -> ResumeStore:
    return _store
