import threading

from docvision.processor.models import ProcessingSession


class SessionStore:
    """Single slot holding the most recently completed run.

    Downstream consumers read it; only the orchestrator replaces it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._session: ProcessingSession | None = None

    def replace(self, session: ProcessingSession) -> None:
        with self._lock:
            self._session = session

    def current(self) -> ProcessingSession | None:
        with self._lock:
            return self._session

    def describe(self) -> dict[str, object] | None:
        """Short description of the latest run, or None before the first run."""
        session = self.current()
        if session is None:
            return None
        return {
            "filePath": str(session.document_path),
            "processedAt": session.timestamp.isoformat(),
            "pageCount": len(session.pages),
            "fileHash": session.document_hash,
        }
