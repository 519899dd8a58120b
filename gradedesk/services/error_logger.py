"""
Error logging service.

Keeps a bounded in-memory log of errors raised through the service layer,
mirrors short summaries into an optional key/value storage and can hand
entries to an external reporter. It is injected where needed rather than
shared as a module-level singleton.
"""

import json
import secrets
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..app_logger import get_logger
from ..core.enums import ErrorCode, ErrorSeverity
from ..core.exceptions import GradeDeskException
from ..core.interfaces import KeyValueStorage


logger = get_logger(__name__)

Reporter = Callable[[Dict[str, Any]], Awaitable[None]]

_SEVERITY_BY_CODE = {
    ErrorCode.AUTHENTICATION_ERROR: ErrorSeverity.MEDIUM,
    ErrorCode.AUTHORIZATION_ERROR: ErrorSeverity.MEDIUM,
    ErrorCode.VALIDATION_ERROR: ErrorSeverity.LOW,
    ErrorCode.NETWORK_ERROR: ErrorSeverity.MEDIUM,
    ErrorCode.SERVER_ERROR: ErrorSeverity.HIGH,
}


@dataclass
class ErrorLogEntry:
    """A logged error with its context."""
    id: str
    timestamp: datetime
    error: BaseException
    severity: ErrorSeverity
    context: Dict[str, Any] = field(default_factory=dict)
    reported: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            'errorId': self.id,
            'message': str(self.error),
            'errorType': type(self.error).__name__,
            'context': self.context,
            'timestamp': self.timestamp.isoformat(),
            'severity': self.severity.value,
        }


class ErrorLogger:
    """Bounded error log with optional persistence and reporting."""

    def __init__(self, storage: Optional[KeyValueStorage] = None, reporter: Optional[Reporter] = None,
                 max_logs: int = 100, max_persisted: int = 50, storage_key: str = 'errorLogs'):
        self._storage = storage
        self._reporter = reporter
        self._max_logs = max_logs
        self._max_persisted = max_persisted
        self._storage_key = storage_key
        self._logs: 'OrderedDict[str, ErrorLogEntry]' = OrderedDict()

    @staticmethod
    def generate_error_id() -> str:
        return f"err_{int(time.time() * 1000)}_{secrets.token_hex(5)}"

    @staticmethod
    def determine_severity(error: BaseException) -> ErrorSeverity:
        if isinstance(error, GradeDeskException):
            return _SEVERITY_BY_CODE.get(error.error_code, ErrorSeverity.MEDIUM)
        if isinstance(error, (TypeError, NameError)):
            return ErrorSeverity.HIGH
        return ErrorSeverity.MEDIUM

    def log_error(self, error: BaseException, context: Optional[Dict[str, Any]] = None) -> str:
        """Record an error and return its id."""
        entry = ErrorLogEntry(
            id=self.generate_error_id(),
            timestamp=datetime.now(timezone.utc),
            error=error,
            severity=self.determine_severity(error),
            context=dict(context or {}),
        )

        self._logs[entry.id] = entry
        while len(self._logs) > self._max_logs:
            self._logs.popitem(last=False)

        level = 'error' if entry.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL) else 'warning'
        getattr(logger, level)(
            "Error logged: id=%s severity=%s type=%s message=%s context=%s",
            entry.id, entry.severity.value, type(error).__name__, error, entry.context
        )

        self._persist(entry)
        return entry.id

    async def report_error(self, error_id: str) -> bool:
        """Send an entry to the reporter; False when it cannot or need not be sent."""
        entry = self._logs.get(error_id)
        if entry is None or entry.reported or self._reporter is None:
            return False

        try:
            await self._reporter(entry.to_payload())
        except Exception as e:
            logger.warning("Failed to report error %s: %s", error_id, e)
            return False

        entry.reported = True
        logger.info("Error %s reported", error_id)
        return True

    def get_error_log(self, error_id: str) -> Optional[ErrorLogEntry]:
        return self._logs.get(error_id)

    def get_all_error_logs(self) -> List[ErrorLogEntry]:
        """All in-memory entries, newest first."""
        return list(reversed(self._logs.values()))

    def get_unreported_errors(self) -> List[ErrorLogEntry]:
        return [e for e in self.get_all_error_logs() if not e.reported]

    def get_persisted_errors(self) -> List[Dict[str, Any]]:
        if self._storage is None:
            return []
        try:
            stored = self._storage.get(self._storage_key)
            persisted = json.loads(stored) if stored else []
        except Exception as e:
            logger.warning("Could not read persisted error logs: %s", e)
            return []

        if not isinstance(persisted, list):
            logger.warning("Ignoring persisted error logs of type %s", type(persisted).__name__)
            return []
        return persisted

    def clear_error_logs(self) -> None:
        self._logs.clear()
        if self._storage is not None:
            try:
                self._storage.remove(self._storage_key)
            except Exception as e:
                logger.warning("Could not clear persisted error logs: %s", e)

    def _persist(self, entry: ErrorLogEntry) -> None:
        if self._storage is None:
            return

        persisted = self.get_persisted_errors()
        persisted.append({
            'id': entry.id,
            'timestamp': entry.timestamp.isoformat(),
            'message': str(entry.error),
            'severity': entry.severity.value,
            'reported': entry.reported,
        })
        persisted = persisted[-self._max_persisted:]

        try:
            self._storage.set(self._storage_key, json.dumps(persisted))
        except Exception as e:
            logger.warning("Could not persist error log %s: %s", entry.id, e)
