"""
Composition root for the GradeDesk core.
"""

from typing import Any, Dict, Optional

from .app_logger import get_logger, setup_logging
from .config import load_config
from .core.interfaces import GradeGateway, KeyValueStorage
from .services import ErrorLogger, GradeService
from .services.error_logger import Reporter


logger = get_logger(__name__)


class GradeDeskApp:
    """Wires logging, error logging and the grade service around a gateway."""

    def __init__(self, gateway: GradeGateway, storage: Optional[KeyValueStorage] = None,
                 config: Optional[Dict[str, Any]] = None, reporter: Optional[Reporter] = None,
                 config_path: Optional[str] = None):
        self._config = load_config(config_path, config)
        self._gateway = gateway
        self._storage = storage
        self._reporter = reporter
        self._error_logger = None
        self._grade_service = None

        self._initialize()

    def _initialize(self):
        setup_logging(self._config.get('log_level'))
        logger.info("Initializing GradeDesk...")

        self._error_logger = ErrorLogger(
            storage=self._storage,
            reporter=self._reporter,
            max_logs=self._config.get('max_error_logs', 100),
            max_persisted=self._config.get('max_persisted_errors', 50),
            storage_key=self._config.get('error_log_storage_key', 'errorLogs'),
        )
        logger.debug("Error logger ready (persistence=%s, reporter=%s)",
                     self._storage is not None, self._reporter is not None)

        self._grade_service = GradeService(self._gateway, self._error_logger)
        logger.info("GradeDesk initialized with gateway %s", type(self._gateway).__name__)

    @property
    def config(self) -> Dict[str, Any]:
        return dict(self._config)

    @property
    def error_logger(self) -> ErrorLogger:
        return self._error_logger

    @property
    def grade_service(self) -> GradeService:
        return self._grade_service
