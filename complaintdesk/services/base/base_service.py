"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

from sqlalchemy.orm import Session

from complaintdesk.core.events import ChangeEvent, ChangeNotifier
from complaintdesk.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateEntryError,
    InvalidTransitionError,
    ProvisioningError,
    ResourceNotFoundError,
    ValidationError,
)
from complaintdesk.core.logging import get_logger
from complaintdesk.repositories.base.base_repository import BaseRepository
from complaintdesk.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

TModel = TypeVar("TModel")
TRepo = TypeVar("TRepo", bound=BaseRepository)


class BaseService(Generic[TModel, TRepo]):
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    - Change publication after commit
    """

    # Domain exception -> (error code, severity). Checked in order.
    _EXCEPTION_MAPPING = (
        (AuthorizationError, ErrorCode.UNAUTHORIZED, ErrorSeverity.WARNING),
        (AuthenticationError, ErrorCode.AUTHENTICATION_FAILED, ErrorSeverity.WARNING),
        (ResourceNotFoundError, ErrorCode.NOT_FOUND, ErrorSeverity.WARNING),
        (ValidationError, ErrorCode.VALIDATION_ERROR, ErrorSeverity.WARNING),
        (InvalidTransitionError, ErrorCode.INVALID_STATE, ErrorSeverity.WARNING),
        (DuplicateEntryError, ErrorCode.ALREADY_EXISTS, ErrorSeverity.WARNING),
        (ProvisioningError, ErrorCode.PROVISIONING_FAILED, ErrorSeverity.ERROR),
    )

    def __init__(
        self,
        repository: TRepo,
        db_session: Session,
        notifier: Optional[ChangeNotifier] = None,
    ):
        """
        Initialize base service.

        Args:
            repository: Repository instance for data access
            db_session: SQLAlchemy database session
            notifier: Change notifier that receives events after commit
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self.notifier = notifier
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Expected domain failures (denials, missing rows, rejected input) are
        logged at WARNING; anything else is logged at ERROR with traceback
        and reported as INTERNAL_ERROR.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            additional_context: Extra context for logging/debugging

        Returns:
            ServiceResult with failure status and error details
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        for exc_type, code, severity in self._EXCEPTION_MAPPING:
            if isinstance(exception, exc_type):
                if severity == ErrorSeverity.ERROR:
                    self._logger.error(
                        f"{operation} failed: {exception.message}",
                        exc_info=True,
                        extra=context,
                    )
                else:
                    self._logger.warning(
                        f"{operation} refused: {exception.message}",
                        extra=context,
                    )
                return ServiceResult.failure(
                    ServiceError(
                        code=code,
                        message=exception.message,
                        details=exception.details or None,
                        field=getattr(exception, "field", None),
                        severity=severity,
                    )
                )

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra=context,
        )
        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation}",
                details={
                    "error": str(exception),
                    "entity_ref": str(entity_ref) if entity_ref is not None else None,
                },
                severity=ErrorSeverity.CRITICAL,
            )
        )

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self):
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.repository.create(entity)
                # commit on success, rollback on exception
        """
        try:
            yield self.db
            self._commit()
        except Exception:
            self._rollback()
            raise

    def _commit(self) -> None:
        """Commit the current transaction with error handling."""
        try:
            self.db.commit()
            self._logger.debug("Transaction committed successfully")
        except Exception as e:
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            self._rollback()
            raise

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except Exception as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")

    # -------------------------------------------------------------------------
    # Change publication
    # -------------------------------------------------------------------------

    def _publish(self, events: Iterable[ChangeEvent]) -> None:
        """Hand committed changes to the notifier, if one is attached."""
        if self.notifier is None:
            return
        for event in events:
            self.notifier.publish(event)

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log service operation with standardized format.

        Args:
            operation: Description of the operation
            entity_ref: Reference to the entity involved
            extra: Additional context to log
        """
        context = {"entity_ref": str(entity_ref) if entity_ref else None}
        if extra:
            context.update(extra)
        self._logger.info(f"{operation}", extra=context)
