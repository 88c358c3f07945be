"""
Excepciones relacionadas con la lógica de dominio.
"""
from datetime import date
from typing import Optional

from timetable_sync.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""
    
    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class ValidationException(DomainException):
    """Excepción para errores de validación."""
    
    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


class ScheduleNotFoundException(DomainException):
    """Excepcion cuando no hay horario proximo (o para la fecha/grupo pedido)."""
    
    def __init__(self, since: Optional[date] = None, group: Optional[str] = None):
        details = {}
        if since is not None:
            details["since"] = since.isoformat()
        if group is not None:
            details["group"] = group
        super().__init__(
            message="Расписание на ближайшие дни не найдено.",
            error_code="SCHEDULE_NOT_FOUND",
            details=details
        )
        self.status_code = 404
