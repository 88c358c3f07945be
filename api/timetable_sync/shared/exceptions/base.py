"""
Excepción base para todas las excepciones personalizadas de la aplicación.
"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Excepción base de la aplicación.
    Todas las excepciones personalizadas deben heredar de esta clase.

    `details` viaja tal cual al cuerpo de la respuesta HTTP y a los logs
    del scheduler, por eso solo debe contener valores serializables.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: Mensaje de error descriptivo
            status_code: Código de estado HTTP
            error_code: Código de error para el cliente (SHEETS_API_ERROR, ...)
            details: Contexto estructurado (url, status_code, snippet, ...)
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Cuerpo de la respuesta de error del API."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }
