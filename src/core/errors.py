"""Errores propios del cliente.

Solo modelamos lo que la capa aporta: respuestas HTTP no exitosas y
descriptores de despliegue inválidos. Los fallos de transporte (`httpx`) y de
JSON se propagan tal cual.
"""

from __future__ import annotations


class DocumentsAPIError(Exception):
    """La API respondió, pero con un status fuera del rango 2xx."""

    def __init__(self, operation: str, *, status_code: int, reason: str, body: str) -> None:
        self.operation = operation
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"Failed to {operation}: {reason} - {body}")


class DeploymentConfigError(ValueError):
    """El descriptor de despliegue no existe, no es YAML válido o no cumple el esquema."""
