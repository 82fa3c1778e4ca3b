"""Core: configuración, logging, errores y dominio (sin I/O de red)."""
