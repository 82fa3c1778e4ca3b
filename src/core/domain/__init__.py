"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos (Pydantic v2): documentos, opciones de
  actualización y el descriptor de despliegue.
- El dominio no conoce HTTP ni CLI: solo conceptos del problema.
"""
