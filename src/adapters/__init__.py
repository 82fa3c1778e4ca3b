"""Adapters: I/O puro (HTTP contra la API de documentos, YAML, JSON)."""
