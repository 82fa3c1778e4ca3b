"""CLI (Typer + Rich): comandos de actualización, doctor y deploy."""
