"""Carga del descriptor de despliegue (`.koyeb/koyeb.yaml`).

Vive en adapters porque es I/O puro (fichero + YAML); la validación es
responsabilidad de `core.domain.deployment`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from core.domain.deployment import DeploymentDescriptor
from core.errors import DeploymentConfigError


def load_raw_descriptor(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise DeploymentConfigError(f"Deployment descriptor not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise DeploymentConfigError(f"Deployment descriptor '{path}' contains invalid YAML") from exc

    if not isinstance(data, Mapping):
        raise DeploymentConfigError("Deployment descriptor must contain a mapping at the root")
    return data


def load_deployment(path: Path) -> DeploymentDescriptor:
    """Lee y valida el descriptor; cualquier problema sale como `DeploymentConfigError`."""

    raw = load_raw_descriptor(path)
    try:
        return DeploymentDescriptor.model_validate(raw)
    except ValidationError as exc:
        raise DeploymentConfigError(f"Invalid deployment descriptor '{path}':\n{exc}") from exc
