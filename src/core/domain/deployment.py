"""Descriptor de despliegue (Koyeb) modelado con Pydantic.

Por qué modelarlo si la plataforma lo consume tal cual:
- Validamos el YAML antes de desplegar (puertos expuestos, duraciones, etc.).
- La CLI puede mostrarlo y comprobar qué secretos `${VAR}` faltan.

Nota:
- Las claves y valores se mantienen idénticos al YAML; no se reinterpretan.
"""

from __future__ import annotations

import re
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict

from core.errors import DeploymentConfigError

_DURATION_RE = re.compile(r"^(?P<amount>\d+)(?P<unit>ms|s|m|h)$")
_PLACEHOLDER_RE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)\}")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def duration_seconds(value: str) -> float:
    """Convierte `30s`, `500ms`, `2m`, `1h` a segundos."""

    match = _DURATION_RE.match(value)
    if match is None:
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. '30s', '500ms', '2m')")
    return int(match.group("amount")) * _UNIT_SECONDS[match.group("unit")]


class PortSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    port: int = Field(..., ge=1, le=65535)
    protocol: Literal["http", "http2", "tcp"] = "http"


class EnvVar(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> str:
        # YAML convierte `8000` en int; la plataforma lo trata como texto.
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    def placeholders(self) -> list[str]:
        return [m.group("name") for m in _PLACEHOLDER_RE.finditer(self.value)]


class Route(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., pattern=r"^/")
    port: int = Field(..., ge=1, le=65535)


class HealthCheck(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["http", "tcp"] = "http"
    port: int = Field(..., ge=1, le=65535)
    path: str | None = Field(default=None, pattern=r"^/")
    initial_delay: str = "0s"
    interval: str = "30s"
    timeout: str = "5s"
    success_threshold: int = Field(default=1, ge=1)
    failure_threshold: int = Field(default=3, ge=1)

    @field_validator("initial_delay", "interval", "timeout")
    @classmethod
    def _check_duration(cls, value: str) -> str:
        duration_seconds(value)
        return value

    @model_validator(mode="after")
    def _http_needs_path(self) -> "HealthCheck":
        if self.type == "http" and not self.path:
            raise ValueError("http health checks require a path")
        return self

    def seconds(self, field: Literal["initial_delay", "interval", "timeout"]) -> float:
        return duration_seconds(getattr(self, field))


class ServiceSpec(BaseModel):
    """Servicio desplegado: comando, puertos, entorno, rutas y health checks."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=63, pattern=r"^[a-z0-9][a-z0-9-]*$")
    type: Literal["web", "worker"] = "web"
    command: str | None = None
    ports: list[PortSpec] = Field(default_factory=list)
    env: list[EnvVar] = Field(default_factory=list)
    routes: list[Route] = Field(default_factory=list)
    healthchecks: list[HealthCheck] = Field(default_factory=list)

    @model_validator(mode="after")
    def _targets_exposed_ports(self) -> "ServiceSpec":
        exposed = {p.port for p in self.ports}
        for route in self.routes:
            if route.port not in exposed:
                raise ValueError(f"route {route.path!r} targets unexposed port {route.port}")
        for check in self.healthchecks:
            if check.port not in exposed:
                raise ValueError(f"health check targets unexposed port {check.port}")

        names = [e.name for e in self.env]
        duplicated = sorted({n for n in names if names.count(n) > 1})
        if duplicated:
            raise ValueError(f"duplicated env vars: {', '.join(duplicated)}")
        return self

    def env_map(self) -> dict[str, str]:
        return {e.name: e.value for e in self.env}

    def placeholders(self) -> list[str]:
        """Nombres `${VAR}` referenciados por el entorno, en orden de aparición."""

        seen: list[str] = []
        for var in self.env:
            for name in var.placeholders():
                if name not in seen:
                    seen.append(name)
        return seen

    def missing_placeholders(self, environ: Mapping[str, str]) -> list[str]:
        return [name for name in self.placeholders() if name not in environ]

    def resolve_env(self, environ: Mapping[str, str]) -> dict[str, str]:
        """Sustituye `${VAR}` con valores de `environ`.

        Lanza `DeploymentConfigError` listando todas las variables ausentes.
        """

        missing = self.missing_placeholders(environ)
        if missing:
            raise DeploymentConfigError(f"Missing environment variables: {', '.join(missing)}")
        return {
            var.name: _PLACEHOLDER_RE.sub(lambda m: environ[m.group("name")], var.value)
            for var in self.env
        }


class DeploymentDescriptor(BaseModel):
    """Raíz del YAML: `{service: {...}}`."""

    model_config = ConfigDict(extra="forbid")

    service: ServiceSpec
