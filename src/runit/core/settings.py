"""Process configuration for runit.

``RunitSettings`` is built once at process entry (usually by the CLI) and
passed by reference to the cluster client factory, the supervisor and the
API app. It is frozen: nothing reads or mutates process-wide flags after
startup.

Order of precedence (highest → lowest):
    1. Explicit keyword arguments (CLI flags)
    2. Environment variables (``RUNIT_IN_CLUSTER``, ``RUNIT_KUBECONFIG`` …)
    3. ``.env`` file
    4. Defaults below

Examples:
    >>> settings = RunitSettings(in_cluster=True)
    >>> settings.auth_enabled
    False

Tags:
    settings, configuration, pydantic, environment, runit

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RunitSettings(BaseSettings):
    """Immutable settings shared by every runit component.

    Fields
    ──────
    in_cluster    : Resolve credentials from the pod service account
    kubeconfig    : Path to a kubeconfig file when running outside the cluster
    poll_interval : Seconds between two status polls of a watched job
    username      : Basic-auth user (auth is enabled only with a password too)
    password      : Basic-auth password
    host, port    : Bind address for the HTTP server
    log_level     : Structlog log level
    json_logs     : Force JSON (True) or console (False) rendering
    """

    model_config = SettingsConfigDict(
        env_prefix="RUNIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ── Cluster credentials ──────────────────────────────────────
    in_cluster: bool = Field(default=False, description="Running inside the Kubernetes cluster")
    kubeconfig: str = Field(default="kubeconfig", description="Path to the kubeconfig file")

    # ── Supervision ──────────────────────────────────────────────
    poll_interval: float = Field(default=1.0, ge=0, description="Seconds between status polls")

    # ── Auth ─────────────────────────────────────────────────────
    username: str | None = Field(default=None, description="Basic-auth username")
    password: str | None = Field(default=None, description="Basic-auth password")

    # ── Server ───────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=10777, description="Bind port")

    # ── Observability ────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool | None = Field(default=None, description="JSON logs; None = auto by TTY")

    @property
    def auth_enabled(self) -> bool:
        """Basic auth is enforced only when both credentials are non-empty."""
        return bool(self.username) and bool(self.password)


__all__ = ["RunitSettings"]
