"""Canonical Pydantic models shared across all liveresolve modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Resolution models** -- produced by resolvers and consumed by the CLI
boundary:
    :class:`ResolvedResult`.

**Object identifier models** -- payload carried by the live-apply errors and
read by the message templates:
    :class:`GroupKind`, :class:`ObjMetadata`, :class:`TimedOutResource`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`ResolversConfig`, :class:`GlobalConfig`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from liveresolve.exit_codes import EXIT_GENERIC_FAILURE


# --- Resolution ---


class ResolvedResult(BaseModel):
    """The explanation produced when a resolver recognises an error.

    An empty instance (``ResolvedResult()``) is the value returned alongside
    ``False`` when nothing matched. A matched result always carries a
    non-empty ``message``.

    ``exit_code`` is only set when the error family has an agreed process
    exit status of its own. It must be positive and must differ from
    :data:`~liveresolve.exit_codes.EXIT_GENERIC_FAILURE`, which is what the
    boundary uses when no override is present.

    Example::

        ResolvedResult(message="Error: Timeout after 30 seconds ...", exit_code=3)
    """

    model_config = ConfigDict(frozen=True)

    message: str = ""
    exit_code: Optional[int] = Field(
        default=None, description="Process exit code override, if any"
    )

    @field_validator("exit_code")
    @classmethod
    def _check_exit_code(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        if value <= 0:
            raise ValueError(f"exit_code must be positive, got {value}")
        if value == EXIT_GENERIC_FAILURE:
            raise ValueError(
                f"exit_code must differ from the default failure code {EXIT_GENERIC_FAILURE}"
            )
        return value

    def effective_exit_code(self, default: int = EXIT_GENERIC_FAILURE) -> int:
        """Return the override if one was set, else *default*."""
        return self.exit_code if self.exit_code is not None else default


# --- Object identifiers ---


class GroupKind(BaseModel):
    """API group and kind of a Kubernetes resource (``apps``/``Deployment``)."""

    model_config = ConfigDict(frozen=True)

    group: str = ""
    kind: str


class ObjMetadata(BaseModel):
    """Identifies a single resource in a package: namespace, name and group/kind."""

    model_config = ConfigDict(frozen=True)

    namespace: str = ""
    name: str
    group_kind: GroupKind


class TimedOutResource(BaseModel):
    """A resource that had not reached the awaited condition when the wait timed out."""

    model_config = ConfigDict(frozen=True)

    identifier: ObjMetadata
    status: str = Field(description="Last observed status, e.g. InProgress")
    message: str = ""


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ResolversConfig(BaseModel):
    """Allow/deny lists for resolvers discovered through entry points.

    Built-in resolvers are always registered; these lists only affect
    third-party resolvers found in the ``liveresolve.resolvers`` group.
    """

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class GlobalConfig(BaseModel):
    """Top-level configuration persisted as ``config.json``.

    See Also:
        :func:`liveresolve.config.resolve_config` for the precedence chain
        that layers environment variables and project config on top of this
        file.
    """

    log_level: Optional[str] = Field(
        default=None, description="Logging level: DEBUG, INFO, WARNING, ERROR"
    )
    discover_resolvers: bool = Field(
        default=True,
        description="Load third-party resolvers from the liveresolve.resolvers entry points",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
    resolvers: ResolversConfig = Field(default_factory=ResolversConfig)
