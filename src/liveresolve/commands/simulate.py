"""The ``liveresolve simulate`` command -- raise a representative error.

Each error family handled by the built-in resolvers can be reproduced without
a cluster. The error is raised wrapped in a generic ``RuntimeError`` so that
the CLI boundary has to find it in the cause chain, exactly as it would for a
real failure deep inside an apply.
"""

from __future__ import annotations

import enum
from datetime import timedelta

import typer

from liveresolve.exceptions import InvalidUsageError
from liveresolve.live.errors import (
    InvExistsError,
    MultipleInventoryObjError,
    NoInventoryObjError,
    NoResourceGroupCRDError,
    ResourceGroupCRDInstallError,
    TaskTimeoutError,
)
from liveresolve.models import GroupKind, ObjMetadata, TimedOutResource


class ErrorFamily(str, enum.Enum):
    """Error families that ``simulate`` can raise."""

    NO_INVENTORY = "no-inventory"
    MULTIPLE_INVENTORY = "multiple-inventory"
    TIMEOUT = "timeout"
    CRD_INSTALL = "crd-install"
    NO_CRD = "no-crd"
    INVENTORY_EXISTS = "inventory-exists"
    UNKNOWN = "unknown"


_DEPLOYMENT = GroupKind(group="apps", kind="Deployment")
_CONFIG_MAP = GroupKind(kind="ConfigMap")


def _identifiers(count: int) -> list[ObjMetadata]:
    return [
        ObjMetadata(namespace="default", name=f"app-{i}", group_kind=_DEPLOYMENT)
        for i in range(count)
    ]


def build_error(
    family: ErrorFamily,
    timeout: float = 30.0,
    total: int = 5,
    timed_out: int = 2,
    condition: str = "Current",
    cause: str = "",
) -> Exception:
    """Construct the typed error for *family*.

    Raises:
        InvalidUsageError: If the timeout arguments are inconsistent.
    """
    if family is ErrorFamily.NO_INVENTORY:
        return NoInventoryObjError()
    if family is ErrorFamily.MULTIPLE_INVENTORY:
        return MultipleInventoryObjError(
            [
                ObjMetadata(namespace="default", name=name, group_kind=_CONFIG_MAP)
                for name in ("inventory-a", "inventory-b")
            ]
        )
    if family is ErrorFamily.TIMEOUT:
        if timeout < 0:
            raise InvalidUsageError("--timeout must not be negative")
        if total < 0 or not 0 <= timed_out <= total:
            raise InvalidUsageError("--timed-out must be between 0 and --total")
        identifiers = _identifiers(total)
        return TaskTimeoutError(
            timeout=timedelta(seconds=timeout),
            identifiers=identifiers,
            condition=condition,
            timed_out_resources=[
                TimedOutResource(
                    identifier=ident,
                    status="InProgress",
                    message="Replicas: 0/1",
                )
                for ident in identifiers[:timed_out]
            ],
        )
    if family is ErrorFamily.CRD_INSTALL:
        return ResourceGroupCRDInstallError(RuntimeError(cause) if cause else None)
    if family is ErrorFamily.NO_CRD:
        return NoResourceGroupCRDError()
    if family is ErrorFamily.INVENTORY_EXISTS:
        return InvExistsError()
    return RuntimeError(cause or "something unexpected went wrong")


def simulate_command(
    family: ErrorFamily = typer.Argument(..., help="Error family to raise."),
    timeout: float = typer.Option(30.0, "--timeout", help="Timeout in seconds (timeout family)."),
    total: int = typer.Option(5, "--total", help="Resources waited on (timeout family)."),
    timed_out: int = typer.Option(2, "--timed-out", help="Resources that timed out (timeout family)."),
    condition: str = typer.Option("Current", "--condition", help="Awaited condition (timeout family)."),
    cause: str = typer.Option("", "--cause", help="Underlying error text (crd-install, unknown)."),
) -> None:
    """Raise a representative error so the CLI explains it.

    The command always fails; its exit status is the one the error would
    produce in a real run (3 for timeouts).
    """
    err = build_error(family, timeout, total, timed_out, condition, cause)
    raise RuntimeError(f"simulated {family.value} failure") from err
