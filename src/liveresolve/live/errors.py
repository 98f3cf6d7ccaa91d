"""Error types produced while applying a package to a cluster.

Each class carries the structured payload its diagnostic template needs, so
that resolvers never have to parse ``str(exc)``.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Sequence

from liveresolve.models import ObjMetadata, TimedOutResource


class NoInventoryObjError(Exception):
    """Raised when a package has no inventory object template."""

    def __init__(self) -> None:
        super().__init__("Package uninitialized. Please run \"init\" command.")


class MultipleInventoryObjError(Exception):
    """Raised when a package contains more than one inventory object template.

    Args:
        inventory_objects: Identifiers of the conflicting templates.
    """

    def __init__(self, inventory_objects: Sequence[ObjMetadata] = ()) -> None:
        super().__init__(
            "Package has multiple inventory object templates. "
            "The package should have one and only one inventory object template."
        )
        self.inventory_objects: list[ObjMetadata] = list(inventory_objects)


class TaskTimeoutError(Exception):
    """Raised by the apply task runner when a wait task exceeds its timeout.

    Args:
        timeout: How long the task waited.
        identifiers: Every resource the task was waiting on.
        condition: The condition the resources were expected to reach
            (``Current``, ``NotFound``, ...).
        timed_out_resources: The subset of *identifiers* that had not reached
            *condition*, with their last observed status.
    """

    def __init__(
        self,
        timeout: timedelta,
        identifiers: Sequence[ObjMetadata],
        condition: str,
        timed_out_resources: Sequence[TimedOutResource] = (),
    ) -> None:
        self.timeout = timeout
        self.identifiers: list[ObjMetadata] = list(identifiers)
        self.condition = condition
        self.timed_out_resources: list[TimedOutResource] = list(timed_out_resources)
        super().__init__(
            f"timeout after {timeout.total_seconds():.0f} seconds waiting for "
            f"{len(self.identifiers)} resources to reach condition {condition}"
        )


class ResourceGroupCRDInstallError(Exception):
    """Raised when the ResourceGroup CRD could not be applied to the cluster.

    The underlying failure is kept both as :attr:`err` and as ``__cause__``
    so it shows up in the cause chain.

    Args:
        err: The error returned by the installer, if any.
    """

    def __init__(self, err: Optional[BaseException] = None) -> None:
        self.err = err
        detail = f": {err}" if err is not None else ""
        super().__init__(f"error installing ResourceGroup crd{detail}")
        self.__cause__ = err


class NoResourceGroupCRDError(Exception):
    """Raised when the cluster does not serve the ResourceGroup type."""

    def __init__(self) -> None:
        super().__init__("type ResourceGroup not found")


class InvExistsError(Exception):
    """Raised by ``live init`` when the Kptfile already holds inventory information."""

    def __init__(self) -> None:
        super().__init__("inventory information already set for package")
