"""Typed errors raised by the live-apply subsystems.

These exceptions are owned by inventory management, the apply task runner and
the ResourceGroup CRD installer. The resolver package only ever matches them
by type, so their wording can change freely without breaking diagnostics.
"""

from liveresolve.live.errors import (
    InvExistsError,
    MultipleInventoryObjError,
    NoInventoryObjError,
    NoResourceGroupCRDError,
    ResourceGroupCRDInstallError,
    TaskTimeoutError,
)

__all__ = [
    "InvExistsError",
    "MultipleInventoryObjError",
    "NoInventoryObjError",
    "NoResourceGroupCRDError",
    "ResourceGroupCRDInstallError",
    "TaskTimeoutError",
]
