"""Resolver for the errors raised by the live apply/destroy/init commands.

Covers inventory problems, wait-task timeouts and ResourceGroup CRD
availability. Timeouts get their own exit code so scripts can retry them
without treating every failure alike.
"""

from __future__ import annotations

from typing import Any

from liveresolve.exit_codes import EXIT_TIMEOUT
from liveresolve.live.errors import (
    InvExistsError,
    MultipleInventoryObjError,
    NoInventoryObjError,
    NoResourceGroupCRDError,
    ResourceGroupCRDInstallError,
    TaskTimeoutError,
)
from liveresolve.resolver.base import Rule, RuleResolver

TIMEOUT_ERROR_EXIT_CODE = EXIT_TIMEOUT

NO_INVENTORY_OBJ_ERROR_MSG = """
Error: Package uninitialized. Please run "kpt live init" command.

The package needs to be initialized to generate the template
which will store state for resource sets. This state is
necessary to perform functionality such as deleting an entire
package or automatically deleting omitted resources (pruning).
"""

MULTIPLE_INVENTORY_OBJ_ERROR_MSG = """
Error: Package has multiple inventory object templates.

The package should have one and only one inventory object template.
"""

TIMEOUT_ERROR_MSG = """
Error: Timeout after {{ "%.0f" | format(err.timeout.total_seconds()) }} seconds waiting for {{ err.timed_out_resources | length }} out of {{ err.identifiers | length }} resources to reach condition {{ err.condition }}:

{% for res in err.timed_out_resources %}
{{ res.identifier.group_kind.kind }}/{{ res.identifier.name }} {{ res.status }} {{ res.message }}
{% endfor %}
"""

RESOURCE_GROUP_CRD_INSTALL_ERROR_MSG = """
Error: Unable to install the ResourceGroup CRD.
{% if cause %}

Details:
{{ cause }}
{% endif %}
"""

NO_RESOURCE_GROUP_CRD_MSG = """
Error: The ResourceGroup CRD was not found in the cluster. Please install it either by using the '--install-resource-group' flag or the 'kpt live install-resource-group' command.
"""

INV_INFO_ALREADY_EXISTS_MSG = """
Error: Inventory information has already been added to the package Kptfile. Changing it after a package has been applied to the cluster can lead to undesired results. Use the --force flag to suppress this error.
"""


def _crd_install_arguments(err: ResourceGroupCRDInstallError) -> dict[str, Any]:
    # The nested message is computed here so the template stays a pure lookup.
    return {"cause": str(err.err) if err.err is not None else ""}


class LiveErrorResolver(RuleResolver):
    """Explains inventory, timeout and ResourceGroup CRD errors."""

    rules = (
        Rule(NoInventoryObjError, NO_INVENTORY_OBJ_ERROR_MSG),
        Rule(MultipleInventoryObjError, MULTIPLE_INVENTORY_OBJ_ERROR_MSG),
        Rule(TaskTimeoutError, TIMEOUT_ERROR_MSG, exit_code=TIMEOUT_ERROR_EXIT_CODE),
        Rule(
            ResourceGroupCRDInstallError,
            RESOURCE_GROUP_CRD_INSTALL_ERROR_MSG,
            arguments=_crd_install_arguments,
        ),
        Rule(NoResourceGroupCRDError, NO_RESOURCE_GROUP_CRD_MSG),
        Rule(InvExistsError, INV_INFO_ALREADY_EXISTS_MSG),
    )

    @property
    def name(self) -> str:
        return "live"

    @property
    def description(self) -> str:
        return "Inventory, wait timeout and ResourceGroup CRD errors from live commands"
