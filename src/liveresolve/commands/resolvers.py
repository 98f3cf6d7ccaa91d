"""The ``liveresolve resolvers`` command -- list registered resolvers in match order."""

from __future__ import annotations

import typer

from liveresolve.output import print_table


def resolvers_command(ctx: typer.Context) -> None:
    """List registered resolvers in the order they are tried.

    The first resolver that recognises an error wins, so a resolver listed
    earlier takes priority over any later one claiming the same error type.
    """
    registry = ctx.obj["registry"]
    rows = [
        [
            str(position),
            entry["name"],
            ", ".join(entry["recognizes"]) or "-",
            entry["description"],
        ]
        for position, entry in enumerate(registry.list_resolvers(), start=1)
    ]
    print_table(
        ["Order", "Name", "Recognizes", "Description"],
        rows,
        title="Error resolvers",
    )
