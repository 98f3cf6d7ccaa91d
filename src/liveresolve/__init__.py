"""liveresolve -- turn internal live-apply errors into user-facing diagnostics.

Errors are raised deep inside the apply machinery as typed exceptions. At the
command-line boundary they are handed to a :class:`ResolverRegistry`, which
asks each registered resolver in turn whether it recognises the error (or any
error in its cause chain). The first resolver that does renders a message
template and may pick a specific process exit code.

Typical usage::

    from liveresolve.resolver import build_registry

    registry = build_registry()
    result, matched = registry.resolve(exc)
    if matched:
        print(result.message, file=sys.stderr)

Modules:
    app: Typer application and CLI error boundary.
    boundary: Fallback policy applied to resolution results.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric process exit codes.
    output: stdout/stderr formatting with Rich support.
    resolver: Resolver interface, registry, templates and built-in resolvers.
    live: Typed errors raised by the live-apply subsystems.
"""

__version__ = "0.1.0"
