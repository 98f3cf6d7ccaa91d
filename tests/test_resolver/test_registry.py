"""Tests for the resolver registry: ordering, sealing and discovery."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import patch

import pytest

from liveresolve.exceptions import ResolverError
from liveresolve.models import GlobalConfig, ResolvedResult, ResolversConfig
from liveresolve.resolver import (
    ENTRY_POINT_GROUP,
    ErrorResolver,
    LiveErrorResolver,
    ResolverRegistry,
    Rule,
    RuleResolver,
    build_registry,
)
from liveresolve.resolver.chain import find_cause


# ---------------------------------------------------------------------------
# Test helpers -- concrete resolvers
# ---------------------------------------------------------------------------


class DiskFullError(Exception):
    pass


class QuotaError(Exception):
    pass


class DiskResolver(ErrorResolver):
    """Hand-written resolver recognising DiskFullError."""

    def __init__(self, label: str = "disk") -> None:
        self._label = label

    @property
    def name(self) -> str:
        return self._label

    @property
    def recognizes(self) -> tuple[type[BaseException], ...]:
        return (DiskFullError,)

    def resolve(self, err: object) -> tuple[ResolvedResult, bool]:
        if find_cause(err, DiskFullError) is None:
            return ResolvedResult(), False
        return ResolvedResult(message=f"Error: disk full ({self._label})"), True


class QuotaResolver(RuleResolver):
    rules = (Rule(QuotaError, "Error: quota exceeded.", exit_code=4),)

    @property
    def name(self) -> str:
        return "quota"

    @property
    def description(self) -> str:
        return "Quota errors"


class NotAResolver:
    pass


class BuggyResolver(ErrorResolver):
    """Resolver whose resolve() itself blows up."""

    @property
    def name(self) -> str:
        return "buggy"

    def resolve(self, err: object) -> tuple[ResolvedResult, bool]:
        raise KeyError("plugin bug")


class EmptyResolver(ErrorResolver):
    """Resolver that claims every error but has nothing to say."""

    @property
    def name(self) -> str:
        return "empty"

    def resolve(self, err: object) -> tuple[ResolvedResult, bool]:
        return ResolvedResult(), True


class DefaultCodeResolver(RuleResolver):
    """Declares the generic failure code as an override, which is rejected."""

    rules = (Rule(DiskFullError, "Error: disk full.", exit_code=1),)

    @property
    def name(self) -> str:
        return "default-code"


class BrokenTemplateResolver(RuleResolver):
    rules = (Rule(DiskFullError, "Error: {{ missing.field }}"),)

    @property
    def name(self) -> str:
        return "broken-template"


def _wrapped(err: Exception) -> Exception:
    try:
        raise RuntimeError("outer") from err
    except RuntimeError as exc:
        return exc


# ---------------------------------------------------------------------------
# ErrorResolver ABC
# ---------------------------------------------------------------------------


class TestErrorResolverABC:
    def test_cannot_instantiate_without_resolve(self) -> None:
        with pytest.raises(TypeError):

            class NoResolve(ErrorResolver):
                @property
                def name(self) -> str:
                    return "x"

            NoResolve()  # type: ignore[abstract]

    def test_defaults(self) -> None:
        resolver = DiskResolver()
        assert resolver.description == ""

    def test_rule_resolver_recognizes_follows_rules(self) -> None:
        assert QuotaResolver().recognizes == (QuotaError,)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class TestResolve:
    def test_empty_registry_does_not_match(self) -> None:
        result, matched = ResolverRegistry().resolve(DiskFullError())
        assert matched is False
        assert result == ResolvedResult()

    def test_matches_wrapped_cause(self) -> None:
        registry = ResolverRegistry([DiskResolver()])
        result, matched = registry.resolve(_wrapped(DiskFullError()))
        assert matched is True
        assert result.message == "Error: disk full (disk)"
        assert result.exit_code is None

    def test_falls_through_to_later_resolver(self) -> None:
        registry = ResolverRegistry([DiskResolver(), QuotaResolver()])
        result, matched = registry.resolve(_wrapped(QuotaError()))
        assert matched is True
        assert result.message == "Error: quota exceeded."
        assert result.exit_code == 4

    def test_first_registered_wins(self) -> None:
        registry = ResolverRegistry()
        registry.register(DiskResolver("first"))
        registry.register(DiskResolver("second"))
        result, matched = registry.resolve(DiskFullError())
        assert matched is True
        assert result.message == "Error: disk full (first)"

    def test_reversed_registration_reverses_winner(self) -> None:
        registry = ResolverRegistry([DiskResolver("second"), DiskResolver("first")])
        result, _ = registry.resolve(DiskFullError())
        assert result.message == "Error: disk full (second)"

    def test_unrecognised_error_does_not_match(self) -> None:
        registry = ResolverRegistry([DiskResolver(), QuotaResolver()])
        result, matched = registry.resolve(_wrapped(KeyError("nope")))
        assert matched is False
        assert result.message == ""

    @pytest.mark.parametrize("value", [None, "DiskFullError", 0])
    def test_non_errors_do_not_match(self, value: object) -> None:
        registry = ResolverRegistry([DiskResolver(), QuotaResolver()])
        assert registry.resolve(value) == (ResolvedResult(), False)

    def test_idempotent(self) -> None:
        registry = ResolverRegistry([DiskResolver(), QuotaResolver()])
        err = _wrapped(QuotaError())
        assert registry.resolve(err) == registry.resolve(err)

    def test_match_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = ResolverRegistry([DiskResolver()])
        with caplog.at_level(logging.DEBUG, logger="liveresolve.resolver.registry"):
            registry.resolve(DiskFullError())
        assert "resolved by 'disk'" in caplog.text


class TestMisbehavingResolvers:
    def test_raising_resolver_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = ResolverRegistry([BuggyResolver(), DiskResolver()])
        with caplog.at_level(logging.WARNING, logger="liveresolve.resolver.registry"):
            result, matched = registry.resolve(_wrapped(DiskFullError()))
        assert matched is True
        assert result.message == "Error: disk full (disk)"
        assert "Resolver 'buggy' failed" in caplog.text
        assert "plugin bug" in caplog.text

    def test_raising_resolver_alone_is_no_match(self) -> None:
        registry = ResolverRegistry([BuggyResolver()])
        assert registry.resolve(ValueError("x")) == (ResolvedResult(), False)

    def test_invalid_result_is_skipped(self) -> None:
        registry = ResolverRegistry([DefaultCodeResolver(), DiskResolver()])
        result, matched = registry.resolve(DiskFullError())
        assert matched is True
        assert result.message == "Error: disk full (disk)"

    def test_empty_message_is_a_decline(self) -> None:
        registry = ResolverRegistry([EmptyResolver()])
        assert registry.resolve(ValueError("x")) == (ResolvedResult(), False)

    def test_empty_message_falls_through(self) -> None:
        registry = ResolverRegistry([EmptyResolver(), DiskResolver()])
        result, matched = registry.resolve(DiskFullError())
        assert matched is True
        assert result.message == "Error: disk full (disk)"

    def test_broken_template_propagates(self) -> None:
        registry = ResolverRegistry([BrokenTemplateResolver(), DiskResolver()])
        with pytest.raises(ResolverError, match="Failed to render message template"):
            registry.resolve(DiskFullError())


# ---------------------------------------------------------------------------
# Registration and sealing
# ---------------------------------------------------------------------------


class TestRegistration:
    def test_register_preserves_order(self) -> None:
        registry = ResolverRegistry()
        registry.register(QuotaResolver())
        registry.register(DiskResolver())
        assert [r.name for r in registry] == ["quota", "disk"]

    def test_no_deduplication(self) -> None:
        resolver = DiskResolver()
        registry = ResolverRegistry([resolver, resolver])
        assert len(registry) == 2

    def test_sealed_registry_rejects_registration(self) -> None:
        registry = ResolverRegistry([DiskResolver()])
        registry.seal()
        assert registry.sealed is True
        with pytest.raises(ResolverError, match="sealed"):
            registry.register(QuotaResolver())
        assert len(registry) == 1

    def test_sealed_registry_still_resolves(self) -> None:
        registry = ResolverRegistry([DiskResolver()])
        registry.seal()
        _, matched = registry.resolve(DiskFullError())
        assert matched is True

    def test_iteration_is_a_snapshot(self) -> None:
        registry = ResolverRegistry([DiskResolver()])
        snapshot = iter(registry)
        registry.register(QuotaResolver())
        assert [r.name for r in snapshot] == ["disk"]

    def test_list_resolvers(self) -> None:
        registry = ResolverRegistry([QuotaResolver(), DiskResolver()])
        assert registry.list_resolvers() == [
            {"name": "quota", "description": "Quota errors", "recognizes": ["QuotaError"]},
            {"name": "disk", "description": "", "recognizes": ["DiskFullError"]},
        ]


# ---------------------------------------------------------------------------
# build_registry
# ---------------------------------------------------------------------------


class TestBuildRegistry:
    def test_builtin_live_resolver_registered_and_sealed(self) -> None:
        registry = build_registry()
        assert registry.sealed is True
        resolvers = list(registry)
        assert len(resolvers) == 1
        assert isinstance(resolvers[0], LiveErrorResolver)

    def test_discovery_off_by_default(self) -> None:
        with patch("liveresolve.resolver.registry.importlib.metadata.entry_points") as mock_eps:
            build_registry()
        mock_eps.assert_not_called()

    def test_discovered_resolvers_follow_builtins(self) -> None:
        eps = _EntryPoints([_EntryPoint("disk", DiskResolver)])
        with patch("liveresolve.resolver.registry.importlib.metadata.entry_points", return_value=eps):
            registry = build_registry(GlobalConfig(), discover=True)
        assert [r.name for r in registry] == ["live", "disk"]
        assert registry.sealed is True

    def test_renderer_is_injected(self) -> None:
        registry = build_registry(renderer=lambda text, args: ",".join(sorted(args)))
        from liveresolve.live.errors import NoInventoryObjError

        result, matched = registry.resolve(NoInventoryObjError())
        assert matched is True
        assert result.message == "err"


# ---------------------------------------------------------------------------
# Entry-point discovery
# ---------------------------------------------------------------------------


class _EntryPoint:
    def __init__(self, name: str, target: Any) -> None:
        self.name = name
        self._target = target

    def load(self) -> Any:
        if isinstance(self._target, Exception):
            raise self._target
        return self._target


class _EntryPoints:
    def __init__(self, items: list[_EntryPoint]) -> None:
        self._items = items

    def select(self, group: str) -> list[_EntryPoint]:
        if group == ENTRY_POINT_GROUP:
            return self._items
        return []


class TestDiscover:
    def _discover(self, registry: ResolverRegistry, eps: list[_EntryPoint], config: GlobalConfig) -> list[str]:
        with patch(
            "liveresolve.resolver.registry.importlib.metadata.entry_points",
            return_value=_EntryPoints(eps),
        ):
            return registry.discover(config)

    def test_loads_resolvers(self) -> None:
        registry = ResolverRegistry()
        loaded = self._discover(registry, [_EntryPoint("disk", DiskResolver)], GlobalConfig())
        assert loaded == ["disk"]
        assert [r.name for r in registry] == ["disk"]

    def test_no_entry_points(self) -> None:
        registry = ResolverRegistry()
        assert self._discover(registry, [], GlobalConfig()) == []
        assert len(registry) == 0

    def test_enabled_list_filters(self) -> None:
        config = GlobalConfig(resolvers=ResolversConfig(enabled=["quota"]))
        registry = ResolverRegistry()
        loaded = self._discover(
            registry,
            [_EntryPoint("disk", DiskResolver), _EntryPoint("quota", QuotaResolver)],
            config,
        )
        assert loaded == ["quota"]

    def test_disabled_list_filters(self) -> None:
        config = GlobalConfig(resolvers=ResolversConfig(disabled=["disk"]))
        registry = ResolverRegistry()
        loaded = self._discover(
            registry,
            [_EntryPoint("disk", DiskResolver), _EntryPoint("quota", QuotaResolver)],
            config,
        )
        assert loaded == ["quota"]

    def test_failed_load_is_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = ResolverRegistry()
        with caplog.at_level(logging.WARNING, logger="liveresolve.resolver.registry"):
            loaded = self._discover(
                registry,
                [_EntryPoint("broken", ImportError("no module")), _EntryPoint("disk", DiskResolver)],
                GlobalConfig(),
            )
        assert loaded == ["disk"]
        assert "Failed to load resolver 'broken'" in caplog.text

    def test_non_resolver_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = ResolverRegistry()
        with caplog.at_level(logging.WARNING, logger="liveresolve.resolver.registry"):
            loaded = self._discover(registry, [_EntryPoint("odd", NotAResolver)], GlobalConfig())
        assert loaded == []
        assert "not an ErrorResolver" in caplog.text

    def test_discover_after_seal_raises(self) -> None:
        registry = ResolverRegistry()
        registry.seal()
        with pytest.raises(ResolverError):
            registry.discover(GlobalConfig())
