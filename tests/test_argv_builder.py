"""Tests for argument-vector construction (core/argv_builder.py).

Coverage:
* Boolean flag on/off paths.
* Flag tokens precede positionals, in declaration order.
* String flags and custom contribution rules.
* Determinism.
* Invariant violations for undeclared flags and mistyped values.
"""

from __future__ import annotations

import pytest

from fsadmin.core.argv_builder import build_argv, build_request_argv, flag_tokens
from fsadmin.core.models import (
    Arity,
    CommandDescriptor,
    FlagKind,
    FlagSpec,
    InvocationRequest,
    RuntimeTarget,
)
from fsadmin.exceptions import FsAdminError, InvariantViolation


# ---------------------------------------------------------------------------
# Boolean flags
# ---------------------------------------------------------------------------

class TestBooleanFlags:
    def test_flag_off_yields_only_positionals(self, chgrp: CommandDescriptor) -> None:
        argv = build_argv(chgrp, {"recursive": False}, ["developers", "/data"])
        assert argv == ("developers", "/data")

    def test_flag_on_precedes_positionals(self, chgrp: CommandDescriptor) -> None:
        argv = build_argv(chgrp, {"recursive": True}, ["developers", "/data"])
        assert argv == ("-R", "developers", "/data")

    def test_no_flag_values_yields_positionals(self, chgrp: CommandDescriptor) -> None:
        assert build_argv(chgrp, {}, ["developers", "/data"]) == ("developers", "/data")

    def test_default_token_is_long_form(self) -> None:
        flag = FlagSpec("force")
        assert flag_tokens(flag, True) == ("--force",)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

class TestOrdering:
    def test_declaration_order_wins_over_mapping_order(self, stat: CommandDescriptor) -> None:
        values = {"quiet": True, "format": "%N", "verbose": True}
        argv = build_argv(stat, values, ["/data"])
        assert argv == ("-v", "-f", "%N", "-q", "/data")

    def test_positionals_keep_user_order(self) -> None:
        descriptor = CommandDescriptor(
            name="mkdir",
            usage="<path>...",
            arity=Arity.at_least(1),
            target=RuntimeTarget("example.Shell"),
        )
        argv = build_argv(descriptor, {}, ["/c", "/a", "/b"])
        assert argv == ("/c", "/a", "/b")

    def test_is_deterministic(self, stat: CommandDescriptor) -> None:
        values = {"verbose": True, "format": "%s", "quiet": False}
        first = build_argv(stat, values, ["/x"])
        second = build_argv(stat, dict(reversed(list(values.items()))), ["/x"])
        assert first == second

    def test_returns_tuple(self, chgrp: CommandDescriptor) -> None:
        assert isinstance(build_argv(chgrp, {}, ["g", "/p"]), tuple)


# ---------------------------------------------------------------------------
# String flags and custom contributions
# ---------------------------------------------------------------------------

class TestStringFlags:
    def test_unset_string_flag_contributes_nothing(self, stat: CommandDescriptor) -> None:
        assert build_argv(stat, {"format": None}, ["/p"]) == ("/p",)

    def test_set_string_flag_emits_token_and_value(self, stat: CommandDescriptor) -> None:
        assert build_argv(stat, {"format": "%z"}, ["/p"]) == ("-f", "%z", "/p")

    def test_empty_string_is_still_set(self, stat: CommandDescriptor) -> None:
        assert build_argv(stat, {"format": ""}, ["/p"]) == ("-f", "", "/p")

    def test_custom_contribution(self) -> None:
        flag = FlagSpec(
            "sort",
            kind=FlagKind.STRING,
            contribute=lambda value: (f"--sort={value}",),
        )
        assert flag_tokens(flag, "size") == ("--sort=size",)


# ---------------------------------------------------------------------------
# Invariant violations
# ---------------------------------------------------------------------------

class TestInvariantViolations:
    def test_undeclared_flag(self, chgrp: CommandDescriptor) -> None:
        with pytest.raises(InvariantViolation, match="undeclared"):
            build_argv(chgrp, {"bogus": True}, ["g", "/p"])

    def test_non_bool_for_boolean_flag(self, chgrp: CommandDescriptor) -> None:
        with pytest.raises(InvariantViolation, match="Boolean flag --recursive"):
            build_argv(chgrp, {"recursive": "yes"}, ["g", "/p"])

    def test_non_string_for_string_flag(self, stat: CommandDescriptor) -> None:
        with pytest.raises(InvariantViolation, match="String flag --format"):
            build_argv(stat, {"format": 3}, ["/p"])

    def test_contribution_returning_non_strings(self) -> None:
        flag = FlagSpec("depth", kind=FlagKind.STRING, contribute=lambda value: ("-d", int(value)))
        with pytest.raises(InvariantViolation, match="non-string"):
            flag_tokens(flag, "2")

    def test_violation_is_not_a_user_error(self) -> None:
        assert not issubclass(InvariantViolation, FsAdminError)


# ---------------------------------------------------------------------------
# InvocationRequest
# ---------------------------------------------------------------------------

class TestRequestArgv:
    def test_matches_build_argv(self, chgrp: CommandDescriptor) -> None:
        request = InvocationRequest.create(chgrp, {"recursive": True}, ["g", "/p"])
        assert build_request_argv(request) == ("-R", "g", "/p")

    def test_request_is_immutable(self, chgrp: CommandDescriptor) -> None:
        values = {"recursive": True}
        request = InvocationRequest.create(chgrp, values, ["g", "/p"])
        values["recursive"] = False
        assert request.flag_values["recursive"] is True
        with pytest.raises(TypeError):
            request.flag_values["recursive"] = False  # type: ignore[index]
        with pytest.raises(AttributeError):
            request.positionals = ()  # type: ignore[misc]
