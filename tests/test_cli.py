"""Tests for CLI routing and the error boundary (cli/app.py).

The launcher is always the :class:`RecordingLauncher` stub.
"""

from __future__ import annotations

import pytest

from conftest import RecordingLauncher
from fsadmin import exit_codes
from fsadmin.cli import app as app_module
from fsadmin.cli.app import cli, main
from fsadmin.commands.fs import FILE_SYSTEM_SHELL_CLASS
from fsadmin.core.models import ExecutionResult
from fsadmin.exceptions import (
    ConfigurationError,
    InvariantViolation,
    LaunchFailureError,
    UnknownCommandError,
)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class TestRouting:
    def test_no_args_prints_help(self) -> None:
        assert main([]) == exit_codes.SUCCESS

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_group_without_command_lists_commands(self, capsys: pytest.CaptureFixture[str]) -> None:
        launcher = RecordingLauncher()
        assert main(["fs"], launcher=launcher, environ={}) == exit_codes.SUCCESS
        assert "chgrp" in capsys.readouterr().err
        assert launcher.calls == []

    def test_group_help_lists_commands(self) -> None:
        assert main(["fs", "--help"], launcher=RecordingLauncher(), environ={}) == exit_codes.SUCCESS

    def test_unknown_group(self) -> None:
        with pytest.raises(UnknownCommandError):
            main(["nope"])

    def test_command_help(self) -> None:
        launcher = RecordingLauncher()
        with pytest.raises(SystemExit) as exc_info:
            main(["fs", "chgrp", "--help"], launcher=launcher, environ={})
        assert exc_info.value.code == 0
        assert launcher.calls == []


# ---------------------------------------------------------------------------
# Dispatch through main()
# ---------------------------------------------------------------------------

class TestDispatch:
    def test_chgrp_recursive(self) -> None:
        launcher = RecordingLauncher()
        code = main(["fs", "chgrp", "-R", "developers", "/data"], launcher=launcher, environ={})

        assert code == exit_codes.SUCCESS
        call = launcher.calls[0]
        assert call.argv == ("-R", "developers", "/data")
        assert call.target.main_class == FILE_SYSTEM_SHELL_CLASS
        assert call.target.parameters == ("chgrp",)

    def test_chgrp_plain(self) -> None:
        launcher = RecordingLauncher()
        main(["fs", "chgrp", "developers", "/data"], launcher=launcher, environ={})
        assert launcher.calls[0].argv == ("developers", "/data")

    def test_separator_passes_dash_path(self) -> None:
        launcher = RecordingLauncher()
        code = main(["fs", "rm", "--", "-tmpfile"], launcher=launcher, environ={})

        assert code == exit_codes.SUCCESS
        assert launcher.calls[0].argv == ("-tmpfile",)

    def test_java_opts_with_separate_value(self) -> None:
        launcher = RecordingLauncher()
        code = main(
            ["fs", "chgrp", "--java-opts", "-Xmx1g", "developers", "/data"],
            launcher=launcher,
            environ={},
        )

        assert code == exit_codes.SUCCESS
        assert launcher.calls[0].target.jvm_options == ("-Xmx1g",)
        assert launcher.calls[0].argv == ("developers", "/data")

    def test_verbose_flag_is_not_forwarded(self) -> None:
        launcher = RecordingLauncher()
        main(["-v", "fs", "chgrp", "developers", "/data"], launcher=launcher, environ={})
        assert launcher.calls[0].argv == ("developers", "/data")

    def test_arity_mismatch(self, capsys: pytest.CaptureFixture[str]) -> None:
        launcher = RecordingLauncher()
        code = main(["fs", "chgrp", "developers"], launcher=launcher, environ={})

        assert code == exit_codes.USAGE_ERROR
        assert launcher.calls == []
        err = capsys.readouterr().err
        assert "chgrp <group> <path>" in err

    def test_unknown_command_in_group(self) -> None:
        launcher = RecordingLauncher()
        code = main(["fs", "frobnicate", "/p"], launcher=launcher, environ={})
        assert code == exit_codes.USAGE_ERROR
        assert launcher.calls == []

    def test_non_zero_exit_propagates(self) -> None:
        launcher = RecordingLauncher(ExecutionResult(exit_code=2))
        code = main(["fs", "chgrp", "developers", "/data"], launcher=launcher, environ={})

        assert code == 2
        assert len(launcher.calls) == 1

    def test_launch_failure_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        launcher = RecordingLauncher(
            error=LaunchFailureError("java is missing", reason=LaunchFailureError.NOT_FOUND),
        )
        code = main(["fs", "chgrp", "developers", "/data"], launcher=launcher, environ={})

        assert code == exit_codes.LAUNCH_NOT_FOUND
        assert "java is missing" in capsys.readouterr().err

    def test_debug_port_from_environment(self) -> None:
        launcher = RecordingLauncher()
        main(
            ["fs", "ls", "--attach-debug", "/"],
            launcher=launcher,
            environ={"FSADMIN_DEBUG_PORT": "7007"},
        )
        assert any("address=7007" in opt for opt in launcher.calls[0].target.jvm_options)

    def test_invalid_configuration_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            main(
                ["fs", "ls", "/"],
                launcher=RecordingLauncher(),
                environ={"FSADMIN_DEBUG_PORT": "abc"},
            )


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

def _raise(exc: BaseException):  # type: ignore[no-untyped-def]
    def fake_main() -> int:
        raise exc

    return fake_main


class TestErrorBoundary:
    def test_success(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "main", lambda: exit_codes.SUCCESS)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.SUCCESS

    def test_known_error(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setattr(app_module, "main", _raise(ConfigurationError("bad port", hint="fix it")))
        with pytest.raises(SystemExit) as exc_info:
            cli()

        assert exc_info.value.code == exit_codes.CONFIG_ERROR
        err = capsys.readouterr().err
        assert "bad port" in err
        assert "fix it" in err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "main", _raise(KeyboardInterrupt()))
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.KEYBOARD_INTERRUPT

    def test_invariant_violation_is_unexpected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "main", _raise(InvariantViolation("defect")))
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.UNEXPECTED_ERROR

    def test_exit_code_passthrough(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "main", lambda: 2)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == 2
