"""Unit tests for the modcc-core exception hierarchy."""

from __future__ import annotations

import pytest

from modcc_core.errors import DiscoveryError, ModccError, TransformError


class TestModccError:
    """Tests for the base ModccError exception."""

    def test_stores_user_message(self) -> None:
        """ModccError should store and expose user_message."""
        error = ModccError("Something went wrong")
        assert error.user_message == "Something went wrong"
        assert str(error) == "Something went wrong"

    def test_internal_details_default_none(self) -> None:
        """internal_details should default to None."""
        assert ModccError("Oops").internal_details is None

    def test_logs_internal_details(self, capsys: pytest.CaptureFixture[str]) -> None:
        """ModccError should log internal_details when provided."""
        ModccError("User sees this", internal_details="OSError: [Errno 13] Permission denied")

        # structlog outputs to stdout
        captured = capsys.readouterr()
        assert "modcc_error" in captured.out
        assert "Permission denied" in captured.out

    def test_does_not_log_without_details(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Nothing is logged when there are no internal details."""
        ModccError("Quiet")
        assert "modcc_error" not in capsys.readouterr().out


class TestDiscoveryError:
    """Tests for DiscoveryError."""

    def test_inherits_from_modcc_error(self) -> None:
        """DiscoveryError should be catchable as ModccError."""
        with pytest.raises(ModccError):
            raise DiscoveryError("Broken tree")

    def test_includes_path_in_message(self) -> None:
        """The path is appended to the user message."""
        error = DiscoveryError("Source root is not a directory", path="/missing")
        assert error.user_message == "Source root is not a directory (/missing)"
        assert error.path == "/missing"

    def test_without_path(self) -> None:
        """Without a path the message is unchanged."""
        error = DiscoveryError("Circular dependency between entry points: a -> b -> a")
        assert str(error) == "Circular dependency between entry points: a -> b -> a"
        assert error.path is None


class TestTransformError:
    """Tests for TransformError."""

    def test_includes_entry_point_and_format(self) -> None:
        """Entry point and format are appended to the user message."""
        error = TransformError("Transform failed", entry_point="@angular/common", format="esm5")
        assert error.user_message == "Transform failed (@angular/common : esm5)"
        assert error.entry_point == "@angular/common"
        assert error.format == "esm5"

    def test_entry_point_only(self) -> None:
        """Only the known context parts are included."""
        error = TransformError("Transform failed", entry_point="a")
        assert error.user_message == "Transform failed (a)"

    def test_without_context(self) -> None:
        """Without context the message is unchanged."""
        assert TransformError("Transform failed").user_message == "Transform failed"
