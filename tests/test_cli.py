"""Test the demo entry point and display helpers."""

import pytest

from spgen.cli import format_assessment, format_crack_time, run
from spgen.config import GenerationOptions
from spgen.security import assess


@pytest.mark.parametrize(
    ("seconds", "text"),
    [
        (0.0, "0.0 seconds"),
        (30.0, "30.0 seconds"),
        (120.0, "2.0 minutes"),
        (7200.0, "2.0 hours"),
        (172800.0, "2.0 days"),
        (63072000.0, "2.0 years"),
        (3.1536e15, "1.00e+08 years"),
    ],
)
def test_format_crack_time(seconds: float, text: str) -> None:
    """Test raw seconds are shown in the largest exceeded unit."""
    assert format_crack_time(seconds) == text


def test_format_assessment_warnings() -> None:
    """Test weak passwords get warning lines."""
    lines = format_assessment(assess("password123", is_duplicate=True))
    assert "Strength:   Weak" in lines
    assert "Warning: contains weak patterns" in lines
    assert "Warning: contains dictionary words" in lines
    assert "Warning: duplicate password" in lines


def test_run_prints_password(capsys: pytest.CaptureFixture[str]) -> None:
    """Test the default run generates and assesses one password."""
    assert run() == 0
    out = capsys.readouterr().out
    assert "Generated password: " in out
    assert "Crack time:" in out


def test_run_reports_invalid_options(capsys: pytest.CaptureFixture[str]) -> None:
    """Test invalid options give a non-zero exit code and a reason."""
    assert run(GenerationOptions(length=4)) == 1
    assert "Invalid options" in capsys.readouterr().err
