from __future__ import annotations

from datetime import datetime

import pytz

import pass_display

# 2023-11-14 22:13:20 UTC
_RISETIME = 1700000000


def test_format_pass_utc() -> None:
    line = pass_display.format_pass({"risetime": _RISETIME, "duration": 465})

    assert line == "Next pass at 2023-11-14 22:13:20 UTC for 465 seconds!"


def test_format_pass_local_timezone() -> None:
    vancouver = pytz.timezone("America/Vancouver")

    line = pass_display.format_pass({"risetime": _RISETIME, "duration": 600}, vancouver)

    assert line == "Next pass at 2023-11-14 14:13:20 PST for 600 seconds!"


def test_format_pass_unknown_shape_is_shown_raw() -> None:
    line = pass_display.format_pass({"start": "soon"})

    assert "soon" in line


def test_categorize_pass_time() -> None:
    assert pass_display.categorize_pass_time(datetime(2024, 1, 1, 20, 0)) == "Evening"
    assert pass_display.categorize_pass_time(datetime(2024, 1, 1, 5, 30)) == "Morning"
    assert pass_display.categorize_pass_time(datetime(2024, 1, 1, 12, 0)) == "Daytime"
    assert pass_display.categorize_pass_time(datetime(2024, 1, 1, 2, 0)) == "Night"


def test_print_pass_times(capsys) -> None:
    passes = [{"risetime": _RISETIME, "duration": 465}, {"risetime": _RISETIME + 3 * 3600, "duration": 300}]

    pass_display.print_pass_times(passes)

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Upcoming ISS passes (2 total):"
    assert out[1] == "[Evening] Next pass at 2023-11-14 22:13:20 UTC for 465 seconds!"
    assert out[2] == "[  Night] Next pass at 2023-11-15 01:13:20 UTC for 300 seconds!"


def test_print_pass_times_empty(capsys) -> None:
    pass_display.print_pass_times([])

    assert "No upcoming ISS passes" in capsys.readouterr().out
