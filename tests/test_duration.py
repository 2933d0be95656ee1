from datetime import timedelta

import pytest

from core.duration import parse_duration


@pytest.mark.parametrize("value, expected", [
    ("250ms", timedelta(milliseconds=250)),
    ("10s", timedelta(seconds=10)),
    (" 5 m ", timedelta(minutes=5)),
    ("4H", timedelta(hours=4)),
    ("7d", timedelta(days=7)),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", None, "10", "s", "1.5s", "-1s", "3w"])
def test_parse_duration_rejects(value):
    with pytest.raises(ValueError):
        parse_duration(value)
