import logging
import sys
from datetime import datetime

import pytest  # type: ignore[import-not-found]

from dynamo_autoscale.commons.logging import PatternFormatter


def make_record(msg: str = "disk at 91%", levelno: int = logging.ERROR, **extra) -> logging.LogRecord:
    fields = {
        "name": "dynamo",
        "msg": msg,
        "levelno": levelno,
        "levelname": logging.getLevelName(levelno),
        "process": 123,
        "created": datetime(2024, 1, 2, 3, 4, 5).timestamp(),
        "msecs": 678.0,
    }
    fields.update(extra)
    return logging.makeLogRecord(fields)


def test_renders_default_layout() -> None:
    formatter = PatternFormatter(hostname="h1")
    assert (
        formatter.format(make_record())
        == "2024-01-02 03:04:05.678 [ERROR] 123 h1 : disk at 91%"
    )


@pytest.mark.parametrize(
    ("levelno", "field"),
    [
        (5, "[TRACE]"),
        (logging.DEBUG, "[DEBUG]"),
        (logging.INFO, "[ INFO]"),
        (logging.WARNING, "[ WARN]"),
        (logging.CRITICAL, "[FATAL]"),
    ],
)
def test_level_field_is_five_columns(levelno: int, field: str) -> None:
    line = PatternFormatter(hostname="h1").format(make_record(levelno=levelno))
    assert line == f"2024-01-02 03:04:05.678 {field} 123 h1 : disk at 91%"


def test_message_args_are_interpolated() -> None:
    record = make_record(msg="table %s at %d%%", args=("events", 80))
    line = PatternFormatter("%m").format(record)
    assert line == "table events at 80%"


def test_width_and_alignment() -> None:
    record = make_record(levelno=logging.INFO)
    assert PatternFormatter("<%-5L>").format(record) == "<INFO >"
    assert PatternFormatter("<%5L>").format(record) == "< INFO>"
    assert PatternFormatter("<%l>").format(record) == "<I>"


def test_extra_placeholders() -> None:
    record = make_record(
        pathname="/srv/app/scaler.py",
        filename="scaler.py",
        lineno=42,
        funcName="scale_up",
        thread=7,
    )
    line = PatternFormatter("%N %F %f:%n %M %t 100%%").format(record)
    assert line == "dynamo /srv/app/scaler.py scaler.py:42 scale_up 7 100%"


def test_unknown_placeholder_is_kept() -> None:
    assert PatternFormatter("%Q %m").format(make_record(msg="x")) == "%Q x"


def test_custom_time_format() -> None:
    formatter = PatternFormatter("%d", time_format="%Y/%m/%d %H:%M %% %L")
    assert formatter.format(make_record()) == "2024/01/02 03:04 % 678"


def test_hostname_defaults_to_machine_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("socket.gethostname", lambda: "scaler-01")
    assert PatternFormatter("%h").format(make_record()) == "scaler-01"


def test_exception_is_appended() -> None:
    try:
        raise RuntimeError("throttled")
    except RuntimeError:
        record = make_record(exc_info=sys.exc_info())
    lines = PatternFormatter("%m").format(record).splitlines()
    assert lines[0] == "disk at 91%"
    assert lines[1] == "Traceback (most recent call last):"
    assert lines[-1] == "RuntimeError: throttled"
