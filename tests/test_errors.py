from pathlib import Path

from jumper.core.errors import (
    AlreadyExistsError,
    BatchResult,
    JumperError,
    NotFoundError,
    format_error,
    wrap_error,
)


def test_format_error_prefixes_code():
    text, severity = format_error(JumperError(code="boom", message="Broke", detail="why"))
    assert text == "[boom] Broke (why)"
    assert severity == "error"


def test_format_error_handles_plain_exceptions():
    assert format_error(RuntimeError("bad")) == ("bad", "error")


def test_format_error_keeps_the_error_severity():
    _text, severity = format_error(JumperError(code="nothing", message="Nothing", severity="information"))
    assert severity == "information"


def test_wrap_error_maps_os_errors_to_typed_errors(tmp_path):
    missing = FileNotFoundError(2, "No such file", str(tmp_path / "x"))
    assert isinstance(wrap_error(missing, code="c", message="m"), NotFoundError)
    exists = FileExistsError(17, "File exists", str(tmp_path / "y"))
    assert isinstance(wrap_error(exists, code="c", message="m"), AlreadyExistsError)
    denied = wrap_error(PermissionError(13, "Permission denied"), code="copy_failed", message="Cannot copy")
    assert denied.code == "copy_failed"
    assert denied.detail == "Permission denied"


def test_wrap_error_passes_through_domain_errors():
    error = JumperError(code="x", message="y")
    assert wrap_error(error, code="other", message="other") is error


def test_batch_summary():
    result = BatchResult(operation="copy")
    result.completed.append((Path("a"), Path("b")))
    assert result.ok
    assert result.summary() == "copy: 1 item(s) done"
    result.failures.append((Path("c"), NotFoundError(Path("c"))))
    assert result.summary().startswith("copy: 1/2 done, 1 failed (c:")
