"""Tests for domain exceptions (error_code, message, details)."""

from sparquil.domain.exceptions import (
    SketchOptionsException,
    SparquilException,
    StoreUnavailableException,
)


def test_sparquil_exception_default_error_code() -> None:
    exc = SparquilException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "SparquilException"
    assert exc.details == {}


def test_store_unavailable_exception() -> None:
    exc = StoreUnavailableException("127.0.0.1", 6379, "Connection refused")
    assert exc.error_code == "STORE_UNAVAILABLE"
    assert exc.details == {"host": "127.0.0.1", "port": 6379, "reason": "Connection refused"}
    assert "127.0.0.1:6379" in str(exc)
    assert isinstance(exc, SparquilException)


def test_sketch_options_exception() -> None:
    exc = SketchOptionsException("title missing")
    assert exc.error_code == "INVALID_SKETCH_OPTIONS"
    assert exc.details == {"reason": "title missing"}
