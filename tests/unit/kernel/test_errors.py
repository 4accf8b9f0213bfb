"""Unit tests for kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from mp_pager.config.validation import ConfigError, PagerConfigurationError
from mp_pager.kernel.errors import (
    ApplicationError,
    BaseError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    SerializationError,
    SortNotAllowedError,
    StateDecodeError,
    StateEncodeError,
    ValidationError,
)


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_to_dict_includes_cause_repr(self) -> None:
        err = BaseError("wrapper", cause=ValueError("original"))
        assert "original" in err.to_dict()["cause"]

    def test_cause_sets_dunder_cause(self) -> None:
        cause = RuntimeError("root")
        assert BaseError("wrap", cause=cause).__cause__ is cause

    def test_str_is_valid_json(self) -> None:
        parsed = json.loads(str(BaseError("oops", code="oops", detail={"x": 1})))
        assert parsed["code"] == "oops"
        assert parsed["message"] == "oops"

    def test_repr_contains_code_and_message(self) -> None:
        r = repr(BaseError("hello", code="hi"))
        assert "hi" in r
        assert "hello" in r


class TestDomainErrors:
    def test_validation_error_stores_errors(self) -> None:
        err = ValidationError("invalid", errors=[{"field": "page", "msg": "must be >= 1"}])
        d = err.to_dict()
        assert d["errors"][0]["field"] == "page"

    def test_validation_error_empty_errors_default(self) -> None:
        assert ValidationError("bad input").errors == []

    def test_validation_is_domain_error(self) -> None:
        assert issubclass(ValidationError, DomainError)
        assert ValidationError("x").code == "validation_error"


class TestApplicationErrors:
    def test_forbidden_stores_permission(self) -> None:
        assert ForbiddenError(permission="user.name").permission == "user.name"

    def test_sort_not_allowed(self) -> None:
        err = SortNotAllowedError("user.password")
        assert err.message == "Sorting not allowed for field user.password"
        assert err.code == "sort_not_allowed"
        assert err.sort == "user.password"
        assert err.permission == "user.password"
        assert err.detail == {"sort": "user.password"}
        assert isinstance(err, ForbiddenError)
        assert isinstance(err, ApplicationError)

    def test_pager_configuration_error_hierarchy(self) -> None:
        assert issubclass(PagerConfigurationError, ConfigError)
        assert issubclass(PagerConfigurationError, ApplicationError)


class TestInfrastructureErrors:
    def test_serialization_error(self) -> None:
        err = SerializationError("bad JSON", payload_type="pager_state")
        assert err.payload_type == "pager_state"
        assert err.code == "serialization_error"

    @pytest.mark.parametrize(
        ("cls", "code"),
        [(StateDecodeError, "state_decode_error"), (StateEncodeError, "state_encode_error")],
    )
    def test_state_errors(self, cls: type[SerializationError], code: str) -> None:
        err = cls("broken")
        assert err.code == code
        assert err.payload_type == "pager_state"
        assert isinstance(err, InfrastructureError)

    def test_cause_chaining_across_hierarchy(self) -> None:
        root = ValueError("Incorrect padding")
        decode = StateDecodeError("Malformed state token", cause=root)
        assert decode.__cause__ is root
        assert "Incorrect padding" in decode.to_dict()["cause"]
