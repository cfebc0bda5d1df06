"""Unit tests for kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from txoutbox.kernel.errors import (
    ApplicationError,
    ArgumentError,
    BaseError,
    BatchAlreadyResolvedError,
    InfrastructureError,
    SerializationError,
    TransactionContextError,
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
        assert isinstance(err.__cause__, ValueError)

    def test_str_is_json(self) -> None:
        payload = json.loads(str(BaseError("boom", code="c")))
        assert payload["code"] == "c"
        assert payload["message"] == "boom"

    def test_repr(self) -> None:
        assert repr(BaseError("m")) == "BaseError(code='base_error', message='m')"


class TestArgumentError:
    def test_is_application_error_and_value_error(self) -> None:
        err = ArgumentError("max_message_batch_size", "must be >= 1")
        assert isinstance(err, ApplicationError)
        assert isinstance(err, ValueError)

    def test_records_argument(self) -> None:
        err = ArgumentError("outgoing_messages", "must not be None")
        assert err.argument == "outgoing_messages"
        assert err.detail["argument"] == "outgoing_messages"
        assert err.code == "invalid_argument"

    def test_can_be_caught_as_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise ArgumentError("x", "bad")


class TestOtherErrors:
    def test_batch_already_resolved_code(self) -> None:
        assert BatchAlreadyResolvedError("m").code == "batch_already_resolved"

    def test_transaction_context_error_code(self) -> None:
        assert TransactionContextError("m").code == "transaction_context_error"

    def test_serialization_error_is_infrastructure(self) -> None:
        err = SerializationError("bad headers", payload_type="headers")
        assert isinstance(err, InfrastructureError)
        assert err.payload_type == "headers"
        assert err.code == "serialization_error"
