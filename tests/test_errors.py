import pytest

from tickbar.errors import InvalidArgument, TickbarConfigError, TickbarError


def test_all_errors_are_subclasses_of_tickbar_error() -> None:
    assert issubclass(InvalidArgument, TickbarError)
    assert issubclass(TickbarConfigError, TickbarError)


def test_invalid_argument_is_also_a_value_error() -> None:
    assert issubclass(InvalidArgument, ValueError)
    assert not issubclass(TickbarConfigError, ValueError)


def test_error_message_is_preserved() -> None:
    msg = "width must be over 0 (got 0)"
    err = InvalidArgument(msg)
    assert str(err) == msg


def test_can_catch_any_tickbar_error() -> None:
    def raise_one() -> None:
        raise TickbarConfigError("nope")

    with pytest.raises(TickbarError):
        raise_one()
