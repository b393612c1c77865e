"""Tests for zero values, runtime conformance and error shapes"""

from collections.abc import Callable
from typing import Annotated, Any, Literal, NewType, Optional, Protocol, runtime_checkable

import pytest

from dofactory.typeinfo import conforms, is_error_type, zero_value

UserId = NewType("UserId", str)
Count = NewType("Count", int)


class Base:
    pass


class Child(Base):
    pass


class Named(Protocol):
    name: str


@runtime_checkable
class Closeable(Protocol):
    def close(self) -> None: ...


class Resource:
    def close(self) -> None:
        pass


class TestZeroValue:
    @pytest.mark.parametrize(
        "tp, expected",
        [
            (int, 0),
            (float, 0.0),
            (str, ""),
            (bool, False),
            (bytes, b""),
            (list, []),
            (list[int], []),
            (dict[str, int], {}),
            (set[str], set()),
            (tuple[int, str], (0, "")),
            (tuple[int, ...], ()),
            (UserId, ""),
            (Count, 0),
            (Annotated[int, "meta"], 0),
        ],
    )
    def test_empty_values(self, tp, expected):
        assert zero_value(tp) == expected

    @pytest.mark.parametrize(
        "tp",
        [Base, Optional[int], int | None, Any, object, Callable[[int], int], None],
    )
    def test_reference_like_types_are_none(self, tp):
        assert zero_value(tp) is None

    def test_zero_value_is_a_fresh_object(self):
        assert zero_value(list[int]) is not zero_value(list[int])


class TestConforms:
    def test_plain_classes_use_isinstance(self):
        assert conforms(Child(), Base)
        assert not conforms(Base(), Child)
        assert not conforms(None, Base)

    def test_optional_accepts_none(self):
        assert conforms(None, Base | None)
        assert conforms(Child(), Optional[Base])

    def test_anything_conforms_to_any_and_object(self):
        assert conforms("x", Any)
        assert conforms(None, object)

    def test_new_type_checks_supertype(self):
        assert conforms("abc", UserId)
        assert not conforms(1, UserId)

    def test_generic_alias_checks_origin_only(self):
        assert conforms([1], list[str])
        assert not conforms((1,), list[int])

    def test_literal(self):
        assert conforms("a", Literal["a", "b"])
        assert not conforms("c", Literal["a", "b"])

    def test_callable(self):
        assert conforms(len, Callable[[str], int])
        assert not conforms(1, Callable[[str], int])

    def test_type_of(self):
        assert conforms(Child, type[Base])
        assert not conforms(Base(), type[Base])

    def test_static_protocol_accepts_anything(self):
        assert conforms(object(), Named)

    def test_runtime_protocol_is_checked(self):
        assert conforms(Resource(), Closeable)
        assert not conforms(object(), Closeable)

    def test_int_is_accepted_as_float(self):
        assert conforms(1, float)
        assert conforms(1.5, float)
        assert not conforms("1", float)

    def test_int_and_float_are_accepted_as_complex(self):
        assert conforms(1, complex)
        assert conforms(1.5, complex)
        assert conforms(1j, complex)

    def test_float_is_not_accepted_as_int(self):
        assert not conforms(1.5, int)

    def test_none_type(self):
        assert conforms(None, None)
        assert not conforms(0, type(None))


class TestIsErrorType:
    @pytest.mark.parametrize(
        "tp",
        [Exception, ValueError, BaseException, Exception | None, Optional[KeyError], ValueError | KeyError],
    )
    def test_error_shapes(self, tp):
        assert is_error_type(tp)

    @pytest.mark.parametrize(
        "tp", [str, None, type(None), Exception | str, Any, list[Exception]]
    )
    def test_non_error_shapes(self, tp):
        assert not is_error_type(tp)
