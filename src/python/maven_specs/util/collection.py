# Copyright 2023 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

from typing import Any, Iterable, Tuple, TypeVar, overload

T = TypeVar("T")


class Collection(Tuple[T, ...]):
    """A light newtype around immutable sequences.

    This should be subclassed when you want to create a distinct collection type, such as:

        @dataclass(frozen=True)
        class Example:
            val1: str

        class Examples(Collection[Example]):
            pass

    Two collections are only equal when they are of the same type, so `Examples([])` is not
    equal to `Collection([])` or to `()`.
    """

    def __new__(cls, iterable: Iterable[T] = ()) -> Collection[T]:
        return super().__new__(cls, iterable)

    @overload  # type: ignore[override]
    def __getitem__(self, index: int) -> T:
        ...

    @overload
    def __getitem__(self, index: slice) -> Collection[T]:
        ...

    def __getitem__(self, index: int | slice) -> T | Collection[T]:
        result = super().__getitem__(index)
        if isinstance(index, int):
            return result  # type: ignore[return-value]
        return self.__class__(result)  # type: ignore[arg-type]

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other) and super().__eq__(other)

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return super().__hash__()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self)})"
