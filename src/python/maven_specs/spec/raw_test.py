# Copyright 2023 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

from maven_specs.spec.raw import SpecKind, StringForm, StructuredForm, normalize_all, raw_spec

_LENGTH = SpecKind("length", len)


def test_raw_spec_tags_strings() -> None:
    assert raw_spec("g:a") == StringForm("g:a")


def test_raw_spec_tags_records() -> None:
    assert raw_spec(3) == StructuredForm(3)


def test_string_form_uses_kind() -> None:
    assert StringForm("abc").normalize(_LENGTH) == 3


def test_structured_form_passes_through() -> None:
    record = object()
    assert StructuredForm(record).normalize(SpecKind("object", object)) is record


def test_normalize_all_preserves_order_and_length() -> None:
    assert normalize_all(_LENGTH, ["a", 10, "abc", 0]) == [1, 10, 3, 0]
