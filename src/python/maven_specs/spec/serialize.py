# Copyright 2023 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Serializes specs into the request format read by the resolver.

The format is JSON laid out the way the resolver's own tooling writes it: objects are padded
(`{ "group": "g", "artifact": "a" }`), arrays are not (`["notify"]`), and fields are emitted in a
fixed order, skipping those that are absent.

String values are quoted but not escaped, so they must not contain double quotes or backslashes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence, Tuple

from maven_specs.spec.artifact import ArtifactSpec, ExclusionSpec, RawExclusion
from maven_specs.spec.parse import parse_exclusion_spec_list
from maven_specs.spec.repository import CredentialSpec, RepositorySpec


@dataclass(frozen=True)
class TextEncoder:
    object_open: str = "{ "
    object_close: str = " }"
    array_open: str = "["
    array_close: str = "]"
    item_separator: str = ", "
    key_separator: str = ": "
    quote: str = '"'

    def encode_string(self, value: str) -> str:
        return f"{self.quote}{value}{self.quote}"

    def encode_bool(self, value: bool) -> str:
        return "true" if value else "false"

    def encode_array(self, items: Iterable[str]) -> str:
        return f"{self.array_open}{self.item_separator.join(items)}{self.array_close}"

    def encode_object(self, fields: Iterable[tuple[str, str]]) -> str:
        body = self.item_separator.join(
            f"{self.encode_string(key)}{self.key_separator}{value}" for key, value in fields
        )
        return f"{self.object_open}{body}{self.object_close}"

    def encode_record(self, record: Any, fields: Sequence[Field]) -> str:
        """Encodes the named attributes of `record` in order, skipping those that are `None`."""
        encoded = []
        for key, encode in fields:
            value = getattr(record, key)
            if value is not None:
                encoded.append((key, encode(value)))
        return self.encode_object(encoded)


# An attribute name (which is also its key in the output), and how to encode its value.
Field = Tuple[str, Callable[[Any], str]]

ENCODER = TextEncoder()


def _string_field(key: str) -> Field:
    return key, ENCODER.encode_string


_CREDENTIALS_FIELDS: tuple[Field, ...] = (
    _string_field("user"),
    _string_field("password"),
)


def write_repository_credentials_spec(credentials_spec: CredentialSpec | None) -> str | None:
    """Returns the serialized credentials, or None if no credentials were given."""
    if credentials_spec is None:
        return None
    return _write_credentials(credentials_spec)


def _write_credentials(credentials_spec: CredentialSpec) -> str:
    return ENCODER.encode_record(credentials_spec, _CREDENTIALS_FIELDS)


_REPOSITORY_FIELDS: tuple[Field, ...] = (
    _string_field("repo_url"),
    ("credentials", _write_credentials),
)


def write_repository_spec(repository_spec: RepositorySpec) -> str:
    return ENCODER.encode_record(repository_spec, _REPOSITORY_FIELDS)


_EXCLUSION_FIELDS: tuple[Field, ...] = (
    _string_field("group"),
    _string_field("artifact"),
)


def write_exclusion_spec(exclusion_spec: ExclusionSpec) -> str:
    return ENCODER.encode_record(exclusion_spec, _EXCLUSION_FIELDS)


def write_override_license_types_spec(override_license_types_spec: Iterable[str]) -> str:
    return ENCODER.encode_array(ENCODER.encode_string(t) for t in override_license_types_spec)


def write_exclusion_spec_list(exclusion_specs: Iterable[RawExclusion]) -> str:
    """Serializes a list of exclusions, normalizing any `group:artifact` strings first."""
    return ENCODER.encode_array(
        write_exclusion_spec(spec) for spec in parse_exclusion_spec_list(exclusion_specs)
    )


_ARTIFACT_FIELDS: tuple[Field, ...] = (
    _string_field("group"),
    _string_field("artifact"),
    _string_field("version"),
    _string_field("packaging"),
    _string_field("classifier"),
    ("override_license_types", write_override_license_types_spec),
    ("exclusions", write_exclusion_spec_list),
    ("neverlink", ENCODER.encode_bool),
)


def write_artifact_spec(artifact_spec: ArtifactSpec) -> str:
    return ENCODER.encode_record(artifact_spec, _ARTIFACT_FIELDS)
