# Copyright 2023 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import toml

from maven_specs.install.request import DEFAULT_REPOSITORIES, MavenInstallRequest
from maven_specs.spec import maven
from maven_specs.spec.artifact import ArtifactSpec, ExclusionSpec
from maven_specs.spec.repository import RepositorySpec
from maven_specs.util.osutil import getuser
from maven_specs.util.strutil import bullet_list, softwrap

logger = logging.getLogger(__name__)

SECTION = "maven_install"

_STRING = "a string"
_BOOL = "a boolean"
_STRING_LIST = "a list of strings"
_ENTRY_LIST = "a list of strings or tables"


def _has_type(value: Any, expected: str) -> bool:
    if expected == _STRING:
        return isinstance(value, str)
    if expected == _BOOL:
        return isinstance(value, bool)
    if expected == _STRING_LIST:
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return isinstance(value, list) and all(isinstance(v, (str, dict)) for v in value)


@dataclass(frozen=True)
class _TableSchema:
    """The keys a config table may hold, the type each must have, and which are required.

    `entries` gives the schema of the tables inside a list of strings or tables.
    """

    fields: Mapping[str, str]
    required: frozenset[str]
    entries: Mapping[str, _TableSchema] = field(default_factory=dict)

    def get_verification_errors(self, table: Mapping[str, Any], location: str) -> list[str]:
        errors = [
            f"Invalid key `{key}` {location}." for key in sorted(set(table) - set(self.fields))
        ]
        errors.extend(
            f"Missing required key `{key}` {location}."
            for key in sorted(self.required - set(table))
        )
        for key, expected in self.fields.items():
            if key not in table:
                continue
            value = table[key]
            if not _has_type(value, expected):
                # The value itself is left out, since it may be a credential.
                errors.append(
                    f"Expected `{key}` to be {expected} {location}, not "
                    f"`{type(value).__name__}`."
                )
                continue
            entry_schema = self.entries.get(key)
            if entry_schema is not None:
                for entry in value:
                    if isinstance(entry, dict):
                        errors.extend(
                            entry_schema.get_verification_errors(entry, f"in `{key}` {location}")
                        )
        return errors


_EXCLUSION_SCHEMA = _TableSchema(
    fields={"group": _STRING, "artifact": _STRING},
    required=frozenset(("group", "artifact")),
)
_ARTIFACT_SCHEMA = _TableSchema(
    fields={
        "group": _STRING,
        "artifact": _STRING,
        "version": _STRING,
        "packaging": _STRING,
        "classifier": _STRING,
        "override_license_types": _STRING_LIST,
        "exclusions": _ENTRY_LIST,
        "neverlink": _BOOL,
    },
    required=frozenset(("group", "artifact", "version")),
    entries={"exclusions": _EXCLUSION_SCHEMA},
)
_REPOSITORY_SCHEMA = _TableSchema(
    fields={"url": _STRING, "user": _STRING, "password": _STRING},
    required=frozenset(("url",)),
)
_INSTALL_SCHEMA = _TableSchema(
    fields={
        "artifacts": _ENTRY_LIST,
        "repositories": _ENTRY_LIST,
        "excluded_artifacts": _ENTRY_LIST,
        "fetch_sources": _BOOL,
        "use_unsafe_shared_cache": _BOOL,
    },
    required=frozenset(("artifacts",)),
    entries={
        "artifacts": _ARTIFACT_SCHEMA,
        "repositories": _REPOSITORY_SCHEMA,
        "excluded_artifacts": _EXCLUSION_SCHEMA,
    },
)

_INTERPOLATION_RE = re.compile(r"%\((?P<interpolated>[a-zA-Z_0-9.]+)\)s")


class ConfigError(Exception):
    """An error encountered while parsing a config file."""


class ConfigValidationError(ConfigError):
    """A config file is invalid."""


class InterpolationMissingOptionError(ConfigError):
    def __init__(self, install: str, raw_value: str, reference: str) -> None:
        super().__init__(
            softwrap(
                f"""
                Bad value substitution: maven install `{install}` contains an interpolation key
                `{reference}` which is not defined (value: {raw_value}). Only `%(homedir)s`,
                `%(user)s` and environment variables (`%(env.NAME)s`) can be interpolated.
                """
            )
        )


@dataclass(frozen=True)
class ConfigSource:
    """The path and raw content of a config file."""

    path: str
    content: bytes


def _determine_seed_values(env: Mapping[str, str] | None) -> dict[str, str]:
    """The values available for `%(name)s` interpolation."""
    seed_values = {
        # Note that expanduser will return the root dir when running with a uid
        # not associated with a user.
        "homedir": os.path.expanduser("~"),
        "user": getuser(),
    }
    for key, value in (env or {}).items():
        seed_values[f"env.{key}"] = value
    return seed_values


@dataclass(frozen=True)
class _InstallTable:
    """The `[maven_install.<name>]` table from one config file."""

    path: str
    name: str
    values: dict[str, Any]

    def interpolated(self, seed_values: Mapping[str, str]) -> dict[str, Any]:
        def interpolate_str(raw_value: str) -> str:
            def substitute(match: re.Match[str]) -> str:
                reference = match.group("interpolated")
                if reference not in seed_values:
                    raise InterpolationMissingOptionError(self.name, raw_value, reference)
                return seed_values[reference]

            return _INTERPOLATION_RE.sub(substitute, raw_value)

        def interpolate(value: Any) -> Any:
            if isinstance(value, str):
                return interpolate_str(value)
            if isinstance(value, list):
                return [interpolate(v) for v in value]
            if isinstance(value, dict):
                return {k: interpolate(v) for k, v in value.items()}
            return value

        return interpolate(self.values)

    def get_verification_errors(self) -> list[str]:
        if not isinstance(self.values, dict):
            return [f"Expected [{SECTION}.{self.name}] to be a table in {self.path}."]
        return _INSTALL_SCHEMA.get_verification_errors(
            self.values, f"for maven install `{self.name}` in {self.path}"
        )

    def to_request(self, seed_values: Mapping[str, str]) -> MavenInstallRequest:
        values = self.interpolated(seed_values)
        return MavenInstallRequest.create(
            name=self.name,
            artifacts=[_artifact(entry) for entry in values["artifacts"]],
            repositories=[
                _repository(entry) for entry in values.get("repositories", DEFAULT_REPOSITORIES)
            ],
            excluded_artifacts=[
                _exclusion(entry) for entry in values.get("excluded_artifacts", [])
            ],
            fetch_sources=values.get("fetch_sources", False),
            use_unsafe_shared_cache=values.get("use_unsafe_shared_cache", False),
        )


def _artifact(entry: str | dict[str, Any]) -> str | ArtifactSpec:
    return entry if isinstance(entry, str) else ArtifactSpec.from_json_dict(entry)


def _repository(entry: str | dict[str, Any]) -> str | RepositorySpec:
    if isinstance(entry, str):
        return entry
    return maven.repository(entry["url"], entry.get("user"), entry.get("password"))


def _exclusion(entry: str | dict[str, Any]) -> str | ExclusionSpec:
    return entry if isinstance(entry, str) else ExclusionSpec.from_json_dict(entry)


@dataclass(frozen=True, eq=False)
class MavenConfig:
    """Maven install declarations loaded from one or more TOML files.

    Each install is a `[maven_install.<name>]` table. List entries are either compact strings or
    tables, and since a TOML array holds a single type, tables go in arrays of tables:

        [maven_install.maven]
        artifacts = ["com.google.guava:guava:27.0-jre"]
        excluded_artifacts = ["com.google.j2objc:j2objc-annotations"]
        fetch_sources = true

        [[maven_install.maven.repositories]]
        url = "https://maven.example.com/"
        user = "deploy"
        password = "%(env.MAVEN_PASSWORD)s"

    An install declared in a later file replaces the one of the same name from an earlier file.
    """

    sources: tuple[str, ...]
    _requests: dict[str, MavenInstallRequest]

    @classmethod
    def load(
        cls, file_contents: Iterable[ConfigSource], *, env: Mapping[str, str] | None = None
    ) -> MavenConfig:
        """Loads config from the given payloads, with later payloads overriding earlier ones.

        If an `env` is supplied, its entries may be interpolated via `%(env.NAME)s`.
        """
        file_contents = tuple(file_contents)
        tables: dict[str, _InstallTable] = {}
        for file_content in file_contents:
            try:
                toml_values = toml.loads(file_content.content.decode())
            except (UnicodeDecodeError, toml.TomlDecodeError) as e:
                raise ConfigError(
                    f"Config file {file_content.path} could not be parsed as TOML:\n  {e}"
                )
            for name, values in toml_values.get(SECTION, {}).items():
                if name in tables:
                    logger.debug(
                        f"Maven install `{name}` from {file_content.path} overrides the one from "
                        f"{tables[name].path}."
                    )
                tables[name] = _InstallTable(file_content.path, name, values)

        error_log = [
            error for table in tables.values() for error in table.get_verification_errors()
        ]
        if error_log:
            for error in error_log:
                logger.error(error)
            raise ConfigValidationError(
                softwrap(
                    """
                    Invalid maven install entries detected. See log for details on which entries
                    to update or remove.
                    """
                )
            )

        seed_values = _determine_seed_values(env)
        return cls(
            sources=tuple(file_content.path for file_content in file_contents),
            _requests={name: table.to_request(seed_values) for name, table in tables.items()},
        )

    @classmethod
    def load_files(
        cls, paths: Iterable[str], *, env: Mapping[str, str] | None = None
    ) -> MavenConfig:
        sources = []
        for path in paths:
            with open(path, "rb") as f:
                sources.append(ConfigSource(path, f.read()))
        return cls.load(sources, env=env)

    def requests(self) -> tuple[MavenInstallRequest, ...]:
        """All declared installs, in the order they were first declared."""
        return tuple(self._requests.values())

    def request(self, name: str) -> MavenInstallRequest:
        try:
            return self._requests[name]
        except KeyError:
            known = bullet_list(sorted(self._requests)) or "  (none)"
            raise ConfigError(
                f"No maven install named `{name}` in {', '.join(self.sources)}. Known installs:"
                f"\n\n{known}"
            )
