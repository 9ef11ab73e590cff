# Copyright 2023 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable

from maven_specs.install.request import MavenInstallRequest
from maven_specs.spec.accessors import artifact_coordinate, repository_url
from maven_specs.spec.parse import parse_exclusion_spec_list
from maven_specs.spec.repository import RepositorySpec
from maven_specs.util.strutil import pluralize

logger = logging.getLogger(__name__)


def _redacted_repository_url(repository: RepositorySpec) -> str:
    if repository.credentials is None:
        return repository_url(repository)
    protocol, _, remainder = repository.repo_url.partition("//")
    return f"{protocol}//***@{remainder}"


@dataclass(frozen=True)
class CoursierFetchArgs:
    """The arguments to `coursier fetch` for a `MavenInstallRequest`.

    Per-artifact exclusions cannot be expressed in coordinate arguments, so they are written to a
    local exclude file whose content is `local_exclude_file_content`. The caller is responsible for
    materializing that file next to the resolver process before running it.
    """

    coord_arg_strings: tuple[str, ...]
    repository_args: tuple[str, ...] = field(repr=False)
    extra_args: tuple[str, ...]
    local_exclude_file_content: str | None
    redacted_repository_args: tuple[str, ...]

    LOCAL_EXCLUDE_FILE: ClassVar[str] = "MAVEN_SPECS_RESOLVE_EXCLUDES"

    @classmethod
    def from_request(
        cls, request: MavenInstallRequest, *, json_output_file: str
    ) -> CoursierFetchArgs:
        coord_arg_strings = tuple(artifact_coordinate(a) for a in request.artifacts)

        repository_args = (
            *(f"-r={repository_url(repo)}" for repo in request.repositories),
            "--no-default",
        )
        redacted_repository_args = (
            *(f"-r={_redacted_repository_url(repo)}" for repo in request.repositories),
            "--no-default",
        )

        extra_args: list[str] = [
            f"--exclude={exclusion.to_coord_str()}" for exclusion in request.excluded_artifacts
        ]

        local_excludes = [
            f"{artifact.group}:{artifact.artifact}--{exclusion.to_coord_str()}"
            for artifact in request.artifacts
            for exclusion in parse_exclusion_spec_list(artifact.exclusions or ())
        ]
        local_exclude_file_content = None
        if local_excludes:
            local_exclude_file_content = "\n".join(local_excludes)
            extra_args += ["--local-exclude-file", cls.LOCAL_EXCLUDE_FILE]

        # Coursier only fetches non-jar artifact types when they are requested with `-A`. The value
        # replaces the default of `jar,bundle`, so those are kept in the list.
        extra_types = {
            artifact.packaging
            for artifact in request.artifacts
            if artifact.packaging is not None and artifact.packaging != "jar"
        }
        if extra_types:
            extra_args.extend(["-A", ",".join(sorted({"jar", "bundle", *extra_types}))])

        if request.fetch_sources:
            # `--sources` alone replaces the default classifier, so the jars must be asked for too.
            extra_args += ["--sources", "--default=true"]

        extra_args.append(f"--json-output-file={json_output_file}")

        logger.debug(
            f"Prepared coursier fetch of {pluralize(len(coord_arg_strings), 'coordinate')} for "
            f"maven install `{request.name}`."
        )
        return cls(
            coord_arg_strings=coord_arg_strings,
            repository_args=repository_args,
            extra_args=tuple(extra_args),
            local_exclude_file_content=local_exclude_file_content,
            redacted_repository_args=redacted_repository_args,
        )

    def _argv(self, repository_args: Iterable[str]) -> tuple[str, ...]:
        return ("fetch", *repository_args, *self.extra_args, *self.coord_arg_strings)

    @property
    def argv(self) -> tuple[str, ...]:
        """Arguments to pass to the coursier executable, with credentials embedded."""
        return self._argv(self.repository_args)

    @property
    def redacted_argv(self) -> tuple[str, ...]:
        """The same arguments as `argv`, with repository credentials masked for display."""
        return self._argv(self.redacted_repository_args)
