# Copyright 2023 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable

from maven_specs.spec.artifact import ArtifactSpec, ArtifactSpecs, ExclusionSpec, ExclusionSpecs
from maven_specs.spec.parse import (
    parse_artifact_spec_list,
    parse_exclusion_spec_list,
    parse_repository_spec_list,
)
from maven_specs.spec.repository import RepositorySpec, RepositorySpecs
from maven_specs.spec.serialize import (
    ENCODER,
    write_artifact_spec,
    write_exclusion_spec,
    write_repository_spec,
)
from maven_specs.util.strutil import pluralize

logger = logging.getLogger(__name__)

DEFAULT_NAME = "maven"
DEFAULT_REPOSITORIES = ("https://repo1.maven.org/maven2",)


@dataclass(frozen=True)
class MavenInstallRequest:
    """A named set of artifacts to resolve, where to resolve them from, and what to leave out.

    `excluded_artifacts` are global: they are excluded from the transitive dependencies of every
    artifact, unlike the per-artifact `ArtifactSpec.exclusions`.
    """

    name: str
    artifacts: ArtifactSpecs
    repositories: RepositorySpecs
    excluded_artifacts: ExclusionSpecs = ExclusionSpecs()
    fetch_sources: bool = False
    use_unsafe_shared_cache: bool = False

    @classmethod
    def create(
        cls,
        *,
        artifacts: Iterable[str | ArtifactSpec],
        name: str = DEFAULT_NAME,
        repositories: Iterable[str | RepositorySpec] = DEFAULT_REPOSITORIES,
        excluded_artifacts: Iterable[str | ExclusionSpec] = (),
        fetch_sources: bool = False,
        use_unsafe_shared_cache: bool = False,
    ) -> MavenInstallRequest:
        """Builds a request from declarations in either their compact or structured form."""
        request = cls(
            name=name,
            artifacts=parse_artifact_spec_list(artifacts),
            repositories=parse_repository_spec_list(repositories),
            excluded_artifacts=parse_exclusion_spec_list(excluded_artifacts),
            fetch_sources=fetch_sources,
            use_unsafe_shared_cache=use_unsafe_shared_cache,
        )
        logger.debug(
            f"Created maven install `{name}` with {pluralize(len(request.artifacts), 'artifact')} "
            f"from {pluralize(len(request.repositories), 'repository')}."
        )
        return request

    def to_json(self) -> str:
        """The request document read by the resolver."""
        return ENCODER.encode_object(
            [
                ("name", ENCODER.encode_string(self.name)),
                ("artifacts", ENCODER.encode_array(map(write_artifact_spec, self.artifacts))),
                (
                    "repositories",
                    ENCODER.encode_array(map(write_repository_spec, self.repositories)),
                ),
                (
                    "excluded_artifacts",
                    ENCODER.encode_array(map(write_exclusion_spec, self.excluded_artifacts)),
                ),
                ("fetch_sources", ENCODER.encode_bool(self.fetch_sources)),
                ("use_unsafe_shared_cache", ENCODER.encode_bool(self.use_unsafe_shared_cache)),
            ]
        )

    def write(self, path: str) -> None:
        """Writes the request document to `path`, creating parent directories as needed."""
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_json())
            f.write("\n")
        logger.debug(f"Wrote maven install request `{self.name}` to {path}.")
