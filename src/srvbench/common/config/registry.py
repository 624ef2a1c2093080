# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Candidate registry: the ordered list of servers to benchmark."""

import logging
import sys
from pathlib import Path
from typing import Annotated, Any, Self

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from srvbench.common.constants import DEFAULT_HOST
from srvbench.common.exceptions import RegistryError
from srvbench.common.net import http_url

logger = logging.getLogger(__name__)

__all__ = [
    "CandidateDescriptor",
    "CandidateRegistry",
    "load_registry",
]


class CandidateDescriptor(BaseModel):
    """One server implementation under comparison.

    Attributes:
        name: Unique display name, also used as the results key
        host: Interface the candidate listens on
        port: TCP port the candidate listens on
        command: Launch command and arguments (mutually exclusive with script)
        script: Python script launched with the current interpreter
        external: Run in its own process group and terminate the whole tree
        path: Request path used for the readiness probe and the load test
        env: Extra environment variables for the candidate process
        cwd: Working directory for the candidate process
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1)]
    host: str = DEFAULT_HOST
    port: Annotated[int, Field(ge=1, le=65535)]
    command: list[str] | None = None
    script: Path | None = None
    external: bool = False
    path: str = "/"
    env: dict[str, str] = Field(default_factory=dict)
    cwd: Path | None = None

    @model_validator(mode="after")
    def validate_launch(self) -> Self:
        if (self.command is None) == (self.script is None):
            raise ValueError(
                f"Candidate '{self.name}' must set exactly one of 'command' or 'script'"
            )
        if self.command is not None and not self.command:
            raise ValueError(f"Candidate '{self.name}' has an empty 'command'")
        if not self.path.startswith("/"):
            raise ValueError(
                f"Candidate '{self.name}' path must start with '/': {self.path!r}"
            )
        return self

    @property
    def endpoint(self) -> tuple[str, int]:
        return self.host, self.port

    @property
    def url(self) -> str:
        return http_url(self.host, self.port, self.path)

    @property
    def launch_argv(self) -> list[str]:
        """Full argv used to start the candidate."""
        if self.script is not None:
            return [sys.executable, str(self.script)]
        return list(self.command)

    def resolve_paths(self, base_dir: Path) -> "CandidateDescriptor":
        """Return a copy with relative script/cwd paths anchored at base_dir."""
        updates: dict[str, Any] = {}
        if self.script is not None and not self.script.is_absolute():
            updates["script"] = (base_dir / self.script).resolve()
        if self.cwd is not None and not self.cwd.is_absolute():
            updates["cwd"] = (base_dir / self.cwd).resolve()
        return self.model_copy(update=updates) if updates else self


class CandidateRegistry(BaseModel):
    """Ordered, name-unique collection of candidates."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    candidates: list[CandidateDescriptor]

    @model_validator(mode="after")
    def validate_unique_names(self) -> Self:
        seen: set[str] = set()
        duplicates = []
        for candidate in self.candidates:
            if candidate.name in seen:
                duplicates.append(candidate.name)
            seen.add(candidate.name)
        if duplicates:
            raise ValueError(f"Duplicate candidate names: {', '.join(duplicates)}")
        return self

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.candidates]

    def select(self, names: list[str]) -> "CandidateRegistry":
        """Return a registry restricted to the given names, keeping registry order."""
        unknown = set(names) - set(self.names)
        if unknown:
            raise RegistryError(f"Unknown candidate(s): {', '.join(sorted(unknown))}")
        wanted = set(names)
        return CandidateRegistry(
            candidates=[c for c in self.candidates if c.name in wanted]
        )


def load_registry(path: Path) -> CandidateRegistry:
    """Load a registry from a JSON file.

    The file holds either ``{"candidates": [...]}`` or a bare list of candidate
    objects. Relative ``script`` and ``cwd`` entries are resolved against the
    file's directory.

    Raises:
        RegistryError: If the file cannot be read, parsed, or validated.
    """
    path = Path(path)
    try:
        raw = orjson.loads(path.read_bytes())
    except OSError as e:
        raise RegistryError(f"Cannot read registry {path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise RegistryError(f"Invalid JSON in registry {path}: {e}") from e

    if isinstance(raw, list):
        raw = {"candidates": raw}

    try:
        registry = CandidateRegistry.model_validate(raw)
    except ValidationError as e:
        raise RegistryError(f"Invalid registry {path}:\n{e}") from e

    if not registry.candidates:
        raise RegistryError(f"Registry {path} does not list any candidates")

    base_dir = path.resolve().parent
    registry = CandidateRegistry(
        candidates=[c.resolve_paths(base_dir) for c in registry.candidates]
    )
    logger.debug(f"Loaded {len(registry.candidates)} candidate(s) from {path}")
    return registry
