# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for the candidate registry."""

import sys
from pathlib import Path

import orjson
import pytest
from pydantic import ValidationError

from srvbench.common.config import (
    CandidateDescriptor,
    CandidateRegistry,
    load_registry,
)
from srvbench.common.exceptions import RegistryError


def write_registry(tmp_path: Path, content) -> Path:
    path = tmp_path / "registry.json"
    path.write_bytes(orjson.dumps(content))
    return path


class TestCandidateDescriptor:
    def test_command_candidate(self):
        candidate = CandidateDescriptor(name="echo", port=4000, command=["node", "echo.js"])
        assert candidate.host == "127.0.0.1"
        assert candidate.url == "http://127.0.0.1:4000/"
        assert candidate.endpoint == ("127.0.0.1", 4000)
        assert candidate.launch_argv == ["node", "echo.js"]
        assert candidate.external is False

    def test_script_candidate_runs_with_current_interpreter(self):
        candidate = CandidateDescriptor(name="py", port=4001, script=Path("/srv/app.py"))
        assert candidate.launch_argv == [sys.executable, "/srv/app.py"]

    def test_custom_path_in_url(self):
        candidate = CandidateDescriptor(
            name="echo", port=4000, command=["srv"], path="/health"
        )
        assert candidate.url == "http://127.0.0.1:4000/health"

    def test_ipv6_host_in_url(self):
        candidate = CandidateDescriptor(name="v6", host="::1", port=4000, command=["srv"])
        assert candidate.url == "http://[::1]:4000/"

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "x", "port": 1},
            {"name": "x", "port": 1, "command": ["a"], "script": "b.py"},
            {"name": "x", "port": 1, "command": []},
            {"name": "x", "port": 0, "command": ["a"]},
            {"name": "x", "port": 70000, "command": ["a"]},
            {"name": "", "port": 1, "command": ["a"]},
            {"name": "x", "port": 1, "command": ["a"], "path": "health"},
        ],
    )  # fmt: skip
    def test_invalid_descriptors(self, fields):
        with pytest.raises(ValidationError):
            CandidateDescriptor(**fields)

    def test_descriptor_is_immutable(self):
        candidate = CandidateDescriptor(name="echo", port=4000, command=["srv"])
        with pytest.raises(ValidationError):
            candidate.port = 5000

    def test_resolve_paths_anchors_relative_paths(self, tmp_path):
        candidate = CandidateDescriptor(
            name="py", port=1, script=Path("servers/app.py"), cwd=Path("servers")
        )
        resolved = candidate.resolve_paths(tmp_path)
        assert resolved.script == (tmp_path / "servers" / "app.py").resolve()
        assert resolved.cwd == (tmp_path / "servers").resolve()

    def test_resolve_paths_keeps_absolute_paths(self, tmp_path):
        candidate = CandidateDescriptor(name="py", port=1, script=Path("/abs/app.py"))
        assert candidate.resolve_paths(tmp_path) is candidate


class TestCandidateRegistry:
    def test_duplicate_names_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate candidate names: a"):
            CandidateRegistry(
                candidates=[
                    CandidateDescriptor(name="a", port=1, command=["x"]),
                    CandidateDescriptor(name="a", port=2, command=["y"]),
                ]
            )

    def test_select_keeps_registry_order(self):
        registry = CandidateRegistry(
            candidates=[
                CandidateDescriptor(name=name, port=i + 1, command=["x"])
                for i, name in enumerate(["a", "b", "c"])
            ]
        )
        assert registry.select(["c", "a"]).names == ["a", "c"]

    def test_select_unknown_name(self):
        registry = CandidateRegistry(
            candidates=[CandidateDescriptor(name="a", port=1, command=["x"])]
        )
        with pytest.raises(RegistryError, match="Unknown candidate"):
            registry.select(["zzz"])


class TestLoadRegistry:
    def test_load_wrapped_registry(self, tmp_path):
        path = write_registry(
            tmp_path,
            {
                "candidates": [
                    {"name": "echo", "port": 4000, "command": ["node", "echo.js"]},
                    {"name": "py", "port": 4001, "script": "app.py", "external": False},
                ]
            },
        )
        registry = load_registry(path)
        assert registry.names == ["echo", "py"]
        assert registry.candidates[1].script == (tmp_path / "app.py").resolve()

    def test_load_bare_list(self, tmp_path):
        path = write_registry(
            tmp_path, [{"name": "echo", "port": 4000, "command": ["srv"], "external": True}]
        )
        registry = load_registry(path)
        assert registry.candidates[0].external is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryError, match="Cannot read registry"):
            load_registry(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text("{not json")
        with pytest.raises(RegistryError, match="Invalid JSON"):
            load_registry(path)

    def test_invalid_candidate(self, tmp_path):
        path = write_registry(tmp_path, [{"name": "echo", "port": "nope"}])
        with pytest.raises(RegistryError, match="Invalid registry"):
            load_registry(path)

    def test_empty_registry(self, tmp_path):
        path = write_registry(tmp_path, {"candidates": []})
        with pytest.raises(RegistryError, match="does not list any candidates"):
            load_registry(path)
