# tests/conftest.py
"""
Shared fixtures: a Store on a throwaway data dir, wired to a permission gate
whose answers each test controls.
"""
from __future__ import annotations

import pytest

from Eduledger.app_init import build_store
from Eduledger.data.backends import PermissionMode, PermissionState
from Eduledger.data.normalize import empty_aggregate


class ScriptedGate:
    """
    Permission gate for tests.

    ``granted[mode]`` is what a silent query returns; when it is False the
    gate "prompts" and answers with ``prompt_answer``. Every call is recorded
    so tests can check that permission is re-verified on each access.
    """

    def __init__(self):
        self.granted = {PermissionMode.READ: True, PermissionMode.READWRITE: True}
        self.prompt_answer = False
        self.calls = []

    def query(self, handle, mode):
        self.calls.append(("query", PermissionMode(mode)))
        if self.granted[PermissionMode(mode)]:
            return PermissionState.GRANTED
        return PermissionState.PROMPT

    def request(self, handle, mode):
        self.calls.append(("request", PermissionMode(mode)))
        return PermissionState.GRANTED if self.prompt_answer else PermissionState.DENIED

    def revoke_all(self):
        self.granted = {PermissionMode.READ: False, PermissionMode.READWRITE: False}
        self.prompt_answer = False


@pytest.fixture
def gate():
    return ScriptedGate()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "appdata"


@pytest.fixture
def fresh_store(data_dir, gate):
    """Store with nothing persisted yet (first read seeds the sample data)."""
    return build_store(data_dir, gate=gate)


@pytest.fixture
def store(fresh_store):
    """Store holding an empty aggregate."""
    fresh_store.save(empty_aggregate())
    return fresh_store
