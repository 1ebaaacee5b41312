"""Shared fixtures for tokau tests."""
import textwrap

import pytest


@pytest.fixture
def write_yaml(tmp_path):
    """Write a YAML document to a temp file and return its path."""
    def _write(text, name="layout.yaml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return str(path)
    return _write
