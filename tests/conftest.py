"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture
def sample_package_json():
    """Sample package.json content for testing."""
    return {
        "name": "test-project",
        "version": "1.0.0",
        "dependencies": {"a": "^1.0.0"},
        "devDependencies": {"b": "^2.0.0"},
    }


@pytest.fixture
def sample_lockfile():
    """Sample package-lock.json (lockfileVersion 1) content for testing."""
    return {
        "name": "test-project",
        "version": "1.0.0",
        "lockfileVersion": 1,
        "requires": True,
        "dependencies": {
            "a": {
                "version": "1.1.0",
                "resolved": "https://registry.npmjs.org/a/-/a-1.1.0.tgz",
                "integrity": "sha512-abc",
                "requires": {"c": "^2.0.0"},
            },
            "b": {"version": "2.0.1", "dev": True},
            "c": {"version": "2.5.0"},
        },
    }


@pytest.fixture
def sample_audit_response():
    """Sample full audit report as returned by the registry."""
    return {
        "actions": [
            {
                "action": "update",
                "module": "a",
                "target": "1.2.0",
                "depth": 1,
                "isMajor": False,
                "resolves": [{"id": 118, "path": "a", "dev": False}],
            },
            {"action": "install", "module": "c", "target": "3.0.0", "isMajor": False},
        ],
        "advisories": {
            "118": {
                "module_name": "a",
                "severity": "high",
                "title": "Prototype Pollution",
                "patched_versions": ">=1.2.0",
                "url": "https://npmjs.com/advisories/118",
            }
        },
        "muted": [],
        "metadata": {
            "vulnerabilities": {"info": 0, "low": 0, "moderate": 1, "high": 1, "critical": 0},
            "dependencies": 3,
            "devDependencies": 1,
            "totalDependencies": 4,
        },
    }


@pytest.fixture
def write_project(tmp_path):
    """Write the given JSON documents into a temporary project root."""

    def _write(files: dict):
        for name, content in files.items():
            path = tmp_path / name
            if isinstance(content, str):
                path.write_text(content)
            else:
                path.write_text(json.dumps(content))
        return tmp_path

    return _write
