"""
Test configuration and fixtures for unipac tests
"""

import os
import sys
import shutil
import tempfile
from pathlib import Path

import pytest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from unipac import config
from unipac.utils.identity import Identity


@pytest.fixture
def temp_dir():
    """Temporary directory for tests"""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def build_root(temp_dir, monkeypatch):
    """Directory the build workspaces are created in"""
    root = Path(temp_dir) / "build"
    root.mkdir()
    monkeypatch.setattr(config, "BUILD_ROOT", str(root))
    return root


@pytest.fixture
def hold_file(temp_dir, monkeypatch):
    path = Path(temp_dir) / "holdlist"
    monkeypatch.setattr(config, "HOLD_FILE", path)
    return path


@pytest.fixture
def regular_user():
    return Identity(uid=1000, user="builder")


@pytest.fixture
def superuser():
    return Identity(uid=0, user="root")
