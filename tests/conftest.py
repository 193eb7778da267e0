"""
Pytest configuration and fixtures for Orchard tests.
"""

import io
import sys
import zipfile
from pathlib import Path

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


def build_zip(files: dict) -> bytes:
    """Return the bytes of a ZIP archive holding ``{relative path: text}``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def zip_factory():
    return build_zip
