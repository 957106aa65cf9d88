"""
Tests for the declared runtime dependencies.
"""
import unittest
from pathlib import Path

import nano_vectordb

REPO_ROOT = Path(__file__).resolve().parents[2]
PACKAGE_DIR = Path(nano_vectordb.__file__).resolve().parent


def _requirement_names():
    names = []
    for line in (REPO_ROOT / "requirements.txt").read_text().splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            for sep in ("<", ">", "=", "~", "!", "[", ";"):
                line = line.split(sep, 1)[0]
            names.append(line.strip().lower())
    return names


class TestRuntimeRequirements(unittest.TestCase):
    """Test that requirements.txt only lists what the library imports."""

    def test_dotenv_is_not_a_runtime_requirement(self):
        """Test that python-dotenv stays out of the runtime requirements."""
        self.assertNotIn("python-dotenv", _requirement_names())

    def test_library_does_not_import_dotenv(self):
        """Test that no library module depends on python-dotenv."""
        for source in PACKAGE_DIR.rglob("*.py"):
            text = source.read_text()
            self.assertNotIn("import dotenv", text, msg=str(source))
            self.assertNotIn("from dotenv", text, msg=str(source))

    def test_runtime_requirements(self):
        """Test the runtime stack declared for installation."""
        self.assertEqual(set(_requirement_names()), {"numpy", "pyyaml"})
