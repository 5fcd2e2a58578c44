"""Test configuration for pytest.

Ensure the repository root is on sys.path so tests can import the `cachesim`
package without needing PYTHONPATH set externally.
"""
import os
import sys

import pytest

# Compute project root: two directories above this file (cachesim/tests -> cachesim -> project root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def write_trace(tmp_path):
    """Write trace lines to a temporary file and return its path."""
    def _write(lines, name='test.trace'):
        path = tmp_path / name
        path.write_text(''.join(line + '\n' for line in lines))
        return str(path)
    return _write
