"""
Pytest configuration for stencil-bench tests.

Adds src/ to sys.path so tests can import stencil_bench without an install
or PYTHONPATH.
"""

import os
import sys

repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(repo_root, 'src')

if src_path not in sys.path:
    sys.path.insert(0, src_path)
