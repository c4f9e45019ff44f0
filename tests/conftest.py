"""
Pytest configuration and fixtures for Anekbot tests.
"""

import sys
from pathlib import Path

# Add src directory to path so imports work without an editable install
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))
