"""
Todo List API Test Suite

Tests for every layer of the todo list API:
- Entity constraints and lookup results
- Repository queries
- Service operations
- HTTP endpoints
"""

import sys
import os
from pathlib import Path

# Add parent directory to path for imports
test_dir = Path(__file__).parent
project_root = test_dir.parent
sys.path.insert(0, str(project_root))

__version__ = "1.0.0"
__all__ = []
