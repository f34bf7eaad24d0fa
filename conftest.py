"""
Pytest configuration for the migration job tests.

Puts src/ on sys.path so tests import the job modules (clients, waiters,
migration, ...) the same way main.py does from a source checkout.
"""

import os
import sys

ROOT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(ROOT_DIR, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)
