#!/usr/bin/env python3
"""
Northflank Addon Backup Migration

Waits for a source and a target addon to be running, imports the latest
completed backup of the source into the target and requests a restore.

Configuration comes from NF_HOST, NF_API_TOKEN, NF_PROJECT_ID,
NF_SOURCE_ADDON_ID, NF_TARGET_ADDON_ID, ADDON_WAIT_DURATION and
BACKUP_WAIT_DURATION (a .env file is honoured), or from the matching
command-line options.

This script runs directly from a source checkout by adding the local
`src/` directory to sys.path. For production use, prefer installing the
project and using the `addon-backup-migrate` console script.
"""

import os
import sys

# Add src/ to path to import modules directly
REPO_ROOT = os.path.dirname(os.path.abspath(__file__))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from cli import main


if __name__ == "__main__":
    sys.exit(main())
