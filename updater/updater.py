#!/usr/bin/env python3
"""
Server pack updater
Finds the newest CurseForge server pack and writes its version and file id
into launch.sh (SERVER_VERSION / SERVER_FILE_ID).

Required env:
- CURSEFORGE_API_KEY
"""

import sys

from serverpack_updater.cli import main

if __name__ == "__main__":
    sys.exit(main())
