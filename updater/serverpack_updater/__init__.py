"""
serverpack_updater package
--------------------------
Keeps a modpack server launch script in sync with the newest server pack
published on CurseForge. Contains modules for configuration, the CurseForge
API client, server pack selection, launch file patching and logging.
"""

__version__ = "0.3.0"
