"""Global constants for Recent Workspaces MCP.

These values serve as defaults for configuration.  Changing these values is
discouraged; instead override environment variables as needed.
"""

import os

# Logging
LOG_FILE_NAME = "RecentWorkspaces.log"

# Results
DEFAULT_MAX_RESULTS = 10

# Transport
MCP_TRANSPORT = os.environ.get("MCP_TRANSPORT", "stdio")

# Visual Studio private hive layout
VS_INSTANCE_PREFIX = "17.0_"
VS_HIVE_FILE = "privateregistry.bin"
VS_SETTINGS_FILE = "ApplicationPrivateSettings.xml"
VS_HIVE_ROOT = r"Software\Microsoft\VisualStudio"
VS_MRU_SUBKEYS = (
    "MRUItems",
    r"MRUItems\Solution",
    "StartPage",
    r"StartPage\MRUItems",
    "FileMRUList",
    "ProjectMRUList",
)

# VS Code style storage.json location, relative to the roaming app data dir
STORAGE_JSON_PARTS = ("User", "globalStorage", "storage.json")
