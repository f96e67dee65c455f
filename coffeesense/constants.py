"""
Shared constants for CoffeeSense.
"""

# Files searched for by fallback discovery
PACKAGE_MANIFEST_FILENAME = "package.json"
LOOSE_PROJECT_CONFIG_FILENAME = "jsconfig.json"
STRICT_PROJECT_CONFIG_FILENAME = "tsconfig.json"

# Workspace configuration files, in lookup priority order
WORKSPACE_CONFIG_FILENAMES = (
    "coffeesense.config.yaml",
    "coffeesense.config.yml",
    "coffeesense.config.json",
)

# Environment variable pointing at an explicit workspace config file
ENV_CONFIG_PATH = "COFFEESENSE_CONFIG"

# Separator used when measuring directory depth
DEPTH_SEPARATOR = "/"
