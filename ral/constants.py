"""Centralized constants for the ral package."""

# Attribute that identifies a resource; never stored in its attribute map
NAME_ATTR = "name"

# Argument used to tell a provider script which action to run
ACTION_ARG = "ral_action"

# Subdirectory of each data dir that holds provider scripts
PROVIDERS_SUBDIR = "providers"

# Config file searched for from the working directory upwards
CONFIG_FILENAME = "ral.toml"

# Environment overrides
CONFIG_ENV_VAR = "RAL_CONFIG"
DATA_DIR_ENV_VAR = "RAL_DATA_DIR"

DEFAULT_DATA_DIRS = ("/usr/share/ral/data",)
DEFAULT_LOG_LEVEL = "warning"
