"""
Constants for the shellbridge application.
"""
from pathlib import Path
import os

# Application information
APP_NAME = "shellbridge"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Shell command adaptation and safety pipeline for AI agents"

# Paths
CONFIG_DIR = Path(os.path.expanduser("~/.config/shellbridge"))
CONFIG_FILE = CONFIG_DIR / "config.toml"
LOG_DIR = CONFIG_DIR / "logs"

# Logging
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[name]} | {message}"
LOG_ROTATION = "100 MB"
LOG_RETENTION = "10 days"

# Shell
DEFAULT_SHELL = "/bin/zsh"
SHELL_COMMAND_FLAG = "-c"

# Execution
DEFAULT_TIMEOUT = 300.0  # seconds
TERMINATE_GRACE_PERIOD = 2.0  # seconds between SIGTERM and SIGKILL when draining

# Environment overrides
ENV_SHELL = "SHELLBRIDGE_SHELL"
ENV_TIMEOUT = "SHELLBRIDGE_TIMEOUT"
ENV_MAX_RISK_LEVEL = "SHELLBRIDGE_MAX_RISK_LEVEL"
ENV_DEBUG = "SHELLBRIDGE_DEBUG"
