"""
Project constants definitions
"""

# ============================================================
# Default Values
# ============================================================

DEFAULT_SSH_PORT = 22
DEFAULT_SSH_TIMEOUT = 10
DEFAULT_PARALLEL = 4
DEFAULT_TRANSPORT = "sftp"

# ============================================================
# Environment
# ============================================================

ENV_PREFIX = "PROXYSYNC_"

# ============================================================
# Remote Commands
# ============================================================

MKDIR_COMMAND = ("mkdir", "-p")
LIST_COMMAND = ("find",)
HASH_COMMAND = ("sha256sum",)
HASH_LENGTH = 64
HEREDOC_DELIMITER = "PROXYSYNC_EOF"

# ============================================================
# Artifact Layout
# ============================================================

FRONTEND_FILENAME = "frontend"
BACKEND_FILENAME_TEMPLATE = "backend_{service}_{order}.cfg"
BACKEND_NAME_TEMPLATE = "bk_{service}_{order}"
FRONTEND_NAME = "front"
FRONTEND_HTTP_NAME = "fronthttp"
FRONTEND_HTTPS_NAME = "fronthttps"

# ============================================================
# SSH Config
# ============================================================

SSH_CONFIG_PATH = "~/.ssh/config"
