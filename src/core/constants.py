"""Core constants used across depcache modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_CACHE_ROOT = Path(".depcache")
VERSION_MARKER_FILE_NAME = ".version-marker"
RUNTIME_METADATA_DIR_NAME = ".runtime-metadata"
RUNTIME_VERSION_FILE_NAME = "version"
BUILD_SPEC_VERSION = 1
DEFAULT_BUILD_COMMAND = ("ember", "build", "--environment=production")
ENV_DIR_BLACKLIST = (
    "PATH",
    "GIT_DIR",
    "CPATH",
    "CPLUS_INCLUDE_PATH",
    "LD_PRELOAD",
    "LIBRARY_PATH",
)
STATUS_PREFIX = "-----> "
DETAIL_PREFIX = "       "
PROTIP_PREFIX = "PRO TIP: "
EXIT_CODE_SUCCESS = 0
EXIT_CODE_BUILD_FAILURE = 1
EXIT_CODE_USAGE_FAILURE = 2
ERROR_PREFIX = " !     "
