"""
Configuration for the API Workbench project store.

Values are module-level constants; a few can be overridden through
environment variables so deployments do not need code changes.
"""

import os

# Format tag written into every folder project's properties.json
PROJECT_FORMAT_TAG = "APInox-v1"

# Root metadata document of a folder project
PROPERTIES_FILE = "properties.json"

# SoapUI version advertised in legacy project and workspace documents
SOAPUI_VERSION = os.environ.get("API_WORKBENCH_SOAPUI_VERSION", "5.7.0")

# Format used when a workspace save has to persist a project that has
# never been saved: "folder" (directory layout) or "xml" (legacy document)
DEFAULT_PROJECT_FORMAT = os.environ.get("API_WORKBENCH_DEFAULT_FORMAT", "folder")

# Minimum width of the numeric prefix on test step file names (01_, 02_, ...)
STEP_INDEX_WIDTH = 2

# Log level used when the HTTP app configures logging at startup
LOG_LEVEL = os.environ.get("API_WORKBENCH_LOG_LEVEL", "WARNING")
