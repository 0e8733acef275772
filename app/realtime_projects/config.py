"""
Realtime Projects Configuration
Project folder location and descriptor defaults
"""

import os

# Repo root: app/realtime_projects/ -> app/ -> repo root
_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

REALTIME_PROJECTS_PATH = os.getenv(
    "REALTIME_PROJECTS_PATH", os.path.join(_REPO_ROOT, "Realtime_projects")
)

# A folder is a project only if it has the entry file
PROJECT_INDEX_FILE = "index.html"
PROJECT_METADATA_FILE = "project.json"

# Probed in order, first hit wins
THUMBNAIL_CANDIDATES = (
    "thumbnail.png",
    "thumbnail.jpg",
    "assets/thumbnail.png",
    "assets/thumbnail.jpg",
    "images/thumbnail.png",
    "img/thumbnail.png",
)

# Descriptor defaults when project.json is missing or silent
DEFAULT_CATEGORY = "Web Development"
DEFAULT_DIFFICULTY = "intermediate"
DEFAULT_ESTIMATED_HOURS = 40
DEFAULT_ORDER = 999
DEFAULT_VERSION = "1.0.0"
