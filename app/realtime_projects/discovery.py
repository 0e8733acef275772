"""
Realtime Project Discovery
File: app/realtime_projects/discovery.py

Scans the realtime projects folder on every call. Each immediate
subdirectory holding an index.html is a project; an optional project.json
beside it overrides the defaults derived from the folder name.

Nothing here raises on a missing folder or a broken project.json: both are
logged and discovery carries on with what it has.
"""

import json
import logging
import math
import os
import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from app.realtime_projects.config import (
    REALTIME_PROJECTS_PATH, PROJECT_INDEX_FILE, PROJECT_METADATA_FILE,
    THUMBNAIL_CANDIDATES, DEFAULT_CATEGORY, DEFAULT_DIFFICULTY,
    DEFAULT_ESTIMATED_HOURS, DEFAULT_ORDER, DEFAULT_VERSION,
)
from app.realtime_projects.models import (
    DIFFICULTY_RANK, ProjectDescriptor, ProjectSort, ProjectStats,
)

logger = logging.getLogger(__name__)

# Served instead of index.html when a phase directory is requested
PHASE_OVERVIEW_FILE = "Overview.html"


class ProjectPathError(ValueError):
    """Requested file lies outside the project folder"""


# ==================== NAME HELPERS ====================

def slugify_folder_name(folder_name: str) -> str:
    return re.sub(r"\s+", "-", folder_name.lower())


def format_folder_name(folder_name: str) -> str:
    """
    "ecommerce-store_v2" -> "Ecommerce Store V2"
    Only the first letter of each word is touched.
    """
    words = folder_name.replace("-", " ").replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _name_key(name: str):
    # case-folded first so "apple" < "Banana", raw text breaks ties
    return (name.casefold(), name)


def _sort_key(project: ProjectDescriptor):
    if project.has_explicit_order:
        return (0, project.order, _name_key(project.name))
    return (1, 0, _name_key(project.name))


# ==================== FILESYSTEM DATES ====================

def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _timestamp_to_date(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).date().isoformat()


def get_folder_creation_date(folder_path: Path) -> str:
    try:
        stats = os.stat(folder_path)
    except OSError:
        return _today()
    # st_birthtime is missing on Linux, inode change time is the closest
    return _timestamp_to_date(getattr(stats, "st_birthtime", stats.st_ctime))


def get_folder_modification_date(folder_path: Path) -> str:
    try:
        return _timestamp_to_date(os.stat(folder_path).st_mtime)
    except OSError:
        return _today()


# ==================== METADATA CLEANUP ====================

# project.json keys by expected shape; numbers given for text keys are kept as text
_TEXT_KEYS = ("id", "name", "description", "category", "difficulty", "thumbnail", "version")
_DATE_KEYS = ("createdAt", "updatedAt")
_NUMBER_KEYS = ("estimatedHours", "order")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _as_date(value) -> Optional[str]:
    """Leading YYYY-MM-DD of an ISO date or datetime string, else None"""
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10]).isoformat()
    except ValueError:
        return None


def clean_metadata(folder_name: str, config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Usable part of a project.json.

    Each key is checked on its own: a bad value is dropped with a warning
    and the remaining keys still override the defaults.
    """
    cleaned: Dict[str, Any] = {}

    for key, value in config.items():
        if value is None:
            continue

        if key in _TEXT_KEYS:
            if isinstance(value, str):
                cleaned[key] = value
            elif _is_number(value):
                cleaned[key] = str(value)
        elif key in _DATE_KEYS:
            if _as_date(value) is not None:
                cleaned[key] = _as_date(value)
        elif key in _NUMBER_KEYS:
            if _is_number(value):
                cleaned[key] = value
        elif key == "tags":
            if isinstance(value, list) and all(isinstance(tag, str) for tag in value):
                cleaned[key] = value
        else:
            cleaned[key] = value
            continue

        if key not in cleaned:
            logger.warning(f"Ignoring {key}={value!r} in {PROJECT_METADATA_FILE} for {folder_name}")

    return cleaned


# ==================== DISCOVERY SERVICE ====================

class ProjectDiscoveryService:
    """
    Discovers projects under `projects_path`.

    Holds only the root path; every call rescans the folder.
    """

    def __init__(self, projects_path):
        self.projects_path = Path(projects_path)
        logger.debug(f"Project discovery using {self.projects_path} (exists: {self.projects_path.is_dir()})")

    def discover_projects(self) -> List[ProjectDescriptor]:
        """All projects, sorted by explicit order then name"""
        if not self.projects_path.is_dir():
            logger.info(f"Projects directory not found: {self.projects_path}")
            return []

        try:
            entries = sorted(self.projects_path.iterdir())
        except OSError as exc:
            logger.error(f"Error listing projects directory {self.projects_path}: {exc}")
            return []

        projects = []
        for entry in entries:
            if not entry.is_dir():
                continue
            project = self.get_project_info(entry.name, entry)
            if project is not None:
                projects.append(project)

        projects.sort(key=_sort_key)
        return projects

    def get_project_info(self, folder_name: str, project_path: Path) -> Optional[ProjectDescriptor]:
        """Descriptor for one folder, or None if it has no index.html"""
        if not (project_path / PROJECT_INDEX_FILE).is_file():
            return None

        config = clean_metadata(folder_name, self._load_metadata(folder_name, project_path))
        return self._build_descriptor(folder_name, project_path, config)

    def _load_metadata(self, folder_name: str, project_path: Path) -> Dict[str, Any]:
        config_path = project_path / PROJECT_METADATA_FILE
        if not config_path.is_file():
            return {}

        try:
            with config_path.open(encoding="utf-8") as fh:
                config = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning(f"Error reading {PROJECT_METADATA_FILE} for {folder_name}: {exc}")
            return {}

        if not isinstance(config, dict):
            logger.warning(f"{PROJECT_METADATA_FILE} for {folder_name} must be a JSON object, got {type(config).__name__}")
            return {}

        return config

    def _build_descriptor(self, folder_name: str, project_path: Path, config: Dict[str, Any]) -> ProjectDescriptor:
        name = config.get("name") or format_folder_name(folder_name)
        order = config.get("order")

        return ProjectDescriptor(
            id=config.get("id") or slugify_folder_name(folder_name),
            folder_name=folder_name,
            name=name,
            description=config.get("description") or f"Interactive {name} project",
            category=config.get("category") or DEFAULT_CATEGORY,
            difficulty=config.get("difficulty") or DEFAULT_DIFFICULTY,
            thumbnail=config.get("thumbnail") or self.find_thumbnail(project_path),
            tags=config.get("tags") or [],
            estimated_hours=config.get("estimatedHours") or DEFAULT_ESTIMATED_HOURS,
            order=order if order is not None else DEFAULT_ORDER,
            version=config.get("version") or DEFAULT_VERSION,
            created_at=config.get("createdAt") or get_folder_creation_date(project_path),
            updated_at=config.get("updatedAt") or get_folder_modification_date(project_path),
            hide_footer=config.get("hideFooter") is True,
            hide_header=config.get("hideHeader") is True,
            path=str(project_path),
            has_explicit_order=order is not None,
        )

    @staticmethod
    def find_thumbnail(project_path: Path) -> Optional[str]:
        for candidate in THUMBNAIL_CANDIDATES:
            if (project_path / candidate).exists():
                return candidate
        return None

    # ==================== LOOKUPS ====================

    def get_project_by_id(self, project_id: Optional[str]) -> Optional[ProjectDescriptor]:
        """Case-insensitive match on id or folder name"""
        if not project_id:
            return None

        projects = self.discover_projects()
        wanted = project_id.lower()
        for project in projects:
            if project.id.lower() == wanted or project.folder_name.lower() == wanted:
                return project

        available = ", ".join(p.id for p in projects)
        logger.info(f"Project not found: {project_id} (available: {available})")
        return None

    def get_categories(self) -> List[str]:
        return sorted({p.category for p in self.discover_projects()})

    def get_stats(self) -> ProjectStats:
        projects = self.discover_projects()
        by_category: Dict[str, int] = {}
        by_difficulty: Dict[str, int] = {}

        for project in projects:
            by_category[project.category] = by_category.get(project.category, 0) + 1
            by_difficulty[project.difficulty] = by_difficulty.get(project.difficulty, 0) + 1

        return ProjectStats(
            total=len(projects),
            by_category=by_category,
            by_difficulty=by_difficulty,
        )


def get_discovery_service() -> ProjectDiscoveryService:
    """Service rooted at the configured REALTIME_PROJECTS_PATH"""
    return ProjectDiscoveryService(REALTIME_PROJECTS_PATH)


# ==================== LISTING HELPERS ====================

def filter_projects(
    projects: Iterable[ProjectDescriptor],
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    search: Optional[str] = None,
) -> List[ProjectDescriptor]:
    """Listing filters; "all" or empty means no filter"""
    result = list(projects)

    if category and category != "all":
        result = [p for p in result if p.category == category]

    if difficulty and difficulty != "all":
        result = [p for p in result if p.difficulty == difficulty]

    if search:
        needle = search.lower()
        result = [
            p for p in result
            if needle in p.name.lower()
            or needle in p.description.lower()
            or any(needle in tag.lower() for tag in p.tags)
        ]

    return result


def sort_projects(projects: Iterable[ProjectDescriptor], sort: Optional[str] = None) -> List[ProjectDescriptor]:
    """Re-sort a listing; unknown or missing sort keeps discovery order"""
    result = list(projects)

    if sort == ProjectSort.NAME.value:
        result.sort(key=lambda p: _name_key(p.name))
    elif sort == ProjectSort.DIFFICULTY.value:
        result.sort(key=lambda p: DIFFICULTY_RANK.get(p.difficulty, 999))
    elif sort == ProjectSort.NEWEST.value:
        result.sort(key=lambda p: p.created_at, reverse=True)
    elif sort == ProjectSort.OLDEST.value:
        result.sort(key=lambda p: p.created_at)

    return result


# ==================== FILE RESOLUTION ====================

def resolve_project_file(project: ProjectDescriptor, sub_path: str = "") -> Optional[Path]:
    """
    File to serve for a request inside a project.

    Empty sub-path serves index.html. A directory serves its Overview.html,
    then its index.html. Anything else that does not exist falls back to the
    project's index.html so client-side routes keep working.
    Raises ProjectPathError if the sub-path escapes the project folder.
    """
    base = Path(project.path).resolve()
    index_file = base / PROJECT_INDEX_FILE

    clean = (sub_path or "").replace("\\", "/").strip().lstrip("/")
    if not clean:
        return index_file if index_file.is_file() else None

    target = (base / clean).resolve()
    if target != base and base not in target.parents:
        raise ProjectPathError(f"Path escapes project folder: {sub_path}")

    if target.is_file():
        return target

    if target.is_dir():
        candidates = [target / PHASE_OVERVIEW_FILE, target / PROJECT_INDEX_FILE, index_file]
    else:
        candidates = [target.parent / PHASE_OVERVIEW_FILE, index_file] if "/" in clean else [index_file]

    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None
