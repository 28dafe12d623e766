"""
Level files for Coil games.

A levels directory holds YAML or JSON files, one level per file, searched
recursively. Files whose names start with `_` or `.` are drafts and are
ignored. The file stem is the level's slug.

A file containing `group: true` is a level group instead: an ordered list of
level slugs played one after another (the campaign):

    group: true
    name: "Campaign"
    levels:
      - spiral
      - cardioid

Level files are checked against schemas/level.schema.json before a game
parses them. Games subclass LevelLoader and provide _parse_level_data().
"""
import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar

import jsonschema
import yaml

from coil.logging import get_logger

log = get_logger('levels')

LEVEL_SUFFIXES = ('.yaml', '.json')
SCHEMA_PATH = Path(__file__).parent / 'schemas' / 'level.schema.json'

# COIL_SKIP_SCHEMA_VALIDATION=1 turns schema failures into warnings
_SKIP_VALIDATION = os.environ.get('COIL_SKIP_SCHEMA_VALIDATION', '').lower() in ('1', 'true', 'yes')

_schema_cache: Dict[str, Any] = {}


class SchemaValidationError(Exception):
    """A level file does not match the level schema."""


def _level_schema() -> Optional[Dict[str, Any]]:
    if 'level' not in _schema_cache:
        if not SCHEMA_PATH.exists():
            return None
        _schema_cache['level'] = json.loads(SCHEMA_PATH.read_text())
    return _schema_cache['level']


def _reject(message: str) -> None:
    if _SKIP_VALIDATION:
        log.warning(message)
        return
    raise SchemaValidationError(message)


def validate_level_yaml(data: Dict[str, Any], source_path: Optional[Path] = None) -> None:
    """Check parsed level data against the level schema.

    Raises:
        SchemaValidationError: on the first violation, naming the offending
            location (unless COIL_SKIP_SCHEMA_VALIDATION=1)
    """
    schema = _level_schema()
    if schema is None:
        _reject(f"Schema file not found: {SCHEMA_PATH}")
        return

    error = next(iter(jsonschema.Draft7Validator(schema).iter_errors(data)), None)
    if error is None:
        return
    where = '/'.join(str(part) for part in error.absolute_path) or '<root>'
    origin = f" in {source_path}" if source_path else ""
    _reject(f"Schema validation error{origin}: {error.message} at {where}")


def read_level_file(path: Path) -> Dict[str, Any]:
    """Parse a level file by suffix. Empty files give an empty dict."""
    text = Path(path).read_text()
    data = json.loads(text) if path.suffix == '.json' else yaml.safe_load(text)
    return data or {}


@dataclass
class LevelInfo:
    """What a level menu needs to know about a file, without parsing it fully."""
    name: str
    slug: str
    description: str = ""
    difficulty: int = 1
    author: str = "unknown"
    version: int = 1
    file_path: Optional[Path] = None
    is_group: bool = False
    levels: List[str] = field(default_factory=list)

    @classmethod
    def from_data(cls, slug: str, data: Dict[str, Any], path: Path) -> 'LevelInfo':
        is_group = bool(data.get('group', False))
        return cls(
            name=data.get('name', slug),
            slug=slug,
            description=data.get('description', ''),
            difficulty=data.get('difficulty', 1),
            author=data.get('author', 'unknown'),
            version=data.get('version', 1),
            file_path=path,
            is_group=is_group,
            levels=list(data.get('levels', [])) if is_group else [],
        )


@dataclass
class LevelGroup:
    """Ordered level slugs plus a cursor into them."""
    name: str
    slug: str
    description: str = ""
    author: str = "unknown"
    levels: List[str] = field(default_factory=list)
    file_path: Optional[Path] = None
    current_index: int = 0

    @property
    def current_level(self) -> Optional[str]:
        if 0 <= self.current_index < len(self.levels):
            return self.levels[self.current_index]
        return None

    @property
    def is_complete(self) -> bool:
        return self.current_index >= len(self.levels)

    @property
    def progress(self) -> float:
        """Fraction of levels already cleared; an empty group counts as done."""
        return self.current_index / len(self.levels) if self.levels else 1.0

    def advance(self) -> Optional[str]:
        """Move the cursor on. Returns the next slug, or None past the end."""
        self.current_index += 1
        return self.current_level

    def reset(self) -> None:
        self.current_index = 0


T = TypeVar('T')


class LevelLoader(Generic[T], ABC):
    """Finds level files in a directory and turns them into game level data.

    Subclasses convert a validated level dict into their own type:

        class ChainLevelLoader(LevelLoader[ChainLevelData]):
            def _parse_level_data(self, data, file_path):
                return ChainLevelData(...)
    """

    def __init__(self, levels_dir: Path):
        self._levels_dir = Path(levels_dir)
        self._info_cache: Dict[str, LevelInfo] = {}
        self._group_cache: Dict[str, LevelGroup] = {}

    @property
    def levels_dir(self) -> Path:
        return self._levels_dir

    @abstractmethod
    def _parse_level_data(self, data: Dict[str, Any], file_path: Path) -> T:
        """Build the game's level object from schema-checked data."""

    def _level_files(self) -> Iterator[Path]:
        if not self._levels_dir.is_dir():
            return
        for path in sorted(self._levels_dir.rglob('*')):
            if path.suffix in LEVEL_SUFFIXES and not path.name.startswith(('_', '.')):
                yield path

    def _find_level_file(self, slug: str) -> Optional[Path]:
        """Top-level file first, then the first match in a subdirectory."""
        for suffix in LEVEL_SUFFIXES:
            direct = self._levels_dir / f"{slug}{suffix}"
            if direct.exists():
                return direct
        for path in self._level_files():
            if path.stem == slug:
                return path
        return None

    def _slugs(self, groups: bool) -> List[str]:
        found = set()
        for path in self._level_files():
            info = self.get_level_info(path.stem)
            if info is not None and info.is_group == groups:
                found.add(path.stem)
        return sorted(found)

    def list_levels(self) -> List[str]:
        """Playable level slugs, sorted."""
        return self._slugs(groups=False)

    def list_groups(self) -> List[str]:
        """Level group slugs, sorted."""
        return self._slugs(groups=True)

    def get_level_info(self, slug: str) -> Optional[LevelInfo]:
        """Menu metadata for a slug, or None when missing or unreadable."""
        if slug not in self._info_cache:
            path = self._find_level_file(slug)
            if path is None:
                return None
            try:
                data = read_level_file(path)
            except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
                log.warning("Could not read level '%s': %s", slug, e)
                return None
            self._info_cache[slug] = LevelInfo.from_data(slug, data, path)
        return self._info_cache[slug]

    def _read(self, slug: str, kind: str) -> tuple:
        path = self._find_level_file(slug)
        if path is None:
            raise FileNotFoundError(f"{kind} not found: {slug}")
        data = read_level_file(path)
        if not data:
            raise ValueError(f"Empty {kind.lower()} file: {slug}")
        return path, data

    def load_level(self, slug: str) -> T:
        """Load, validate and parse one level.

        Raises:
            FileNotFoundError: no file for the slug
            ValueError: the file is empty or is a level group
            SchemaValidationError: the file fails the level schema
        """
        path, data = self._read(slug, 'Level')
        if data.get('group', False):
            raise ValueError(f"'{slug}' is a level group, not a level")
        validate_level_yaml(data, path)
        log.debug("Loaded level '%s' from %s", slug, path)
        return self._parse_level_data(data, path)

    def load_group(self, slug: str) -> LevelGroup:
        """Load a level group with its cursor on the first level.

        Raises:
            FileNotFoundError: no file for the slug
            ValueError: the file is empty or is a plain level
        """
        group = self._group_cache.get(slug)
        if group is None:
            path, data = self._read(slug, 'Level group')
            if not data.get('group', False):
                raise ValueError(f"'{slug}' is a level, not a group")
            group = LevelGroup(
                name=data.get('name', slug),
                slug=slug,
                description=data.get('description', ''),
                author=data.get('author', 'unknown'),
                levels=list(data.get('levels', [])),
                file_path=path,
            )
            self._group_cache[slug] = group
        group.reset()
        return group
