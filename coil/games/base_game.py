"""Base class for Coil games.

A game declares its metadata and extra command line options as class
attributes so the entry point can build its parser before any instance
exists. Setting LEVELS_DIR adds --level, --level-group and --list-levels
and routes level files through _create_level_loader() and
_apply_level_config().
"""
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

import pygame

from coil.games.game_state import GameState
from coil.games.palette import GamePalette, get_palette_names
from coil.logging import get_logger

log = get_logger('base_game')

if TYPE_CHECKING:
    from coil.games.levels import LevelLoader, LevelGroup


# Argument dicts: name, plus any of type/default/help/action/choices
PALETTE_ARGUMENTS: List[Dict[str, Any]] = [
    {'name': '--palette', 'type': str, 'default': None,
     'help': 'Ball palette override: ' + ', '.join(get_palette_names())},
]

LEVEL_ARGUMENTS: List[Dict[str, Any]] = [
    {'name': '--level', 'type': str, 'default': None,
     'help': 'Level slug to play'},
    {'name': '--level-group', 'type': str, 'default': None,
     'help': 'Level group to play in order (e.g. campaign)'},
    {'name': '--list-levels', 'action': 'store_true', 'default': False,
     'help': 'Print levels and level groups, then exit'},
]


class BaseGame(ABC):
    """A game the Coil runner can drive: input, update, render each frame.

    Subclasses provide _get_internal_state(), get_score(), handle_input(),
    update() and render().
    """

    NAME: str = "Unnamed Game"
    DESCRIPTION: str = "No description"
    VERSION: str = "1.0.0"
    AUTHOR: str = "Unknown"

    ARGUMENTS: List[Dict[str, Any]] = []
    LEVELS_DIR: Optional[Path] = None

    @classmethod
    def get_arguments(cls) -> List[Dict[str, Any]]:
        """Game options, then level options, then palette options.

        A game may redefine a shared option; the first definition wins.
        """
        shared = (LEVEL_ARGUMENTS if cls.LEVELS_DIR is not None else []) + PALETTE_ARGUMENTS
        by_name: Dict[str, Dict[str, Any]] = {}
        for arg in cls.ARGUMENTS + shared:
            by_name.setdefault(arg['name'], arg)
        return list(by_name.values())

    def __init__(
        self,
        color_palette: Optional[List[Tuple[int, int, int]]] = None,
        palette: Optional[str] = None,
        level: Optional[str] = None,
        level_group: Optional[str] = None,
        list_levels: bool = False,
        **kwargs,
    ):
        self._palette = GamePalette(colors=color_palette, palette_name=palette)

        self._level_loader: Optional['LevelLoader'] = None
        self._current_level_slug: Optional[str] = None
        self._current_group: Optional['LevelGroup'] = None

        if self.LEVELS_DIR is None:
            return
        self._level_loader = self._create_level_loader()
        if list_levels:
            self._print_levels()
            sys.exit(0)
        if level_group:
            level = self._start_group(level_group) or level
        if level:
            self._load_level(level)

    # =========================================================================
    # Frame interface
    # =========================================================================

    @property
    def state(self) -> GameState:
        return self._get_internal_state()

    @abstractmethod
    def _get_internal_state(self) -> GameState:
        """Translate the game's own run state into a GameState."""

    @abstractmethod
    def get_score(self) -> int:
        pass

    @abstractmethod
    def handle_input(self, events: List) -> None:
        """Consume this frame's InputEvents."""

    @abstractmethod
    def update(self, dt: float) -> None:
        """Advance the game by dt seconds."""

    @abstractmethod
    def render(self, screen: pygame.Surface) -> None:
        pass

    def reset(self) -> None:
        pass

    @property
    def palette_name(self) -> str:
        return self._palette.name

    # =========================================================================
    # Levels
    # =========================================================================

    def _create_level_loader(self) -> Optional['LevelLoader']:
        return None

    def _apply_level_config(self, level_data: Any) -> None:
        """Receive a freshly loaded level."""

    def _on_level_transition(self) -> None:
        """A level group moved on to its next level."""

    @property
    def has_levels(self) -> bool:
        return self._level_loader is not None

    @property
    def current_level_slug(self) -> Optional[str]:
        return self._current_level_slug

    @property
    def current_group(self) -> Optional['LevelGroup']:
        return self._current_group

    def _start_group(self, slug: str) -> Optional[str]:
        """Begin a level group. Returns its first level, None if unusable."""
        try:
            self._current_group = self._level_loader.load_group(slug)
        except (FileNotFoundError, ValueError) as e:
            log.error("Failed to load level group '%s': %s", slug, e)
            return None
        return self._current_group.current_level

    def _load_level(self, slug: str) -> bool:
        """Load a level and hand it to _apply_level_config().

        Missing or invalid levels are logged and leave the current level
        in place.
        """
        if self._level_loader is None:
            return False
        try:
            level_data = self._level_loader.load_level(slug)
        except (FileNotFoundError, ValueError) as e:
            log.error("Failed to load level '%s': %s", slug, e)
            return False
        self._current_level_slug = slug
        self._apply_level_config(level_data)
        return True

    def _level_complete(self) -> bool:
        """Move the current group to its next level.

        Returns:
            False outside a group, after its last level, or when the next
            level fails to load
        """
        if self._current_group is None:
            return False
        next_level = self._current_group.advance()
        if next_level is None or not self._load_level(next_level):
            return False
        self._on_level_transition()
        return True

    def _print_levels(self) -> None:
        loader = self._level_loader
        print(f"\n{self.NAME} levels:")
        levels = loader.list_levels() if loader else []
        for slug in levels:
            info = loader.get_level_info(slug)
            print(f"  {slug:24} [{'*' * info.difficulty:5}] {info.name}")

        groups = loader.list_groups() if loader else []
        if groups:
            print("\nLevel groups:")
            for slug in groups:
                info = loader.get_level_info(slug)
                print(f"  {slug:24} ({len(info.levels)} levels) {info.name}")

        if not levels and not groups:
            print("  (no levels found)")
        print()
