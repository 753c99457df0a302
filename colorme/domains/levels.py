from __future__ import annotations
from dataclasses import dataclass

from colorme.domains.errors import InvalidLevelParameters

# Fixed 8-entry palette; colors beyond this cannot be drawn
COLOR_PALETTE = (
    "#EF4444",  # red
    "#10B981",  # green
    "#3B82F6",  # blue
    "#F59E0B",  # amber
    "#8B5CF6",  # purple
    "#06B6D4",  # cyan
    "#F97316",  # orange
    "#EC4899",  # pink
)
MAX_COLORS = len(COLOR_PALETTE)
MAX_GRID_SIZE = 10

EASY_MAX_LEVEL = 10
MEDIUM_MAX_LEVEL = 20


@dataclass(frozen=True)
class LevelParams:
    level: int
    grid_size: int
    colors: int
    target_moves: int
    tier: str
    hints_enabled: bool = False
    max_undos: int = -1  # -1 = unlimited

    @property
    def move_capacity(self) -> int:
        return self.grid_size * self.grid_size * (self.colors - 1)


def tier_for_level(level: int) -> str:
    if level <= EASY_MAX_LEVEL:
        return "easy"
    if level <= MEDIUM_MAX_LEVEL:
        return "medium"
    return "hard"


def _grid_size(level: int) -> int:
    if level <= EASY_MAX_LEVEL:
        return 3
    if level <= MEDIUM_MAX_LEVEL:
        return 4
    # grows one step every 10 hard levels
    return min(MAX_GRID_SIZE, 5 + (level - 21) // 10)


def _colors(level: int) -> int:
    if level <= EASY_MAX_LEVEL:
        return 3
    if level <= MEDIUM_MAX_LEVEL:
        return 4
    return min(MAX_COLORS, 4 + (level - 21) // 20)


def _target_moves(level: int) -> int:
    if level <= EASY_MAX_LEVEL:
        return level
    if level <= MEDIUM_MAX_LEVEL:
        return 4 + ((level - 11) * 11) // 10
    return min(30, 5 + ((level - 20) * 12) // 10)


def _max_undos(level: int) -> int:
    if level <= EASY_MAX_LEVEL:
        return -1
    if level <= 30:
        return 10
    return max(1, 15 - level // 10)


def validate_params(p: LevelParams) -> LevelParams:
    """Reject configurations whose scramble length exceeds gridSize² × (colors − 1)."""
    if p.colors < 2 or p.colors > MAX_COLORS:
        raise InvalidLevelParameters(f"level {p.level}: colors={p.colors} outside [2, {MAX_COLORS}]")
    if p.grid_size < 1:
        raise InvalidLevelParameters(f"level {p.level}: grid_size={p.grid_size}")
    if p.target_moves < 0 or p.target_moves > p.move_capacity:
        raise InvalidLevelParameters(
            f"level {p.level}: target_moves={p.target_moves} exceeds capacity {p.move_capacity}"
        )
    return p


def params_for_level(level: int) -> LevelParams:
    """Deterministic level -> (grid size, colors, scramble moves, tier)."""
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        raise InvalidLevelParameters(f"level must be a positive integer, got {level!r}")
    return validate_params(LevelParams(
        level=level,
        grid_size=_grid_size(level),
        colors=_colors(level),
        target_moves=_target_moves(level),
        tier=tier_for_level(level),
        hints_enabled=level <= 3,
        max_undos=_max_undos(level),
    ))
