"""
Tests for SpiralChain level loading.

Tests cover:
- Discovery of the bundled levels and the campaign group
- Parsing generator and formula levels
- Player overrides and color count clamping
- Schema errors for malformed level files
"""
import pytest
from pydantic import ValidationError

from coil.games.levels import SchemaValidationError
from coil.games.palette import MASTER_PALETTE
from games.SpiralChain.levels import ChainLevelData, ChainLevelLoader, create_loader
from games.SpiralChain.path import ChainPath

R = (255, 0, 0)
B = (0, 0, 255)


@pytest.fixture
def loader():
    return create_loader()


@pytest.fixture
def write_level(tmp_path):
    """Write a level file into a scratch levels directory."""
    def _write(slug, text):
        (tmp_path / f"{slug}.yaml").write_text(text)
        return ChainLevelLoader(tmp_path)
    return _write


class TestBundledLevels:
    """Test the levels shipped with the game."""

    def test_list_levels(self, loader):
        assert loader.list_levels() == ['cardioid', 'infinity', 'serpent', 'shrinking_circle', 'spiral']

    def test_list_groups(self, loader):
        assert loader.list_groups() == ['campaign']

    def test_campaign_order(self, loader):
        group = loader.load_group('campaign')
        assert group.levels == ['spiral', 'cardioid', 'infinity', 'serpent']
        assert group.current_level == 'spiral'

    @pytest.mark.parametrize("slug", ['cardioid', 'infinity', 'serpent', 'shrinking_circle', 'spiral'])
    def test_every_level_builds_a_path(self, loader, slug):
        level = loader.load_level(slug).to_config()
        path = ChainPath.from_generator(level.path_generator, 1280, 720)
        assert len(path) > 100

    def test_spiral_values(self, loader):
        data = loader.load_level('spiral')
        assert data.name == "Classic Spiral"
        assert data.generator == 'spiral'
        assert data.formula is None
        assert data.travel_time_ms == 120000
        assert data.ball_count == 50
        assert data.color_count == 3

    def test_formula_level(self, loader):
        data = loader.load_level('shrinking_circle')
        assert data.generator is None
        assert data.formula[0].startswith("(min(width, height)")

    def test_group_is_not_a_level(self, loader):
        with pytest.raises(ValueError):
            loader.load_level('campaign')

    def test_missing_level(self, loader):
        with pytest.raises(FileNotFoundError):
            loader.load_level('no_such_level')


class TestToConfig:
    """Test turning level data into an engine configuration."""

    def test_defaults_from_file(self, loader):
        level = loader.load_level('serpent').to_config()
        assert level.name == "Giant Serpent"
        assert level.travel_time_ms == 140000
        assert level.target_ball_count == 70
        assert level.palette == MASTER_PALETTE[:4]

    def test_overrides(self, loader):
        level = loader.load_level('spiral').to_config(travel_time_s=30.5, ball_count=10, color_count=5)
        assert level.travel_time_ms == 30500
        assert level.target_ball_count == 10
        assert level.palette == MASTER_PALETTE[:5]

    @pytest.mark.parametrize("requested,expected", [(1, 2), (0, 2), (6, 6), (99, 6)])
    def test_color_count_clamped(self, loader, requested, expected):
        level = loader.load_level('spiral').to_config(color_count=requested)
        assert len(level.palette) == expected

    def test_no_color_count_uses_whole_palette(self):
        data = ChainLevelData(generator='spiral', palette=[R, B])
        assert data.to_config().palette == [R, B]

    def test_unknown_generator(self):
        with pytest.raises(ValueError, match="Unknown path generator"):
            ChainLevelData(generator='zigzag').to_config()

    def test_duplicate_palette_rejected(self):
        with pytest.raises(ValidationError):
            ChainLevelData(generator='spiral', palette=[R, R]).to_config()

    def test_custom_level(self):
        data = ChainLevelData.custom("t * 10", "0")
        level = data.to_config()
        assert level.name == "Custom"
        assert len(level.palette) == 3
        points = level.path_generator(800, 600)
        assert points[0] == pytest.approx((400.0, 300.0))


class TestLevelFiles:
    """Test parsing and validating level files."""

    def test_palette_formats(self, write_level):
        loader = write_level('mixed', """
name: Mixed
path:
  generator: spiral
palette: ["#ff0000", [0, 0, 255]]
ball_radius: 10
""")
        data = loader.load_level('mixed')
        assert data.palette == [R, B]
        assert data.ball_radius == 10.0
        assert data.to_config().ball_radius == 10.0

    def test_missing_values_use_defaults(self, write_level):
        data = write_level('bare', "name: Bare\npath:\n  generator: spiral\n").load_level('bare')
        assert data.travel_time_ms == 120000
        assert data.ball_count == 50
        assert data.color_count is None
        assert data.palette == MASTER_PALETTE

    def test_both_generator_and_formula(self, write_level):
        loader = write_level('both', """
name: Both
path:
  generator: spiral
  formula: {x: "t", y: "t"}
""")
        with pytest.raises(SchemaValidationError):
            loader.load_level('both')

    def test_color_count_out_of_range(self, write_level):
        loader = write_level('many', "name: Many\npath:\n  generator: spiral\ncolor_count: 9\n")
        with pytest.raises(SchemaValidationError, match="color_count"):
            loader.load_level('many')

    def test_unknown_key(self, write_level):
        loader = write_level('typo', "name: Typo\npath:\n  generator: spiral\nball_cuont: 9\n")
        with pytest.raises(SchemaValidationError):
            loader.load_level('typo')

    def test_empty_file(self, write_level):
        loader = write_level('empty', "")
        with pytest.raises(ValueError):
            loader.load_level('empty')
