"""
Tests for SpiralChainMode and the standalone entry point.

Rendering runs against an off-screen surface with the dummy SDL video
driver (set in conftest.py).
"""
import pygame
import pytest

from models import Point2D
from coil.games.game_state import GameState
from coil.games.input import EventType, InputEvent
from coil.lua import FormulaError
from games.SpiralChain import game_mode, main
from games.SpiralChain.chain import RunState
from games.SpiralChain.game_mode import SpiralChainMode
from games.SpiralChain.path import PathError


@pytest.fixture(scope='module', autouse=True)
def pygame_session():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def game():
    return SpiralChainMode(seed=1, width=800, height=600)


def fire_at(x, y):
    return InputEvent(position=Point2D(x=x, y=y), timestamp=0.0, event_type=EventType.FIRE)


def _refuse_engine(*args, **kwargs):
    raise PathError("Path generator produced no points")


class TestSetup:
    """Test level selection at construction."""

    def test_default_level(self, game):
        assert game.level_name == "Classic Spiral"
        assert game.current_level_slug == 'spiral'
        assert game.state == GameState.PLAYING
        assert game.get_score() == 0

    def test_named_level(self):
        game = SpiralChainMode(level='cardioid', width=800, height=600)
        assert game.level_name == "Cardioid"

    def test_unknown_level_falls_back_to_default(self):
        game = SpiralChainMode(level='no_such_level', width=800, height=600)
        assert game.level_name == "Classic Spiral"

    def test_overrides(self):
        game = SpiralChainMode(travel_time=30, ball_count=7, color_count=2, width=800, height=600)
        level = game.engine.level
        assert level.travel_time_ms == 30000
        assert level.target_ball_count == 7
        assert len(level.palette) == 2
        assert game.engine.spawner.pending == 7

    def test_palette_override(self):
        game = SpiralChainMode(palette='bw', width=800, height=600)
        assert game.palette_name == 'bw'
        assert game.engine.level.palette == [(40, 40, 40), (255, 255, 255)]

    def test_custom_formula(self):
        game = SpiralChainMode(formula_x="t * 10", formula_y="0", width=800, height=600)
        assert game.level_name == "Custom"
        assert len(game.engine.path) == 1251

    def test_formula_needs_both_parts(self):
        with pytest.raises(ValueError):
            SpiralChainMode(formula_x="t", width=800, height=600)

    def test_rejected_formula(self):
        with pytest.raises(FormulaError):
            SpiralChainMode(formula_x="t", formula_y="os.exit()", width=800, height=600)

    def test_list_levels_exits(self, capsys):
        with pytest.raises(SystemExit):
            SpiralChainMode(list_levels=True, width=800, height=600)
        out = capsys.readouterr().out
        assert 'spiral' in out
        assert 'campaign' in out

    def test_arguments(self):
        names = [arg['name'] for arg in SpiralChainMode.get_arguments()]
        for name in ('--formula-x', '--formula-y', '--travel-time', '--ball-count',
                     '--color-count', '--level', '--level-group', '--palette'):
            assert name in names


class TestInput:
    """Test input event handling."""

    def test_aim(self, game):
        aim = InputEvent(position=Point2D(x=400.0, y=0.0), timestamp=0.0, event_type=EventType.AIM)
        game.handle_input([aim])
        assert game.engine.launcher.angle == pytest.approx(-1.5707963, rel=1e-6)

    def test_fire(self, game):
        game.handle_input([fire_at(800.0, 300.0)])
        assert len(game.engine.projectiles) == 1
        assert game.engine.stats.shots_fired == 1

    def test_swap(self, game):
        swap = InputEvent(position=Point2D(x=0.0, y=0.0), timestamp=0.0, event_type=EventType.SWAP)
        game.handle_input([swap])
        assert game.engine.launcher.is_swapping

    def test_fire_after_loss_restarts(self, game):
        first = game.engine
        first._finish(RunState.LOST)
        assert game.state == GameState.GAME_OVER

        game.handle_input([fire_at(0.0, 0.0)])
        assert game.engine is not first
        assert game.engine.running
        assert game.level_name == "Classic Spiral"


class TestRestart:
    """Test starting a level again when the engine cannot be built."""

    @pytest.fixture
    def failing_engine(self, monkeypatch):
        monkeypatch.setattr(game_mode, 'ChainEngine', _refuse_engine)

    def test_reset_keeps_running_engine(self, game, failing_engine):
        engine = game.engine
        runs = game.runs
        game.reset()
        assert game.engine is engine
        assert game.runs == runs

    def test_continue_after_loss_keeps_engine(self, game, failing_engine):
        engine = game.engine
        engine._finish(RunState.LOST)
        game.handle_input([fire_at(0.0, 0.0)])
        assert game.engine is engine
        assert game.state == GameState.GAME_OVER

    def test_campaign_advance_keeps_engine(self, monkeypatch):
        game = SpiralChainMode(level_group='campaign', width=800, height=600)
        engine = game.engine
        monkeypatch.setattr(game_mode, 'ChainEngine', _refuse_engine)

        engine._finish(RunState.WON)
        game.handle_input([fire_at(0.0, 0.0)])

        assert game.engine is engine
        assert game.current_level_slug == 'cardioid'


class TestCampaign:
    """Test playing through a level group."""

    def test_win_advances_to_next_level(self):
        game = SpiralChainMode(level_group='campaign', width=800, height=600)
        assert game.current_group.name == "Campaign"
        assert game.level_name == "Classic Spiral"

        game.engine._finish(RunState.WON)
        assert game.state == GameState.WON
        game.handle_input([fire_at(0.0, 0.0)])

        assert game.current_level_slug == 'cardioid'
        assert game.level_name == "Cardioid"
        assert game.engine.running

    def test_win_without_group_replays(self, game):
        game.engine._finish(RunState.WON)
        game.handle_input([fire_at(0.0, 0.0)])
        assert game.level_name == "Classic Spiral"
        assert game.engine.running


class TestRender:
    """Test drawing to an off-screen surface."""

    def test_render_running(self, game):
        screen = pygame.Surface((800, 600))
        for _ in range(10):
            game.update(0.2)
        game.handle_input([fire_at(400.0, 0.0)])
        game.render(screen)
        assert len(game.engine.balls) > 0

    def test_render_follows_surface_size(self, game):
        game.update(0.5)
        game.render(pygame.Surface((400, 300)))
        assert game.engine.launcher.position == Point2D(x=200.0, y=150.0)

    def test_render_on_window_too_small_for_path(self):
        game = SpiralChainMode(level='serpent', width=800, height=600)
        path = game.engine.path

        game.render(pygame.Surface((100, 400)))
        game.update(0.1)
        game.render(pygame.Surface((100, 400)))

        assert game.engine.path is path
        assert (game.engine.width, game.engine.height) == (800, 600)
        assert game.state == GameState.PLAYING

    def test_rejected_resize_keeps_size(self):
        game = SpiralChainMode(level='serpent', width=800, height=600)
        assert game.resize(90, 600) is False
        assert game.resize(640, 480) is True
        assert game.engine.launcher.position == Point2D(x=320.0, y=240.0)

    def test_render_campaign_progress(self):
        game = SpiralChainMode(level_group='campaign', width=800, height=600)
        game.engine._finish(RunState.WON)
        game.handle_input([fire_at(0.0, 0.0)])
        assert game.current_group.progress > 0
        game.render(pygame.Surface((800, 600)))

    def test_render_game_over(self, game):
        game.engine._finish(RunState.LOST)
        game.render(pygame.Surface((800, 600)))

    def test_render_during_swap(self, game):
        game.request_swap()
        game.update(0.05)
        game.render(pygame.Surface((800, 600)))


class TestEntryPoint:
    """Test the standalone command line."""

    def test_parser(self):
        args = main.build_parser().parse_args(['--level', 'cardioid', '--color-count', '4'])
        assert args.level == 'cardioid'
        assert args.color_count == 4
        assert args.list_levels is False
        assert args.formula_x is None

    def test_bad_arguments_return_error(self, capsys):
        assert main.main(['--formula-x', 't']) == 1
        assert 'ERROR' in capsys.readouterr().out
