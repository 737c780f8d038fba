"""
Tests for the Catch the Thief turn controller.
"""

import pytest

import thief
from coords import GridCoordinates
from conftest import make_thief_state
from models import Phase

# Thief boxed into the bottom-right corner so it never moves
CORNER_WALLS = [(3, 4), (4, 3), (3, 3)]


def make_stuck_thief_state(**overrides):
    return make_thief_state(player=(1, 1), thief_pos=(4, 4), exit_pos=(0, 4), walls=CORNER_WALLS, **overrides)


class TestStartGame:

    def test_initialize_sits_in_menu(self, thief_config) -> None:
        game = thief.initialize_game(seed=3, config=thief_config)
        assert game.phase == Phase.MENU
        assert len(game.board) == 25

    @pytest.mark.parametrize("seed", range(15))
    def test_placement(self, seed, thief_config) -> None:
        game = thief.start_game(thief.initialize_game(seed=seed, config=thief_config))
        grid = GridCoordinates(5)
        assert game.player.position in grid.interior_coords()
        assert game.exit_pos in grid.edge_coords()
        assert game.thief.position != game.exit_pos
        assert grid.distance(game.thief.position, game.player.position) > 1
        assert game.thief.visible is False
        assert game.thief.active

    def test_restart_is_idempotent(self, thief_game) -> None:
        old_thief = thief_game.thief
        thief_game.turn = 5
        thief_game.visibility_counter = 2
        thief.start_game(thief_game)
        thief.start_game(thief_game)
        assert thief_game.phase == Phase.PLAYING
        assert thief_game.turn == 1
        assert thief_game.visibility_counter == 0
        assert thief_game.thief is not old_thief


class TestScenario:
    """5x5 four-way grid, player (1, 1), exit (0, 0), thief (2, 2)."""

    def test_diagonal_rejected_then_orthogonal_accepted(self) -> None:
        state = make_thief_state(player=(1, 1), thief_pos=(2, 2), exit_pos=(0, 0), diagonal=False)

        result = thief.move_player_to(state, (2, 0))
        assert not result['moved']
        assert state.player.position == (1, 1)
        assert state.turn == 1

        result = thief.move_player_to(state, (1, 0))
        assert result['moved']
        assert result['thief_moved']
        assert state.player.position == (1, 0)
        assert state.thief.position == (3, 2)
        assert state.turn == 2
        assert state.phase == Phase.PLAYING

    def test_non_adjacent_rejected(self) -> None:
        state = make_thief_state(player=(1, 1), thief_pos=(3, 3))
        for target in [(3, 1), (1, 3), (1, 1), (-1, 1)]:
            result = thief.move_player_to(state, target)
            assert not result['moved']
        assert state.player.position == (1, 1)
        assert state.thief.position == (3, 3)
        assert state.turn == 1


class TestOutcomes:

    def test_catching_thief_wins(self) -> None:
        state = make_thief_state(player=(1, 1), thief_pos=(2, 2))
        result = thief.move_player_to(state, (2, 2))
        assert result['phase'] == 'won'
        assert not result['thief_moved']
        assert state.thief.visible

    def test_thief_reaching_exit_loses(self) -> None:
        state = make_thief_state(player=(4, 4), thief_pos=(1, 1), exit_pos=(0, 0))
        thief.move_player_to(state, (3, 4))
        assert state.thief.position == (0, 0)
        assert state.phase == Phase.LOST
        assert state.turn == 1

    def test_moves_ignored_after_game_over(self) -> None:
        state = make_thief_state(player=(1, 1), thief_pos=(2, 2))
        thief.move_player_to(state, (2, 2))
        result = thief.move_player_to(state, (2, 3))
        assert not result['moved']
        assert state.player.position == (2, 2)

    def test_end_turn_is_noop(self) -> None:
        state = make_thief_state()
        result = thief.end_turn(state)
        assert not result['ended']
        assert state.turn == 1


class TestDirections:

    def test_move_by_direction(self) -> None:
        state = make_stuck_thief_state()
        result = thief.move_player(state, 'down_right')
        assert result['moved']
        assert state.player.position == (2, 2)

    def test_off_board_direction_ignored(self) -> None:
        state = make_thief_state(player=(0, 2), thief_pos=(4, 4), exit_pos=(4, 0))
        result = thief.move_player(state, 'up')
        assert not result['moved']
        assert state.player.position == (0, 2)
        assert state.turn == 1

    def test_unknown_direction_ignored(self) -> None:
        state = make_thief_state(diagonal=False)
        result = thief.move_player(state, 'up_left')
        assert not result['moved']
        assert state.player.position == (1, 1)


class TestVisibility:

    def test_visible_every_third_turn(self) -> None:
        state = make_stuck_thief_state()
        seen = []
        counters = []
        for target in [(1, 2), (1, 1), (1, 2), (1, 1), (1, 2), (1, 1)]:
            thief.move_player_to(state, target)
            seen.append(state.thief.visible)
            counters.append(state.visibility_counter)
        assert seen == [False, False, True, False, False, True]
        assert counters == [1, 2, 0, 1, 2, 0]
        assert state.turn == 7

    def test_hidden_again_after_delay(self) -> None:
        state = make_stuck_thief_state(hide_delay=0.5)
        thief.tick(state, 100.0)
        for target in [(1, 2), (1, 1), (1, 2)]:
            thief.move_player_to(state, target)
        assert state.thief.visible
        assert state.scheduler.pending() == ['hide_thief']

        thief.tick(state, 100.4)
        assert state.thief.visible
        thief.tick(state, 100.5)
        assert not state.thief.visible
        assert state.hide_token is None

    def test_next_move_cancels_pending_hide(self) -> None:
        state = make_stuck_thief_state()
        for target in [(1, 2), (1, 1), (1, 2), (1, 1)]:
            thief.move_player_to(state, target)
        assert not state.thief.visible
        assert state.scheduler.pending() == []

    def test_game_end_disarms_hide(self) -> None:
        state = make_stuck_thief_state()
        for target in [(1, 2), (1, 1), (1, 2)]:
            thief.move_player_to(state, target)
        assert state.scheduler.pending() == ['hide_thief']

        state.thief.position = (2, 2)
        thief.move_player_to(state, (2, 2))
        assert state.phase == Phase.WON
        assert state.scheduler.pending() == []
        thief.tick(state, 10.0)
        assert state.thief.visible

    def test_return_to_menu_disarms_hide(self) -> None:
        state = make_stuck_thief_state()
        for target in [(1, 2), (1, 1), (1, 2)]:
            thief.move_player_to(state, target)
        thief.return_to_menu(state)
        assert state.scheduler.pending() == []
        assert thief.tick(state, 10.0) == 0
        assert state.thief.visible

    def test_hide_delay_counts_from_move_time(self) -> None:
        state = make_stuck_thief_state(hide_delay=0.5)
        for target in [(1, 2), (1, 1), (1, 2)]:
            thief.move_player_to(state, target, now=200.0)
        assert state.thief.visible

        assert thief.tick(state, 200.4) == 0
        assert state.thief.visible
        assert thief.tick(state, 200.5) == 1
        assert not state.thief.visible


class TestEventLog:

    def test_hidden_thief_position_not_logged(self) -> None:
        state = make_thief_state()
        thief.move_player_to(state, (1, 2))
        assert state.phase == Phase.PLAYING
        assert not state.thief.visible

        thief_entries = [entry for entry in state.log if entry['event'].startswith('Thief')]
        assert [entry['event'] for entry in thief_entries] == ['Thief moved out of sight']
        assert all('thief' not in entry for entry in state.log)
        assert str(state.thief.position) not in ' '.join(entry['event'] for entry in state.log)

    def test_visible_thief_moves_logged_with_position(self) -> None:
        state = make_thief_state(visibility_interval=1)
        thief.move_player_to(state, (1, 2))
        moved = next(entry for entry in state.log if entry['event'].startswith('Thief moved'))
        assert moved['thief'] == state.thief.position
        assert moved['visible'] is True

    def test_thief_revealed_in_log_when_round_ends(self) -> None:
        state = make_thief_state(player=(1, 1), thief_pos=(1, 2))
        thief.move_player_to(state, (1, 2))
        assert state.phase == Phase.WON
        assert state.log[-1]['thief'] == (1, 2)
