from flask import Flask, request, jsonify
from flask_cors import CORS
from typing import Any, Dict, Optional, Tuple
import threading
import time

import escape
import thief
from state import EscapeGameState, GameStateType, get_game_summary

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
games: Dict[str, GameStateType] = {}  # In-memory storage for game states
games_lock = threading.Lock()  # All state mutation goes through this lock

GAME_MODULES = {'escape': escape, 'thief': thief}


def _lookup(kind: str, game_id: str) -> Tuple[Optional[Any], Optional[GameStateType]]:
    """Resolve the controller module and game state, ticking pending callbacks."""
    module = GAME_MODULES.get(kind)
    game_state = games.get(game_id)
    if module is None or game_state is None:
        return None, None
    if isinstance(game_state, EscapeGameState) != (kind == 'escape'):
        return None, None
    module.tick(game_state, time.monotonic())
    return module, game_state


def _parse_target(kind: str, data: Dict[str, Any]) -> Tuple[int, int]:
    keys = ('q', 'r') if kind == 'escape' else ('row', 'col')
    return (int(data[keys[0]]), int(data[keys[1]]))


@app.route('/api/<kind>/new', methods=['POST'])
def new_game(kind: str):
    """Create a new game in the menu phase with the provided seed."""
    try:
        if kind not in GAME_MODULES:
            return jsonify({'error': f'Unknown game: {kind}'}), 404

        data = request.get_json(silent=True) or {}
        seed = data.get('seed')
        if seed is not None:
            try:
                seed = int(seed)
            except (ValueError, TypeError):
                return jsonify({'error': 'Seed must be an integer'}), 400

        with games_lock:
            game_state = GAME_MODULES[kind].initialize_game(seed)
            games[game_state.game_id] = game_state

        return jsonify({'game_id': game_state.game_id, 'phase': game_state.phase.value})

    except Exception as e:
        return jsonify({'error': f'Failed to create game: {str(e)}'}), 500


@app.route('/api/<kind>/<game_id>/start', methods=['POST'])
def start_game(kind: str, game_id: str):
    """Start (or restart) a round."""
    try:
        with games_lock:
            module, game_state = _lookup(kind, game_id)
            if game_state is None:
                return jsonify({'error': 'Game not found'}), 404
            module.start_game(game_state)
            return jsonify({'game_id': game_id, 'state': get_game_summary(game_state, reveal_hidden=False)})

    except Exception as e:
        return jsonify({'error': f'Failed to start game: {str(e)}'}), 500


@app.route('/api/<kind>/<game_id>/move', methods=['POST'])
def move(kind: str, game_id: str):
    """Attempt a player move, by target coordinate or (thief game) by direction."""
    try:
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        with games_lock:
            module, game_state = _lookup(kind, game_id)
            if game_state is None:
                return jsonify({'error': 'Game not found'}), 404

            if 'direction' in data and kind == 'thief':
                results = module.move_player(game_state, str(data['direction']), now=time.monotonic())
            else:
                try:
                    target = _parse_target(kind, data)
                except (KeyError, ValueError, TypeError):
                    return jsonify({'error': 'Move needs q and r (escape) or row and col / direction (thief)'}), 400
                results = module.move_player_to(game_state, target, now=time.monotonic())

            results['state'] = get_game_summary(game_state, reveal_hidden=False)
            return jsonify(results)

    except Exception as e:
        return jsonify({'error': f'Failed to process move: {str(e)}'}), 500


@app.route('/api/<kind>/<game_id>/end_turn', methods=['POST'])
def end_turn(kind: str, game_id: str):
    """End the player's turn (Escape Door); a no-op in the thief game."""
    try:
        with games_lock:
            module, game_state = _lookup(kind, game_id)
            if game_state is None:
                return jsonify({'error': 'Game not found'}), 404
            results = module.end_turn(game_state)
            results['state'] = get_game_summary(game_state, reveal_hidden=False)
            return jsonify(results)

    except Exception as e:
        return jsonify({'error': f'Failed to end turn: {str(e)}'}), 500


@app.route('/api/<kind>/<game_id>/menu', methods=['POST'])
def menu(kind: str, game_id: str):
    try:
        with games_lock:
            module, game_state = _lookup(kind, game_id)
            if game_state is None:
                return jsonify({'error': 'Game not found'}), 404
            module.return_to_menu(game_state)
            return jsonify({'game_id': game_id, 'phase': game_state.phase.value})

    except Exception as e:
        return jsonify({'error': f'Failed to return to menu: {str(e)}'}), 500


@app.route('/api/<kind>/<game_id>/state', methods=['GET'])
def get_game_state(kind: str, game_id: str):
    """Retrieve the current game state; the thief's position is withheld while hidden."""
    try:
        with games_lock:
            module, game_state = _lookup(kind, game_id)
            if game_state is None:
                return jsonify({'error': 'Game not found'}), 404
            return jsonify(get_game_summary(game_state, reveal_hidden=False))

    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game state: {str(e)}'}), 500


@app.route('/api/<kind>/<game_id>/log', methods=['GET'])
def get_game_log(kind: str, game_id: str):
    """Retrieve the full game log for analysis."""
    try:
        with games_lock:
            module, game_state = _lookup(kind, game_id)
            if game_state is None:
                return jsonify({'error': 'Game not found'}), 404
            return jsonify({
                'game_id': game_id,
                'turn': game_state.turn,
                'phase': game_state.phase.value,
                'log': game_state.log
            })

    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game log: {str(e)}'}), 500


if __name__ == '__main__':
    app.run(debug=True)
