"""
Rules API Blueprint.

Stateless JSON endpoints: every request carries the complete game, the
server builds an engine for it, answers, and forgets it.

Endpoints:
- POST /api/attacks/types   - Legal attack types for the active player
- POST /api/attacks/find    - Concrete attacks, for one type or all legal types
- POST /api/attacks/resolve - Resolve a proposed attack
- GET  /api/registry        - Registered modules, attack types and skills
"""

import logging
from typing import Any, Dict, Tuple

import jsonschema
from flask import Blueprint, current_app, jsonify, request

from ...core.engine import RulesEngine
from ...core.errors import InternalInconsistencyError
from ...core.serialization import (
    game_from_dict, game_to_dict, proposal_from_dict, record_to_dict,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)


class BadRequest(ValueError):
    """Payload problem reported to the client as a 400."""
    pass


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    if 'game' not in data:
        raise BadRequest("Missing 'game'")
    return data


def _engine(data: Dict[str, Any]) -> RulesEngine:
    try:
        game = game_from_dict(data['game'])
    except jsonschema.ValidationError as e:
        raise BadRequest(f"Invalid game: {e.message}") from e
    return RulesEngine(game, current_app.registries)


def _bad_request(e: Exception) -> Tuple[Any, int]:
    return jsonify({'success': False, 'error': str(e)}), 400


def _internal_error(e: InternalInconsistencyError) -> Tuple[Any, int]:
    logger.error(f"Internal inconsistency: {e}")
    return jsonify({
        'success': False,
        'error': str(e),
        'details': e.details(),
    }), 500


@api_bp.route('/api/attacks/types', methods=['POST'])
def api_attack_types():
    """
    List the attack types the active player may declare.

    Request:
        {"game": {...}}

    Returns:
        {
            "success": true,
            "legal_attack_types": ["Power", "Speed", "Surrender"],
            "state": "START_TURN"
        }
    """
    try:
        engine = _engine(_payload())
        return jsonify({
            'success': True,
            'legal_attack_types': engine.list_legal_attack_types(),
            'state': engine.game.state.name,
        })
    except InternalInconsistencyError as e:
        return _internal_error(e)
    except ValueError as e:
        return _bad_request(e)


@api_bp.route('/api/attacks/find', methods=['POST'])
def api_find_attacks():
    """
    Enumerate concrete attacks.

    Request:
        {"game": {...}, "attack_type": "Speed"}   (attack_type optional)

    Returns:
        {
            "success": true,
            "attacks": {"Speed": [{"attack_type": "Speed", "attackers": [...], "defenders": [...]}]}
        }
    """
    try:
        data = _payload()
        engine = _engine(data)
        attack_type = data.get('attack_type')
        if attack_type:
            found = {attack_type: engine.find_attacks(attack_type)}
        else:
            found = engine.find_all_attacks()

        return jsonify({
            'success': True,
            'attacks': {
                name: [proposal.to_dict() for proposal in proposals]
                for name, proposals in found.items()
            },
        })
    except InternalInconsistencyError as e:
        return _internal_error(e)
    except ValueError as e:
        return _bad_request(e)


@api_bp.route('/api/attacks/resolve', methods=['POST'])
def api_resolve_attack():
    """
    Resolve one attack and return the updated game.

    Request:
        {"game": {...}, "proposal": {"attack_type": "Power", "attackers": [id], "defenders": [id]}}

    Returns:
        {
            "success": true,
            "record": {...},
            "messages": ["Alice performed Power attack ..."],
            "game": {...}
        }
        or 422 with "error" and "error_code" when the attack is not allowed.
    """
    try:
        data = _payload()
        if 'proposal' not in data:
            raise BadRequest("Missing 'proposal'")
        engine = _engine(data)

        try:
            proposal = proposal_from_dict(data['proposal'], engine.game)
        except jsonschema.ValidationError as e:
            raise BadRequest(f"Invalid proposal: {e.message}") from e

        result = engine.resolve(proposal)
        if not result.success:
            return jsonify({
                'success': False,
                'error': result.error,
                'error_code': result.error_code,
            }), 422

        action_log = engine.extensions.get('action_log')
        return jsonify({
            'success': True,
            'record': record_to_dict(result.data),
            'messages': action_log.messages() if action_log else [],
            'game': game_to_dict(engine.game),
        })
    except InternalInconsistencyError as e:
        return _internal_error(e)
    except ValueError as e:
        return _bad_request(e)


@api_bp.route('/api/registry')
def api_registry():
    """
    Describe the registered modules, attack types and skills.

    Returns:
        {"success": true, "modules": [...], "attack_types": [...], "skills": [...]}
    """
    registries = current_app.registries
    return jsonify({'success': True, **registries.to_dict()})
