#!/usr/bin/env python3
"""
Command-line interface for the Button Men rules engine.

Commands operate on game JSON files (see core/serialization.py for the
format): list legal attack types, enumerate attacks, resolve an attack and
inspect the registered modules.
"""

import argparse
import json
import sys

import jsonschema

from ..core.config import get_config
from ..core.engine import RulesEngine
from ..core.errors import InternalInconsistencyError
from ..core.logging_config import setup_logging
from ..core.models import AttackProposal
from ..core.module_loader import ModuleLoader
from ..core.registry import get_registries
from ..core.serialization import (
    game_from_dict, game_to_dict, proposal_from_dict, record_to_dict,
)


def _load_engine(game_file: str) -> RulesEngine:
    with open(game_file, 'r') as f:
        data = json.load(f)
    return RulesEngine(game_from_dict(data))


def _describe(proposal: AttackProposal) -> str:
    attackers = ','.join(d.recipe_status for d in proposal.attackers)
    defenders = ','.join(d.recipe_status for d in proposal.defenders)
    ids = ' '.join(d.die_id for d in proposal.dice())
    if not ids:
        return proposal.attack_type
    return f"[{attackers}] vs [{defenders}]  ({ids})"


def cmd_types(args):
    """List the attack types the active player may declare."""
    try:
        engine = _load_engine(args.game_file)
        legal = engine.list_legal_attack_types()

        player = engine.game.attacker.name
        if not legal:
            print(f"No attacks are legal for {player} in state {engine.game.state.name}")
            return

        print(f"Legal attack types for {player}:")
        for name in legal:
            print(f"  {name}")
    except InternalInconsistencyError as e:
        print(f"✗ Internal error: {e}", file=sys.stderr)
        sys.exit(2)
    except (OSError, ValueError, jsonschema.ValidationError) as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_find(args):
    """Enumerate concrete attacks."""
    try:
        engine = _load_engine(args.game_file)
        if args.type:
            found = {args.type: engine.find_attacks(args.type)}
        else:
            found = engine.find_all_attacks()

        if args.json:
            print(json.dumps({
                name: [p.to_dict() for p in proposals] for name, proposals in found.items()
            }, indent=2))
            return

        total = sum(len(proposals) for proposals in found.values())
        print(f"Found {total} attacks:\n")
        for name, proposals in found.items():
            print(f"  {name} ({len(proposals)})")
            for proposal in proposals:
                print(f"    {_describe(proposal)}")
    except InternalInconsistencyError as e:
        print(f"✗ Internal error: {e}", file=sys.stderr)
        sys.exit(2)
    except (OSError, ValueError, jsonschema.ValidationError) as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_resolve(args):
    """Resolve one attack and write the updated game."""
    try:
        engine = _load_engine(args.game_file)
        game = engine.game

        proposal = proposal_from_dict({
            'attack_type': args.attack_type,
            'attackers': args.attackers,
            'defenders': args.defenders,
        }, game)
        result = engine.resolve(proposal)

        if not result.success:
            print(f"✗ Error: {result.error} ({result.error_code})", file=sys.stderr)
            sys.exit(1)

        action_log = engine.extensions.get('action_log')
        print(f"✓ {args.attack_type} attack resolved")
        if action_log:
            for message in action_log.messages():
                print(f"  {message}")

        output = args.output or args.game_file
        with open(output, 'w') as f:
            json.dump(game_to_dict(game), f, indent=2)
        print(f"  Game written to {output}")

        if args.record:
            print(json.dumps(record_to_dict(result.data), indent=2))
    except InternalInconsistencyError as e:
        print(f"✗ Internal error: {e}", file=sys.stderr)
        sys.exit(2)
    except (OSError, ValueError, jsonschema.ValidationError) as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_registry(args):
    """List registered modules, attack types and skills."""
    registries = get_registries()

    loaded = {module.name for module in registries.modules}

    print("Modules:")
    for info in ModuleLoader().discover_available_modules():
        mark = "✓" if info['name'] in loaded else "-"
        core = " [core]" if info['is_core'] else ""
        deps = f" (requires {', '.join(info['dependencies'])})" if info['dependencies'] else ""
        print(f"  {mark} {info['name']:15} v{info['version']}  {info['display_name']}{core}{deps}")

    print("\nAttack types:")
    for definition in registries.attack_types.definitions():
        print(f"  {definition.name:15} {definition.description}")

    print("\nSkills:")
    for skill in registries.skills.to_dict():
        hooks = ', '.join(skill['hooks'])
        print(f"  {skill['name']:15} [{skill['abbreviation']}] {skill['description']} ({hooks})")


def cmd_serve(args):
    """Run the JSON API server."""
    from ..web.server import run_server
    run_server(args.host, args.port, args.debug)


def main(argv=None):
    """Main CLI entry point."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description='Button Men - dice combat rules engine'
    )
    parser.add_argument('--log-level', default=config.log_level,
                        help='Logging level (default from LOG_LEVEL)')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # ========== types command ==========
    parser_types = subparsers.add_parser('types', help='List legal attack types')
    parser_types.add_argument('game_file', help='Path to game JSON file')
    parser_types.set_defaults(func=cmd_types)

    # ========== find command ==========
    parser_find = subparsers.add_parser('find', help='Enumerate attacks')
    parser_find.add_argument('game_file', help='Path to game JSON file')
    parser_find.add_argument('--type', help='Only this attack type')
    parser_find.add_argument('--json', action='store_true', help='Print proposals as JSON')
    parser_find.set_defaults(func=cmd_find)

    # ========== resolve command ==========
    parser_resolve = subparsers.add_parser('resolve', help='Resolve an attack')
    parser_resolve.add_argument('game_file', help='Path to game JSON file')
    parser_resolve.add_argument('attack_type', help='Attack type (e.g. Power)')
    parser_resolve.add_argument('--attackers', nargs='*', default=[], help='Attacking die ids')
    parser_resolve.add_argument('--defenders', nargs='*', default=[], help='Defending die ids')
    parser_resolve.add_argument('--output', help='Where to write the game (defaults to game_file)')
    parser_resolve.add_argument('--record', action='store_true', help='Print the attack record')
    parser_resolve.set_defaults(func=cmd_resolve)

    # ========== registry command ==========
    parser_registry = subparsers.add_parser('registry', help='List modules, attack types and skills')
    parser_registry.set_defaults(func=cmd_registry)

    # ========== serve command ==========
    parser_serve = subparsers.add_parser('serve', help='Run the JSON API server')
    parser_serve.add_argument('--host', default=config.host, help='Host to bind to')
    parser_serve.add_argument('--port', type=int, default=config.port, help='Port to bind to')
    parser_serve.add_argument('--debug', action='store_true', default=config.debug,
                              help='Enable debug mode')
    parser_serve.set_defaults(func=cmd_serve)

    # Parse and execute
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(level=args.log_level, log_file=config.log_file, levels=config.log_levels)
    args.func(args)


if __name__ == '__main__':
    main()
