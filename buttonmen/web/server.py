"""
Web interface for the Button Men rules engine.

Flask app exposing the rules engine as stateless JSON endpoints:
- /: Service summary
- /api/...: See blueprints/api.py
"""

import logging
from typing import Optional

from flask import Flask, jsonify

from .. import __version__
from ..core.config import get_config
from ..core.logging_config import setup_logging
from ..core.registry import Registries, get_registries
from .blueprints import api_bp

logger = logging.getLogger(__name__)


def create_app(registries: Optional[Registries] = None) -> Flask:
    """
    Create the Flask app.

    Args:
        registries: Registries to serve; defaults to the process-wide ones

    Returns:
        Flask app
    """
    app = Flask(__name__)
    app.json.sort_keys = False

    # Read-only and shared by every request
    app.registries = registries or get_registries()

    app.register_blueprint(api_bp)

    @app.route('/')
    def index():
        """Service summary."""
        return jsonify({
            'success': True,
            'service': 'buttonmen',
            'version': __version__,
            'attack_types': app.registries.attack_types.names(),
            'skills': app.registries.skills.skill_names(),
        })

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'success': False, 'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'success': False, 'error': 'Method not allowed'}), 405

    logger.info(f"Web app ready with {len(app.registries.attack_types.names())} attack types")
    return app


def main():
    """Run development server."""
    import argparse

    config = get_config()

    parser = argparse.ArgumentParser(description='Button Men Rules Server')
    parser.add_argument('--host', default=config.host, help='Host to bind to')
    parser.add_argument('--port', type=int, default=config.port, help='Port to bind to')
    parser.add_argument('--debug', action='store_true', default=config.debug, help='Enable debug mode')

    args = parser.parse_args()

    setup_logging(level=config.log_level, log_file=config.log_file, levels=config.log_levels)
    run_server(args.host, args.port, args.debug)


def run_server(host: str, port: int, debug: bool = False) -> None:
    app = create_app()

    print(f"\n╔══════════════════════════════════════════════════╗")
    print(f"║     Button Men Rules Server                      ║")
    print(f"╚══════════════════════════════════════════════════╝")
    print(f"")
    print(f"  Server URL:   http://{host}:{port}")
    print(f"  Attack types: {', '.join(app.registries.attack_types.names())}")
    print(f"  Skills:       {', '.join(app.registries.skills.skill_names())}")
    print(f"")
    print(f"  Press Ctrl+C to stop")
    print(f"")

    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    main()
