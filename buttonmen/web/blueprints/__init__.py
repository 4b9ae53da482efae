"""
Flask blueprints for the Button Men web interface.

- api: stateless JSON endpoints for the rules engine
"""

from .api import api_bp

__all__ = ['api_bp']
