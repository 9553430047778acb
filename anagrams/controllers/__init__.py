"""
Controllers Package

Contains the HTTP blueprints of the lobby coordinator.
"""

from .lobby_controller import lobby_bp

__all__ = ['lobby_bp']
