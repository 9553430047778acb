"""
Anagrams Co-op Package

A word game where players find every word hidden in a six-letter base word,
alone or racing together over a network. The package holds the client game
core (word derivation, answer ledger, letter pool, wire protocol, connection
state machine) and the Flask-SocketIO lobby coordinator the clients talk to.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating coordinator app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(
        app,
        cors_allowed_origins="*",
        logger=False,
        engineio_logger=False,
        always_connect=True
    )

    # Register blueprints
    from .controllers.lobby_controller import lobby_bp

    app.register_blueprint(lobby_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
