"""
Anagrams Lobby Coordinator - Main Entry Point

This is the main entry point for the multiplayer lobby coordinator.
It initializes the lobby service and starts the Flask-SocketIO application.
"""

from anagrams import create_app
from anagrams.config import Config
from anagrams.services.lobby_service import initialize_lobby_service
from anagrams.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        lobby_service = initialize_lobby_service()
        if lobby_service:
            print("✓ Lobby service initialized successfully")
        else:
            print("✗ Failed to initialize lobby service")

        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        game_logger.logger.info("Anagrams coordinator starting")

        print(f"\nStarting Anagrams Coordinator on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Anagrams coordinator shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
