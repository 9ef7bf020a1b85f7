import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma-separated list, or '*' for any origin
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_PATH = os.environ.get('SOCKETIO_PATH', 'socket.io')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Room codes
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    ROOM_CODE_MAX_ATTEMPTS = int(os.environ.get('ROOM_CODE_MAX_ATTEMPTS', '10'))
    # Kitchen timers
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1'))
    COOKING_TIMEOUT_MS = int(os.environ.get('COOKING_TIMEOUT_MS', '10000'))
    CUSTOMER_PATIENCE_MS = int(os.environ.get('CUSTOMER_PATIENCE_MS', '60000'))
    CUSTOMER_RETURN_DELAY_SEC = float(os.environ.get('CUSTOMER_RETURN_DELAY_SEC', '2'))
    # Points lost for a burned pizza or a customer who walks out
    PENALTY_POINTS = int(os.environ.get('PENALTY_POINTS', '5'))
