import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Join codes (uppercase letters and digits)
    JOIN_CODE_LENGTH = int(os.environ.get('JOIN_CODE_LENGTH', '6'))
    # Sessions nobody joined are pruned after this many seconds
    EMPTY_SESSION_TTL_SEC = int(os.environ.get('EMPTY_SESSION_TTL_SEC', '600'))
    # SpacebarInvaders pause between a cleared wave and the next one (seconds)
    WAVE_RESPAWN_DELAY_SEC = float(os.environ.get('WAVE_RESPAWN_DELAY_SEC', '5'))
    # TypeFlight hazard ticker (milliseconds)
    TYPEFLIGHT_BASE_TICK_MS = int(os.environ.get('TYPEFLIGHT_BASE_TICK_MS', '2200'))
    TYPEFLIGHT_MIN_TICK_MS = int(os.environ.get('TYPEFLIGHT_MIN_TICK_MS', '450'))
    TYPEFLIGHT_DECAY_MS = int(os.environ.get('TYPEFLIGHT_DECAY_MS', '90000'))
    # Socket.IO namespace the game client connects to
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Comma separated list, or '*'
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
