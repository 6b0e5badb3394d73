import os


def normalize_port(value):
    """Mirror the usual node-style port parsing: numeric ports, named pipes, fallback 3000."""
    try:
        port = int(value)
    except (TypeError, ValueError):
        return value
    if port >= 0:
        return port
    return 3000


def _optional_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _origins(value):
    value = (value or '*').strip()
    if value == '*':
        return '*'
    return [o.strip() for o in value.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = normalize_port(os.environ.get('PORT') or '3000')
    CORS_ORIGINS = _origins(os.environ.get('CORS_ORIGINS'))
    STATIC_DIR = os.environ.get('STATIC_DIR', 'public')
    # Rooms
    DEFAULT_ROOM = os.environ.get('DEFAULT_ROOM', 'dev')
    # None means unbounded
    MAX_SPECTATORS = _optional_int(os.environ.get('MAX_SPECTATORS'))
    # 'authoritative' (server reducer) or 'relay' (trust the last publishing player)
    SYNC_MODE = os.environ.get('SYNC_MODE', 'authoritative')
    # Initial authoritative layout
    DECK_SIZE = int(os.environ.get('DECK_SIZE', '50'))
    CARD_PATH_TEMPLATE = os.environ.get('CARD_PATH_TEMPLATE', 'deck/player_{side}/images/image ({n}).png')
    # Optional: fixed seed for shuffles. Unset uses system entropy.
    SHUFFLE_SEED = _optional_int(os.environ.get('SHUFFLE_SEED'))
