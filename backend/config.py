import os

basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'games.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Comma-separated variant names served by this deployment
    SUPPORTED_VARIANTS = os.environ.get('SUPPORTED_VARIANTS', 'everdell,root')
    # Variant behind the unprefixed /api/games routes
    DEFAULT_VARIANT = os.environ.get('DEFAULT_VARIANT', 'everdell')
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    PORT = int(os.environ.get('PORT', '8080'))
    MIGRATIONS_DIR = os.path.join(basedir, 'migrations')
