from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    # Variants are fixed for the life of the process
    from scorebook.services.games.codec import Variant, resolve_variants
    variants = resolve_variants(flask_app.config.get('SUPPORTED_VARIANTS', 'everdell'))
    default_variant = Variant(flask_app.config.get('DEFAULT_VARIANT', variants[0].value).strip().lower())
    if default_variant not in variants:
        raise ValueError(f"Default variant '{default_variant.value}' is not in SUPPORTED_VARIANTS")
    flask_app.extensions['scorebook'] = {
        'variants': variants,
        'default_variant': default_variant,
    }

    db.init_app(flask_app)
    migrate.init_app(
        flask_app,
        db,
        directory=flask_app.config.get('MIGRATIONS_DIR', 'migrations'),
        render_as_batch=True,
    )
    origins = flask_app.config.get('CORS_ORIGINS', '')
    if isinstance(origins, str):
        origins = [o.strip() for o in origins.split(',') if o.strip()]
    CORS(flask_app, origins=origins)

    # Ensure models are registered on db.metadata for migrations
    from scorebook import models  # noqa: F401

    from scorebook.routes import main
    flask_app.register_blueprint(main)

    from scorebook.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api')

    @click.command('init-db')
    def init_db_command():
        """Creates missing tables and checks existing ones."""
        from scorebook.errors import SchemaError
        from scorebook.schema import ensure_schema
        with flask_app.app_context():
            try:
                ensure_schema()
            except SchemaError as exc:
                raise click.ClickException(exc.message)
        click.echo('Database schema is ready.')

    flask_app.cli.add_command(init_db_command)

    flask_app.logger.info(
        f"[startup] variants={','.join(v.value for v in variants)} default={default_variant.value}"
    )
    return flask_app
