import sys

from scorebook import create_app
from scorebook.errors import SchemaError
from scorebook.schema import ensure_schema

app = create_app()

# The server must not come up against a missing or partial schema
with app.app_context():
    try:
        ensure_schema()
    except SchemaError as exc:
        app.logger.critical(f"[startup] {exc.message}")
        sys.exit(1)

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=app.config['PORT'])
