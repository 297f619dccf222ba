import importlib
import logging
import os
import pkgutil

from flask import Blueprint, Flask

from config.settings import DEBUG_PRINT, MAX_UPLOAD_BYTES

logger = logging.getLogger(__name__)


def _register_blueprints(app: Flask) -> None:
    """Register every Blueprint found in the ``routes`` package."""
    from routes import __path__ as routes_path

    for _, module_name, _ in pkgutil.iter_modules(routes_path):
        module = importlib.import_module(f"routes.{module_name}")
        for attr_name in dir(module):
            obj = getattr(module, attr_name)
            if isinstance(obj, Blueprint):
                app.register_blueprint(obj)
                logger.debug("Registered blueprint %s from routes.%s", obj.name, module_name)


def create_app() -> Flask:
    """Build the retreat dashboard API."""
    logging.basicConfig(
        level=logging.DEBUG if DEBUG_PRINT else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = os.getenv("SECRET_KEY", "dev")
    # Exports are parsed in memory, never written to disk
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES

    from middleware.handlers import register_error_handlers
    register_error_handlers(app)

    _register_blueprints(app)
    return app


if __name__ == "__main__":
    create_app().run(
        host="0.0.0.0",
        port=int(os.getenv("PORT", 5000)),
        debug=os.getenv("FLASK_DEBUG", "0") == "1",
        use_reloader=False,
    )
