import logging
from pathlib import Path

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)

    # Basis-Konfiguration
    app.config.from_mapping(
        SECRET_KEY="dev",
        DATABASE=str(Path(app.instance_path) / "repladder.db"),
        LOG_LEVEL="INFO",
        DEFAULT_EXERCISE="pushups",
    )

    # Lokale Instanz-Konfiguration (instance/config.py), falls vorhanden
    if test_config is None:
        app.config.from_pyfile("config.py", silent=True)
    else:
        # Test-Config überschreibt alles (z. B. für Tests)
        app.config.update(test_config)

    # Instance-Ordner sicherstellen
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # DB-Initialisierung / Teardown / CLI
    from . import db
    db.init_app(app)

    from .seed import seed_catalog_command
    app.cli.add_command(seed_catalog_command)

    # Fehler als JSON statt HTML
    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.name, "description": exc.description}), exc.code

    # Healthcheck
    @app.get("/health")
    def health():
        _ = db.get_db()
        return {"status": "ok"}

    # Startseite
    @app.get("/")
    def index():
        from .catalog import EXERCISES
        return {
            "name": "RepLadder",
            "exercises": {k: {"name": v.name_plural, "goal": v.goal} for k, v in EXERCISES.items()},
            "default_exercise": app.config["DEFAULT_EXERCISE"],
        }

    # Blueprints registrieren
    from .blueprints.catalog import bp as catalog_bp
    app.register_blueprint(catalog_bp)

    from .blueprints.plans import bp as plans_bp
    app.register_blueprint(plans_bp)

    from .blueprints.workouts import bp as workouts_bp
    app.register_blueprint(workouts_bp)

    from .routes.progress import progress_bp
    app.register_blueprint(progress_bp)

    return app
