from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from gamestats.config import Config

db = SQLAlchemy()
migrate = Migrate()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)

    # Ensure models are registered on the metadata before migrations or create_all
    from gamestats import models  # noqa: F401

    from gamestats.cli import register_commands
    register_commands(flask_app)

    return flask_app
