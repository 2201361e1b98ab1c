"""LifeBoard habits application factory."""

from __future__ import annotations

from flask import Flask

from .config import BaseConfig, DevConfig, TestingConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestingConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def create_app(config_name: str | None = None) -> Flask:
    """Create the Flask application hosting the LifeBoard context and CLI."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["LIFEBOARD_CONFIG"] = config_obj

    # Imported lazily so importing the package does not register SQLModel tables
    from . import cli
    from .context import create_app_context
    from .logging_config import setup_logging

    setup_logging(config_obj)
    app.extensions["lifeboard"] = create_app_context(config_obj)
    cli.init_app(app)
    return app


__all__ = ["BaseConfig", "DevConfig", "TestingConfig", "create_app"]
