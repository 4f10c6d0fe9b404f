from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .runs.controller import register as register_runs


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if app.config["DEBUG"]:
        logging.getLogger(__name__).debug("settings=%s timezone=%s", settings_module, getattr(settings, "TIMEZONE", None))

    container = build_container(
        policy=getattr(settings, "POLICY", None),
        timezone=getattr(settings, "TIMEZONE", "Europe/Zagreb"),
        recap_top_n=int(getattr(settings, "RECAP_TOP_N", 5)),
    )
    app.extensions["epr_container"] = container

    register_runs(app, container)

    return app
