from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from .. import __version__
from ..container import Container
from ..core.exceptions import InvariantViolation, ValidationError
from .model import RunRequest

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify({"ok": False, "error": "validation_error", "message": str(exc)}), 400

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(exc: InvariantViolation):
        logger.error("Run halted: %s", exc)
        return jsonify({"ok": False, "error": "invariant_violation", "message": str(exc)}), 500

    @app.get("/health")
    def health():
        return jsonify({"ok": True, "version": __version__})

    @app.post("/api/attendance/run")
    def run_attendance():
        payload = request.get_json(silent=True)
        run_request = RunRequest.from_payload(payload)
        output = container.run_service.run(run_request)
        return jsonify({"ok": True, **output.to_dict()})
