from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_actor, error_response, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        try:
            return jsonify(container.dashboard_service.for_actor(current_actor()))
        except Exception as e:
            return error_response(e)
