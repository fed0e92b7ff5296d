from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import current_actor, error_response, login_required, ok, request_payload
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..profiles.model import profile_to_dict

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        try:
            data = request_payload()
            user_id = container.auth_service.sign_up(
                email=data.get("email", ""),
                password=data.get("password", ""),
                name=data.get("name", ""),
            )
            return ok("Registration successful", 201, user_id=user_id)
        except Exception as e:
            return error_response(e)

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        try:
            data = request_payload()
            s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except Exception as e:
            return error_response(e)

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        logger.info("User %s signed in", s_user.user_id)
        return ok("Signed in", user_id=s_user.user_id, name=s_user.name, role=s_user.role.value)

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok("Signed out")

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            profile = container.profile_service.get(current_actor().user_id)
            return jsonify({"profile": profile_to_dict(profile)})
        except Exception as e:
            return error_response(e)
