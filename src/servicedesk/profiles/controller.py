from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_actor, error_response, lead_required, login_required, ok, request_payload
from ..container import Container
from .model import profile_to_dict


def register(app: Flask, container: Container) -> None:
    service = container.profile_service

    @app.route("/profile", methods=["GET"], endpoint="my_profile")
    @login_required
    def my_profile():
        try:
            return jsonify({"profile": profile_to_dict(service.get(current_actor().user_id))})
        except Exception as e:
            return error_response(e)

    @app.route("/profile", methods=["PATCH"], endpoint="update_my_profile")
    @login_required
    def update_my_profile():
        try:
            data = request_payload()
            profile = service.update_self(
                current_actor(),
                name=data.get("name", ""),
                area=data.get("area"),
                avatar_url=data.get("avatar_url"),
            )
            return ok("Profile updated", profile=profile_to_dict(profile))
        except Exception as e:
            return error_response(e)

    @app.route("/analysts", methods=["GET"], endpoint="list_analysts")
    @lead_required
    def list_analysts():
        try:
            return jsonify({"analysts": [profile_to_dict(p) for p in service.list_analysts()]})
        except Exception as e:
            return error_response(e)

    @app.route("/analysts/<int:user_id>/schedule", methods=["PUT"], endpoint="update_schedule")
    @lead_required
    def update_schedule(user_id: int):
        try:
            profile = service.update_schedule(current_actor(), user_id=user_id, data=request_payload())
            return ok("Shift schedule updated", profile=profile_to_dict(profile))
        except Exception as e:
            return error_response(e)

    @app.route("/analysts/<int:user_id>", methods=["DELETE"], endpoint="remove_analyst")
    @lead_required
    def remove_analyst(user_id: int):
        try:
            service.remove_analyst(current_actor(), user_id=user_id)
            return ok("Analyst removed")
        except Exception as e:
            return error_response(e)
