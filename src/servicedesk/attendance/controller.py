from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_actor, error_response, login_required
from ..container import Container
from ..profiles.model import profile_to_dict
from .evaluator import shift_status_to_dict


def register(app: Flask, container: Container) -> None:
    @app.route("/online", methods=["GET"], endpoint="online_now")
    @login_required
    def online_now():
        try:
            actor = current_actor()
            online = container.attendance_service.online_now(exclude_user_id=actor.user_id)
            return jsonify({"online": [profile_to_dict(p) for p in online], "count": len(online)})
        except Exception as e:
            return error_response(e)

    @app.route("/shift-status", methods=["GET"], endpoint="my_shift_status")
    @login_required
    def my_shift_status():
        try:
            status = container.attendance_service.shift_status_for(current_actor().user_id)
            return jsonify(shift_status_to_dict(status))
        except Exception as e:
            return error_response(e)
