from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_actor, error_response, lead_required, login_required, ok, request_payload
from ..container import Container
from .model import absence_to_dict


def register(app: Flask, container: Container) -> None:
    service = container.absence_service

    @app.route("/absences", methods=["GET"], endpoint="my_absences")
    @login_required
    def my_absences():
        try:
            rows = service.list_mine(current_actor())
            return jsonify({"requests": [absence_to_dict(r) for r in rows]})
        except Exception as e:
            return error_response(e)

    @app.route("/absences", methods=["POST"], endpoint="new_absence")
    @login_required
    def new_absence():
        try:
            data = request_payload()
            req = service.create(
                current_actor(),
                start_date=parse_iso_date(data.get("start_date"), "Start date"),
                end_date=parse_iso_date(data.get("end_date"), "End date"),
                reason=data.get("reason", ""),
                category=data.get("category") or None,
            )
            return ok("Absence request submitted", 201, request=absence_to_dict(req))
        except Exception as e:
            return error_response(e)

    @app.route("/absences/<int:request_id>", methods=["GET"], endpoint="absence_detail")
    @login_required
    def absence_detail(request_id: int):
        try:
            return jsonify({"request": absence_to_dict(service.get(current_actor(), request_id))})
        except Exception as e:
            return error_response(e)

    @app.route("/absences/<int:request_id>", methods=["DELETE"], endpoint="delete_absence")
    @login_required
    def delete_absence(request_id: int):
        try:
            service.delete(current_actor(), request_id)
            return ok("Absence request removed")
        except Exception as e:
            return error_response(e)

    @app.route("/absences/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_absence")
    @login_required
    def cancel_absence(request_id: int):
        try:
            req = service.cancel(current_actor(), request_id)
            return ok("Absence request cancelled", request=absence_to_dict(req))
        except Exception as e:
            return error_response(e)

    @app.route(
        "/absences/<int:request_id>/request-cancellation",
        methods=["POST"],
        endpoint="request_absence_cancellation",
    )
    @login_required
    def request_absence_cancellation(request_id: int):
        try:
            req = service.request_cancellation(
                current_actor(),
                request_id,
                cancel_reason=request_payload().get("cancel_reason", ""),
            )
            return ok("Cancellation requested", request=absence_to_dict(req))
        except Exception as e:
            return error_response(e)

    @app.route("/absences/pending", methods=["GET"], endpoint="pending_absences")
    @lead_required
    def pending_absences():
        try:
            rows = service.list_pending(current_actor())
            return jsonify({"requests": [absence_to_dict(r) for r in rows]})
        except Exception as e:
            return error_response(e)

    @app.route("/absences/cancellations", methods=["GET"], endpoint="cancellation_requests")
    @lead_required
    def cancellation_requests():
        try:
            rows = service.list_cancellation_requests(current_actor())
            return jsonify({"requests": [absence_to_dict(r) for r in rows]})
        except Exception as e:
            return error_response(e)

    @app.route("/absences/<int:request_id>/approve", methods=["POST"], endpoint="approve_absence")
    @lead_required
    def approve_absence(request_id: int):
        try:
            req = service.approve(current_actor(), request_id, comment=request_payload().get("comment", ""))
            return ok("Absence request approved", request=absence_to_dict(req))
        except Exception as e:
            return error_response(e)

    @app.route("/absences/<int:request_id>/reject", methods=["POST"], endpoint="reject_absence")
    @lead_required
    def reject_absence(request_id: int):
        try:
            req = service.reject(current_actor(), request_id, comment=request_payload().get("comment", ""))
            return ok("Absence request rejected", request=absence_to_dict(req))
        except Exception as e:
            return error_response(e)

    @app.route(
        "/absences/<int:request_id>/approve-cancellation",
        methods=["POST"],
        endpoint="approve_absence_cancellation",
    )
    @lead_required
    def approve_absence_cancellation(request_id: int):
        try:
            req = service.approve_cancellation(current_actor(), request_id)
            return ok("Cancellation approved", request=absence_to_dict(req))
        except Exception as e:
            return error_response(e)

    @app.route(
        "/absences/<int:request_id>/reject-cancellation",
        methods=["POST"],
        endpoint="reject_absence_cancellation",
    )
    @lead_required
    def reject_absence_cancellation(request_id: int):
        try:
            req = service.reject_cancellation(current_actor(), request_id)
            return ok("Cancellation rejected; absence stays approved", request=absence_to_dict(req))
        except Exception as e:
            return error_response(e)
