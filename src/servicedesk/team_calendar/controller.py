from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_actor, error_response, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.team_calendar_service

    @app.route("/calendar", methods=["GET"], endpoint="team_calendar")
    @login_required
    def team_calendar():
        try:
            day_s = request.args.get("date")
            day = parse_iso_date(day_s) if day_s else service.today()
            entries = service.absences_on(current_actor(), day)
            return jsonify(
                {
                    "date": day.strftime("%Y-%m-%d"),
                    "absences": [
                        {
                            "request_id": e.request_id,
                            "analyst_id": e.analyst_id,
                            "title": e.title,
                            "subtitle": e.subtitle,
                            "start_date": e.start_date.strftime("%Y-%m-%d"),
                            "end_date": e.end_date.strftime("%Y-%m-%d"),
                        }
                        for e in entries
                    ],
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/calendar/marked", methods=["GET"], endpoint="team_calendar_marked")
    @login_required
    def team_calendar_marked():
        try:
            today = service.today()
            start_s = request.args.get("start")
            end_s = request.args.get("end")
            start = parse_iso_date(start_s, "Start") if start_s else today.replace(day=1)
            end = parse_iso_date(end_s, "End") if end_s else start + timedelta(days=41)
            days = service.marked_days(current_actor(), start, end)
            return jsonify({"days": [d.strftime("%Y-%m-%d") for d in days]})
        except Exception as e:
            return error_response(e)
