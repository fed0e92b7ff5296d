from __future__ import annotations

from datetime import datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_actor, error_response, lead_required, login_required, ok, request_payload
from ..container import Container
from ..core.constants import TASK_PRIORITY_MIN
from .model import task_to_dict


def register(app: Flask, container: Container) -> None:
    service = container.task_service

    def _due_date(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        return datetime.combine(parse_iso_date(value, "Due date"), datetime.min.time())

    @app.route("/tasks", methods=["GET"], endpoint="my_tasks")
    @login_required
    def my_tasks():
        try:
            actor = current_actor()
            rows = service.list_all(actor) if actor.is_lead and request.args.get("all") else service.list_mine(actor)
            return jsonify({"tasks": [task_to_dict(t) for t in rows]})
        except Exception as e:
            return error_response(e)

    @app.route("/tasks", methods=["POST"], endpoint="self_assign_task")
    @login_required
    def self_assign_task():
        try:
            data = request_payload()
            task = service.create_self_assigned(
                current_actor(),
                title=data.get("title", ""),
                description=data.get("description"),
                priority=data.get("priority", TASK_PRIORITY_MIN),
                due_date=_due_date(data.get("due_date")),
            )
            return ok("Task created", 201, task=task_to_dict(task))
        except Exception as e:
            return error_response(e)

    @app.route("/tasks/assign", methods=["POST"], endpoint="assign_task")
    @lead_required
    def assign_task():
        try:
            data = request_payload()
            task = service.assign(
                current_actor(),
                assigned_to=data.get("assigned_to"),
                title=data.get("title", ""),
                description=data.get("description"),
                priority=data.get("priority", TASK_PRIORITY_MIN),
                due_date=_due_date(data.get("due_date")),
            )
            return ok("Task assigned", 201, task=task_to_dict(task))
        except Exception as e:
            return error_response(e)

    @app.route("/tasks/<int:task_id>/start", methods=["POST"], endpoint="start_task")
    @login_required
    def start_task(task_id: int):
        try:
            return ok("Task started", task=task_to_dict(service.start(current_actor(), task_id)))
        except Exception as e:
            return error_response(e)

    @app.route("/tasks/<int:task_id>/complete", methods=["POST"], endpoint="complete_task")
    @login_required
    def complete_task(task_id: int):
        try:
            return ok("Task completed", task=task_to_dict(service.complete(current_actor(), task_id)))
        except Exception as e:
            return error_response(e)

    @app.route("/tasks/<int:task_id>", methods=["DELETE"], endpoint="delete_task")
    @login_required
    def delete_task(task_id: int):
        try:
            service.delete(current_actor(), task_id)
            return ok("Task removed")
        except Exception as e:
            return error_response(e)
