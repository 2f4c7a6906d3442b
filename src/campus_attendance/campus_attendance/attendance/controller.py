from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.constants import ALL, CSV_MIMETYPE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def roles_required(*roles: Role):
        """Session guard. The login layer stores ``user_id`` and ``role`` in the session,
        plus ``faculty_id`` or ``student_id`` when the user has one."""

        allowed = {r.value for r in roles}

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if "user_id" not in session:
                    return jsonify({"message": "Authentication required"}), 401
                if session.get("role") not in allowed:
                    return jsonify({"message": "Access denied for this role"}), 403
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def _session_date_arg() -> date | str:
        value = (request.args.get("date") or ALL).strip()
        if value.lower() == ALL:
            return ALL
        return parse_iso_date(value)

    def _faculty_scope() -> Optional[str]:
        """Faculty callers only see their own subjects; admins see everything."""
        if session.get("role") != Role.FACULTY.value:
            return None
        return str(session.get("faculty_id") or session["user_id"])

    def _optional_date_arg(name: str) -> Optional[date]:
        value = request.args.get(name)
        return parse_iso_date(value) if value else None

    def _json_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"message": str(e)}), 400
            except AuthorizationError as e:
                return jsonify({"message": str(e)}), 403
            except NotFoundError as e:
                return jsonify({"message": str(e)}), 404
            except Exception:
                logger.exception("Failed to build attendance report for %s", request.path)
                return jsonify({"message": "Failed to fetch report data"}), 500

        return wrapper

    @app.route(
        "/api/faculty/subjects/<subject_id>/attendance/report",
        methods=["GET"],
        endpoint="subject_attendance_report",
    )
    @roles_required(Role.FACULTY, Role.ADMIN)
    @_json_errors
    def subject_attendance_report(subject_id: str):
        report = container.report_service.build_subject_report(
            subject_id, on=_session_date_arg(), faculty_id=_faculty_scope()
        )
        return jsonify(report.as_dict())

    @app.route(
        "/api/faculty/subjects/<subject_id>/attendance/report.csv",
        methods=["GET"],
        endpoint="subject_attendance_report_csv",
    )
    @roles_required(Role.FACULTY, Role.ADMIN)
    @_json_errors
    def subject_attendance_report_csv(subject_id: str):
        export = container.report_service.export_subject_csv(
            subject_id, on=_session_date_arg(), faculty_id=_faculty_scope()
        )
        return app.response_class(
            export.content.encode("utf-8-sig"),
            mimetype=CSV_MIMETYPE,
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )

    @app.route(
        "/api/faculty/courses/<course_id>/attendance/report",
        methods=["GET"],
        endpoint="course_attendance_report",
    )
    @roles_required(Role.FACULTY, Role.ADMIN)
    @_json_errors
    def course_attendance_report(course_id: str):
        report = container.report_service.build_course_report(
            course_id, on=_session_date_arg(), faculty_id=_faculty_scope()
        )
        return jsonify(report.as_dict())

    @app.route(
        "/api/admin/students/<student_id>/attendance",
        methods=["GET"],
        endpoint="admin_student_attendance",
    )
    @roles_required(Role.ADMIN)
    @_json_errors
    def admin_student_attendance(student_id: str):
        report = container.report_service.build_student_report(
            student_id,
            start=_optional_date_arg("start"),
            end=_optional_date_arg("end"),
            status=request.args.get("status") or ALL,
        )
        return jsonify(report.as_dict())

    @app.route("/api/student/attendance", methods=["GET"], endpoint="my_attendance")
    @roles_required(Role.STUDENT)
    @_json_errors
    def my_attendance():
        student_id = session.get("student_id") or session["user_id"]
        report = container.report_service.build_student_report(str(student_id))
        return jsonify(report.as_dict())
