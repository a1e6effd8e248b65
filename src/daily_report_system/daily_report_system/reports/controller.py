from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.http import (
    BadPayload,
    current_user_id,
    json_body,
    json_endpoint,
    login_required,
    optional_str,
    parse_date_value,
    parse_enum,
    require_number,
    require_str,
    respond,
    roles_required,
)
from ..container import Container
from ..core.enums import ReportStatus, Role
from ..core.ids import CommentId, DailyReportId, ProjectId, UserId
from .model import DailyReportChanges, NewDailyReport, ReportSearchCriteria, TaskInput


def _parse_tasks(data: dict, *, required: bool) -> Optional[tuple[TaskInput, ...]]:
    raw = data.get("tasks")
    if raw is None and not required:
        return None
    if not isinstance(raw, list):
        raise BadPayload("tasks must be a list", "tasks")

    tasks = []
    for item in raw:
        if not isinstance(item, dict):
            raise BadPayload("each task must be an object", "tasks")
        progress = require_number(item, "progress")
        if progress != int(progress):
            raise BadPayload("progress must be a whole number", "progress")
        tasks.append(
            TaskInput(
                project_id=ProjectId(require_str(item, "projectId")),
                description=require_str(item, "description"),
                hours_spent=float(require_number(item, "hoursSpent")),
                progress=int(progress),
            )
        )
    return tuple(tasks)


def register(app: Flask, container: Container) -> None:
    reports = container.report_service
    comments = container.comment_service

    @app.route("/api/daily-reports", methods=["POST"], endpoint="create_daily_report")
    @login_required
    @json_endpoint
    def create_daily_report():
        data = json_body()
        report_date = parse_date_value(require_str(data, "date"), "date")
        if report_date is None:
            raise BadPayload("date is required", "date")
        new = NewDailyReport(
            user_id=current_user_id(),
            report_date=report_date,
            tasks=_parse_tasks(data, required=True),
            challenges=require_str(data, "challenges"),
            next_day_plan=require_str(data, "nextDayPlan"),
        )
        return respond(reports.create_report(new), key="dailyReport", status=201)

    @app.route("/api/daily-reports", methods=["GET"], endpoint="search_daily_reports")
    @login_required
    @json_endpoint
    def search_daily_reports():
        args = request.args
        criteria = ReportSearchCriteria(
            user_id=UserId(args["userId"]) if args.get("userId") else None,
            date_from=parse_date_value(args.get("dateFrom"), "dateFrom"),
            date_to=parse_date_value(args.get("dateTo"), "dateTo"),
            status=parse_enum(ReportStatus, args.get("status"), "status"),
            approver_id=UserId(args["approverId"]) if args.get("approverId") else None,
            project_id=ProjectId(args["projectId"]) if args.get("projectId") else None,
        )
        result = reports.search_reports(requester_id=current_user_id(), criteria=criteria)
        return respond(result, key="dailyReports")

    @app.route("/api/daily-reports/summary/<user_id>", methods=["GET"], endpoint="daily_report_summary")
    @login_required
    @json_endpoint
    def daily_report_summary(user_id: str):
        date_from = parse_date_value(request.args.get("dateFrom"), "dateFrom")
        date_to = parse_date_value(request.args.get("dateTo"), "dateTo")
        if date_from is None or date_to is None:
            raise BadPayload("dateFrom and dateTo are required", "dateFrom" if date_from is None else "dateTo")
        result = reports.get_summary(
            requester_id=current_user_id(),
            target_user_id=UserId(user_id),
            date_from=date_from,
            date_to=date_to,
        )
        return respond(result, key="summary")

    @app.route("/api/daily-reports/<report_id>", methods=["GET"], endpoint="get_daily_report")
    @login_required
    @json_endpoint
    def get_daily_report(report_id: str):
        result = reports.get_report(requester_id=current_user_id(), report_id=DailyReportId(report_id))
        return respond(result, key="dailyReport")

    @app.route("/api/daily-reports/<report_id>", methods=["PUT"], endpoint="update_daily_report")
    @login_required
    @json_endpoint
    def update_daily_report(report_id: str):
        data = json_body()
        changes = DailyReportChanges(
            report_id=DailyReportId(report_id),
            user_id=current_user_id(),
            tasks=_parse_tasks(data, required=False),
            challenges=optional_str(data, "challenges"),
            next_day_plan=optional_str(data, "nextDayPlan"),
        )
        return respond(reports.update_report(changes), key="dailyReport")

    @app.route("/api/daily-reports/<report_id>/submit", methods=["POST"], endpoint="submit_daily_report")
    @login_required
    @json_endpoint
    def submit_daily_report(report_id: str):
        result = reports.submit_report(report_id=DailyReportId(report_id), user_id=current_user_id())
        return respond(result, key="dailyReport")

    @app.route("/api/daily-reports/<report_id>/approve", methods=["POST"], endpoint="approve_daily_report")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @json_endpoint
    def approve_daily_report(report_id: str):
        data = json_body()
        result = reports.approve_report(
            report_id=DailyReportId(report_id),
            approver_id=current_user_id(),
            feedback=optional_str(data, "feedback"),
        )
        return respond(result, key="dailyReport")

    @app.route("/api/daily-reports/<report_id>/reject", methods=["POST"], endpoint="reject_daily_report")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @json_endpoint
    def reject_daily_report(report_id: str):
        data = json_body()
        result = reports.reject_report(
            report_id=DailyReportId(report_id),
            rejector_id=current_user_id(),
            feedback=optional_str(data, "feedback") or "",
        )
        return respond(result, key="dailyReport")

    @app.route("/api/daily-reports/<report_id>/comments", methods=["GET"], endpoint="list_report_comments")
    @login_required
    @json_endpoint
    def list_report_comments(report_id: str):
        result = comments.list_comments(requester_id=current_user_id(), report_id=DailyReportId(report_id))
        return respond(result, key="comments")

    @app.route("/api/daily-reports/<report_id>/comments", methods=["POST"], endpoint="create_report_comment")
    @login_required
    @json_endpoint
    def create_report_comment(report_id: str):
        data = json_body()
        result = comments.create_comment(
            report_id=DailyReportId(report_id),
            user_id=current_user_id(),
            content=optional_str(data, "content") or "",
        )
        return respond(result, key="comment", status=201)

    @app.route("/api/daily-reports/comments/<comment_id>/read", methods=["PUT"], endpoint="mark_comment_read")
    @login_required
    @json_endpoint
    def mark_comment_read(comment_id: str):
        return respond(comments.mark_as_read(CommentId(comment_id)), key="comment")
