from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import (
    BadPayload,
    current_user_id,
    json_body,
    json_endpoint,
    login_required,
    optional_str,
    parse_enum,
    require_str,
    respond,
    roles_required,
)
from ..core.enums import Role
from ..core.ids import DepartmentId, UserId
from ..container import Container
from .model import NewAccount, ProfileUpdate, UserSearchCriteria


def _optional_bool(data: dict, field: str):
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise BadPayload(f"{field} must be true or false", field)
    return value


def _profile_update(user_id: UserId, data: dict) -> ProfileUpdate:
    return ProfileUpdate(
        user_id=user_id,
        email=optional_str(data, "email"),
        name=optional_str(data, "name"),
        role=parse_enum(Role, optional_str(data, "role"), "role"),
        dept_id=DepartmentId(data["departmentId"]) if optional_str(data, "departmentId") else None,
        manager_id=UserId(data["managerId"]) if optional_str(data, "managerId") else None,
        is_active=_optional_bool(data, "isActive"),
        chat_user_id=optional_str(data, "chatUserId"),
    )


def _start_session(user, *, remember: bool) -> None:
    session.clear()
    session.permanent = remember
    session["user_id"] = user.user_id
    session["role"] = user.role.value


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @json_endpoint
    def login():
        data = json_body()
        result = container.auth_service.authenticate(require_str(data, "email"), require_str(data, "password"))
        if result.is_ok():
            _start_session(result.value, remember=bool(data.get("rememberMe")))
        return respond(result, key="user")

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    @json_endpoint
    def register_account():
        data = json_body()
        account = NewAccount(
            email=require_str(data, "email"),
            password=require_str(data, "password"),
            name=require_str(data, "name"),
            role=Role.EMPLOYEE,
            dept_id=DepartmentId(require_str(data, "departmentId")),
        )
        result = container.user_service.register(account)
        if result.is_ok():
            _start_session(result.value, remember=False)
        return respond(result, key="user", status=201)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    @json_endpoint
    def me():
        return respond(container.user_service.get_user(current_user_id()), key="user")

    @app.route("/api/auth/me", methods=["PUT"], endpoint="update_me")
    @login_required
    @json_endpoint
    def update_me():
        update = _profile_update(current_user_id(), json_body())
        return respond(container.user_service.update_own_profile(update), key="user")

    @app.route("/api/auth/password", methods=["POST"], endpoint="change_password")
    @login_required
    @json_endpoint
    def change_password():
        data = json_body()
        result = container.auth_service.change_password(
            user_id=current_user_id(),
            current_password=require_str(data, "currentPassword"),
            new_password=require_str(data, "newPassword"),
        )
        return respond(result, key="ok", render=lambda _: True)

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @roles_required(Role.ADMIN)
    @json_endpoint
    def create_user():
        data = json_body()
        role = parse_enum(Role, require_str(data, "role"), "role")
        if role is None:
            raise BadPayload("role is required", "role")
        account = NewAccount(
            email=require_str(data, "email"),
            password=require_str(data, "password"),
            name=require_str(data, "name"),
            role=role,
            dept_id=DepartmentId(require_str(data, "departmentId")),
            manager_id=UserId(data["managerId"]) if optional_str(data, "managerId") else None,
            chat_user_id=optional_str(data, "chatUserId"),
        )
        return respond(container.user_service.create_account(account), key="user", status=201)

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @json_endpoint
    def list_users():
        args = request.args
        criteria = UserSearchCriteria(
            email=args.get("email") or None,
            name=args.get("name") or None,
            role=parse_enum(Role, args.get("role"), "role"),
            dept_id=DepartmentId(args["departmentId"]) if args.get("departmentId") else None,
            manager_id=UserId(args["managerId"]) if args.get("managerId") else None,
            is_active={"true": True, "false": False}.get((args.get("isActive") or "").lower()),
        )
        users = container.user_service.search_users(criteria)
        return jsonify({"users": [u.to_dict() for u in users]})

    @app.route("/api/users/<user_id>", methods=["GET"], endpoint="get_user")
    @roles_required(Role.ADMIN)
    @json_endpoint
    def get_user(user_id: str):
        return respond(container.user_service.get_user(UserId(user_id)), key="user")

    @app.route("/api/users/<user_id>", methods=["PUT"], endpoint="update_user")
    @roles_required(Role.ADMIN)
    @json_endpoint
    def update_user(user_id: str):
        update = _profile_update(UserId(user_id), json_body())
        return respond(container.user_service.update_profile(update), key="user")

    @app.route("/api/users/<user_id>/deactivate", methods=["POST"], endpoint="deactivate_user")
    @roles_required(Role.ADMIN)
    @json_endpoint
    def deactivate_user(user_id: str):
        result = container.user_service.deactivate(current_user_id=current_user_id(), user_id=UserId(user_id))
        return respond(result, key="user")

    @app.route("/api/users/<user_id>/subordinates", methods=["GET"], endpoint="list_subordinates")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @json_endpoint
    def list_subordinates(user_id: str):
        return respond(container.user_service.list_subordinates(UserId(user_id)), key="users")
