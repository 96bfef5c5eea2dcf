# promptshare/api/notifications/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from promptshare.api.notifications.schemas import NotificationResponseSchema, NotificationUpdateSchema
from promptshare.core.security import get_current_user
from promptshare.utils.datetime_utils import DateTimeUtils

notifications_bp = Blueprint('notifications_bp', __name__)

@notifications_bp.route('', methods=['GET'])
@jwt_required()
def get_notifications():
    """
    최근 알림 목록과 읽지 않은 알림 수를 반환합니다.
    - before: ISO 시각. 응답의 next_before 를 그대로 넘기면 다음 페이지를 조회합니다.
    """
    notification_service = current_app.services['notifications']
    user = get_current_user()

    before = request.args.get('before')
    try:
        before_dt = DateTimeUtils.parse_iso_datetime(before) if before else None
    except ValueError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": {"before": [str(e)]}}), 400

    notifications = notification_service.list_notifications(user['user_id'], before=before_dt)
    next_before = None
    if len(notifications) == notification_service.page_size:
        next_before = DateTimeUtils.to_iso_string(notifications[-1]['created_at'])

    return jsonify({
        "notifications": NotificationResponseSchema(many=True).dump(notifications),
        "unread_count": notification_service.count_unread(user['user_id']),
        "next_before": next_before
    }), 200


@notifications_bp.route('/mark-all-read', methods=['PATCH'])
@jwt_required()
def mark_all_read():
    notification_service = current_app.services['notifications']
    user = get_current_user()
    updated = notification_service.mark_all_read(user['user_id'])
    return jsonify({"message": "모든 알림을 읽음 처리했습니다.", "updated": updated}), 200


@notifications_bp.route('/<string:notification_id>', methods=['PATCH'])
@jwt_required()
def mark_read(notification_id: str):
    """
    알림 하나의 읽음 상태를 변경합니다. 본문이 없으면 읽음으로 처리합니다.
    - 본인의 알림이 아니면 존재하지 않는 알림과 같게 404 를 반환합니다.
    """
    notification_service = current_app.services['notifications']
    user = get_current_user()
    try:
        data = NotificationUpdateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    notification = notification_service.mark_read(user['user_id'], notification_id, data['read'])
    if notification is None:
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": "알림을 찾을 수 없습니다."}), 404
    return jsonify(NotificationResponseSchema().dump(notification)), 200
