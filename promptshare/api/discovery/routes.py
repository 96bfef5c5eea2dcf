# promptshare/api/discovery/routes.py
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from promptshare.api.discovery.ranking import PromptFilters
from promptshare.api.discovery.schemas import DiscoveryQuerySchema
from promptshare.api.prompts.schemas import PromptResponseSchema
from promptshare.api.users.schemas import CreatorResponseSchema
from promptshare.core.security import get_optional_user_id

discovery_bp = Blueprint('discovery_bp', __name__)

def _load_query():
    """쿼리 파라미터를 검증하고 (필터, 나머지 옵션) 으로 나눕니다."""
    args = DiscoveryQuerySchema().load(request.args)
    filters = PromptFilters(
        categories=args['categories'],
        difficulties=args['difficulties'],
        min_likes=args['min_likes'],
        is_template=args['is_template'],
        featured=args['featured'],
        time_range=args['time_range'],
        creative=args['creative'],
        search=args['search'],
    )
    return filters, args


@discovery_bp.route('/prompts', methods=['GET'])
def list_prompts():
    """
    필터와 정렬 조건에 맞는 프롬프트 목록을 조회합니다.
    - category, difficulty: 반복 또는 쉼표 구분 (OR)
    - sort_by: newest | oldest | most-liked | trending
    """
    try:
        filters, args = _load_query()
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    discovery_service = current_app.services['discovery']
    prompt_service = current_app.services['prompts']
    prompts = discovery_service.list_prompts(filters, args['sort_by'], args['limit'])
    return jsonify(PromptResponseSchema(many=True).dump(prompt_service.present_many(prompts, get_optional_user_id()))), 200


@discovery_bp.route('/prompts/random', methods=['GET'])
def random_prompt():
    """필터에 맞는 프롬프트 하나를 무작위로 반환합니다. trending=true 이면 인기 프롬프트에 가중치를 둡니다."""
    try:
        filters, args = _load_query()
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    discovery_service = current_app.services['discovery']
    prompt_service = current_app.services['prompts']
    prompt = discovery_service.pick_random(filters, trending=args['trending'])
    return jsonify(PromptResponseSchema().dump(prompt_service.present(prompt, get_optional_user_id()))), 200


@discovery_bp.route('/users/discover', methods=['GET'])
def discover_creators():
    discovery_service = current_app.services['discovery']
    creators = discovery_service.discover_creators(current_app.config['DISCOVER_CREATORS_LIMIT'])
    return jsonify(CreatorResponseSchema(many=True).dump(creators)), 200
