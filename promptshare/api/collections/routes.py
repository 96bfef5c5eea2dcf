# promptshare/api/collections/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from promptshare.api.collections.schemas import CollectionCreateSchema, CollectionResponseSchema
from promptshare.core.security import get_current_user, get_optional_user_id

collections_bp = Blueprint('collections_bp', __name__)

@collections_bp.route('', methods=['GET'])
def list_collections():
    """공개 컬렉션과 (로그인한 경우) 본인의 비공개 컬렉션"""
    collection_service = current_app.services['collections']
    collections = collection_service.list_visible(get_optional_user_id())
    return jsonify(CollectionResponseSchema(many=True).dump(collections)), 200


@collections_bp.route('', methods=['POST'])
@jwt_required()
def create_collection():
    collection_service = current_app.services['collections']
    user = get_current_user()
    try:
        data = CollectionCreateSchema().load(request.get_json())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    new_collection = collection_service.create_collection(user['user_id'], data)
    return jsonify(CollectionResponseSchema().dump(new_collection)), 201


@collections_bp.route('/public', methods=['GET'])
def list_public_collections():
    collection_service = current_app.services['collections']
    return jsonify(CollectionResponseSchema(many=True).dump(collection_service.list_public())), 200
