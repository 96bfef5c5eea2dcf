# promptshare/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정 / 예외
from promptshare.core.config import config_by_name
from promptshare.core.errors import ServiceError

# - API 블루프린트
from promptshare.api.auth.routes import auth_bp
from promptshare.api.users.routes import users_bp
from promptshare.api.follows.routes import follows_bp
from promptshare.api.prompts.routes import prompts_bp
from promptshare.api.discovery.routes import discovery_bp
from promptshare.api.comments.routes import comments_bp
from promptshare.api.notifications.routes import notifications_bp
from promptshare.api.collections.routes import collections_bp

# - 서비스
from promptshare.services.firestore_service import EntityStore
from promptshare.services.notification_service import NotificationService
from promptshare.services.engagement_service import EngagementLedger
from promptshare.api.auth.services import AuthService
from promptshare.api.follows.services import FollowService
from promptshare.api.prompts.services import PromptService
from promptshare.api.comments.services import CommentService
from promptshare.api.users.services import UserService
from promptshare.api.discovery.services import DiscoveryService
from promptshare.api.collections.services import CollectionService

def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production'. 없으면 FLASK_ENV 를 따릅니다.
    :param db: 사용할 Firestore 클라이언트. 없으면 firebase_admin 을 초기화해 기본 클라이언트를 씁니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt_manager = JWTManager(app)

    if db is None and not firebase_admin._apps:
        cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용/핵심 서비스 먼저 생성
    store = EntityStore(db)
    app.services['store'] = store
    app.services['notifications'] = NotificationService(store, page_size=app.config['NOTIFICATION_PAGE_SIZE'])
    app.services['engagement'] = EngagementLedger(store, app.services['notifications'])
    app.services['auth'] = AuthService(store)

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['follows'] = FollowService(store, app.services['notifications'])
    app.services['prompts'] = PromptService(store, app.services['engagement'])
    app.services['comments'] = CommentService(store, app.services['engagement'], app.services['notifications'])
    app.services['users'] = UserService(
        store,
        prompt_service=app.services['prompts'],
        follow_service=app.services['follows']
    )
    app.services['discovery'] = DiscoveryService(store, app.services['follows'])
    app.services['collections'] = CollectionService(store, public_limit=app.config['PUBLIC_COLLECTIONS_LIMIT'])

    # 5-3. JWT 콜백: 무효화된 토큰 확인 및 401 응답 형식 통일
    @jwt_manager.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return app.services['auth'].is_token_revoked(jwt_payload)

    @jwt_manager.unauthorized_loader
    def handle_missing_token(reason):
        return jsonify({"error_code": "UNAUTHORIZED", "message": "로그인이 필요합니다."}), 401

    @jwt_manager.invalid_token_loader
    def handle_invalid_token(reason):
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 401

    @jwt_manager.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return jsonify({"error_code": "TOKEN_EXPIRED", "message": "토큰이 만료되었습니다."}), 401

    @jwt_manager.revoked_token_loader
    def handle_revoked_token(jwt_header, jwt_payload):
        return jsonify({"error_code": "TOKEN_REVOKED", "message": "로그아웃된 토큰입니다."}), 401

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(follows_bp, url_prefix='/api/users')
    app.register_blueprint(prompts_bp, url_prefix='/api/prompts')
    app.register_blueprint(discovery_bp, url_prefix='/api')
    app.register_blueprint(comments_bp, url_prefix='/api')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')
    app.register_blueprint(collections_bp, url_prefix='/api/collections')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ServiceError)
    def handle_service_error(err):
        if err.status_code >= 500:
            logging.error(f"Service error: {err.message}", exc_info=True)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404/405 같은 HTTP 예외는 Flask 기본 응답을 그대로 사용
        if isinstance(err, HTTPException):
            return err
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
