# promptshare/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명에 사용되는 비밀 키입니다. .env 파일에 정의된 값을 읽어옵니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    # 외부 ID 제공자(Google OAuth)와의 인증 코드 교환에 필요한 클라이언트 시크릿 파일 경로입니다.
    GOOGLE_CLIENT_SECRETS_PATH = os.getenv('GOOGLE_CLIENT_SECRETS_PATH')

    # 알림 목록 한 번에 반환하는 최대 개수
    NOTIFICATION_PAGE_SIZE = int(os.getenv('NOTIFICATION_PAGE_SIZE', 50))
    # 크리에이터 탐색 결과 최대 개수
    DISCOVER_CREATORS_LIMIT = int(os.getenv('DISCOVER_CREATORS_LIMIT', 20))
    # 공개 컬렉션 목록 최대 개수
    PUBLIC_COLLECTIONS_LIMIT = int(os.getenv('PUBLIC_COLLECTIONS_LIMIT', 20))

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    # 테스트에서는 .env 없이도 토큰을 발급할 수 있어야 합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'testing-secret-key-with-enough-length')

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app 함수에서 적절한 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
