# promptshare/core/errors.py
"""
서비스 계층에서 발생시키는 도메인 예외 정의.

모든 예외는 안정적인 error_code 와 HTTP 상태 코드를 함께 가지며,
app 팩토리에 등록된 에러 핸들러가 {"error_code", "message"} 형태로 응답합니다.
"""


class ServiceError(Exception):
    """도메인 예외의 기반 클래스"""
    error_code = "INTERNAL_SERVER_ERROR"
    status_code = 500
    default_message = "서버 내부에서 예상치 못한 오류가 발생했습니다."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


class UnauthorizedError(ServiceError):
    """호출자 신원이 없거나 유효하지 않음"""
    error_code = "UNAUTHORIZED"
    status_code = 401
    default_message = "로그인이 필요합니다."


class ForbiddenError(ServiceError):
    """인증은 되었으나 권한이 없음 (소유자 아님, 관리자 아님)"""
    error_code = "FORBIDDEN"
    status_code = 403
    default_message = "해당 작업을 수행할 권한이 없습니다."


class NotFoundError(ServiceError):
    error_code = "RESOURCE_NOT_FOUND"
    status_code = 404
    default_message = "요청한 리소스를 찾을 수 없습니다."


class InvalidOperationError(ServiceError):
    """도메인 불변식 위반 (예: 자기 자신 팔로우)"""
    error_code = "INVALID_OPERATION"
    status_code = 400
    default_message = "허용되지 않는 작업입니다."


class ConflictError(ServiceError):
    """유니크 제약 경합에서 패배한 경우"""
    error_code = "CONFLICT"
    status_code = 409
    default_message = "이미 존재하는 리소스입니다."


class InternalError(ServiceError):
    pass
