class ApiError(Exception):
    """
    기본 API 예외의 최상위 클래스
    - 모든 커스텀 API 예외가 이 클래스를 상속
    - status_code 값으로 FastAPI 예외 핸들러가 응답 코드를 결정
    """
    status_code: int = 500

    def __init__(self, message: str):
        """
        - message: 사용자에게 전달할 예외 메시지 문자열
        """
        # 예외 메시지 설정
        self.message = message
        # 상위 Exception 초기화
        super().__init__(message)


class BadRequestError(ApiError):
    """400 Bad Request"""
    status_code = 400


class UnauthorizedError(ApiError):
    """401 Unauthorized - 자격 증명이 없거나 형식이 잘못됨"""
    status_code = 401


class AuthenticationError(ApiError):
    """403 - 잘못된 자격 증명, 만료/위조/블랙리스트 토큰"""
    status_code = 403


class ForbiddenError(ApiError):
    """403 Forbidden - 인증은 되었지만 권한 없음"""
    status_code = 403


class NotFoundError(ApiError):
    """404 Not Found"""
    status_code = 404


class ValidationError(ApiError):
    """422 - 필수 입력 누락 또는 형식 오류"""
    status_code = 422


class ConflictError(ApiError):
    """422 - 이미 존재하는 사용자"""
    status_code = 422


class ServiceError(ApiError):
    """500 - 토큰 발급 실패, 저장소/레지스트리 연결 불가"""
    status_code = 500
