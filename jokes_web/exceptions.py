class WebError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationError(WebError):
    """세션에 리프레시 토큰이 없거나 백엔드가 재발급을 거부함"""


class LogoutRequired(WebError):
    """세션을 지우고 로그인 페이지로 보내야 함"""


class ApiRequestError(WebError):
    """백엔드가 인증 외의 이유로 요청을 거부함"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)
