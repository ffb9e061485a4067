"""
커스텀 예외 클래스 정의.

이 모듈은 애플리케이션 전체에서 사용할 예외 클래스들을 정의합니다.
예외 계층 구조를 통해 타입별 에러 처리가 가능하며,
각 예외는 app.main의 exception handler에서 HTTP 상태 코드와
{"success": false, "message": ...} 응답으로 변환됩니다.
"""


class AppException(Exception):
    """
    애플리케이션 기본 예외.

    모든 커스텀 예외의 기본 클래스입니다.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DatabaseException(AppException):
    """
    데이터베이스 관련 예외.
    """
    pass


class MongoDBException(DatabaseException):
    """
    MongoDB 관련 예외.

    MongoDB 연결 실패, 쿼리 실패 등에 사용됩니다.
    """
    pass


class OperationFailedException(MongoDBException):
    """
    저장소 작업 실패.

    북마크 CRUD 중 pymongo 에러가 발생했을 때 사용됩니다.
    메시지는 저장소의 에러 메시지를 그대로 전달합니다. (HTTP 400)
    """
    pass


class ResourceNotFoundException(AppException):
    """
    리소스를 찾을 수 없음.

    요청한 id의 북마크가 존재하지 않을 때 사용됩니다. (HTTP 404)
    """
    pass


class ValidationException(AppException):
    """
    입력값 검증 실패.

    필수 필드 누락, URL 형식 오류, 잘못된 id 형식 등에 사용됩니다. (HTTP 400)
    """
    pass


class ForbiddenException(AppException):
    """
    소유자가 아닌 사용자의 접근.

    북마크는 존재하지만 요청한 사용자의 것이 아닐 때 사용됩니다.
    존재 여부는 숨기지 않으며 HTTP 401로 응답합니다.
    """
    pass


class UnauthorizedException(AppException):
    """
    인증 실패.

    토큰이 없거나 유효하지 않을 때 사용됩니다. (HTTP 401)
    """
    pass
