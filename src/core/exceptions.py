"""앱 전역 커스텀 예외 클래스.

AppException을 상속하면 전역 핸들러(error_handlers.py)가 자동으로
{"error_code": "...", "message": "..."} 형식의 JSON 응답을 생성한다.
extra가 있으면 같은 응답 본문에 함께 실린다 (예: 중복 날짜의 conflict 정보).
"""


class AppException(Exception):
    """앱 전역 베이스 예외.

    서브클래스에서 status_code, error_code, message를 클래스 변수로 정의하면
    전역 핸들러가 해당 값을 읽어 HTTP 응답을 생성한다.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "서버 내부 오류가 발생했습니다"

    def __init__(self, message: str | None = None, **extra):
        if message:
            self.message = message
        self.extra = extra
        super().__init__(self.message)


# --- 인증 관련 ---


class DuplicateEmail(AppException):
    status_code = 409
    error_code = "DUPLICATE_EMAIL"
    message = "이미 등록된 이메일입니다"


class InvalidCredentials(AppException):
    status_code = 401
    error_code = "INVALID_CREDENTIALS"
    message = "이메일 또는 패스워드가 올바르지 않습니다"


class InvalidToken(AppException):
    status_code = 401
    error_code = "INVALID_TOKEN"
    message = "유효하지 않거나 만료된 토큰입니다"


class UserNotAllowed(AppException):
    status_code = 403
    error_code = "USER_NOT_ALLOWED"
    message = "아직 접근이 허용되지 않은 이메일입니다"


class Forbidden(AppException):
    status_code = 403
    error_code = "FORBIDDEN"
    message = "접근 권한이 없습니다"


# --- 입력 검증 ---


class MissingField(AppException):
    status_code = 400
    error_code = "MISSING_FIELD"
    message = "모든 필수 항목을 입력해 주세요"


class EmptyMachineName(AppException):
    status_code = 400
    error_code = "EMPTY_MACHINE_NAME"
    message = "기계 이름을 입력해 주세요"


class InvalidTimeFormat(AppException):
    status_code = 400
    error_code = "INVALID_TIME_FORMAT"
    message = "시간은 HH:MM 형식으로 입력해 주세요 (예: 08:00)"


class InvalidTimeRange(AppException):
    status_code = 400
    error_code = "INVALID_TIME_RANGE"
    message = "종료 시간은 시작 시간보다 늦어야 합니다"


class DuplicateDayRecord(AppException):
    status_code = 409
    error_code = "DUPLICATE_DAY"
    message = "해당 날짜에 이미 근무 시간이 기록되어 있습니다"


# --- 작업(Job) 관련 ---


class JobNotFound(AppException):
    status_code = 404
    error_code = "JOB_NOT_FOUND"
    message = "작업을 찾을 수 없습니다"


class JobAlreadyClosed(AppException):
    status_code = 409
    error_code = "JOB_ALREADY_CLOSED"
    message = "이미 종료된 작업입니다"


class InvalidJobUpdate(AppException):
    status_code = 400
    error_code = "INVALID_JOB_UPDATE"
    message = "변경할 수 없는 작업 항목입니다"


class InvalidImageList(AppException):
    status_code = 400
    error_code = "INVALID_IMAGE_LIST"
    message = "지원하지 않는 이미지 목록입니다"


class ImageNotFound(AppException):
    status_code = 404
    error_code = "IMAGE_NOT_FOUND"
    message = "이미지를 찾을 수 없습니다"


# --- 근무 기록 관련 ---


class TimeRecordNotFound(AppException):
    status_code = 404
    error_code = "TIME_RECORD_NOT_FOUND"
    message = "근무 기록을 찾을 수 없습니다"
