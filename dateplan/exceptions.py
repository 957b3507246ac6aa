"""Error types surfaced by the calendar engine.

Each error carries the HTTP status and the client-facing code/message pair
that the exception handlers in ``dateplan.main`` put in the response envelope.
"""
import enum


class Resource(str, enum.Enum):
    MEMBER = "MEMBER"
    COUPLE = "COUPLE"


class Operation(str, enum.Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"


class DetailMessage:
    INVALID_INPUT_VALUE = "입력값이 올바르지 않습니다."
    INVALID_DATE_PATTERN = "날짜는 yyyy-MM-dd 형식으로 입력해 주세요."
    INVALID_DATE_TIME_RANGE = "종료 일자가 시작 일자보다 빠를 수 없습니다."
    INVALID_REPEAT_END_TIME = "반복 일정은 반복 종료 일자를 시작 일자 이후로 입력해 주세요."
    INVALID_CALENDER_TIME_RANGE = "캘린더 종료일 이후의 날짜는 입력할 수 없습니다."
    INVALID_SCHEDULE_TITLE = "일정 제목은 1-15자로 입력해 주세요."
    INVALID_SCHEDULE_CONTENT = "일정 내용은 최대 100자까지 입력할 수 있습니다."
    INVALID_SCHEDULE_LOCATION = "일정 장소는 최대 20자까지 입력할 수 있습니다."
    INVALID_REPEAT_RULE = "반복 규칙은 N, D, W, M, Y 중 하나로 입력해 주세요."
    INVALID_ANNIVERSARY_TITLE = "기념일 제목은 2-15자로 입력해 주세요."
    INVALID_ANNIVERSARY_CONTENT = "기념일 내용은 최대 100자까지 입력할 수 있습니다."
    INVALID_ANNIVERSARY_REPEAT_RULE = "기념일 반복 규칙은 NONE, YEAR 중 하나로 입력해 주세요."
    MEMBER_NOT_FOUND = "유저가 존재하지 않습니다."
    SCHEDULE_NOT_FOUND = "일정이 존재하지 않습니다."
    COUPLE_NOT_CONNECTED = "현재 커플이 연결되어 있지 않습니다."
    ALREADY_CONNECTED = "이미 상대방이 연결되어 있습니다."
    SELF_CONNECTION_NOT_ALLOWED = "자기 자신과 연결할 수 없습니다."
    NO_PERMISSION = "{resource}에 대한 {operation} 권한이 없습니다."
    SERVER_ERROR = "서버 내부에 문제가 생겼습니다."


class DateplanError(Exception):
    status_code = 500
    code = "S001"

    def __init__(self, message: str = DetailMessage.SERVER_ERROR):
        super().__init__(message)
        self.message = message


class InvalidInputError(DateplanError):
    status_code = 400
    code = "C012"

    def __init__(self, message: str = DetailMessage.INVALID_INPUT_VALUE):
        super().__init__(message)


class InvalidDateTimeRangeError(InvalidInputError):
    def __init__(self, message: str = DetailMessage.INVALID_DATE_TIME_RANGE):
        super().__init__(message)


class MemberNotFoundError(DateplanError):
    status_code = 404
    code = "C006"

    def __init__(self):
        super().__init__(DetailMessage.MEMBER_NOT_FOUND)


class ScheduleNotFoundError(DateplanError):
    status_code = 404
    code = "C022"

    def __init__(self):
        super().__init__(DetailMessage.SCHEDULE_NOT_FOUND)


class MemberNotConnectedError(DateplanError):
    status_code = 400
    code = "C021"

    def __init__(self):
        super().__init__(DetailMessage.COUPLE_NOT_CONNECTED)


class NoPermissionError(DateplanError):
    status_code = 403
    code = "A001"

    def __init__(self, resource: Resource, operation: Operation):
        super().__init__(
            DetailMessage.NO_PERMISSION.format(
                resource=resource.value, operation=operation.value
            )
        )
        self.resource = resource
        self.operation = operation


class AlreadyConnectedError(DateplanError):
    status_code = 409
    code = "C017"

    def __init__(self):
        super().__init__(DetailMessage.ALREADY_CONNECTED)


class SelfConnectionNotAllowedError(DateplanError):
    status_code = 400
    code = "C018"

    def __init__(self):
        super().__init__(DetailMessage.SELF_CONNECTION_NOT_ALLOWED)
