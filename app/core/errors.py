"""이 파일은 .py 공통 예외 모듈로 오류 유형을 표준화합니다."""


class InvalidUrlError(ValueError):
    """비어 있거나 http(s)가 아닌 URL 입력에 사용합니다."""


class RuleTableError(ValueError):
    """규칙 테이블 YAML 형식이 잘못된 경우 사용합니다."""


class AdminConfigError(ValueError):
    """관리자 설정이 카테고리 스키마와 맞지 않을 때 사용합니다."""


class ScanExecutionError(RuntimeError):
    """스캔 실행 중 발생한 오류를 감싸는 예외입니다."""


class AuthError(RuntimeError):
    """로그인 실패, 잘못된 토큰 등 인증 오류에 사용합니다."""


class PermissionDeniedError(AuthError):
    """관리자 권한이 없는 계정의 접근에 사용합니다."""


class QuotaExceededError(RuntimeError):
    """요금제의 월간 스캔 한도를 초과했거나 계정이 정지된 경우 사용합니다."""


class NotFoundError(KeyError):
    """백엔드에서 레코드를 찾지 못한 경우 사용합니다."""


class ScanConflictError(RuntimeError):
    """같은 소유자의 스캔이 이미 진행 중일 때 사용합니다."""
