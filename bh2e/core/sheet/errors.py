"""시트 조작 에러 분류

모든 실패는 국소적이며 시트를 깨뜨리지 않는다.
UI 진입점(SheetService)이 종류별 로그 레벨로 기록하고 삼킨다.
"""


class SheetError(Exception):
    """시트 엔진 에러 기반 클래스"""


class NotFound(SheetError):
    """아이템 또는 소유 액터를 찾지 못함. error 로그, 변경 없음."""


class NotEligible(SheetError):
    """필요한 자원 하위 레코드가 없거나 상태가 조작을 허용하지 않음. warning 로그."""


class NoUsageDie(NotEligible):
    """사용 주사위가 없는 아이템에 사용 주사위 조작 시도"""


class InvalidLevel(SheetError):
    """마법 아이템 레벨이 지원 범위를 벗어남. 뷰에서 제외, error 로그."""


class UnknownVariant(SheetError):
    """인식하지 못한 아이템 타입/마법 종류/능력치 값. warning 로그."""


class StoreError(SheetError):
    """저장소 쓰기 실패. 재시도 없음."""
