# 시트 기록 엔진에서 올라오는 예외 모음


class SheetWriteError(Exception):
    pass


class ValueNotFound(SheetWriteError):
    """범위 안에서 찾는 값이 없을 때."""


class AnchorNotFound(SheetWriteError):
    """기록 기준 셀(앵커)을 확정하지 못했을 때. 해당 호출은 쓰기 없이 종료."""


class DateNotFound(AnchorNotFound):
    pass


class ManagerNotFound(AnchorNotFound):
    """strict 모드에서 담당자 행을 못 찾았을 때."""


class LayoutError(SheetWriteError, ValueError):
    """레이아웃 설정 오류. 쓰기 전에 바로 실패시킨다."""
