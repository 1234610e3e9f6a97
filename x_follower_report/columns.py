import re

COLUMN_RE = re.compile(r"[A-Z]+")


# 열 문자를 1-based 열 번호로 변환 (A -> 1, Z -> 26, AA -> 27)
def letter_to_index(letter: str) -> int:
    letter = (letter or "").strip().upper()
    if not COLUMN_RE.fullmatch(letter):
        raise ValueError(f"잘못된 컬럼 문자: {letter!r}")
    n = 0
    for ch in letter:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


# 1-based 열 번호를 열 문자로 변환 (1 -> A, 28 -> AB)
def column_letter(index: int) -> str:
    if index < 1:
        raise ValueError("column index는 1 이상이어야 합니다.")
    n = index
    s = ""
    while n > 0:
        n, r = divmod(n - 1, 26)
        s = chr(65 + r) + s
    return s


def cell_address(row: int, col: int) -> str:
    return f"{column_letter(col)}{row}"
