"""
Code Normalizer - canonical form for loosely formatted cabinet codes.

Codes arrive from OCR'd order sheets with symbol misreads, stray spaces,
zero padding and cosmetic suffixes. ``normalize_code`` turns them into the
canonical form used for catalog comparison and display.
"""
import re


# Applied after upper-casing, so the mis-decoded euro sign "â‚¬" arrives as "Â‚¬"
_OCR_SYMBOLS = (
    ('$', 'B'),       # 3D$ -> 3DB
    ('Â‚¬', 'E'),
    ('€', 'E'),
    ('@', '0'),
)

_WHITESPACE = re.compile(r'\s+')
_SPURIOUS_TEN = re.compile(r'^([A-Z]+)10(\d{2})')
_SPURIOUS_ZERO = re.compile(r'^([A-Z]+)0(\d{2})')
_DIRECTIONAL = re.compile(r'(?<=\d)-?(?:LH|RH|L|R)$')
_FINISHED_END = re.compile(r'-?FE[LR]?$')


def _normalize_once(code: str) -> str:
    code = code.upper().strip()

    for symbol, replacement in _OCR_SYMBOLS:
        code = code.replace(symbol, replacement)

    code = _WHITESPACE.sub('', code)

    # "BD1015" -> "BD15": a pipe read as 1 before a zero-padded width
    code = _SPURIOUS_TEN.sub(r'\1\2', code)
    # "B015" -> "B15"
    code = _SPURIOUS_ZERO.sub(r'\1\2', code)

    code = re.sub(r'-?2B$', '', code)
    code = re.sub(r'-?BUTT$', '', code)

    # Only after a digit: VDB27AH-3 keeps its drawer count
    code = _DIRECTIONAL.sub('', code)

    code = _FINISHED_END.sub('', code)
    return code


def normalize_code(raw: str) -> str:
    """
    Canonicalize a raw cabinet code.

    Steps run in order: upper-case/trim, OCR symbol repair, whitespace
    removal, zero-pad repair, cosmetic suffix strip (-2B, -BUTT),
    directional strip (-L/-R/-LH/-RH after a digit) and finished-end strip
    (-FE/-FEL/-FER). The pipeline repeats until the code stops changing,
    so the result is stable under re-normalization.
    """
    if not raw:
        return ""
    code = str(raw)
    while True:
        cleaned = _normalize_once(code)
        if cleaned == code:
            return cleaned
        code = cleaned


def normalize_catalog_key(raw) -> str:
    """Lookup form of a catalog SKU: upper case, plain dashes, no whitespace."""
    if raw is None:
        return ""
    key = str(raw).strip().upper()
    key = key.replace('–', '-').replace('—', '-')
    return _WHITESPACE.sub('', key)
