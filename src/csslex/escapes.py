"""Backslash escape decoding and re-escaping of CSS names and strings."""

from __future__ import annotations

from csslex.tokens import is_digit, is_hex_digit, is_name_letter, is_nonascii, is_whitespace

_MAX_HEX_DIGITS = 6
_REPLACEMENT_CHAR = "\ufffd"


def unbackslash(s: str, is_string: bool = False) -> str:
    """Decode CSS backslash escapes in s.

    Rules (CSS2 4.1.3):
    1. A backslash followed by 1-6 hex digits is the code point they spell.
       With fewer than six digits, one following whitespace character is
       consumed as the terminator.
    2. In strings, a backslash before a newline (LF or CRLF) is a line
       continuation and contributes nothing. A CR not followed by LF is
       dropped as well.
    3. A backslash before any other character stands for that character.
    4. A trailing backslash with nothing after it is kept as-is.
    """
    if "\\" not in s:
        return s

    out: list[str] = []
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        i += 1
        if ch != "\\":
            out.append(ch)
            continue

        if i >= n:
            out.append("\\")
            break
        ch = s[i]
        i += 1

        if is_string:
            if ch == "\n":
                continue
            if ch == "\r":
                if i >= n:
                    out.append("\\")
                    break
                if s[i] == "\n":
                    i += 1
                continue

        if is_hex_digit(ch):
            start = i - 1
            while i < n and i - start < _MAX_HEX_DIGITS and is_hex_digit(s[i]):
                i += 1
            digits = s[start:i]
            if len(digits) < _MAX_HEX_DIGITS and i < n and is_whitespace(s[i]):
                i += 1
            out.append(_decode_hex(digits))
        else:
            out.append(ch)

    return "".join(out)


def _decode_hex(digits: str) -> str:
    codepoint = int(digits, 16)
    if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return _REPLACEMENT_CHAR
    return chr(codepoint)


def hex_escape(ch: str) -> str:
    """Return the ``\\<hex>`` escape for ch, space-terminated when shorter than six digits."""
    digits = f"{ord(ch):x}"
    if len(digits) < _MAX_HEX_DIGITS:
        return f"\\{digits} "
    return f"\\{digits}"


def _escape_char(ch: str) -> str:
    # Printable characters survive a plain backslash; anything the escape
    # production cannot carry needs the hex form.
    o = ord(ch)
    if 0x20 <= o <= 0x7E or is_nonascii(ch):
        return "\\" + ch
    return hex_escape(ch)


def escape_name(value: str) -> str:
    """Escape value for use as a name (the part of a HASH after ``#``)."""
    out: list[str] = []
    for ch in value:
        if is_name_letter(ch) or is_digit(ch) or (ord(ch) > 0xFF and is_nonascii(ch)):
            out.append(ch)
        else:
            out.append(_escape_char(ch))
    return "".join(out)


def escape_ident(value: str) -> str:
    """Escape value so it scans back as a single identifier.

    Letters, ``_``, ``-`` and non-ASCII characters above U+00FF pass through;
    everything else gets a backslash. Digits are only escaped where an
    identifier cannot start with one, and so is a second leading dash.
    """
    if value == "-":
        return "\\-"
    lead = 1 if value.startswith("-") else 0
    out: list[str] = []
    for i, ch in enumerate(value):
        if is_name_letter(ch):
            if ch == "-" and i == 1 and lead:
                out.append("\\-")
            else:
                out.append(ch)
        elif is_digit(ch):
            out.append(hex_escape(ch) if i == lead else ch)
        elif ord(ch) > 0xFF and is_nonascii(ch):
            out.append(ch)
        else:
            out.append(_escape_char(ch))
    return "".join(out)


def escape_string(value: str, quote: str = '"') -> str:
    """Escape value for use between a pair of quote characters."""
    out: list[str] = []
    for ch in value:
        if ch == quote or ch == "\\":
            out.append("\\" + ch)
        elif ch == "\x7f" or (ord(ch) > 0x7F and not is_nonascii(ch)):
            out.append(hex_escape(ch))
        elif ch >= "#" or ch == "\t" or ch == "!":
            out.append(ch)
        elif ch == " " or ch == '"':
            out.append("\\" + ch)
        else:
            out.append(hex_escape(ch))
    return "".join(out)
