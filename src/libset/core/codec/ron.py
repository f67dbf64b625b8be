from __future__ import annotations

"""
RON (Rusty Object Notation) Text Codec.

Maps RON documents onto plain Python values so RON files can be handled
by the store like TOML and JSON:

- unit '()' and 'None' -> None, 'Some(x)' -> x
- structs 'Name(field: v)' / '(field: v)' -> dict, 'Name()' -> {}
- tuples '(a, b)' and lists '[a, b]' -> list
- maps '{k: v}' -> dict
- bare identifiers (unit variants) -> str

The emitter produces the pretty layout (one item per line, trailing
commas). Dicts whose keys are all identifiers are written as anonymous
structs, other dicts as maps, dataclass instances as named structs.
"""

import dataclasses
import math
import re
from typing import Any, Dict, List, Optional

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INT_RE = re.compile(r"[+-]?(0x[0-9A-Fa-f_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*)")
_FLOAT_RE = re.compile(r"[+-]?([0-9][0-9_]*)?\.?[0-9_]*([eE][+-]?[0-9_]+)?")

_ESCAPES = {
    "\\": "\\\\",
    "\"": "\\\"",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}

_UNESCAPES = {
    "\\": "\\",
    "\"": "\"",
    "'": "'",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
}


class RonDecodeError(ValueError):
    """
    Raised on malformed RON input.

    Attributes:
        msg: Unformatted message.
        line: 1-based line of the failure.
        column: 1-based column of the failure.
    """

    def __init__(self, msg: str, text: str, pos: int) -> None:
        self.msg = msg
        self.line = text.count("\n", 0, pos) + 1
        self.column = pos - (text.rfind("\n", 0, pos) + 1) + 1
        super().__init__(f"{msg} at line {self.line}, column {self.column}")


# ==============================================================================
# PUBLIC API
# ==============================================================================

def loads(text: str) -> Any:
    """
    Parse a RON document into Python values.

    Raises:
        RonDecodeError: On syntax errors or trailing content.
    """
    parser = _Parser(text)
    parser.skip_attributes()
    value = parser.parse_value()
    parser.skip_ws()
    if not parser.at_end():
        parser.fail("Trailing characters after value")
    return value


def dumps(value: Any, indent: str = "    ") -> str:
    """
    Serialize a Python value as pretty RON.

    Raises:
        TypeError: For values with no RON representation.
    """
    return _emit(value, indent, 0)


# ==============================================================================
# EMITTER
# ==============================================================================

def _emit(value: Any, indent: str, depth: int) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _emit_float(value)
    if isinstance(value, str):
        return _emit_string(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        return type(value).__name__ + _emit_struct(fields, indent, depth)
    if isinstance(value, dict):
        if value and all(isinstance(k, str) and _IDENT_RE.fullmatch(k) for k in value):
            return _emit_struct(value, indent, depth)
        return _emit_map(value, indent, depth)
    if isinstance(value, (list, tuple)):
        return _emit_seq(value, indent, depth)
    raise TypeError(f"Object of type {type(value).__name__} is not RON serializable")


def _emit_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = repr(value)
    if "." not in text and "e" not in text and "E" not in text:
        text += ".0"
    return text


def _emit_string(value: str) -> str:
    out = []
    for ch in value:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    return "\"" + "".join(out) + "\""


def _emit_block(open_: str, close: str, items: List[str], indent: str, depth: int) -> str:
    if not items:
        return open_ + close
    pad = indent * (depth + 1)
    body = "".join(f"{pad}{item},\n" for item in items)
    return f"{open_}\n{body}{indent * depth}{close}"


def _emit_struct(fields: Dict[str, Any], indent: str, depth: int) -> str:
    items = [f"{k}: {_emit(v, indent, depth + 1)}" for k, v in fields.items()]
    return _emit_block("(", ")", items, indent, depth)


def _emit_map(mapping: Dict[Any, Any], indent: str, depth: int) -> str:
    items = [
        f"{_emit(k, indent, depth + 1)}: {_emit(v, indent, depth + 1)}"
        for k, v in mapping.items()
    ]
    return _emit_block("{", "}", items, indent, depth)


def _emit_seq(seq: Any, indent: str, depth: int) -> str:
    items = [_emit(v, indent, depth + 1) for v in seq]
    return _emit_block("[", "]", items, indent, depth)


# ==============================================================================
# PARSER
# ==============================================================================

class _Parser:
    """Recursive-descent reader over a RON string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # -------------------------------------------------------------------------
    # Low-level cursor helpers
    # -------------------------------------------------------------------------

    def fail(self, msg: str) -> None:
        raise RonDecodeError(msg, self.text, self.pos)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        return self.text[idx] if idx < len(self.text) else ""

    def expect(self, ch: str) -> None:
        self.skip_ws()
        if self.peek() != ch:
            self.fail(f"Expected '{ch}'")
        self.pos += 1

    def skip_ws(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end < 0 else end + 1
            elif text.startswith("/*", self.pos):
                self._skip_block_comment()
            else:
                break

    def _skip_block_comment(self) -> None:
        # RON block comments nest
        depth = 0
        text = self.text
        while self.pos < len(text):
            if text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        self.fail("Unterminated block comment")

    def skip_attributes(self) -> None:
        """Skip leading '#![enable(...)]' extension attributes."""
        self.skip_ws()
        while self.text.startswith("#!", self.pos):
            end = self.text.find("]", self.pos)
            if end < 0:
                self.fail("Unterminated attribute")
            self.pos = end + 1
            self.skip_ws()

    def read_ident(self) -> Optional[str]:
        # Raw identifiers: r#name
        if self.text.startswith("r#", self.pos) and _IDENT_RE.match(self.text, self.pos + 2):
            self.pos += 2
        match = _IDENT_RE.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        return match.group(0)

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    def parse_value(self) -> Any:
        self.skip_ws()
        ch = self.peek()
        if not ch:
            self.fail("Unexpected end of input")
        if ch == "\"":
            return self.parse_string()
        if ch == "r" and self._at_raw_string():
            return self.parse_raw_string()
        if ch == "'":
            return self.parse_char()
        if ch == "[":
            return self.parse_list()
        if ch == "{":
            return self.parse_map()
        if ch == "(":
            return self.parse_parenthesized()
        if ch.isdigit() or ch in "+-.":
            return self.parse_number()
        return self.parse_identifier_value()

    def _at_raw_string(self) -> bool:
        idx = self.pos + 1
        while self.text[idx:idx + 1] == "#":
            idx += 1
        return self.text[idx:idx + 1] == "\""

    def parse_identifier_value(self) -> Any:
        start = self.pos
        ident = self.read_ident()
        if ident is None:
            self.fail(f"Unexpected character '{self.peek()}'")
        if ident == "true":
            return True
        if ident == "false":
            return False
        if ident == "None":
            return None
        if ident == "inf":
            return math.inf
        if ident == "NaN":
            return math.nan
        if ident == "Some":
            self.expect("(")
            value = self.parse_value()
            self.skip_ws()
            if self.peek() == ",":
                self.pos += 1
            self.expect(")")
            return value

        # Named struct / tuple struct / enum variant with data
        after_name = self.pos
        self.skip_ws()
        if self.peek() == "(":
            value = self.parse_parenthesized()
            # 'Name()' is a struct without fields, not the unit value
            return {} if value is None else value
        if self.peek() == "{":
            self.pos = start
            self.fail("Named maps are not valid RON")
        self.pos = after_name
        return ident

    def parse_parenthesized(self) -> Any:
        """'()' unit, '(name: v, ...)' struct or '(a, b)' tuple."""
        self.expect("(")
        self.skip_ws()
        if self.peek() == ")":
            self.pos += 1
            return None
        if self._looks_like_field():
            return self._parse_struct_body()
        return self._parse_seq_body(")")

    def _looks_like_field(self) -> bool:
        saved = self.pos
        try:
            if self.read_ident() is None:
                return False
            self.skip_ws()
            return self.peek() == ":" and self.peek(1) != ":"
        finally:
            self.pos = saved

    def _parse_struct_body(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        while True:
            self.skip_ws()
            if self.peek() == ")":
                self.pos += 1
                return fields
            name = self.read_ident()
            if name is None:
                self.fail("Expected field name")
            self.expect(":")
            fields[name] = self.parse_value()
            if not self._comma_or_close(")"):
                return fields

    def _parse_seq_body(self, close: str) -> List[Any]:
        items: List[Any] = []
        while True:
            self.skip_ws()
            if self.peek() == close:
                self.pos += 1
                return items
            items.append(self.parse_value())
            if not self._comma_or_close(close):
                return items

    def _comma_or_close(self, close: str) -> bool:
        """Consume a separator; False when the closing token was consumed."""
        self.skip_ws()
        ch = self.peek()
        if ch == ",":
            self.pos += 1
            return True
        if ch == close:
            self.pos += 1
            return False
        self.fail(f"Expected ',' or '{close}'")
        return False

    def parse_list(self) -> List[Any]:
        self.expect("[")
        return self._parse_seq_body("]")

    def parse_map(self) -> Dict[Any, Any]:
        self.expect("{")
        result: Dict[Any, Any] = {}
        while True:
            self.skip_ws()
            if self.peek() == "}":
                self.pos += 1
                return result
            key = _hashable(self.parse_value())
            self.expect(":")
            result[key] = self.parse_value()
            if not self._comma_or_close("}"):
                return result

    # -------------------------------------------------------------------------
    # Scalars
    # -------------------------------------------------------------------------

    def parse_number(self) -> Any:
        text = self.text
        start = self.pos
        sign = ""
        if self.peek() in "+-":
            sign = self.peek()
            if text.startswith("inf", start + 1):
                self.pos = start + 4
                return -math.inf if sign == "-" else math.inf
            if text.startswith("NaN", start + 1):
                self.pos = start + 4
                return math.nan

        float_match = _FLOAT_RE.match(text, start)
        int_match = _INT_RE.match(text, start)
        float_text = float_match.group(0) if float_match else ""
        int_text = int_match.group(0) if int_match else ""

        if int_text and len(int_text) >= len(float_text):
            self.pos = int_match.end()
            return _to_int(int_text)
        if float_text and any(c.isdigit() for c in float_text):
            self.pos = float_match.end()
            try:
                return float(float_text.replace("_", ""))
            except ValueError:
                self.pos = start
                self.fail(f"Invalid number '{float_text}'")
        self.fail("Invalid number")
        return None

    def parse_string(self) -> str:
        self.pos += 1
        out: List[str] = []
        text = self.text
        while True:
            if self.pos >= len(text):
                self.fail("Unterminated string")
            ch = text[self.pos]
            if ch == "\"":
                self.pos += 1
                return "".join(out)
            if ch == "\\":
                out.append(self._parse_escape())
            else:
                out.append(ch)
                self.pos += 1

    def parse_raw_string(self) -> str:
        self.pos += 1
        hashes = 0
        while self.peek() == "#":
            hashes += 1
            self.pos += 1
        if self.peek() != "\"":
            self.fail("Expected '\"' in raw string")
        self.pos += 1
        terminator = "\"" + "#" * hashes
        end = self.text.find(terminator, self.pos)
        if end < 0:
            self.fail("Unterminated raw string")
        value = self.text[self.pos:end]
        self.pos = end + len(terminator)
        return value

    def parse_char(self) -> str:
        self.pos += 1
        if self.peek() == "\\":
            value = self._parse_escape()
        else:
            value = self.peek()
            self.pos += 1
        if self.peek() != "'":
            self.fail("Unterminated char literal")
        self.pos += 1
        return value

    def _parse_escape(self) -> str:
        self.pos += 1
        code = self.peek()
        if code in _UNESCAPES:
            self.pos += 1
            return _UNESCAPES[code]
        if code == "x":
            return self._read_hex(self.pos + 1, 2)
        if code == "u":
            if self.peek(1) == "{":
                end = self.text.find("}", self.pos)
                if end < 0:
                    self.fail("Unterminated unicode escape")
                digits = self.text[self.pos + 2:end]
                try:
                    value = chr(int(digits, 16))
                except ValueError:
                    self.fail("Invalid unicode escape")
                self.pos = end + 1
                return value
            return self._read_hex(self.pos + 1, 4)
        self.fail(f"Unknown escape '\\{code}'")
        return ""

    def _read_hex(self, start: int, width: int) -> str:
        digits = self.text[start:start + width]
        try:
            value = chr(int(digits, 16))
        except ValueError:
            self.fail("Invalid hex escape")
        self.pos = start + width
        return value


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _to_int(text: str) -> int:
    clean = text.replace("_", "")
    negative = clean.startswith("-")
    body = clean.lstrip("+-")
    if body[:2] in ("0x", "0o", "0b"):
        value = int(body, 0)
    else:
        value = int(body)
    return -value if negative else value


def _hashable(value: Any) -> Any:
    """Map keys must be hashable; sequences become tuples."""
    if isinstance(value, list):
        return tuple(_hashable(v) for v in value)
    if isinstance(value, dict):
        return tuple((k, _hashable(v)) for k, v in value.items())
    return value

