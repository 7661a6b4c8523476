"""
Parser: recursive-descent parser for the declarations of a Go source file.

Only ``type`` declarations are turned into AST nodes. Imports, constants,
variables and functions are skipped token by token with bracket balancing,
so function bodies never need to be understood.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .lexer import Token, TOK_KEYWORD, TOK_IDENT, TOK_STRING, TOK_SYMBOL, TOK_EOF


# ── AST nodes ────────────────────────────────────────────────────────

@dataclass
class NamedType:
    name: str                 # "uint32", "MacAddress"


@dataclass
class QualifiedType:
    package: str              # "ip_types"
    name: str                 # "Address"


@dataclass
class ArrayType:
    elem: 'TypeExpr'
    length: Optional[str] = None   # None for slices, "6" or "..." for arrays


@dataclass
class MapType:
    key: 'TypeExpr'
    value: 'TypeExpr'


@dataclass
class PointerType:
    elem: 'TypeExpr'


@dataclass
class StructField:
    names: List[str]          # empty for embedded fields
    type: 'TypeExpr'
    tag: Optional[str] = None  # raw literal, quotes included


@dataclass
class StructType:
    fields: List[StructField] = field(default_factory=list)


@dataclass
class OtherType:
    """A type the generator has no use for (func, chan, interface, ...)."""
    kind: str


TypeExpr = Union[NamedType, QualifiedType, ArrayType, MapType, PointerType,
                 StructType, OtherType]


@dataclass
class TypeSpec:
    name: str
    type: TypeExpr
    line: int
    is_alias: bool = False


@dataclass
class GoFile:
    package: str
    types: List[TypeSpec] = field(default_factory=list)


_OPEN = {"(": ")", "[": "]", "{": "}"}


# ── Parser ───────────────────────────────────────────────────────────

class Parser:
    """
    Recursive-descent parser for Go source files.

    Expects a token list produced by ``tokenize()``. Builds a ``GoFile``
    holding every type declaration, top-level or grouped.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    # ── Token helpers ────────────────────────────────────────────────

    def peek(self, offset: int = 0) -> Token:
        idx = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != TOK_EOF:
            self.pos += 1
        return tok

    def expect(self, kind: str, value: Optional[str] = None) -> Token:
        tok = self.advance()
        if tok.kind != kind:
            raise SyntaxError(
                f"Line {tok.line}: expected {kind}"
                f"{f' {value!r}' if value else ''}, got {tok.kind} {tok.value!r}")
        if value is not None and tok.value != value:
            raise SyntaxError(
                f"Line {tok.line}: expected {value!r}, got {tok.value!r}")
        return tok

    def at(self, value: str) -> bool:
        tok = self.peek()
        return tok.kind in (TOK_SYMBOL, TOK_KEYWORD) and tok.value == value

    def accept(self, value: str) -> bool:
        if self.at(value):
            self.advance()
            return True
        return False

    def skip_semicolons(self):
        while self.accept(";"):
            pass

    # ── Top-level ────────────────────────────────────────────────────

    def parse(self) -> GoFile:
        self.skip_semicolons()
        self.expect(TOK_KEYWORD, "package")
        go_file = GoFile(package=self.expect(TOK_IDENT).value)
        self._end_decl()

        while self.peek().kind != TOK_EOF:
            tok = self.peek()
            if tok.kind == TOK_KEYWORD and tok.value == "type":
                self.advance()
                go_file.types.extend(self._parse_type_decl())
                self._end_decl()
            elif tok.kind == TOK_KEYWORD and tok.value in ("import", "const", "var", "func"):
                self._skip_decl()
            elif self.at(";"):
                self.advance()
            else:
                raise SyntaxError(
                    f"Line {tok.line}: expected declaration, got {tok.value!r}")

        return go_file

    def _end_decl(self):
        if self.peek().kind == TOK_EOF:
            return
        self.expect(TOK_SYMBOL, ";")

    def _skip_decl(self):
        """Skip one declaration: everything up to a ';' outside brackets."""
        stack: List[str] = []
        while True:
            tok = self.peek()
            if tok.kind == TOK_EOF:
                if stack:
                    raise SyntaxError(f"Line {tok.line}: unexpected end of file")
                return
            self.advance()
            if tok.kind != TOK_SYMBOL:
                continue
            if tok.value in _OPEN:
                stack.append(_OPEN[tok.value])
            elif tok.value in (")", "]", "}"):
                if not stack or stack.pop() != tok.value:
                    raise SyntaxError(f"Line {tok.line}: unbalanced {tok.value!r}")
            elif tok.value == ";" and not stack:
                return

    def _skip_balanced(self, close: str):
        """Skip tokens after an opening bracket up to its matching ``close``."""
        stack = [close]
        while stack:
            tok = self.advance()
            if tok.kind == TOK_EOF:
                raise SyntaxError(f"Line {tok.line}: unexpected end of file")
            if tok.kind != TOK_SYMBOL:
                continue
            if tok.value in _OPEN:
                stack.append(_OPEN[tok.value])
            elif tok.value in (")", "]", "}"):
                if stack.pop() != tok.value:
                    raise SyntaxError(f"Line {tok.line}: unbalanced {tok.value!r}")

    # ── Type declarations ────────────────────────────────────────────

    def _parse_type_decl(self) -> List[TypeSpec]:
        if not self.accept("("):
            return [self._parse_type_spec()]

        specs: List[TypeSpec] = []
        self.skip_semicolons()
        while not self.at(")"):
            specs.append(self._parse_type_spec())
            if not self.at(")"):
                self.expect(TOK_SYMBOL, ";")
            self.skip_semicolons()
        self.expect(TOK_SYMBOL, ")")
        return specs

    def _parse_type_spec(self) -> TypeSpec:
        name_tok = self.expect(TOK_IDENT)
        is_alias = self.accept("=")
        return TypeSpec(name=name_tok.value, type=self._parse_type(),
                        line=name_tok.line, is_alias=is_alias)

    # ── Type expressions ─────────────────────────────────────────────

    def _parse_type(self) -> TypeExpr:
        tok = self.peek()

        if tok.kind == TOK_IDENT:
            self.advance()
            if self.accept("."):
                typ = QualifiedType(package=tok.value,
                                    name=self.expect(TOK_IDENT).value)
            else:
                typ = NamedType(name=tok.value)
            if self.accept("["):
                # Generic instantiation, e.g. List[T]; arguments are ignored.
                self._skip_balanced("]")
            return typ

        if tok.kind == TOK_SYMBOL:
            if tok.value == "*":
                self.advance()
                return PointerType(elem=self._parse_type())
            if tok.value == "[":
                return self._parse_array()
            if tok.value == "(":
                self.advance()
                self._parse_type()
                self.expect(TOK_SYMBOL, ")")
                return OtherType(kind="paren")
            if tok.value == "<-":
                self.advance()
                self.expect(TOK_KEYWORD, "chan")
                self._parse_type()
                return OtherType(kind="chan")

        if tok.kind == TOK_KEYWORD:
            if tok.value == "map":
                self.advance()
                self.expect(TOK_SYMBOL, "[")
                key = self._parse_type()
                self.expect(TOK_SYMBOL, "]")
                return MapType(key=key, value=self._parse_type())
            if tok.value == "struct":
                return self._parse_struct()
            if tok.value == "interface":
                self.advance()
                self.expect(TOK_SYMBOL, "{")
                self._skip_balanced("}")
                return OtherType(kind="interface")
            if tok.value == "func":
                self.advance()
                self._parse_signature()
                return OtherType(kind="func")
            if tok.value == "chan":
                self.advance()
                self.accept("<-")
                self._parse_type()
                return OtherType(kind="chan")

        raise SyntaxError(f"Line {tok.line}: expected type, got {tok.value!r}")

    def _parse_array(self) -> ArrayType:
        self.expect(TOK_SYMBOL, "[")
        if self.accept("]"):
            return ArrayType(elem=self._parse_type())

        # Array length is a constant expression; keep its text verbatim.
        start = self.pos
        self._skip_balanced("]")
        length = "".join(t.value for t in self.tokens[start:self.pos - 1])
        return ArrayType(elem=self._parse_type(), length=length)

    def _parse_signature(self):
        self.expect(TOK_SYMBOL, "(")
        self._skip_balanced(")")
        if self.accept("("):
            self._skip_balanced(")")
        elif self._starts_type():
            self._parse_type()

    def _starts_type(self) -> bool:
        tok = self.peek()
        if tok.kind == TOK_IDENT:
            return True
        if tok.kind == TOK_KEYWORD:
            return tok.value in ("map", "struct", "interface", "func", "chan")
        return tok.kind == TOK_SYMBOL and tok.value in ("*", "[", "<-")

    def _parse_struct(self) -> StructType:
        self.expect(TOK_KEYWORD, "struct")
        self.expect(TOK_SYMBOL, "{")
        fields: List[StructField] = []
        self.skip_semicolons()
        while not self.at("}"):
            fields.append(self._parse_field())
            if not self.at("}"):
                self.expect(TOK_SYMBOL, ";")
            self.skip_semicolons()
        self.expect(TOK_SYMBOL, "}")
        return StructType(fields=fields)

    def _parse_field(self) -> StructField:
        if self._is_embedded_field():
            typ = self._parse_type()
            names: List[str] = []
        else:
            names = [self.expect(TOK_IDENT).value]
            while self.accept(","):
                names.append(self.expect(TOK_IDENT).value)
            typ = self._parse_type()

        tag = None
        if self.peek().kind == TOK_STRING:
            tag = self.advance().value
        return StructField(names=names, type=typ, tag=tag)

    def _is_embedded_field(self) -> bool:
        """Embedded fields: ``T``, ``*T``, ``pkg.T``, each optionally tagged."""
        if self.at("*"):
            return True
        nxt = self.peek(1)
        if nxt.kind == TOK_STRING:
            return True
        return nxt.kind == TOK_SYMBOL and nxt.value in (".", ";", "}")
