"""
Lexer: tokenizes Go source text into a stream of tokens.

Follows the Go lexical grammar closely enough to walk generated binapi
files: comments are dropped and semicolons are inserted at line ends the
way the Go compiler does it, so the parser sees explicit ``;`` tokens.
"""

from dataclasses import dataclass
from typing import List, Optional

# Token kinds.
TOK_KEYWORD = "KEYWORD"
TOK_IDENT   = "IDENT"
TOK_NUMBER  = "NUMBER"
TOK_STRING  = "STRING"   # value keeps its quotes: "..." or `...`
TOK_CHAR    = "CHAR"
TOK_SYMBOL  = "SYMBOL"
TOK_EOF     = "EOF"

KEYWORDS = {
    "break", "case", "chan", "const", "continue", "default", "defer",
    "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
    "interface", "map", "package", "range", "return", "select", "struct",
    "switch", "type", "var",
}

# Longest first so that greedy matching picks "<<=" over "<<" over "<".
OPERATORS = sorted([
    "<<=", ">>=", "&^=", "...",
    "&&", "||", "<-", "++", "--", "==", "!=", "<=", ">=", ":=",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<", ">>", "&^",
    "+", "-", "*", "/", "%", "&", "|", "^", "<", ">", "=", "!", "~",
    "(", ")", "[", "]", "{", "}", ",", ";", ".", ":",
], key=len, reverse=True)

# A newline after one of these ends the statement.
_SEMI_KEYWORDS = {"break", "continue", "fallthrough", "return"}
_SEMI_SYMBOLS = {"++", "--", ")", "]", "}"}


@dataclass
class Token:
    kind: str
    value: str
    line: int


def _ends_statement(tok: Optional[Token]) -> bool:
    if tok is None:
        return False
    if tok.kind in (TOK_IDENT, TOK_NUMBER, TOK_STRING, TOK_CHAR):
        return True
    if tok.kind == TOK_KEYWORD:
        return tok.value in _SEMI_KEYWORDS
    return tok.kind == TOK_SYMBOL and tok.value in _SEMI_SYMBOLS


def _scan_number(text: str, i: int) -> int:
    """Return the index just past the numeric literal starting at i."""
    n = len(text)
    is_hex = text[i:i+2] in ("0x", "0X")
    j = i
    while j < n:
        ch = text[j]
        if ch.isalnum() or ch in "_.":
            j += 1
        elif ch in "+-" and j > i and (
                text[j-1] in "pP" or (text[j-1] in "eE" and not is_hex)):
            j += 1
        else:
            break
    return j


def _scan_quoted(text: str, i: int, quote: str, line: int) -> int:
    """Return the index just past the closing quote of the literal at i."""
    n = len(text)
    j = i + 1
    while j < n:
        ch = text[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "\n":
            break
        if ch == quote:
            return j + 1
        j += 1
    kind = "string" if quote == '"' else "rune"
    raise SyntaxError(f"Line {line}: unterminated {kind} literal")


def tokenize(text: str) -> List[Token]:
    """
    Convert Go source text into a list of tokens.

    Handles: keywords, identifiers, numbers, rune and string literals
    (interpreted and raw), operators, line and block comments, whitespace
    and automatic semicolon insertion.
    Raises SyntaxError on unterminated constructs or unexpected characters.
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    n = len(text)

    def newline():
        if tokens and _ends_statement(tokens[-1]):
            tokens.append(Token(TOK_SYMBOL, ";", line))

    while i < n:
        ch = text[i]

        # Newlines
        if ch == "\n":
            newline()
            line += 1
            i += 1
            continue

        # Whitespace
        if ch in " \t\r\ufeff":
            i += 1
            continue

        # Single-line comment
        if text[i:i+2] == "//":
            while i < n and text[i] != "\n":
                i += 1
            continue

        # Block comment; one spanning lines acts like a newline
        if text[i:i+2] == "/*":
            end = text.find("*/", i + 2)
            if end == -1:
                raise SyntaxError(f"Line {line}: unterminated block comment")
            newlines = text[i:end+2].count("\n")
            if newlines:
                newline()
            line += newlines
            i = end + 2
            continue

        # Raw string
        if ch == "`":
            end = text.find("`", i + 1)
            if end == -1:
                raise SyntaxError(f"Line {line}: unterminated raw string")
            tokens.append(Token(TOK_STRING, text[i:end+1], line))
            line += text[i:end+1].count("\n")
            i = end + 1
            continue

        # Interpreted string / rune
        if ch in "\"'":
            j = _scan_quoted(text, i, ch, line)
            kind = TOK_STRING if ch == '"' else TOK_CHAR
            tokens.append(Token(kind, text[i:j], line))
            i = j
            continue

        # Number (including ".5")
        if ch.isdigit() or (ch == "." and i + 1 < n and text[i+1].isdigit()):
            j = _scan_number(text, i)
            tokens.append(Token(TOK_NUMBER, text[i:j], line))
            i = j
            continue

        # Identifier / keyword
        if ch.isalpha() or ch == "_":
            j = i
            while j < n and (text[j].isalnum() or text[j] == "_"):
                j += 1
            word = text[i:j]
            kind = TOK_KEYWORD if word in KEYWORDS else TOK_IDENT
            tokens.append(Token(kind, word, line))
            i = j
            continue

        # Operators and punctuation
        for op in OPERATORS:
            if text.startswith(op, i):
                tokens.append(Token(TOK_SYMBOL, op, line))
                i += len(op)
                break
        else:
            raise SyntaxError(f"Line {line}: unexpected character '{ch}'")

    newline()
    tokens.append(Token(TOK_EOF, "", line))
    return tokens
