"""Tokenizer for the SQL dialect."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum


class TokenKind(IntEnum):
    """Token kinds; single-character operators use their character code."""

    LPAREN = ord("(")
    RPAREN = ord(")")
    STAR = ord("*")
    COMMA = ord(",")
    DOT = ord(".")
    SEMICOLON = ord(";")
    LT = ord("<")
    EQ = ord("=")
    GT = ord(">")
    SHOW = 258
    TABLES = 259
    CREATE = 260
    TABLE = 261
    DROP = 262
    DESC = 263
    INSERT = 264
    INTO = 265
    VALUES = 266
    DELETE = 267
    FROM = 268
    ASC = 269
    ORDER = 270
    BY = 271
    WHERE = 272
    UPDATE = 273
    SET = 274
    SELECT = 275
    INT = 276
    CHAR = 277
    FLOAT = 278
    INDEX = 279
    AND = 280
    JOIN = 281
    EXIT = 282
    HELP = 283
    TXN_BEGIN = 284
    TXN_COMMIT = 285
    TXN_ABORT = 286
    TXN_ROLLBACK = 287
    ORDER_BY = 288
    LEQ = 289
    NEQ = 290
    GEQ = 291
    T_EOF = 292
    IDENTIFIER = 293
    VALUE_STRING = 294
    VALUE_INT = 295
    VALUE_FLOAT = 296


_KEYWORDS = {
    "SHOW": TokenKind.SHOW,
    "BEGIN": TokenKind.TXN_BEGIN,
    "COMMIT": TokenKind.TXN_COMMIT,
    "ABORT": TokenKind.TXN_ABORT,
    "ROLLBACK": TokenKind.TXN_ROLLBACK,
    "TABLES": TokenKind.TABLES,
    "CREATE": TokenKind.CREATE,
    "TABLE": TokenKind.TABLE,
    "DROP": TokenKind.DROP,
    "DESC": TokenKind.DESC,
    "INSERT": TokenKind.INSERT,
    "INTO": TokenKind.INTO,
    "VALUES": TokenKind.VALUES,
    "DELETE": TokenKind.DELETE,
    "FROM": TokenKind.FROM,
    "WHERE": TokenKind.WHERE,
    "UPDATE": TokenKind.UPDATE,
    "SET": TokenKind.SET,
    "SELECT": TokenKind.SELECT,
    "INT": TokenKind.INT,
    "CHAR": TokenKind.CHAR,
    "FLOAT": TokenKind.FLOAT,
    "INDEX": TokenKind.INDEX,
    "AND": TokenKind.AND,
    "JOIN": TokenKind.JOIN,
    "EXIT": TokenKind.EXIT,
    "HELP": TokenKind.HELP,
    "ORDER": TokenKind.ORDER,
    "BY": TokenKind.BY,
    "ASC": TokenKind.ASC,
}

_TWO_CHAR_OPS = {
    ">=": TokenKind.GEQ,
    "<=": TokenKind.LEQ,
    "<>": TokenKind.NEQ,
}

# Rules in priority order; the longest match wins, ties go to the earlier rule.
_RULES: list[tuple[str, re.Pattern[str]]] = [
    ("block_comment", re.compile(r"/\*")),
    ("line_comment", re.compile(r"--.*")),
    ("space", re.compile(r"[ \t]+")),
    ("newline", re.compile(r"[\r\n]")),
    ("word", re.compile(r"[A-Za-z_][A-Za-z0-9_]*")),
    ("op2", re.compile(r">=|<=|<>")),
    ("op1", re.compile(r"[;(),*=<>.]")),
    ("float", re.compile(r"[+-]?[0-9]+\.[0-9]*")),
    ("int", re.compile(r"[+-]?[0-9]+")),
    ("string", re.compile(r"'[^']*'")),
]


@dataclass(frozen=True)
class Token:
    """A token with its text, its value and where it starts (1-based)."""

    kind: TokenKind
    text: str
    value: int | float | str | None
    line: int
    column: int


class LexerError(ValueError):
    """The input holds a character no token can start with."""

    def __init__(self, char: str, line: int, column: int) -> None:
        super().__init__(f"Lexer Error: unexpected character {char}")
        self.char = char
        self.line = line
        self.column = column


def _longest_match(text: str, pos: int) -> tuple[str, str] | None:
    best: tuple[str, str] | None = None
    for name, pattern in _RULES:
        m = pattern.match(text, pos)
        if m and m.end() > pos and (best is None or len(m.group()) > len(best[1])):
            best = (name, m.group())
    return best


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of text, ending with a T_EOF token."""
    pos = 0
    line, column = 1, 1

    def advance(chunk: str) -> None:
        nonlocal line, column
        for ch in chunk:
            if ch == "\n":
                line += 1
                column = 1
            else:
                column += 1

    while pos < len(text):
        start_line, start_column = line, column
        match = _longest_match(text, pos)
        if match is None:
            raise LexerError(text[pos], start_line, start_column)
        name, lexeme = match

        if name == "block_comment":
            end = text.find("*/", pos + 2)
            if end == -1:
                advance(text[pos:])
                pos = len(text)
                break
            lexeme = text[pos:end + 2]

        advance(lexeme)
        pos += len(lexeme)

        if name in ("block_comment", "line_comment", "space", "newline"):
            continue
        if name == "word":
            kind = _KEYWORDS.get(lexeme.upper(), TokenKind.IDENTIFIER)
            value = lexeme if kind is TokenKind.IDENTIFIER else None
            yield Token(kind, lexeme, value, start_line, start_column)
        elif name == "op2":
            yield Token(_TWO_CHAR_OPS[lexeme], lexeme, None, start_line, start_column)
        elif name == "op1":
            yield Token(TokenKind(ord(lexeme)), lexeme, None, start_line, start_column)
        elif name == "float":
            yield Token(TokenKind.VALUE_FLOAT, lexeme, float(lexeme), start_line, start_column)
        elif name == "int":
            yield Token(TokenKind.VALUE_INT, lexeme, int(lexeme), start_line, start_column)
        else:
            yield Token(TokenKind.VALUE_STRING, lexeme, lexeme[1:-1], start_line, start_column)

    yield Token(TokenKind.T_EOF, "", None, line, column)