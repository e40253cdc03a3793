"""Lexical analysis: source text to a flat list of tokens."""

from __future__ import annotations

import re
from collections import namedtuple
from enum import Enum

from .constants import KEYWORDS
from .errors import LexicalError


class TokenKind(str, Enum):
    LEFT_PAREN = 'LEFT_PAREN'
    RIGHT_PAREN = 'RIGHT_PAREN'
    LEFT_BRACE = 'LEFT_BRACE'
    RIGHT_BRACE = 'RIGHT_BRACE'
    LEFT_BRACKET = 'LEFT_BRACKET'
    RIGHT_BRACKET = 'RIGHT_BRACKET'
    COMMA = 'COMMA'
    DOT = 'DOT'
    SEMICOLON = 'SEMICOLON'
    PLUS = 'PLUS'
    MINUS = 'MINUS'
    STAR = 'STAR'
    SLASH = 'SLASH'
    EQUAL = 'EQUAL'
    EQUAL_EQUAL = 'EQUAL_EQUAL'
    BANG = 'BANG'
    BANG_EQUAL = 'BANG_EQUAL'
    LESS = 'LESS'
    LESS_EQUAL = 'LESS_EQUAL'
    GREATER = 'GREATER'
    GREATER_EQUAL = 'GREATER_EQUAL'
    AND = 'AND'
    OR = 'OR'
    NUMBER = 'NUMBER'
    STRING_LITERAL = 'STRING_LITERAL'
    IDENTIFIER = 'IDENTIFIER'
    # keywords
    IF = 'IF'
    ELSE = 'ELSE'
    WHILE = 'WHILE'
    FOR = 'FOR'
    RETURN = 'RETURN'
    INT = 'INT'
    FLOAT = 'FLOAT'
    VOID = 'VOID'
    STRING = 'STRING'
    BOOL = 'BOOL'
    TRUE = 'TRUE'
    FALSE = 'FALSE'
    NULL = 'NULL'
    FUNCTION = 'FUNCTION'
    VAR = 'VAR'
    EOF = 'EOF'


Token = namedtuple('Token', ['kind', 'text', 'line', 'column'])


OPERATORS = {
    '==': TokenKind.EQUAL_EQUAL,
    '!=': TokenKind.BANG_EQUAL,
    '<=': TokenKind.LESS_EQUAL,
    '>=': TokenKind.GREATER_EQUAL,
    '&&': TokenKind.AND,
    '||': TokenKind.OR,
    '(': TokenKind.LEFT_PAREN,
    ')': TokenKind.RIGHT_PAREN,
    '{': TokenKind.LEFT_BRACE,
    '}': TokenKind.RIGHT_BRACE,
    '[': TokenKind.LEFT_BRACKET,
    ']': TokenKind.RIGHT_BRACKET,
    ',': TokenKind.COMMA,
    '.': TokenKind.DOT,
    ';': TokenKind.SEMICOLON,
    '+': TokenKind.PLUS,
    '-': TokenKind.MINUS,
    '*': TokenKind.STAR,
    '/': TokenKind.SLASH,
    '=': TokenKind.EQUAL,
    '!': TokenKind.BANG,
    '<': TokenKind.LESS,
    '>': TokenKind.GREATER,
}


class Lexer:
    # Order matters: comments before '/', two-character operators before one.
    token_specification = [
        ("COMMENT",      r'//[^\n]*'),
        ("NUMBER",       r'[0-9]+(?:\.[0-9]+)?'),
        ("STRING",       r'"[^"]*"'),
        ("UNTERMINATED", r'"'),
        ("ID",           r'[A-Za-z_][A-Za-z0-9_]*'),
        ("OP",           '|'.join(re.escape(op) for op in sorted(OPERATORS, key=len, reverse=True))),
        ("NEWLINE",      r'\n'),
        ("SKIP",         r'[ \t\r]+'),
        ("MISMATCH",     r'.'),
    ]
    tok_regex = '|'.join(f'(?P<{n}>{p})' for n, p in token_specification)
    master_re = re.compile(tok_regex)

    def __init__(self, code):
        self.code = code
        self.lineno = 1
        self.line_start = 0
        self.tokens = []

    def tokenize(self):
        self.lineno = 1
        self.line_start = 0
        self.tokens = []
        for mo in self.master_re.finditer(self.code):
            kind = mo.lastgroup
            val = mo.group()
            column = mo.start() - self.line_start + 1
            if kind == "NUMBER":
                self._add(TokenKind.NUMBER, val, column)
            elif kind == "STRING":
                self._add(TokenKind.STRING_LITERAL, val[1:-1], column)
                # strings may span lines; keep the position counters in step
                newlines = val.count('\n')
                if newlines:
                    self.lineno += newlines
                    self.line_start = mo.start() + val.rindex('\n') + 1
            elif kind == "ID":
                if val in KEYWORDS:
                    self._add(TokenKind(val.upper()), val, column)
                else:
                    self._add(TokenKind.IDENTIFIER, val, column)
            elif kind == "OP":
                self._add(OPERATORS[val], val, column)
            elif kind == "NEWLINE":
                self.lineno += 1
                self.line_start = mo.end()
            elif kind == "SKIP" or kind == "COMMENT":
                pass
            elif kind == "UNTERMINATED":
                raise LexicalError("Unterminated string", self.lineno, column)
            else:
                raise LexicalError(f"Unexpected character: {val}", self.lineno, column)
        self._add(TokenKind.EOF, '', len(self.code) - self.line_start + 1)
        return self.tokens

    def _add(self, kind, text, column):
        self.tokens.append(Token(kind, text, self.lineno, column))


def tokenize(source):
    return Lexer(source).tokenize()
