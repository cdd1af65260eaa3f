"""Lexer for the Constant language.

Lexing happens in two steps:

1. **Splitting**: a Lark ``basic`` lexer cuts the source into string
   literals and whitespace separated words, discarding whitespace and
   ``//`` line comments. A ``"`` that never finds its closing quote is the
   only input the splitter cannot match, so Lark's ``UnexpectedCharacters``
   is reported as an unterminated string.

2. **Classification**: every word is matched against the fixed vocabulary
   of operators, built-in words and keywords. Words starting with a digit
   must be well-formed numbers, ``true``/``false`` are booleans, and
   anything else must be a valid identifier.

`tokenize` is the public entry point and always returns a fully
materialized list, since the block parser needs to see the whole stream.
"""

from __future__ import annotations

import decimal
import re
from dataclasses import dataclass
from typing import Any, Dict, List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import LexError


@dataclass(frozen=True)
class Token:
    kind: str
    lexeme: str
    line: int
    column: int
    value: Any = None  # decoded literal, only set for literal tokens

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.lexeme!r}, {self.line}:{self.column})"


OPERATORS = ('+', '-', '*', '/', '%', '>', '<', '>=', '<=', '==', '!=')
BUILTIN_WORDS = ('print', 'dup', 'swap', 'drop', 'bind')
KEYWORDS = ('if', 'elif', 'else', 'do', 'while', 'end')

VOCABULARY: Dict[str, str] = {}
VOCABULARY.update((op, 'OPERATOR') for op in OPERATORS)
VOCABULARY.update((word, 'BUILTIN') for word in BUILTIN_WORDS)
VOCABULARY.update((word, 'KEYWORD') for word in KEYWORDS)

BOOLEANS = {'true': True, 'false': False}


SPLIT_GRAMMAR = r"""
    start: (STRING | WORD)*

    STRING.3: /"(?:[^"\\]|\\.)*"/s
    WORD: /(?:[^\s"\/]|\/(?!\/))+/

    // Comments
    LINE_COMMENT.4: /\/\/[^\n]*/
    %ignore LINE_COMMENT

    %import common.WS
    %ignore WS
"""


SPLITTER = Lark(
    SPLIT_GRAMMAR,
    parser='lalr',
    lexer='basic',
)


NUMBER_RE = re.compile(r'[0-9]+(\.[0-9]+)?')
IDENT_START_RE = re.compile(r'[^\W\d]')
IDENT_RE = re.compile(r'[^\W\d]\w*')
ESCAPE_RE = re.compile(r'\\(.)', re.DOTALL)
ESCAPES = {'n': '\n', 't': '\t'}


def decode_string(lexeme: str) -> str:
    """Strip the quotes from a string lexeme and resolve backslash escapes."""
    body = lexeme[1:-1]
    return ESCAPE_RE.sub(lambda m: ESCAPES.get(m.group(1), m.group(1)), body)


def parse_int(digits: str) -> int:
    try:
        return int(digits)
    except ValueError:
        # past the interpreter's str-to-int digit limit; Decimal has none
        return int(decimal.Decimal(digits))


def classify_word(word: str, line: int, column: int) -> Token:
    """Turn a whitespace separated word into a token."""
    kind = VOCABULARY.get(word)
    if kind is not None:
        return Token(kind, word, line, column)
    if word in BOOLEANS:
        return Token('BOOL', word, line, column, BOOLEANS[word])
    if word[0].isdigit():
        match = NUMBER_RE.fullmatch(word)
        if match is None:
            raise LexError('InvalidNumber', f"invalid number {word!r}", line, column)
        if match.group(1):
            return Token('FLOAT', word, line, column, float(word))
        return Token('INT', word, line, column, parse_int(word))
    if IDENT_RE.fullmatch(word):
        return Token('IDENT', word, line, column)
    # report the first character that cannot be part of an identifier
    offset = 0
    if IDENT_START_RE.match(word[0]):
        offset = 1
        while offset < len(word) - 1 and (word[offset].isalnum() or word[offset] == '_'):
            offset += 1
    bad = word[offset]
    raise LexError('UnknownCharacter', f"unknown character {bad!r} in {word!r}", line, column + offset)


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens."""
    tokens: List[Token] = []
    try:
        for piece in SPLITTER.lex(source):
            if piece.type == 'STRING':
                tokens.append(Token('STRING', str(piece), piece.line, piece.column, decode_string(str(piece))))
            else:
                tokens.append(classify_word(str(piece), piece.line, piece.column))
    except UnexpectedCharacters as e:
        raise LexError('UnterminatedString', 'string literal is not terminated before end of input',
                       e.line, e.column) from None
    return tokens
