"""Block parser for the Constant language.

The parser makes a single left-to-right pass over the token list. Plain
tokens (literals, identifiers, operators, built-in words) become
statements immediately. Control keywords are handled with an explicit
stack of open blocks: ``if`` and ``while`` push a frame, ``do``,
``elif`` and ``else`` move the innermost frame to its next segment, and
``end`` pops the frame and appends the finished `IfChain` or `WhileLoop`
to whatever segment encloses it. Because each frame collects already
built statements, nested blocks come out as nested sub-programs without
a second pass.

`parse_tokens` is the public entry point and returns the top-level
`Program`, or raises `ParseError`.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Program, PushLiteral, PushVariable, BindVariable, Operator, BuiltinCall,
    Branch, IfChain, WhileLoop, Node,
)
from .errors import ParseError
from .lexer import Token


class BlockFrame:
    """An `if` or `while` block that has been opened but not closed yet.

    ``phase`` is 'cond' while the condition is being collected, 'body'
    after ``do``, and 'else' after ``else``.
    """

    def __init__(self, opener: Token):
        self.opener = opener
        self.phase = 'cond'
        self.condition: List[Node] = []
        self.body: List[Node] = []
        self.branches: List[Branch] = []
        self.else_body: Optional[List[Node]] = None

    @property
    def keyword(self) -> str:
        return self.opener.lexeme

    def target(self) -> List[Node]:
        """Return the statement list currently being filled."""
        if self.phase == 'cond':
            return self.condition
        if self.phase == 'body':
            return self.body
        return self.else_body

    def close_branch(self):
        self.branches.append(Branch(Program(self.condition), Program(self.body)))
        self.condition = []
        self.body = []

    def finish(self) -> Node:
        pos = dict(line=self.opener.line, column=self.opener.column)
        if self.keyword == 'while':
            return WhileLoop(Program(self.condition), Program(self.body), **pos)
        if self.phase == 'body':
            self.close_branch()
        else_body = Program(self.else_body) if self.else_body is not None else None
        return IfChain(self.branches, else_body, **pos)


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.blocks: List[BlockFrame] = []
        self.top: List[Node] = []

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def error(self, kind: str, message: str, token: Token) -> ParseError:
        return ParseError(kind, message, token.line, token.column)

    def emit(self, node: Node):
        if self.blocks:
            self.blocks[-1].target().append(node)
        else:
            self.top.append(node)

    def parse_program(self) -> Program:
        while self.peek() is not None:
            token = self.advance()
            if token.kind == 'KEYWORD':
                self.parse_keyword(token)
            else:
                self.emit(self.parse_simple(token))
        if self.blocks:
            opener = self.blocks[-1].opener
            raise self.error('UnterminatedBlock',
                             f"'{opener.lexeme}' block opened at {opener.line}:{opener.column} is never closed with 'end'",
                             opener)
        return Program(self.top)

    def parse_simple(self, token: Token) -> Node:
        pos = dict(line=token.line, column=token.column)
        if token.kind in ('BOOL', 'INT', 'FLOAT', 'STRING'):
            return PushLiteral(token.value, **pos)
        if token.kind == 'IDENT':
            return PushVariable(token.lexeme, **pos)
        if token.kind == 'OPERATOR':
            return Operator(token.lexeme, **pos)
        if token.lexeme == 'bind':
            target = self.peek()
            if target is None or target.kind != 'IDENT':
                found = 'end of input' if target is None else repr(target.lexeme)
                raise self.error('MissingBindTarget', f"'bind' must be followed by an identifier, got {found}", token)
            self.advance()
            return BindVariable(target.lexeme, **pos)
        return BuiltinCall(token.lexeme, **pos)

    def parse_keyword(self, token: Token):
        word = token.lexeme
        frame = self.blocks[-1] if self.blocks else None
        if word in ('if', 'while'):
            self.blocks.append(BlockFrame(token))
        elif word == 'do':
            if frame is None or frame.phase != 'cond':
                raise self.error('UnmatchedDo', "'do' without an open 'if', 'elif' or 'while' condition", token)
            frame.phase = 'body'
        elif word == 'elif':
            if frame is None or frame.keyword != 'if' or frame.phase != 'body':
                raise self.error('UnexpectedElif', "'elif' must follow the body of an 'if' or 'elif' branch", token)
            frame.close_branch()
            frame.phase = 'cond'
        elif word == 'else':
            if frame is None or frame.keyword != 'if' or frame.phase != 'body':
                raise self.error('UnexpectedElse', "'else' must follow the body of an 'if' or 'elif' branch", token)
            frame.close_branch()
            frame.phase = 'else'
            frame.else_body = []
            following = self.peek()
            if following is not None and following.kind == 'KEYWORD' and following.lexeme == 'do':
                self.advance()
        else:  # end
            if frame is None:
                raise self.error('UnmatchedEnd', "'end' without an open block", token)
            if frame.phase == 'cond':
                raise self.error('UnmatchedEnd', f"'end' reached before 'do' in '{frame.keyword}' block", token)
            self.blocks.pop()
            self.emit(frame.finish())


def parse_tokens(tokens: List[Token]) -> Program:
    """Parse a token list into a Program."""
    return Parser(tokens).parse_program()
