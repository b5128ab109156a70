from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Union

from bnanalysis.errors import ParseError, UnknownReferenceError
from bnanalysis.expression import BinaryKind, BinaryOp, Expression, Literal, Not, Variable

_IDENT_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")
_KEYWORD_OPS = {kind.value: kind for kind in BinaryKind}
_TRUE_WORDS = ("TRUE",)
_FALSE_WORDS = ("FALSE",)
RESERVED_WORDS = frozenset(_KEYWORD_OPS) | {"NOT"} | set(_TRUE_WORDS) | set(_FALSE_WORDS)

IDENT, OP, NOT, LITERAL, LPAREN, RPAREN = "ident", "op", "not", "literal", "(", ")"

@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    op: Optional[BinaryKind] = None
    value: Optional[bool] = None

@dataclass(frozen=True)
class ParsedRule:
    target: str
    expression: Expression

def index_lookup(node_ids: Union[Mapping[str, int], Iterable[str]]) -> Dict[str, int]:
    """Map node id -> index; iterables are numbered by first occurrence."""
    if isinstance(node_ids, Mapping):
        return dict(node_ids)
    out: Dict[str, int] = {}
    for node_id in node_ids:
        if node_id not in out:
            out[node_id] = len(out)
    return out

def tokenize(text: str, rule_text: Optional[str] = None) -> List[Token]:
    rule_text = text if rule_text is None else rule_text
    tokens: List[Token] = []
    pos = 0
    n = len(text)
    while pos < n:
        ch = text[pos]
        if ch.isspace():
            pos += 1
            continue
        if ch == "(":
            tokens.append(Token(LPAREN, ch, pos))
            pos += 1
            continue
        if ch == ")":
            tokens.append(Token(RPAREN, ch, pos))
            pos += 1
            continue
        if ch == "!":
            tokens.append(Token(NOT, ch, pos))
            pos += 1
            continue
        if ch in _IDENT_CHARS:
            end = pos + 1
            while end < n and text[end] in _IDENT_CHARS:
                end += 1
            word = text[pos:end]
            upper = word.upper()
            if upper in _KEYWORD_OPS:
                tokens.append(Token(OP, word, pos, op=_KEYWORD_OPS[upper]))
            elif upper == "NOT":
                tokens.append(Token(NOT, word, pos))
            elif upper in _TRUE_WORDS:
                tokens.append(Token(LITERAL, word, pos, value=True))
            elif upper in _FALSE_WORDS:
                tokens.append(Token(LITERAL, word, pos, value=False))
            else:
                tokens.append(Token(IDENT, word, pos))
            pos = end
            continue
        raise ParseError(f"unexpected character {ch!r} at position {pos}", rule_text)
    return tokens

class _Parser:
    def __init__(self, tokens: List[Token], index_of: Mapping[str, int], rule_text: str):
        self.tokens = tokens
        self.index_of = index_of
        self.rule_text = rule_text
        self.pos = 0

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def fail(self, reason: str):
        raise ParseError(reason, self.rule_text)

    def parse(self) -> Expression:
        if not self.tokens:
            self.fail("empty expression")
        expr = self.or_expr()
        tok = self.peek()
        if tok is not None:
            if tok.kind == RPAREN:
                self.fail(f"unbalanced parentheses: unexpected ')' at position {tok.pos}")
            self.fail(f"unexpected {tok.text!r} after complete expression")
        return expr

    def _binary_level(self, kinds, operand) -> Expression:
        left = operand()
        while True:
            tok = self.peek()
            if tok is None or tok.kind != OP or tok.op not in kinds:
                return left
            self.advance()
            left = BinaryOp(tok.op, left, operand())

    def or_expr(self) -> Expression:
        return self._binary_level((BinaryKind.OR, BinaryKind.NOR), self.xor_expr)

    def xor_expr(self) -> Expression:
        return self._binary_level((BinaryKind.XOR,), self.and_expr)

    def and_expr(self) -> Expression:
        return self._binary_level((BinaryKind.AND, BinaryKind.NAND), self.unary)

    def unary(self) -> Expression:
        tok = self.peek()
        if tok is not None and tok.kind == NOT:
            self.advance()
            return Not(self.unary())
        return self.primary()

    def primary(self) -> Expression:
        tok = self.peek()
        if tok is None:
            self.fail("unexpected end of expression")
        if tok.kind == LITERAL:
            self.advance()
            return Literal(bool(tok.value))
        if tok.kind == IDENT:
            self.advance()
            return self.resolve(tok.text)
        if tok.kind == LPAREN:
            self.advance()
            inner = self.or_expr()
            close = self.peek()
            if close is None:
                self.fail(f"unbalanced parentheses: '(' at position {tok.pos} is never closed")
            if close.kind != RPAREN:
                self.fail(f"unexpected {close.text!r} at position {close.pos}, expected ')'")
            self.advance()
            return inner
        if tok.kind == RPAREN:
            self.fail(f"unbalanced parentheses: unexpected ')' at position {tok.pos}")
        self.fail(f"expected an operand but found {tok.text!r} at position {tok.pos}")

    def resolve(self, name: str) -> Expression:
        if name in self.index_of:
            return Variable(self.index_of[name])
        if name == "1":
            return Literal(True)
        if name == "0":
            return Literal(False)
        raise UnknownReferenceError(name, self.rule_text)

def parse_expression(text: str, node_ids, rule_text: Optional[str] = None) -> Expression:
    """Parse a bare right-hand side against the given node ids.

        or_expr  := xor_expr (('OR' | 'NOR') xor_expr)*
        xor_expr := and_expr ('XOR' and_expr)*
        and_expr := unary (('AND' | 'NAND') unary)*
        unary    := ('!' | 'NOT') unary | primary
        primary  := 'true' | 'false' | IDENT | '(' or_expr ')'

    Keywords and literals are case-insensitive and reserved; node ids are
    case-sensitive. ``1``/``0`` are literals unless a node carries that id.
    """
    rule_text = text if rule_text is None else rule_text
    index_of = index_lookup(node_ids)
    return _Parser(tokenize(text, rule_text), index_of, rule_text).parse()

def parse_rule(rule_text: str, node_ids) -> ParsedRule:
    """Parse ``<nodeId> = <expression>``.

    Raises ParseError for malformed syntax and UnknownReferenceError when
    either side names a node outside ``node_ids``.
    """
    index_of = index_lookup(node_ids)
    count = rule_text.count("=")
    if count == 0:
        raise ParseError("missing '=' separator", rule_text)
    if count > 1:
        raise ParseError("duplicated '=' separator", rule_text)
    lhs, rhs = (part.strip() for part in rule_text.split("="))
    if not lhs:
        raise ParseError("empty left-hand side", rule_text)
    if any(ch not in _IDENT_CHARS for ch in lhs):
        raise ParseError(f"left-hand side {lhs!r} is not a single node id", rule_text)
    if lhs.upper() in RESERVED_WORDS:
        raise ParseError(f"left-hand side {lhs!r} is a reserved word", rule_text)
    if lhs not in index_of:
        raise UnknownReferenceError(lhs, rule_text)
    expression = _Parser(tokenize(rhs, rule_text), index_of, rule_text).parse()
    return ParsedRule(target=lhs, expression=expression)
