"""Lexer for the STQ (String Tables Query) language."""

import re

import ply.lex as lex

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def unescape(text: str) -> str:
    """Resolve backslash escapes in a string literal body."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), text)


class QueryLexer:
    """Lexer for tokenizing STQ statements."""

    # Reserved keywords
    reserved = {
        "create": "CREATE",
        "table": "TABLE",
        "describe": "DESCRIBE",
        "select": "SELECT",
        "one": "ONE",
        "where": "WHERE",
        "insert": "INSERT",
        "update": "UPDATE",
        "set": "SET",
        "delete": "DELETE",
        "add": "ADD",
        "remove": "REMOVE",
        "column": "COLUMN",
        "as": "AS",
        "import": "IMPORT",
        "export": "EXPORT",
        "and": "AND",
        "or": "OR",
        "not": "NOT",
        "contains": "CONTAINS",
        "true": "TRUE",
        "false": "FALSE",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "STRING",
        "COMMA",
        "LPAREN",
        "RPAREN",
        "EQ",
        "NEQ",
        "CONCAT",
        "SEMICOLON",
    ] + list(reserved.values())

    t_COMMA = r","
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_EQ = r"="
    t_NEQ = r"!="
    t_CONCAT = r"\+\+"
    t_SEMICOLON = r";"

    t_ignore = " \t"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\]|\\.)*"'
        t.value = unescape(t.value[1:-1])
        return t

    def t_BACKTICK_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"`[^`]+`"
        # Always a field name, even when it spells a keyword
        t.value = t.value[1:-1]
        t.type = "IDENTIFIER"
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        t.type = self.reserved.get(t.value.lower(), "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_COMMENT(self, t: lex.LexToken) -> None:
        r"--[^\n]*"
        pass

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
