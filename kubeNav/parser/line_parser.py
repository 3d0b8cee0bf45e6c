# kubeNav/parser/line_parser.py
"""
Splits a command line into words using shell-like quoting:

    pods -r "web-.*"          -> ['pods', '-r', 'web-.*']
    alias p 'pods -s Age'     -> ['alias', 'p', 'pods -s Age']
    echo a"b c"\\ d           -> ['echo', 'ab c d']

Adjacent bare and quoted pieces form a single word. Inside double quotes a backslash
escapes the next character; single quotes are literal.
"""
import logging
import re
from typing import List

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError, UnexpectedInput

from kubeNav.core.errors import UsageError

logger = logging.getLogger(__name__)

_LINE_GRAMMAR = r"""
    start: (word (_WS word)*)?

    word: (BARE | DOUBLE | SINGLE)+

    BARE: /([^\s"'\\]|\\.)+/
    DOUBLE: /"(\\.|[^"\\])*"/
    SINGLE: /'[^']*'/
    _WS: /\s+/
"""

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


@v_args(inline=True)
class LineTransformer(Transformer):
    def start(self, *words):
        return list(words)

    def word(self, *pieces):
        return "".join(_unquote(piece) for piece in pieces)


def _unquote(token) -> str:
    text = str(token)
    if token.type == "SINGLE":
        return text[1:-1]
    if token.type == "DOUBLE":
        text = text[1:-1]
    return _ESCAPE.sub(r"\1", text)


_line_parser = Lark(_LINE_GRAMMAR, start="start", parser="lalr", transformer=LineTransformer())


def tokenize(line: str) -> List[str]:
    """
    Splits ``line`` into words.

    Raises:
        UsageError: on an unterminated quote or a dangling escape.
    """
    stripped = line.strip()
    if not stripped:
        return []
    try:
        return _line_parser.parse(stripped)
    except UnexpectedInput as e:
        raise UsageError(f"Cannot parse command line at column {e.column}: unterminated quote or escape")
    except LarkError as e:
        logger.debug(f"Tokenizer failure for '{line}': {e}")
        raise UsageError(f"Cannot parse command line: {e}")


def tokenize_partial(line: str) -> List[str]:
    """
    Like ``tokenize`` but tolerant of an unfinished line, for completion.

    A trailing space yields an empty last word (the word being started).
    """
    try:
        words = tokenize(line)
    except UsageError:
        words = line.split()
        if words and words[-1][:1] in ("'", '"'):
            words[-1] = words[-1][1:]
    if not line.strip() or line[-1].isspace():
        words.append("")
    return words
