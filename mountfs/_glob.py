"""Glob compiler and backtracking matcher.

A glob is matched against single path components. The pattern language:

* ``?`` matches exactly one character.
* ``*`` matches zero or more characters, non-greedily.
* ``{foo,bar}`` matches one of the literal alternatives. Inside an
  alternative ``\\,``, ``\\}`` and ``\\\\`` stand for ``,``, ``}`` and ``\\``.
* ``[a-cx]`` matches one character from the class. ``\\]`` stands for ``]``.
* ``\\`` escapes the following character anywhere else.

Inside an alternative or a class an unescaped metacharacter other than the
closing one (and ``,`` between options) is a syntax error rather than
literal text; escape it (``{a\\*,b}``) to match it literally.

A name starting with ``.`` is only matched by a glob that starts with ``.``.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from dataclasses import dataclass

from ._exceptions import PatternSyntaxError

_ESCAPE = "\\"
_META = frozenset("{},*?[]")


@dataclass(frozen=True, slots=True)
class MatchOne:
    pass


@dataclass(frozen=True, slots=True)
class MatchAny:
    pass


@dataclass(frozen=True, slots=True)
class MatchAlternative:
    options: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MatchCollection:
    # each class is either a single character or an inclusive (lo, hi) range
    classes: tuple[str | tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class MatchCharacter:
    character: str


GlobNode = MatchOne | MatchAny | MatchAlternative | MatchCollection | MatchCharacter


# ---------------------------------------------------------------------------
#  Compiler
# ---------------------------------------------------------------------------


class _Parser:
    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.pos = 0

    def error(self, message: str, position: int | None = None) -> PatternSyntaxError:
        return PatternSyntaxError(
            message, self.pattern, self.pos if position is None else position
        )

    def at_end(self) -> bool:
        return self.pos >= len(self.pattern)

    def peek(self) -> str:
        return self.pattern[self.pos]

    def take_char(self, syntax: str) -> tuple[str, bool]:
        """Consume one character, decoding an escape.

        Returns the character and whether it was escaped. An unescaped
        metacharacter that is not in *syntax* is an error.
        """
        start = self.pos
        ch = self.pattern[self.pos]
        if ch == _ESCAPE:
            if self.pos + 1 >= len(self.pattern):
                raise self.error("Dangling escape", start)
            self.pos += 2
            return self.pattern[start + 1], True
        if ch in _META and ch not in syntax:
            raise self.error(f"Unexpected {ch!r}", start)
        self.pos += 1
        return ch, False

    def parse(self) -> tuple[GlobNode, ...]:
        nodes: list[GlobNode] = []
        while not self.at_end():
            ch = self.peek()
            if ch == "?":
                self.pos += 1
                nodes.append(MatchOne())
            elif ch == "*":
                self.pos += 1
                nodes.append(MatchAny())
            elif ch == "{":
                nodes.append(self.parse_alternative())
            elif ch == "[":
                nodes.append(self.parse_collection())
            else:
                char, _ = self.take_char("")
                nodes.append(MatchCharacter(char))
        return tuple(nodes)

    def parse_alternative(self) -> MatchAlternative:
        start = self.pos
        self.pos += 1
        options: list[str] = []
        current: list[str] = []
        while True:
            if self.at_end():
                raise self.error("Unterminated '{'", start)
            char, escaped = self.take_char(",}")
            if not escaped and char in ",}":
                if not current:
                    raise self.error("Empty alternative", self.pos - 1)
                options.append("".join(current))
                current = []
                if char == "}":
                    return MatchAlternative(tuple(options))
            else:
                current.append(char)

    def parse_collection(self) -> MatchCollection:
        start = self.pos
        self.pos += 1
        classes: list[str | tuple[str, str]] = []
        while True:
            if self.at_end():
                raise self.error("Unterminated '['", start)
            char_pos = self.pos
            lo, escaped = self.take_char("]")
            if lo == "]" and not escaped:
                if not classes:
                    raise self.error("Empty character class", start)
                return MatchCollection(tuple(classes))
            # a '-' directly before ']' is a literal
            if (
                self.pos + 1 < len(self.pattern)
                and self.peek() == "-"
                and self.pattern[self.pos + 1] != "]"
            ):
                self.pos += 1
                hi, _ = self.take_char("")
                if hi < lo:
                    raise self.error(f"Reversed range {lo}-{hi}", char_pos)
                classes.append((lo, hi))
            else:
                classes.append(lo)


@functools.lru_cache(maxsize=256)
def compile_glob(pattern: str) -> tuple[GlobNode, ...]:
    """Compile a single-component glob into its node sequence."""
    if not isinstance(pattern, str):
        raise TypeError(f"Glob must be a string, not {type(pattern).__name__}")
    return _Parser(pattern).parse()


# ---------------------------------------------------------------------------
#  Matcher
# ---------------------------------------------------------------------------


def _in_collection(char: str, classes: tuple[str | tuple[str, str], ...]) -> bool:
    for cls in classes:
        if isinstance(cls, tuple):
            if cls[0] <= char <= cls[1]:
                return True
        elif char == cls:
            return True
    return False


def _match_nodes(nodes: tuple[GlobNode, ...], candidate: str) -> bool:
    text = candidate
    idx = 0
    # checkpoints: (text at the '*', characters consumed so far, node index after the '*')
    backup: list[tuple[str, int, int]] = []

    while True:
        if idx == len(nodes):
            if not text:
                return True
            ok = False
        else:
            node = nodes[idx]
            ok = True
            if isinstance(node, MatchAny):
                backup.append((text, 0, idx + 1))
                idx += 1
                continue
            elif isinstance(node, MatchOne):
                if text:
                    text = text[1:]
                else:
                    ok = False
            elif isinstance(node, MatchAlternative):
                for option in node.options:
                    if text.startswith(option):
                        text = text[len(option):]
                        break
                else:
                    ok = False
            elif isinstance(node, MatchCollection):
                if text and _in_collection(text[0], node.classes):
                    text = text[1:]
                else:
                    ok = False
            elif isinstance(node, MatchCharacter):
                if text.startswith(node.character):
                    text = text[1:]
                else:
                    ok = False
            else:
                raise TypeError(f"Unknown glob node: {node!r}")
            if ok:
                idx += 1
                continue

        while True:
            if not backup:
                return False
            saved, consumed, resume = backup.pop()
            consumed += 1
            if consumed <= len(saved):
                break
        backup.append((saved, consumed, resume))
        text = saved[consumed:]
        idx = resume


def match_glob(
    nodes: tuple[GlobNode, ...], glob: str, candidates: Iterable[str]
) -> list[str]:
    """Return the candidates matched by the compiled glob, in input order.

    *glob* is the source text of *nodes*; it decides whether hidden names
    (leading ``.``) may match at all.
    """
    allow_hidden = glob.startswith(".")
    result: list[str] = []
    for name in candidates:
        if name.startswith(".") and not allow_hidden:
            continue
        if _match_nodes(nodes, name):
            result.append(name)
    return result


def glob_filter(glob: str, candidates: Iterable[str]) -> list[str]:
    return match_glob(compile_glob(glob), glob, candidates)

