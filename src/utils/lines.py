"""
Line-oriented editing helpers shared by the ramdisk patchers.

Entries are split on "\\n" only. A trailing newline produces a final empty
line so that join_lines(split_lines(x)) == x for any content.
"""
import re
from typing import Iterable, List, Sequence, Tuple, Union

PatternLike = Union[str, re.Pattern]


def _compile(pattern: PatternLike) -> re.Pattern:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


def split_lines(data: bytes) -> List[str]:
    # surrogateescape keeps non UTF-8 bytes intact through a round trip
    return data.decode("utf-8", errors="surrogateescape").split("\n")


def join_lines(lines: Iterable[str]) -> bytes:
    return "\n".join(lines).encode("utf-8", errors="surrogateescape")


def insert_before_match(lines: Sequence[str], anchor: PatternLike, preceding: PatternLike,
                        new_lines: Sequence[str], trailing: Sequence[str] = ()) -> List[str]:
    """
    Insert new_lines right before every line matching `anchor` whose previous
    line matches `preceding`, then append `trailing` unconditionally.

    :param lines: Input lines (not modified)
    :param anchor: Pattern searched in the current line
    :param preceding: Pattern searched in the line before it
    :param new_lines: Lines spliced between the preceding and anchor line
    :param trailing: Lines appended at the end regardless of any match
    """
    anchor = _compile(anchor)
    preceding = _compile(preceding)

    result = []
    previous_line = ""
    for line in lines:
        if anchor.search(line) and preceding.search(previous_line):
            result.extend(new_lines)
        result.append(line)
        # The anchor line becomes the previous line, so inserted lines are
        # never matched against on the same pass
        previous_line = line

    result.extend(trailing)
    return result


def substitute_lines(lines: Sequence[str], rules: Iterable[Tuple[PatternLike, str]]) -> List[str]:
    """Apply (pattern, replacement) rules to every line, in rule order"""
    compiled = [(_compile(pattern), repl) for pattern, repl in rules]
    result = []
    for line in lines:
        for pattern, repl in compiled:
            line = pattern.sub(repl, line)
        result.append(line)
    return result


def remove_matching(lines: Sequence[str], pattern: PatternLike) -> List[str]:
    pattern = _compile(pattern)
    return [line for line in lines if not pattern.search(line)]
