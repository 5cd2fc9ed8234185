"""Rule: comments.

Control comment formatting: ``require-starting-space`` wants a space after
the ``#`` (shebangs on the first line are exempt with ``ignore-shebangs``),
and ``min-spaces-from-content`` sets the gap before inline comments.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Comment
from yamlsieve.rules.base import CommentRule, RuleConf

_SHEBANG = re.compile(r"^!\S")


class CommentsRule(CommentRule):
    options = {
        "require-starting-space": bool,
        "ignore-shebangs": bool,
        "min-spaces-from-content": int,
    }
    defaults = {
        "require-starting-space": True,
        "ignore-shebangs": True,
        "min-spaces-from-content": 2,
    }

    @property
    def id(self) -> str:
        return "comments"

    def check(self, conf: RuleConf, comment: Comment) -> Iterator[LintProblem]:
        min_spaces = conf["min-spaces-from-content"]
        if (
            min_spaces != -1
            and comment.is_inline()
            and comment.token_before is not None
            and comment.pointer - comment.token_before.end_mark.pointer < min_spaces
        ):
            yield LintProblem(
                line=comment.line_no,
                column=comment.column_no,
                desc=f"too few spaces before comment: expected {min_spaces}",
            )

        if not conf["require-starting-space"]:
            return

        buffer = comment.buffer
        text_start = comment.pointer + 1
        while text_start < len(buffer) and buffer[text_start] == "#":
            text_start += 1
        if text_start >= len(buffer):
            return

        if (
            conf["ignore-shebangs"]
            and comment.line_no == 1
            and comment.column_no == 1
            and _SHEBANG.match(buffer[text_start:])
        ):
            return
        # "\r" covers both "\r" and "\r\n" line breaks
        if buffer[text_start] not in (" ", "\n", "\r", "\x00"):
            yield LintProblem(
                line=comment.line_no,
                column=comment.column_no + text_start - comment.pointer,
                desc="missing starting space in comment",
            )
