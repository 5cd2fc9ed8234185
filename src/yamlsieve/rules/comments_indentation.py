"""Rule: comments-indentation. Block comments must be indented like content."""

from __future__ import annotations

from collections.abc import Iterator

from yamlsieve.models.problems import LintProblem
from yamlsieve.models.tokens import Comment, TokenType
from yamlsieve.rules.base import CommentRule, RuleConf
from yamlsieve.rules.common import get_line_indent


class CommentsIndentationRule(CommentRule):
    @property
    def id(self) -> str:
        return "comments-indentation"

    def check(self, conf: RuleConf, comment: Comment) -> Iterator[LintProblem]:
        before = comment.token_before
        after = comment.token_after
        if before is None:
            return

        # Only block comments are checked
        if (
            before.type is not TokenType.STREAM_START
            and before.end_mark.line + 1 == comment.line_no
        ):
            return

        if after is None or after.type is TokenType.STREAM_END:
            next_line_indent = 0
        else:
            next_line_indent = after.start_mark.column

        if before.type is TokenType.STREAM_START:
            prev_line_indent = 0
        else:
            prev_line_indent = get_line_indent(before)

        # Only the next line's indent counts here:
        #     list:
        #         # comment
        #         - 1
        prev_line_indent = max(prev_line_indent, next_line_indent)

        # Once a comment went back to an outer indent, the following ones
        # must stay there
        if comment.comment_before is not None and not comment.comment_before.is_inline():
            prev_line_indent = comment.comment_before.column_no - 1

        if comment.column_no - 1 not in (prev_line_indent, next_line_indent):
            yield LintProblem(
                line=comment.line_no,
                column=comment.column_no,
                desc="comment not indented like content",
            )
