"""Source map comment handling."""

import re

# Trailing "//# sourceMappingURL=..." (or legacy "//@") annotation
_COMMENT_REGEX = re.compile(r"^[ \t]*//[#@][ \t]+sourceMappingURL=[^\r\n]*(?:\r?\n)*\Z", re.MULTILINE)


def delete_comment(source: str) -> str:
    """Strip a trailing single-line source map reference from source."""
    return _COMMENT_REGEX.sub("", source)
