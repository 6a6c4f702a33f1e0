"""Console formatting for resolver errors.

Resolution errors embed specifiers and paths in brackets, e.g.
"Unable to resolve module [lodash] from [/src/a.js]", which Rich would
otherwise read as markup tags.
"""

from rich.markup import escape as _escape_markup


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings."""
    return _escape_markup(str(value))


def error_line(e: BaseException) -> str:
    """Rich markup line reporting e on the error console."""
    return f"[red]Error:[/red] {escape_markup(e)}"
