"""Text formatting helpers shared by the aggregator and the report renderer."""

from ansi2html import Ansi2HTMLConverter

from runreport.email_reporter.models.reporter_config import NameFormat
from runreport.email_reporter.models.test_record import TestIdentity

_ansi_converter = Ansi2HTMLConverter(inline=True)


def format_duration(milliseconds: int) -> str:
    """Format a millisecond count as non-zero hour, minute and second units.

    Args:
        milliseconds: Duration in milliseconds

    Returns:
        Units in descending order, e.g. "1h 2m 3s", or "<n>ms" when the
        duration is shorter than one second

    Raises:
        ValueError: If the duration is negative

    """
    if milliseconds < 0:
        raise ValueError(f"Duration must not be negative: {milliseconds}")

    total_seconds = milliseconds // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = [
        f"{value}{unit}"
        for value, unit in ((hours, "h"), (minutes, "m"), (seconds, "s"))
        if value
    ]
    if not parts:
        return f"{milliseconds}ms"
    return " ".join(parts)


def format_test_name(identity: TestIdentity, name_format: NameFormat) -> str:
    """Build the display name of a test.

    The group segment is left out when the test has no enclosing group.
    """
    segments = [identity.file_name]
    if identity.group_title:
        segments.append(identity.group_title)
    segments.append(identity.title)

    if name_format == "title-first":
        return " < ".join(reversed(segments))
    return " > ".join(segments)


def ansi_to_html(text: str) -> str:
    """Convert terminal escape sequences to inline-styled, escaped HTML."""
    return _ansi_converter.convert(text, full=False)
