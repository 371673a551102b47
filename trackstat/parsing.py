"""Parsing of `git for-each-ref` tracking output into ahead/behind records.

Each branch produces one line of the form::

    <push-track>::<upstream-track>::<push-ref>::<upstream-ref>::<branch>

where a track field is ``gone``, ``ahead N``, ``behind M``, ``ahead N, behind M``,
empty (tracked and in sync), or any other text git happened to print.
"""

import re

from trackstat.models import GONE, AheadBehindData

# The track fields are matched against git's English wording. Anything else
# (localized output, new wording) lands in the unk_* groups.
AHEAD_BEHIND_PATTERN = re.compile(
    r"""
    ^(?:(?P<gone_p>gone)|(?:(?:ahead\s(?P<ahead_p>\d+))?(?:,\s)?(?:behind\s(?P<behind_p>\d+))?)|(?P<unk_p>.*?))::
    (?:(?P<gone_u>gone)|(?:(?:ahead\s(?P<ahead_u>\d+))?(?:,\s)?(?:behind\s(?P<behind_u>\d+))?)|(?P<unk_u>.*?))::
    (?P<remote_p>.*?)::(?P<remote_u>.*?)::(?P<branch>.*)$
    """,
    re.MULTILINE | re.VERBOSE | re.ASCII,
)


def _present(match: re.Match[str], group: str) -> bool:
    return match.group(group) is not None


def _has_text(match: re.Match[str], group: str) -> bool:
    value = match.group(group)
    return value is not None and bool(value.strip())


def select_remote_ref(match: re.Match[str]) -> str:
    """Pick the remote ref shown for a branch, preferring the push ref.

    A push ref can come from a push refspec configured on the remote even when
    the branch tracks nothing; git then reports the push side as gone and the
    upstream ref is used instead.
    """
    remote_p = match.group("remote_p")
    if remote_p and not _present(match, "gone_p"):
        return remote_p
    return match.group("remote_u") or ""


def resolve_ahead_count(match: re.Match[str]) -> str:
    if _present(match, "ahead_p"):
        return match.group("ahead_p")
    # push only reports "behind", ahead does not apply
    if _present(match, "behind_p"):
        return ""
    if _present(match, "ahead_u"):
        return match.group("ahead_u")
    if _present(match, "gone_p") or _present(match, "gone_u"):
        return GONE
    # Unrecognized (possibly translated) tracking text, do not assume "0"
    if _has_text(match, "unk_p") or _has_text(match, "unk_u"):
        return ""
    # git prints nothing when the branch and its remote are even
    return "0"


def resolve_behind_count(match: re.Match[str]) -> str:
    if _present(match, "behind_p"):
        return match.group("behind_p")
    if not _present(match, "ahead_p"):
        return match.group("behind_u") or ""
    return ""


def resolve_match(match: re.Match[str]) -> AheadBehindData | None:
    """Build the record for one matched line, or None if it must be skipped."""
    branch = match.group("branch")
    remote_ref = select_remote_ref(match)
    if not branch or not remote_ref:
        return None
    return AheadBehindData(
        branch=branch,
        remote_ref=remote_ref,
        ahead_count=resolve_ahead_count(match),
        behind_count=resolve_behind_count(match),
    )


def parse_line(line: str) -> AheadBehindData | None:
    """Parse a single output line."""
    match = AHEAD_BEHIND_PATTERN.match(line)
    if match is None:
        return None
    return resolve_match(match)


def parse_ahead_behind(output: str) -> dict[str, AheadBehindData]:
    """Parse the full for-each-ref output into records keyed by branch name."""
    records: dict[str, AheadBehindData] = {}
    for match in AHEAD_BEHIND_PATTERN.finditer(output):
        record = resolve_match(match)
        if record is None:
            continue
        records[record.branch] = record
    return records
