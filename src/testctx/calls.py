"""Collect the distinct call sites inside a declaration body."""

import logging

from testctx.locator import walk
from testctx.models import CallSite, Position
from testctx.parsers.base import GrammarProfile, node_text

logger = logging.getLogger(__name__)


def _call_site(callee, source: bytes, profile: GrammarProfile) -> CallSite | None:
    """Build a CallSite for a callee node, or None for unsupported shapes.

    Member calls are named by the whole access text but positioned on the
    member identifier, which is what the resolver has to be pointed at.
    """
    if callee.type == profile.identifier_kind:
        return CallSite(
            name=node_text(callee, source),
            position=Position(callee.start_point[0], callee.start_point[1]),
        )

    if callee.type == profile.member_kind:
        member = callee.child_by_field_name(profile.member_field)
        if member is None:
            return None
        return CallSite(
            name=node_text(callee, source),
            position=Position(member.start_point[0], member.start_point[1]),
        )

    return None


def extract_call_sites(body, source: bytes, profile: GrammarProfile) -> list[CallSite]:
    """Return distinct call sites in discovery order.

    Repeated calls to the same name keep the first occurrence. Function
    literals inside the body are walked as well.

    Args:
        body: Body node of the target declaration (None yields no calls)
        source: Source bytes the tree was parsed from
        profile: Grammar profile describing call node kinds

    Returns:
        List of CallSite objects, first-seen order
    """
    if body is None:
        return []

    calls: dict[str, CallSite] = {}
    for node in walk(body):
        if node.type != profile.call_kind:
            continue
        callee = node.child_by_field_name(profile.callee_field)
        if callee is None:
            continue
        site = _call_site(callee, source, profile)
        if site is None:
            logger.debug(f"Ignoring call with callee of type {callee.type}")
            continue
        if site.name not in calls:
            calls[site.name] = site

    return list(calls.values())
