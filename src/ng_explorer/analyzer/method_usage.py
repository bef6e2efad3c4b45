"""
Method usage aggregation for matched instances.

Every call expression in a class's constructor, methods and accessors is
offered to an ordered list of matchers. The first matcher that attributes
the call to an instance wins, so each call counts for at most one instance.

Local aliases (``const s = this.svc``), destructured methods and usage from
templates are not followed.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from ng_explorer.analyzer.instance_matcher import InstanceRecord
from ng_explorer.analyzer.models import CallSite, ClassDefinition

logger = logging.getLogger(__name__)

Attribution = Tuple[InstanceRecord, str]


@dataclass
class UsageScope:
    """Candidates visible to the executable member being scanned."""

    instances: Dict[str, InstanceRecord]
    ctor_only: Dict[str, InstanceRecord]
    in_constructor: bool = False


class CallMatcher(ABC):
    """Attributes a call site to a candidate instance."""

    name = "matcher"

    @abstractmethod
    def match(self, call: CallSite, scope: UsageScope) -> Optional[Attribution]:
        """Return (record, method name) or None when the call is not attributed."""
        pass


class ThisMemberPattern(CallMatcher):
    """``this.<member>.<method>(`` and ``this.<member>?.<method>(``."""

    name = "this-member"
    pattern = re.compile(r"this\.(\w+)\??\.(\w+)\s*\(")

    def match(self, call: CallSite, scope: UsageScope) -> Optional[Attribution]:
        found = self.pattern.search(call.callee_text + "(")
        if found is None:
            return None
        record = scope.instances.get(found.group(1))
        if record is None:
            return None
        return record, found.group(2)


class ConstructorParamPattern(CallMatcher):
    """``<param>.<method>(`` inside the constructor for constructor-only params."""

    name = "constructor-param"
    pattern = re.compile(r"^\s*(\w+)\??\.(\w+)\s*\(")

    def match(self, call: CallSite, scope: UsageScope) -> Optional[Attribution]:
        if not scope.in_constructor:
            return None
        found = self.pattern.match(call.callee_text + "(")
        if found is None:
            return None
        record = scope.ctor_only.get(found.group(1))
        if record is None:
            return None
        return record, found.group(2)


class StructuralReceiverMatcher(CallMatcher):
    """Member-access callee whose receiver is ``this.<member>`` or a constructor-only identifier.

    Catches names the text patterns cannot, such as ``this.store$.select()``.
    """

    name = "structural"

    def match(self, call: CallSite, scope: UsageScope) -> Optional[Attribution]:
        if not call.method_name or not call.receiver_name:
            return None
        if call.receiver_kind == "this_member":
            record = scope.instances.get(call.receiver_name)
        elif call.receiver_kind == "identifier" and scope.in_constructor:
            record = scope.ctor_only.get(call.receiver_name)
        else:
            record = None
        if record is None:
            return None
        return record, call.method_name


DEFAULT_MATCHERS: Tuple[CallMatcher, ...] = (
    ThisMemberPattern(),
    ConstructorParamPattern(),
    StructuralReceiverMatcher(),
)


def attribute_call(
    call: CallSite,
    scope: UsageScope,
    matchers: Sequence[CallMatcher] = DEFAULT_MATCHERS,
) -> Optional[Attribution]:
    """Run matchers in order and return the first attribution."""
    for matcher in matchers:
        attribution = matcher.match(call, scope)
        if attribution is not None:
            return attribution
    return None


def collect_instance_method_usages(
    cls: ClassDefinition,
    instances: Dict[str, InstanceRecord],
    ctor_only: Optional[Dict[str, InstanceRecord]] = None,
    matchers: Sequence[CallMatcher] = DEFAULT_MATCHERS,
) -> None:
    """
    Add the methods invoked on each candidate to its record.

    Records are updated in place.

    Args:
        cls: Class whose executable members are scanned
        instances: Parameter-property and field candidates
        ctor_only: Constructor-only parameter candidates
        matchers: Ordered matcher strategies
    """
    ctor_only = ctor_only or {}
    if not instances and not ctor_only:
        return

    for member in cls.executables:
        scope = UsageScope(
            instances=instances,
            ctor_only=ctor_only,
            in_constructor=member.is_constructor,
        )
        for call in member.calls:
            attribution = attribute_call(call, scope, matchers)
            if attribution is None:
                continue
            record, method = attribution
            record.methods.add(method)
            logger.debug(f"{cls.name}.{member.name}: {record.property_name}.{method}() at line {call.line_number}")
