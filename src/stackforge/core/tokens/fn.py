# src/stackforge/core/tokens/fn.py
"""Intrinsic function helpers and pseudo-parameter tokens.

Usage:
    from stackforge.core.tokens import Aws, Fn

    arn = Fn.join(":", ["arn", Aws.PARTITION, "s3", "", "", bucket.ref])
    first_az = Fn.select(0, Fn.split(",", subnet_list).as_list())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stackforge.contracts.enums import IntrinsicName, PseudoParameter
from stackforge.core.tokens.models import Intrinsic, PseudoReference, ResourceReference

if TYPE_CHECKING:
    from stackforge.constructs.resource import Resource


class Fn:
    """Factories for intrinsic tokens. Arguments may contain tokens."""

    @staticmethod
    def ref(target: Resource) -> ResourceReference:
        return target.ref

    @staticmethod
    def get_att(target: Resource, attribute: str) -> ResourceReference:
        return target.get_att(attribute)

    @staticmethod
    def join(separator: str, parts: list[Any]) -> Intrinsic:
        """``Fn::Join``; parts are kept as given, never folded into a literal."""
        return Intrinsic(IntrinsicName.JOIN, [separator, list(parts)])

    @staticmethod
    def select(index: int, values: list[Any]) -> Intrinsic:
        return Intrinsic(IntrinsicName.SELECT, [index, values])

    @staticmethod
    def split(delimiter: str, source: Any) -> Intrinsic:
        """``Fn::Split``; use ``.as_list()`` on the result to pass it where a list is expected."""
        return Intrinsic(IntrinsicName.SPLIT, [delimiter, source])

    @staticmethod
    def base64(value: Any) -> Intrinsic:
        return Intrinsic(IntrinsicName.BASE64, value)


class Aws:
    """Pseudo-parameter tokens.

    They resolve to a ``Ref`` of the reserved parameter name; the concrete
    value is filled in at deploy time.
    """

    ACCOUNT_ID = PseudoReference(PseudoParameter.ACCOUNT_ID)
    REGION = PseudoReference(PseudoParameter.REGION)
    PARTITION = PseudoReference(PseudoParameter.PARTITION)
    STACK_NAME = PseudoReference(PseudoParameter.STACK_NAME)
    STACK_ID = PseudoReference(PseudoParameter.STACK_ID)
    URL_SUFFIX = PseudoReference(PseudoParameter.URL_SUFFIX)
    NOTIFICATION_ARNS = PseudoReference(PseudoParameter.NOTIFICATION_ARNS)
    NO_VALUE = PseudoReference(PseudoParameter.NO_VALUE)
