"""Keywords, policies and kinds shared across subsystem boundaries.

String values are the wire vocabulary of the emitted template and are
written into the document verbatim.
"""

from enum import StrEnum


class IntrinsicName(StrEnum):
    """Intrinsic function keywords of the template format."""

    REF = "Ref"
    GET_ATT = "Fn::GetAtt"
    JOIN = "Fn::Join"
    SELECT = "Fn::Select"
    SPLIT = "Fn::Split"
    BASE64 = "Fn::Base64"


class PseudoParameter(StrEnum):
    """Reserved parameters supplied by the deployment engine at deploy time."""

    ACCOUNT_ID = "AWS::AccountId"
    REGION = "AWS::Region"
    PARTITION = "AWS::Partition"
    STACK_NAME = "AWS::StackName"
    STACK_ID = "AWS::StackId"
    URL_SUFFIX = "AWS::URLSuffix"
    NOTIFICATION_ARNS = "AWS::NotificationARNs"
    NO_VALUE = "AWS::NoValue"


class RemovalPolicy(StrEnum):
    """Deletion / update-replace policies.

    Absence of a policy on a resource means the consumer's default applies;
    the emitter never fills one in.
    """

    DELETE = "Delete"
    RETAIN = "Retain"
    SNAPSHOT = "Snapshot"
    RETAIN_EXCEPT_ON_DELETE = "RetainExceptOnDelete"


class ValueKind(StrEnum):
    """Discriminator for values that may appear in a property tree."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    TOKEN = "token"


class EdgeOrigin(StrEnum):
    """Why a reference edge exists."""

    REFERENCE = "reference"
    EXPLICIT = "explicit"
