# citegraph/graph/schema.py

from enum import Enum


class NodeType(str, Enum):
    PAPER = "paper"
    AUTHOR = "author"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value) -> "NodeType":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class EdgeType(str, Enum):
    # Paper -> paper citation
    CITES = "cites"

    # Author -> paper authorship
    AUTHORED = "authored"

    # Anything else the document carries
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "EdgeType":
        if value is None:
            return cls.OTHER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class Relationship(str, Enum):
    """How a neighbor relates to the node being inspected, in display order."""

    CITES = "cites"
    CITED_BY = "cited by"
    AUTHORED_BY = "authored by"
    AUTHOR_OF = "author of"


class Direction(str, Enum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"
