from .edge import Edge
from .node import Node

__all__ = ["Edge", "Node"]
