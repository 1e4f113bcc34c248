"""
Tree Utility Functions

Traversal, structural comparison and path helpers shared by the simplifier,
the validator, the serializer tests and the equation owner.
"""

from typing import List, Tuple, Type, TypeVar, Optional

from ..core.node import Node, Variable

T = TypeVar('T', bound=Node)


def get_all_nodes(node: Node, traversal_order: str = 'depth_first') -> List[Node]:
    """
    Get all nodes in the tree using specified traversal order.

    Args:
        node: Root node of the tree
        traversal_order: 'depth_first' (default, document order) or 'breadth_first'

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(node)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(node)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(node: Node) -> List[Node]:
    """Breadth-first traversal (iterative, non-recursive)"""
    nodes_to_visit = [node]
    all_nodes = []

    while nodes_to_visit:
        current_node = nodes_to_visit.pop(0)
        all_nodes.append(current_node)
        nodes_to_visit.extend(current_node.children())

    return all_nodes


def _depth_first_traversal(node: Node) -> List[Node]:
    """Depth-first pre-order traversal (recursive)"""
    nodes = [node]
    for child in node.children():
        nodes.extend(_depth_first_traversal(child))
    return nodes


def find_nodes_by_type(node: Node, node_type: Type[T]) -> List[T]:
    """
    Find all nodes of a specific class in the tree.

    Args:
        node: Root node of the tree
        node_type: Node class to look for

    Returns:
        List of matching nodes in document order
    """
    return [n for n in _depth_first_traversal(node) if isinstance(n, node_type)]


def get_variables(node: Node) -> List[Variable]:
    return find_nodes_by_type(node, Variable)


def structure_key(node: Node, include_sign: bool = True, include_select: bool = False) -> tuple:
    """
    Hashable description of a subtree's shape and values.

    Two subtrees with equal keys denote the same value. Geometry is never part
    of the key.

    Args:
        node: Root of the subtree
        include_sign: Whether the root's own negation takes part (children's always do);
            when False the root reads as unsigned
        include_select: Whether selection markers take part

    Returns:
        Nested tuple of variant names, payloads and flags
    """
    key = (node.node_type.name, node.key_payload())
    key += (node.negative and include_sign,)
    if include_select:
        key += (int(node.select),)
    return key + tuple(structure_key(child, True, include_select) for child in node.children())


def trees_equal(a: Node, b: Node, include_select: bool = False) -> bool:
    """Structural and value equality of two trees"""
    return structure_key(a, True, include_select) == structure_key(b, True, include_select)


def get_node_path(root: Node, target: Node) -> Optional[Tuple[int, ...]]:
    """
    Child-index path from ``root`` down to ``target``.

    Returns:
        Tuple of child indices, or None when ``target`` is not below ``root``
    """
    path = []
    node = target
    while node is not root:
        parent = node.parent
        if parent is None:
            return None
        for i, child in enumerate(parent.children()):
            if child is node:
                path.append(i)
                break
        else:
            return None
        node = parent
    return tuple(reversed(path))


def node_at_path(root: Node, path: Tuple[int, ...]) -> Node:
    """Follow a child-index path; raises IndexError for a stale path"""
    node = root
    for index in path:
        node = node.children()[index]
    return node
