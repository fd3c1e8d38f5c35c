"""
Depth-first traversal of forests.

Trees here are any objects whose nodes expose an ordered `children` list.
A forest is either an object exposing `roots` or a plain sequence of root
nodes. Traversal uses an explicit stack, so deep trees (e.g. long chains from
poor elimination orderings) do not hit the interpreter's recursion limit.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

VisitorPre = Callable[[Any, Any], Any]
VisitorPost = Callable[[Any, Any], None]


@dataclass
class _TraversalEntry:
    node: Any
    parent_data: Any
    data: Any = None
    expanded: bool = False


def _roots(forest: Any) -> List[Any]:
    return list(getattr(forest, 'roots', forest))


def depth_first_forest(
    forest: Any,
    root_data: Any,
    visitor_pre: VisitorPre,
    visitor_post: Optional[VisitorPost] = None
) -> None:
    """
    Visit every node of `forest` depth-first.

    `visitor_pre(node, parent_data)` runs on entry to a node and returns the
    data for that node, which is passed as `parent_data` to each of its
    children. `visitor_post(node, data)` runs once all of the node's
    descendants have been visited. Roots receive `root_data` as their parent
    data. Siblings are visited in the order of their `children` list.

    Args:
        forest: Object with a `roots` attribute, or a sequence of root nodes
        root_data: Parent data handed to every root
        visitor_pre: Pre-order hook, returns the node's own data
        visitor_post: Optional post-order hook
    """
    stack = [_TraversalEntry(root, root_data) for root in reversed(_roots(forest))]

    while stack:
        entry = stack[-1]
        if entry.expanded:
            stack.pop()
            if visitor_post is not None:
                visitor_post(entry.node, entry.data)
            continue

        entry.data = visitor_pre(entry.node, entry.parent_data)
        entry.expanded = True
        for child in reversed(entry.node.children):
            stack.append(_TraversalEntry(child, entry.data))


def format_forest(
    forest: Any,
    label: Callable[[Any], str] = str,
    indent: str = '  '
) -> str:
    """
    Render a forest as indented text, one node per line.

    Args:
        forest: Object with a `roots` attribute, or a sequence of root nodes
        label: Function producing the text for a single node
        indent: Indentation added per tree level

    Returns:
        The rendered forest (empty string for an empty forest)
    """
    lines = []

    def visit(node, depth):
        lines.append(f"{indent * depth}{label(node)}")
        return depth + 1

    depth_first_forest(forest, 0, visit)
    return '\n'.join(lines)
