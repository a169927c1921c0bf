"""Pure tree transforms.

None of these functions modify their input. Ancestors of a changed node are
rebuilt and every untouched subtree is reused as-is. When nothing matches,
the input tree itself is returned.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import replace

from groupwatch.hierarchy.models import GroupNode, ProjectNode, TreeNode

ProjectUpdate = Callable[[ProjectNode], ProjectNode]


def iter_projects(tree: GroupNode) -> Iterator[ProjectNode]:
    """Yield every project node depth-first."""
    for child in tree.children:
        if isinstance(child, GroupNode):
            yield from iter_projects(child)
        else:
            yield child


def collect_project_ids(tree: GroupNode) -> list[int]:
    """Return the IDs of all projects in the tree, depth-first."""
    return [project.id for project in iter_projects(tree)]


def find_project(tree: GroupNode, project_id: int) -> ProjectNode | None:
    return next((p for p in iter_projects(tree) if p.id == project_id), None)


def _rebuild(group: GroupNode, transform: Callable[[TreeNode], TreeNode]) -> GroupNode:
    """Apply ``transform`` to each child, recreating ``group`` only if a child changed."""
    changed = False
    children = []
    for child in group.children:
        new_child = transform(child)
        changed = changed or new_child is not child
        children.append(new_child)
    if not changed:
        return group
    return replace(group, children=tuple(children))


def replace_project(tree: GroupNode, project_id: int, update_fn: ProjectUpdate) -> GroupNode:
    """Replace the project with ``project_id`` by ``update_fn(project)``.

    Args:
        tree: Root of the tree.
        project_id: ID of the project to replace.
        update_fn: Receives the current node and returns its replacement.

    Returns:
        The new root, or ``tree`` unchanged if no project matches.
    """
    found = False

    def visit(node: TreeNode) -> TreeNode:
        nonlocal found
        if found:
            return node
        if isinstance(node, ProjectNode):
            if node.id == project_id:
                found = True
                return update_fn(node)
            return node
        return _rebuild(node, visit)

    return _rebuild(tree, visit)


def toggle_group(tree: GroupNode, group_id: int) -> GroupNode:
    """Flip ``expanded`` on the group with ``group_id`` (the root included)."""
    if tree.id == group_id:
        return replace(tree, expanded=not tree.expanded)

    def visit(node: TreeNode) -> TreeNode:
        if isinstance(node, GroupNode):
            return toggle_group(node, group_id)
        return node

    return _rebuild(tree, visit)


def set_expanded_all(tree: GroupNode, expanded: bool) -> GroupNode:
    """Set ``expanded`` on every group node in the tree."""

    def visit(node: TreeNode) -> TreeNode:
        if isinstance(node, GroupNode):
            return set_expanded_all(node, expanded)
        return node

    group = _rebuild(tree, visit)
    if group.expanded == expanded:
        return group
    return replace(group, expanded=expanded)


def expand_all(tree: GroupNode) -> GroupNode:
    return set_expanded_all(tree, True)


def collapse_all(tree: GroupNode) -> GroupNode:
    return set_expanded_all(tree, False)
