"""Unit tests for tree transforms."""

from dataclasses import replace

import pytest

from groupwatch.gitlab import Pipeline, PipelineStatus
from groupwatch.hierarchy import (
    GroupNode,
    ProjectNode,
    collapse_all,
    collect_project_ids,
    expand_all,
    find_project,
    iter_projects,
    replace_project,
    set_expanded_all,
    toggle_group,
)


def _project(project_id: int, loading: bool = True) -> ProjectNode:
    return ProjectNode(
        id=project_id,
        name=f"p{project_id}",
        path_with_namespace=f"acme/p{project_id}",
        web_url=f"https://gitlab.test/acme/p{project_id}",
        loading=loading,
    )


def _pipeline(project_id: int, status: PipelineStatus) -> Pipeline:
    return Pipeline(
        id=project_id * 10,
        project_id=project_id,
        status=status,
        ref="main",
        sha="abc",
        web_url="https://gitlab.test/pipelines/1",
        created_at="2024-05-01T10:00:00Z",
        updated_at="2024-05-01T10:00:00Z",
    )


@pytest.fixture
def tree() -> GroupNode:
    """acme(10) -> [platform(11) -> [101, 102], tools(12) -> [104], 103]."""
    platform = GroupNode(11, "platform", "acme/platform", children=(_project(101), _project(102)))
    tools = GroupNode(12, "tools", "acme/tools", children=(_project(104),))
    return GroupNode(10, "acme", "acme", children=(platform, tools, _project(103)))


def _expanded_flags(node: GroupNode) -> list[bool]:
    flags = [node.expanded]
    for child in node.children:
        if isinstance(child, GroupNode):
            flags.extend(_expanded_flags(child))
    return flags


@pytest.mark.unit
class TestTraversal:
    """Tests for iter_projects, collect_project_ids and find_project."""

    def test_collect_project_ids_depth_first(self, tree: GroupNode) -> None:
        assert collect_project_ids(tree) == [101, 102, 104, 103]

    def test_iter_projects_yields_nodes(self, tree: GroupNode) -> None:
        assert all(isinstance(p, ProjectNode) for p in iter_projects(tree))

    def test_find_project(self, tree: GroupNode) -> None:
        assert find_project(tree, 104).name == "p104"
        assert find_project(tree, 999) is None


@pytest.mark.unit
class TestReplaceProject:
    """Tests for replace_project."""

    def test_replaces_matching_project(self, tree: GroupNode) -> None:
        pipeline = _pipeline(102, PipelineStatus.SUCCESS)

        new_tree = replace_project(
            tree, 102, lambda p: replace(p, pipeline=pipeline, loading=False)
        )

        updated = find_project(new_tree, 102)
        assert updated.pipeline == pipeline
        assert not updated.loading

    def test_input_tree_unchanged(self, tree: GroupNode) -> None:
        replace_project(tree, 102, lambda p: replace(p, loading=False))

        assert find_project(tree, 102).loading

    def test_untouched_subtrees_shared(self, tree: GroupNode) -> None:
        """Only the path from the root to the changed project is rebuilt."""
        new_tree = replace_project(tree, 102, lambda p: replace(p, loading=False))

        assert new_tree is not tree
        assert new_tree.children[0] is not tree.children[0]
        assert new_tree.children[1] is tree.children[1]
        assert new_tree.children[2] is tree.children[2]
        assert new_tree.children[0].children[0] is tree.children[0].children[0]

    def test_no_match_returns_same_tree(self, tree: GroupNode) -> None:
        """Replacing a project that is not in the tree is a no-op."""
        assert replace_project(tree, 999, lambda p: replace(p, loading=False)) is tree

    def test_top_level_project(self, tree: GroupNode) -> None:
        new_tree = replace_project(tree, 103, lambda p: replace(p, error="boom", loading=False))

        assert find_project(new_tree, 103).error == "boom"
        assert new_tree.children[0] is tree.children[0]


@pytest.mark.unit
class TestExpandState:
    """Tests for toggle_group and set_expanded_all."""

    def test_toggle_nested_group(self, tree: GroupNode) -> None:
        new_tree = toggle_group(tree, 12)

        assert not new_tree.children[1].expanded
        assert new_tree.children[0] is tree.children[0]

    def test_toggle_twice_restores(self, tree: GroupNode) -> None:
        assert toggle_group(toggle_group(tree, 11), 11) == tree

    def test_toggle_root(self, tree: GroupNode) -> None:
        assert not toggle_group(tree, 10).expanded

    def test_toggle_unknown_group_is_noop(self, tree: GroupNode) -> None:
        assert toggle_group(tree, 999) is tree

    def test_collapse_all(self, tree: GroupNode) -> None:
        assert _expanded_flags(collapse_all(tree)) == [False, False, False]

    def test_expand_all_after_collapse(self, tree: GroupNode) -> None:
        assert _expanded_flags(expand_all(collapse_all(tree))) == [True, True, True]

    def test_expand_state_keeps_membership(self, tree: GroupNode) -> None:
        """Expanding or collapsing never adds or removes projects."""
        for expanded in (True, False):
            result = set_expanded_all(tree, expanded)
            assert collect_project_ids(result) == collect_project_ids(tree)

    def test_expand_all_on_expanded_tree_is_noop(self, tree: GroupNode) -> None:
        assert expand_all(tree) is tree
