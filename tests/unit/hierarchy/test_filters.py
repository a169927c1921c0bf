"""Unit tests for the tree filter."""

import pytest

from groupwatch.gitlab import Pipeline, PipelineStatus
from groupwatch.hierarchy import (
    FilterOptions,
    GroupNode,
    ProjectNode,
    apply_filter,
    collect_project_ids,
    count_active_pipelines,
    count_projects,
    parse_status_category,
    project_matches,
)


def _project(project_id: int, name: str, status: PipelineStatus | None) -> ProjectNode:
    pipeline = None
    if status is not None:
        pipeline = Pipeline(
            id=project_id * 10,
            project_id=project_id,
            status=status,
            ref="main",
            sha="abc",
            web_url="https://gitlab.test/pipelines/1",
            created_at="2024-05-01T10:00:00Z",
            updated_at="2024-05-01T10:00:00Z",
        )
    return ProjectNode(
        id=project_id,
        name=name,
        path_with_namespace=f"acme/{name}",
        web_url=f"https://gitlab.test/acme/{name}",
        pipeline=pipeline,
    )


@pytest.fixture
def tree() -> GroupNode:
    """acme(10) -> [platform(11) -> [api running, web success], docs (no pipeline)]."""
    platform = GroupNode(
        11,
        "platform",
        "acme/platform",
        children=(
            _project(101, "api", PipelineStatus.RUNNING),
            _project(102, "web", PipelineStatus.SUCCESS),
        ),
    )
    return GroupNode(10, "acme", "acme", children=(platform, _project(103, "docs", None)))


@pytest.mark.unit
class TestParseStatusCategory:
    """Tests for parse_status_category."""

    def test_categories(self) -> None:
        assert parse_status_category("all") == "all"
        assert parse_status_category("active") == "active"
        assert parse_status_category("none") == "none"

    def test_pipeline_status(self) -> None:
        assert parse_status_category("failed") is PipelineStatus.FAILED

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            parse_status_category("green")


@pytest.mark.unit
class TestProjectMatches:
    """Tests for project_matches."""

    def test_search_is_case_insensitive(self, tree: GroupNode) -> None:
        api = tree.children[0].children[0]
        assert project_matches(api, FilterOptions(search_term="API"))

    def test_search_matches_path(self, tree: GroupNode) -> None:
        docs = tree.children[1]
        assert project_matches(docs, FilterOptions(search_term="acme/do"))
        assert not project_matches(docs, FilterOptions(search_term="zzz"))

    def test_none_category(self, tree: GroupNode) -> None:
        docs = tree.children[1]
        api = tree.children[0].children[0]
        assert project_matches(docs, FilterOptions(pipeline_status="none"))
        assert not project_matches(api, FilterOptions(pipeline_status="none"))

    def test_only_with_pipelines(self, tree: GroupNode) -> None:
        docs = tree.children[1]
        assert not project_matches(docs, FilterOptions(show_only_with_pipelines=True))


@pytest.mark.unit
class TestApplyFilter:
    """Tests for apply_filter."""

    def test_default_filter_returns_same_tree(self, tree: GroupNode) -> None:
        assert apply_filter(tree, FilterOptions()) is tree

    def test_active_keeps_running_only(self, tree: GroupNode) -> None:
        """Only the running project survives; docs is pruned, the root stays."""
        result = apply_filter(tree, FilterOptions(pipeline_status="active"))

        assert result.id == 10
        assert collect_project_ids(result) == [101]
        assert [child.id for child in result.children] == [11]

    def test_specific_status(self, tree: GroupNode) -> None:
        result = apply_filter(tree, FilterOptions(pipeline_status=PipelineStatus.SUCCESS))

        assert collect_project_ids(result) == [102]

    def test_empty_groups_pruned(self, tree: GroupNode) -> None:
        result = apply_filter(tree, FilterOptions(pipeline_status="none"))

        assert [child.id for child in result.children] == [103]

    def test_root_kept_when_nothing_matches(self, tree: GroupNode) -> None:
        result = apply_filter(tree, FilterOptions(search_term="nothing-matches-this"))

        assert result.id == 10
        assert result.children == ()

    def test_idempotent(self, tree: GroupNode) -> None:
        """Filtering an already filtered tree changes nothing."""
        for options in (
            FilterOptions(pipeline_status="active"),
            FilterOptions(search_term="w"),
            FilterOptions(show_only_with_pipelines=True),
        ):
            once = apply_filter(tree, options)
            assert apply_filter(once, options) == once

    def test_criteria_combine(self, tree: GroupNode) -> None:
        options = FilterOptions(search_term="ap", show_only_with_pipelines=True)

        assert collect_project_ids(apply_filter(tree, options)) == [101]

    def test_unchanged_subtree_shared(self, tree: GroupNode) -> None:
        """Groups whose children all match are reused."""
        result = apply_filter(tree, FilterOptions(show_only_with_pipelines=True))

        assert result.children[0] is tree.children[0]

    def test_expand_state_preserved(self, tree: GroupNode) -> None:
        collapsed = GroupNode(10, "acme", "acme", expanded=False, children=tree.children)

        assert not apply_filter(collapsed, FilterOptions(pipeline_status="active")).expanded


@pytest.mark.unit
class TestCounts:
    """Tests for count_projects and count_active_pipelines."""

    def test_count_projects(self, tree: GroupNode) -> None:
        assert count_projects(tree) == 3

    def test_count_active_pipelines(self, tree: GroupNode) -> None:
        assert count_active_pipelines(tree) == 1

    def test_filter_options_is_default(self) -> None:
        assert FilterOptions().is_default
        assert not FilterOptions(search_term="x").is_default
