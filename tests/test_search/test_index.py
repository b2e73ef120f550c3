"""Tests for the flattened search index."""
import pytest

from knowtree.config.settings import SearchConfig
from knowtree.exceptions import ConfigurationError
from knowtree.models.node import Node, NodeKind
from knowtree.search.index import SearchIndex, flatten_forest, perform_search


@pytest.fixture
def forest():
    """A small course tree."""
    return [
        Node(
            id="math",
            title="Mathematics",
            kind=NodeKind.CONTAINER,
            children=[
                Node(id="alg-notes", title="Notes", content="algebra"),
                Node(
                    id="alg",
                    title="Algebra",
                    kind=NodeKind.FOLDER,
                    tags=["math"],
                    children=[
                        Node(id="alg2", title="Algebra II", tags=["advanced"]),
                        Node(id="groups", title="Group theory", content="Symmetry and groups"),
                    ],
                ),
            ],
        ),
        Node(
            id="bio",
            title="Biology",
            children=[
                Node(id="cells", title="Cells", tags=["Lab"], content="Membranes"),
            ],
        ),
    ]


def _ids(nodes):
    return [node.id for node in nodes]


def test_flatten_forest_preorder(forest):
    """Test pre-order flattening into childless copies."""
    flat = flatten_forest(forest)

    assert _ids(flat) == ["math", "alg-notes", "alg", "alg2", "groups", "bio", "cells"]
    assert all(node.children == [] for node in flat)
    # Source tree keeps its structure
    assert len(forest[0].children) == 2


def test_exact_title_is_top_match(forest):
    """Test that an exact title wins over partial and content matches."""
    results = perform_search(forest, "Algebra")

    assert results[0].id == "alg"
    assert set(_ids(results)) >= {"alg", "alg2", "alg-notes"}


def test_exact_title_for_every_node(forest):
    """Test that each node's own title ranks it first."""
    index = SearchIndex(forest)
    for node in flatten_forest(forest):
        assert index.search(node.title)[0].id == node.id


def test_typo_tolerance(forest):
    """Test that small misspellings still match."""
    assert "alg" in _ids(perform_search(forest, "algebar"))
    assert perform_search(forest, "Biolgy")[0].id == "bio"


def test_case_insensitive(forest):
    """Test that matching ignores case."""
    assert perform_search(forest, "MEMBRANES")[0].id == "cells"


def test_tags_are_searched(forest):
    """Test matches on individual tags."""
    assert _ids(perform_search(forest, "advanced")) == ["alg2"]


def test_no_similarity_returns_empty(forest):
    """Test that unrelated queries return nothing."""
    assert perform_search(forest, "zzqxw") == []


@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_query_returns_empty(forest, query):
    """Test that empty queries never match everything."""
    assert perform_search(forest, query) == []
    assert SearchIndex(forest).search(query) == []


def test_match_location_penalty():
    """Test that matches far into a long field are rejected."""
    node = Node(title="Essay", content=("x" * 60) + " photosynthesis")
    assert perform_search([node], "photosynthesis") == []

    near = Node(title="Essay", content="photosynthesis in plants")
    assert _ids(perform_search([near], "photosynthesis")) == [near.id]


def test_early_near_match_not_hidden_by_later_exact_match():
    """Test that a late exact match does not mask an early close match."""
    node = Node(title="Notes", content="algebr basics " + ("x" * 50) + " algebra")

    assert _ids(perform_search([node], "algebra")) == [node.id]


def test_case_exact_title_breaks_ties():
    """Test that a title equal to the query as typed outranks case variants."""
    lower = Node(id="lower", title="algebra")
    upper = Node(id="upper", title="Algebra")

    assert _ids(perform_search([lower, upper], "Algebra")) == ["upper", "lower"]
    assert _ids(perform_search([lower, upper], "algebra")) == ["lower", "upper"]


def test_results_are_detached_copies(forest):
    """Test that results are shallow copies of the source nodes."""
    results = perform_search(forest, "Algebra")
    top = results[0]

    assert top.children == []
    top.title = "Changed"
    top.tags.append("changed")

    assert forest[0].children[1].title == "Algebra"
    assert forest[0].children[1].tags == ["math"]
    assert len(forest[0].children[1].children) == 2


def test_repeated_searches_return_fresh_copies(forest):
    """Test that mutating a result does not affect the index."""
    index = SearchIndex(forest)
    index.search("Biology")[0].title = "Changed"
    assert index.search("Biology")[0].title == "Biology"


def test_duplicate_ids_collapse_to_last_seen():
    """Test that a repeated node ID appears once with the last copy."""
    forest = [
        Node(id="dup", title="Alpha first"),
        Node(id="other", title="Beta"),
        Node(id="dup", title="Alpha second"),
    ]
    index = SearchIndex(forest)
    results = index.search("alpha")

    assert len(index) == 2
    assert _ids(results) == ["dup"]
    assert results[0].title == "Alpha second"


def test_tag_query(forest):
    """Test exact tag filtering with the tag: prefix."""
    assert _ids(perform_search(forest, "tag:lab")) == ["cells"]
    assert _ids(perform_search(forest, "TAG: Math")) == ["alg"]
    assert perform_search(forest, "tag:mat") == []
    assert perform_search(forest, "tag:") == []


def test_limit(forest):
    """Test result truncation."""
    results = SearchIndex(forest).search("Algebra", limit=1)
    assert _ids(results) == ["alg"]


def test_restricted_keys(forest):
    """Test searching titles only."""
    config = SearchConfig(keys=("title",))
    assert perform_search(forest, "Membranes", config=config) == []
    assert _ids(perform_search(forest, "Cells", config=config)) == ["cells"]


def test_invalid_config(forest):
    """Test that invalid search settings are rejected."""
    with pytest.raises(ConfigurationError):
        SearchIndex(forest, SearchConfig(threshold=1.5))
    with pytest.raises(ConfigurationError):
        SearchIndex(forest, SearchConfig(keys=("title", "body")))
