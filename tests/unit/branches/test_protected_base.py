"""Unit tests for find_protected_base and find_protected_bases."""

from stackline.branches import BranchIndex, find_protected_base, find_protected_bases
from stackline.gateway.repo.fake import FakeRepository
from stackline.gateway.repo.types import Branch
from stackline.protect import FakeProtectionMatcher
from tests.test_utils.repo_builders import linear_history, sibling_history


def _protected(repo: FakeRepository, *names: str) -> BranchIndex:
    matcher = FakeProtectionMatcher(protected_names=names)
    return BranchIndex(repo.list_branches()).protected_subset(matcher)


def test_finds_protected_ancestor_on_linear_history() -> None:
    repo = linear_history([Branch(id="a", name="main"), Branch(id="c", name="feat")])

    result = find_protected_base(repo, _protected(repo, "main"), "d")

    assert result == Branch(id="a", name="main")


def test_nearest_protected_base_wins() -> None:
    repo = linear_history([Branch(id="a", name="main"), Branch(id="b", name="release")])

    result = find_protected_base(repo, _protected(repo, "main", "release"), "d")

    assert result == Branch(id="b", name="release")


def test_head_itself_can_be_the_protected_base() -> None:
    repo = linear_history([Branch(id="d", name="main")])

    assert find_protected_base(repo, _protected(repo, "main"), "d") == Branch(id="d", name="main")


def test_protected_branch_ahead_of_head_anchors_at_fork_point() -> None:
    """main@x moved on after d's line forked at a; d rejoins main's line at a."""
    repo = sibling_history([Branch(id="x", name="main")])

    result = find_protected_base(repo, _protected(repo, "main"), "d")

    assert result == Branch(id="x", name="main")


def test_first_branch_of_group_is_returned() -> None:
    repo = linear_history([Branch(id="a", name="master"), Branch(id="a", name="main")])

    result = find_protected_base(repo, _protected(repo, "main", "master"), "d")

    assert result == Branch(id="a", name="master")


def test_no_protected_base_on_unrelated_history() -> None:
    repo = FakeRepository(
        parents={"a": [], "b": ["a"], "z": []},
        branches=[Branch(id="z", name="main")],
        head="b",
    )

    assert find_protected_base(repo, _protected(repo, "main"), "b") is None
    assert find_protected_bases(repo, _protected(repo, "main"), "b") is None


def test_no_protected_base_with_no_protected_branches() -> None:
    repo = linear_history([Branch(id="a", name="feat")])

    assert find_protected_base(repo, _protected(repo), "d") is None


def test_colliding_merge_bases_are_unioned_in_commit_order() -> None:
    """release-1@p1 and release-2@p2 both fork from a, so both meet d at a."""
    repo = FakeRepository(
        parents={"a": [], "b": ["a"], "d": ["b"], "p1": ["a"], "p2": ["a"]},
        branches=[Branch(id="p2", name="release-2"), Branch(id="p1", name="release-1")],
        head="d",
    )
    protected = _protected(repo, "release-1", "release-2")

    assert find_protected_bases(repo, protected, "d") == (
        Branch(id="p1", name="release-1"),
        Branch(id="p2", name="release-2"),
    )
    assert find_protected_base(repo, protected, "d") == Branch(id="p1", name="release-1")


def test_walk_starts_at_head() -> None:
    repo = linear_history([Branch(id="a", name="main")])

    find_protected_base(repo, _protected(repo, "main"), "c")

    assert repo.ancestor_walks == ["c"]


def test_repeated_lookups_are_independent() -> None:
    repo = sibling_history([Branch(id="a", name="main"), Branch(id="y", name="release")])
    protected = _protected(repo, "main", "release")

    assert find_protected_base(repo, protected, "d") == Branch(id="y", name="release")
    assert find_protected_base(repo, protected, "x") == Branch(id="a", name="main")
    assert find_protected_base(repo, protected, "d") == Branch(id="y", name="release")
