"""Tests for the base, stack and protected commands.

These tests use StacklineContext.for_test() injection with a FakeRepository.
"""

from click.testing import CliRunner

from stackline.cli.cli import cli
from stackline.cli.context import StacklineContext
from stackline.gateway.repo.fake import FakeRepository
from stackline.gateway.repo.types import Branch
from stackline.protect import ProtectedBranches
from tests.test_utils.repo_builders import linear_history, sibling_history

# Realistic 40-hex ids keep short-sha output meaningful
A = "a" * 40
B = "b" * 40
C = "c" * 40
D = "d" * 40


def _linear_repo(branches: list[Branch]) -> FakeRepository:
    return FakeRepository.linear([A, B, C, D], branches=branches)


# ============================================================================
# base
# ============================================================================


def test_base_prints_protected_base() -> None:
    repo = _linear_repo([Branch(id=A, name="main"), Branch(id=C, name="feat")])
    ctx = StacklineContext.for_test(repo=repo)

    result = CliRunner().invoke(cli, ["base"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert result.output == "main\n"


def test_base_with_explicit_head() -> None:
    repo = _linear_repo([Branch(id=A, name="main"), Branch(id=B, name="release")])
    ctx = StacklineContext.for_test(repo=repo, protection=ProtectedBranches(["main", "release"]))

    from_head = CliRunner().invoke(cli, ["base"], obj=ctx)
    from_main = CliRunner().invoke(cli, ["base", "--head", "main"], obj=ctx)

    assert from_head.exit_code == 0, from_head.output
    assert from_head.output == "release\n"
    assert from_main.exit_code == 0, from_main.output
    assert from_main.output == "main\n"


def test_base_all_prints_every_candidate() -> None:
    repo = _linear_repo([Branch(id=A, name="main"), Branch(id=A, name="master")])
    ctx = StacklineContext.for_test(repo=repo)

    result = CliRunner().invoke(cli, ["base", "--all"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert result.output == "main\nmaster\n"


def test_base_reports_missing_base_without_failing() -> None:
    repo = _linear_repo([Branch(id=C, name="feat")])
    ctx = StacklineContext.for_test(repo=repo)

    result = CliRunner().invoke(cli, ["base"], obj=ctx)

    assert result.exit_code == 0
    assert "No protected base found for HEAD" in result.output


def test_base_unknown_revision_is_an_error() -> None:
    ctx = StacklineContext.for_test(repo=_linear_repo([]))

    result = CliRunner().invoke(cli, ["base", "--head", "nope"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: Unknown revision: nope" in result.output


# ============================================================================
# stack
# ============================================================================


def test_stack_defaults_base_to_protected_base() -> None:
    repo = _linear_repo([Branch(id=A, name="main"), Branch(id=C, name="feat")])
    ctx = StacklineContext.for_test(repo=repo)

    result = CliRunner().invoke(cli, ["stack"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "aaaaaaa main (protected)",
        "ccccccc feat",
    ]


def test_stack_default_base_is_fork_point_of_moved_protected_branch() -> None:
    """main@x has moved on past a, where d's line forked; the stack starts at a."""
    repo = sibling_history([Branch(id="x", name="main"), Branch(id="c", name="feat")])
    ctx = StacklineContext.for_test(repo=repo)

    on_path = CliRunner().invoke(cli, ["stack"], obj=ctx)
    dependents = CliRunner().invoke(cli, ["stack", "--dependents"], obj=ctx)

    assert on_path.exit_code == 0, on_path.output
    assert on_path.output.splitlines() == ["c feat"]
    assert dependents.exit_code == 0, dependents.output
    assert dependents.output.splitlines() == ["c feat"]


def test_stack_with_explicit_base() -> None:
    repo = _linear_repo([Branch(id=A, name="main"), Branch(id=C, name="feat")])
    ctx = StacklineContext.for_test(repo=repo)

    result = CliRunner().invoke(cli, ["stack", "--base", B], obj=ctx)

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["ccccccc feat"]


def test_stack_dependents_includes_rejoining_forks() -> None:
    repo = sibling_history(
        [
            Branch(id="a", name="main"),
            Branch(id="c", name="feat"),
            Branch(id="x", name="side"),
            Branch(id="y", name="fork"),
        ]
    )
    ctx = StacklineContext.for_test(repo=repo)

    on_path = CliRunner().invoke(cli, ["stack"], obj=ctx)
    dependents = CliRunner().invoke(cli, ["stack", "--dependents"], obj=ctx)

    assert on_path.exit_code == 0, on_path.output
    assert on_path.output.splitlines() == ["a main (protected)", "c feat"]
    assert dependents.exit_code == 0, dependents.output
    assert dependents.output.splitlines() == ["a main (protected)", "c feat", "y fork"]


def test_stack_without_protected_base_requires_explicit_base() -> None:
    repo = linear_history([Branch(id="c", name="feat")])
    ctx = StacklineContext.for_test(repo=repo)

    result = CliRunner().invoke(cli, ["stack"], obj=ctx)

    assert result.exit_code == 1
    assert "No protected base found for HEAD; pass --base explicitly" in result.output


def test_stack_unknown_base_is_an_error() -> None:
    repo = _linear_repo([Branch(id=A, name="main")])
    ctx = StacklineContext.for_test(repo=repo)

    result = CliRunner().invoke(cli, ["stack", "--base", "missing"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: Unknown revision: missing" in result.output


def test_stack_with_no_branches_on_path() -> None:
    repo = sibling_history([Branch(id="a", name="main"), Branch(id="x", name="side")])
    ctx = StacklineContext.for_test(repo=repo)

    result = CliRunner().invoke(cli, ["stack", "--base", "b"], obj=ctx)

    assert result.exit_code == 0
    assert "No branches on this stack" in result.output


# ============================================================================
# protected
# ============================================================================


def test_protected_lists_matching_branches() -> None:
    repo = _linear_repo(
        [
            Branch(id=C, name="release/1.0"),
            Branch(id=A, name="main"),
            Branch(id=B, name="feat"),
        ]
    )
    ctx = StacklineContext.for_test(repo=repo, protection=ProtectedBranches(["main", "release/*"]))

    result = CliRunner().invoke(cli, ["protected"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["main", "release/1.0"]


def test_protected_with_none_configured() -> None:
    repo = _linear_repo([Branch(id=A, name="main")])
    ctx = StacklineContext.for_test(repo=repo, protection=ProtectedBranches([]))

    result = CliRunner().invoke(cli, ["protected"], obj=ctx)

    assert result.exit_code == 0
    assert "No protected branches" in result.output
