"""Tests for WorktreeService"""
import os

import pytest

from tak.exceptions import GitOperationError
from tak.services.git.worktrees import WorktreeService, parse_worktree_porcelain


PORCELAIN = """worktree /src/myapp
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /src/myapp/trees/armstrong
HEAD 2222222222222222222222222222222222222222
branch refs/heads/feature/login

worktree /src/myapp/trees/hickey
HEAD 3333333333333333333333333333333333333333
detached
"""


class TestParsePorcelain:
    """Test parsing of `git worktree list --porcelain`."""

    def test_parses_blocks(self):
        worktrees = parse_worktree_porcelain(PORCELAIN)

        assert [wt.path for wt in worktrees] == [
            "/src/myapp",
            "/src/myapp/trees/armstrong",
            "/src/myapp/trees/hickey",
        ]
        assert worktrees[0].is_main is True
        assert worktrees[1].is_main is False
        assert worktrees[1].branch_name == "feature/login"
        assert worktrees[1].commit_sha.startswith("2222")

    def test_detached_head_has_no_branch(self):
        worktrees = parse_worktree_porcelain(PORCELAIN)
        assert worktrees[2].branch_name == ""

    def test_empty_output(self):
        assert parse_worktree_porcelain("") == []


class TestWorktreeLifecycle:
    """Test worktree operations against a real repository."""

    def test_add_worktree_creates_branch(self, git_repo, temp_dir):
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "trees", "armstrong")

        created = service.add_worktree(path, "feature/login")

        assert created is True
        assert os.path.isdir(path)
        assert "feature/login" in [b.name for b in git_repo.branches]

    def test_add_worktree_existing_branch(self, git_repo):
        git_repo.create_head("existing")
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "trees", "hickey")

        created = service.add_worktree(path, "existing")

        assert created is False
        assert service.get_worktree_branch(path) == "existing"

    def test_add_worktree_branch_checked_out_elsewhere(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "trees", "kay")

        with pytest.raises(GitOperationError, match="worktree add"):
            service.add_worktree(path, "main")

    def test_branch_exists(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        assert service.branch_exists("main") is True
        assert service.branch_exists("nope") is False

    def test_get_worktree_branch_matches_exact_path(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "trees", "kay")
        service.add_worktree(path, "feature/kay")

        assert service.get_worktree_branch(path) == "feature/kay"
        assert service.get_worktree_branch(path + "ak") is None

    def test_get_worktree_branch_relative_path(self, git_repo, monkeypatch):
        service = WorktreeService(git_repo.working_dir)
        service.add_worktree(os.path.join(git_repo.working_dir, "trees", "kay"), "feature/kay")
        monkeypatch.chdir(git_repo.working_dir)

        assert service.get_worktree_branch("trees/kay") == "feature/kay"

    def test_get_worktree_branch_outside_repository(self, temp_dir):
        service = WorktreeService(str(temp_dir))
        assert service.get_worktree_branch(str(temp_dir)) is None

    def test_get_current_branch(self, git_repo):
        assert WorktreeService(git_repo.working_dir).get_current_branch() == "main"

    def test_remove_clean_worktree(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "trees", "kay")
        service.add_worktree(path, "feature/kay")

        success, error = service.remove_worktree(path)

        assert success is True
        assert error is None
        assert not os.path.exists(path)

    def test_remove_dirty_worktree_requires_force(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        path = os.path.join(git_repo.working_dir, "trees", "kay")
        service.add_worktree(path, "feature/kay")
        with open(os.path.join(path, "scratch.txt"), "w") as f:
            f.write("work in progress")

        success, error = service.remove_worktree(path)
        assert success is False
        assert "worktree remove failed" in error
        assert os.path.isdir(path)

        success, error = service.remove_worktree(path, force=True)
        assert success is True
        assert not os.path.exists(path)

    def test_prune_worktrees(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        assert service.prune_worktrees() == (True, None)

    def test_delete_merged_branch(self, git_repo):
        git_repo.create_head("feature/done")
        service = WorktreeService(git_repo.working_dir)

        assert service.delete_branch("feature/done") == (True, None)
        assert "feature/done" not in [b.name for b in git_repo.branches]

    def test_delete_unmerged_branch_requires_force(self, git_repo):
        git_repo.git.checkout("-b", "feature/wip")
        with open(os.path.join(git_repo.working_dir, "wip.txt"), "w") as f:
            f.write("wip")
        git_repo.index.add(["wip.txt"])
        git_repo.index.commit("WIP")
        git_repo.git.checkout("main")
        service = WorktreeService(git_repo.working_dir)

        success, error = service.delete_branch("feature/wip")
        assert success is False
        assert error

        assert service.delete_branch("feature/wip", force=True) == (True, None)

    def test_delete_missing_branch(self, git_repo):
        success, error = WorktreeService(git_repo.working_dir).delete_branch("nope")
        assert success is False


    def test_cleanup_outside_repository_reports_failure(self, temp_dir):
        service = WorktreeService(str(temp_dir))

        for success, error in (
            service.prune_worktrees(),
            service.delete_branch("feature/login"),
            service.remove_worktree(str(temp_dir / "trees" / "kay"), force=True),
        ):
            assert success is False
            assert error.startswith("git ")
