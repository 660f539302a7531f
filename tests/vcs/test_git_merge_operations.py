"""Tests for merge, rebase, conflict resolution and undo helpers."""

import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from plm_helper.vcs.git_client import GitClient


def completed(stdout: str = "", returncode: int = 0) -> SimpleNamespace:
    return SimpleNamespace(stdout=stdout, stderr="", returncode=returncode)


@patch.object(GitClient, "_run", autospec=True)
class TestGitMergeOperations(unittest.TestCase):
    def setUp(self) -> None:
        self.client = GitClient(Path("/fake/repo"))

    def calls(self, mock_run):
        return [c[0][1] for c in mock_run.call_args_list]

    def test_merge_no_ff(self, mock_run) -> None:
        self.client.merge("topic", no_ff=True)
        mock_run.assert_called_once_with(self.client, ["merge", "--no-ff", "topic"])

    def test_merge_and_rebase_abort(self, mock_run) -> None:
        self.client.merge_abort()
        self.client.rebase_abort()
        self.assertEqual(self.calls(mock_run), [["merge", "--abort"], ["rebase", "--abort"]])

    def test_rebase(self, mock_run) -> None:
        self.client.rebase("main")
        mock_run.assert_called_once_with(self.client, ["rebase", "main"])

    def test_rebase_continue_does_not_open_an_editor(self, mock_run) -> None:
        self.client.rebase_continue()
        mock_run.assert_called_once_with(self.client, ["-c", "core.editor=true", "rebase", "--continue"])

    def test_conflicts_come_from_unmerged_status_codes(self, mock_run) -> None:
        mock_run.return_value = completed("## main\0UU src/app.ts\0M  done.ts\0")
        self.assertEqual(self.client.get_conflicted_files(), ["src/app.ts"])
        self.assertTrue(self.client.has_conflicts())
        mock_run.return_value = completed("## main\0M  done.ts\0")
        self.assertFalse(self.client.has_conflicts())

    def test_accept_ours_and_theirs_stage_the_path(self, mock_run) -> None:
        self.client.accept_ours("a b.ts")
        self.client.accept_theirs("c.ts")
        self.assertEqual(
            self.calls(mock_run),
            [
                ["checkout", "--ours", "--", "a b.ts"],
                ["add", "--", "a b.ts"],
                ["checkout", "--theirs", "--", "c.ts"],
                ["add", "--", "c.ts"],
            ],
        )

    def test_mark_resolved(self, mock_run) -> None:
        self.client.mark_resolved([])
        mock_run.assert_not_called()
        self.client.mark_resolved(["a.ts", "b.ts"])
        mock_run.assert_called_once_with(self.client, ["add", "--", "a.ts", "b.ts"])

    def test_revert_returns_new_short_hash(self, mock_run) -> None:
        mock_run.side_effect = [completed(""), completed("beef123\n")]
        self.assertEqual(self.client.revert("abc1234"), "beef123")
        self.assertEqual(self.calls(mock_run)[0], ["revert", "--no-edit", "abc1234"])

    def test_reset_modes(self, mock_run) -> None:
        self.client.reset()
        self.client.reset("hard", "origin/main")
        self.assertEqual(
            self.calls(mock_run),
            [["reset", "--mixed", "HEAD~1"], ["reset", "--hard", "origin/main"]],
        )

    def test_reset_rejects_unknown_mode(self, mock_run) -> None:
        with self.assertRaises(ValueError):
            self.client.reset("keep")
        mock_run.assert_not_called()


if __name__ == "__main__":
    unittest.main()
