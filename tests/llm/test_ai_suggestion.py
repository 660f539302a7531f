import unittest
from pathlib import Path
from unittest.mock import MagicMock

from plm_helper.llm.ai_suggestion import filter_diff, generate_ai_suggestion
from plm_helper.llm.base import LLMError
from plm_helper.vcs.git_client import GitClient


def file_diff(path: str, body: str = "+line\n") -> str:
    return f"diff --git a/{path} b/{path}\n{body}"


class TestFilterDiff(unittest.TestCase):
    def test_drops_build_output_and_dependencies(self) -> None:
        diff = file_diff("dist/app.js") + file_diff("node_modules/x/index.js") + file_diff("README.md")
        result = filter_diff(diff)
        self.assertNotIn("dist/app.js", result)
        self.assertNotIn("node_modules", result)
        self.assertIn("README.md", result)

    def test_src_parts_first(self) -> None:
        diff = file_diff("README.md") + file_diff("src/a.ts") + file_diff("src/b.ts")
        result = filter_diff(diff)
        self.assertLess(result.index("src/b.ts"), result.index("src/a.ts"))
        self.assertLess(result.index("src/a.ts"), result.index("README.md"))

    def test_truncates(self) -> None:
        diff = file_diff("big.txt", "+" + "x" * 100 + "\n")
        self.assertEqual(len(filter_diff(diff, limit=20)), 20)

    def test_empty(self) -> None:
        self.assertEqual(filter_diff(""), "")


class TestGenerateAISuggestion(unittest.TestCase):
    def setUp(self) -> None:
        self.client = MagicMock(spec=GitClient(Path("/fake/repo")))
        self.client.get_staged_files.return_value = ["src/a.ts", "dist/a.js"]
        self.client.get_staged_diff.return_value = file_diff("src/a.ts") + file_diff("dist/a.js")
        self.provider = MagicMock()
        self.provider.name = "Fake"

    def test_success(self) -> None:
        self.provider.generate_commit_message.return_value = "feat: ai message"
        result = generate_ai_suggestion(self.client, self.provider)
        self.assertEqual(result.suggestion, "feat: ai message")
        self.assertIsNone(result.error)
        diff, files = self.provider.generate_commit_message.call_args[0]
        self.assertEqual(files, ["src/a.ts"])
        self.assertNotIn("dist/a.js", diff)

    def test_no_staged_files(self) -> None:
        self.client.get_staged_files.return_value = []
        result = generate_ai_suggestion(self.client, self.provider)
        self.assertEqual(result.error, "No staged files")
        self.provider.generate_commit_message.assert_not_called()

    def test_provider_error(self) -> None:
        self.provider.generate_commit_message.side_effect = LLMError("boom")
        result = generate_ai_suggestion(self.client, self.provider)
        self.assertIsNone(result.suggestion)
        self.assertEqual(result.error, "boom")

    def test_empty_response(self) -> None:
        self.provider.generate_commit_message.return_value = ""
        result = generate_ai_suggestion(self.client, self.provider)
        self.assertIn("empty response", result.error)


if __name__ == "__main__":
    unittest.main()
