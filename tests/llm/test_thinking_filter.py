"""Tests for filtering reasoning blocks from model responses."""

import unittest

from plm_helper.llm.base import strip_thinking_tags


class TestThinkingFilter(unittest.TestCase):
    def test_each_tag_variant(self) -> None:
        for tag in ("think", "thinking", "thought", "reasoning"):
            with self.subTest(tag=tag):
                text = f"<{tag}>Let me analyze\nthis code...</{tag}>\n\nfeat: add feature"
                self.assertEqual(strip_thinking_tags(text), "feat: add feature")

    def test_case_insensitive(self) -> None:
        self.assertEqual(strip_thinking_tags("<THINK>x</Think>fix: y"), "fix: y")

    def test_multiple_blocks(self) -> None:
        text = "<think>a</think>feat: one<thinking>b</thinking> two"
        self.assertEqual(strip_thinking_tags(text), "feat: one two")

    def test_no_tags(self) -> None:
        self.assertEqual(strip_thinking_tags("  docs: plain  \n"), "docs: plain")

    def test_unclosed_tag_is_kept(self) -> None:
        self.assertEqual(strip_thinking_tags("<think>never closed"), "<think>never closed")


if __name__ == "__main__":
    unittest.main()
