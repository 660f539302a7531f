"""
Rule-by-rule tests for the path heuristics in change_classifier.
"""

import pytest

from plm_helper.suggest.change_classifier import (
    FilePatternProfile,
    analyze_file_patterns,
    classify,
    determine_commit_type,
    determine_scope,
    generate_message,
)


class TestAnalyzeFilePatterns:
    def test_empty_profile(self):
        assert analyze_file_patterns([]) == FilePatternProfile()

    def test_new_files_flag(self):
        assert analyze_file_patterns(["src/newThing.ts"]).has_new_files is True
        assert analyze_file_patterns(["src/addUser.ts"]).has_new_files is True
        assert analyze_file_patterns(["src/thing.ts"]).has_new_files is False

    def test_deleted_files_never_detected(self):
        assert analyze_file_patterns(["deleted.ts", "removed/x.md"]).has_deleted_files is False

    def test_config_flag_variants(self):
        for path in ["app.config.ts", "a.json", "b.yml", "c.yaml", ".env.local"]:
            assert analyze_file_patterns([path]).has_config_files is True, path

    def test_workflow_flag_matches_bare_ci_and_cd(self):
        assert analyze_file_patterns(["src/circle.ts"]).has_workflow_files is True
        assert analyze_file_patterns(["src/cdk/stack.ts"]).has_workflow_files is True
        assert analyze_file_patterns(["src/app.ts"]).has_workflow_files is False

    def test_dependency_flag(self):
        assert analyze_file_patterns(["package.json"]).has_dependency_files is True
        assert analyze_file_patterns(["App.csproj"]).has_dependency_files is True
        assert analyze_file_patterns(["sub/package.json"]).has_dependency_files is False


class TestDetermineCommitType:
    def _type(self, files):
        return determine_commit_type(analyze_file_patterns(files), files)

    def test_test_beats_docs(self):
        assert self._type(["docs/a.test.md"]) == "test"

    def test_dependency_rule_needs_exactly_one_file(self):
        assert self._type(["package-lock.json"]) == "chore"
        # Two files fall through to the config rule instead.
        assert self._type(["package.json", "package-lock.json"]) == "chore"

    def test_style_requires_only_css_or_scss(self):
        assert self._type(["a.css", "b.scss"]) == "style"
        assert self._type(["theme.less"]) == "feat"

    def test_component_and_api_are_features(self):
        assert self._type(["src/App.tsx"]) == "feat"
        assert self._type(["src/UserController.ts"]) == "feat"

    def test_config_only_is_chore(self):
        assert self._type(["tsconfig.json", ".eslintrc.yml"]) == "chore"

    def test_default_is_feat(self):
        assert self._type(["src/main.py"]) == "feat"


class TestDetermineScope:
    def test_empty(self):
        assert determine_scope([]) is None

    def test_dictionary_order_decides_ties(self):
        # Matches both api and ui; api comes first.
        assert determine_scope(["src/components/api/Thing.tsx"]) == "api"
        # Matches both config and ci; config comes first.
        assert determine_scope([".github/workflows/release.yml"]) == "config"

    def test_every_file_must_match(self):
        assert determine_scope(["a.md", "docs/guide.rst"]) is None
        assert determine_scope(["a.md", "src/docs/guide.rst"]) == "docs"

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/fooBar.ts", "foo-bar"),
            ("src/UserProfile.ts", "user-profile"),
            ("src/XMLParser.ts", "xmlparser"),
            ("src/myHTTPClient.js", "my-httpclient"),
            ("lib/helpers.jsx", "ui"),
        ],
    )
    def test_file_name_fallback(self, path, expected):
        assert determine_scope([path]) == expected

    def test_file_name_fallback_uses_first_file_only(self):
        assert determine_scope(["README", "src/Foo.ts"]) is None
        assert determine_scope(["src/fooBar.ts", "x", "y"]) == "foo-bar"

    def test_file_name_fallback_limited_to_three_files(self):
        assert determine_scope(["src/a.ts", "src/b.ts", "src/c.ts", "src/d.ts"]) is None

    def test_top_level_file_has_no_slash(self):
        assert determine_scope(["index.ts"]) is None


class TestGenerateMessage:
    def test_component_directory_name(self):
        files = ["src/App.tsx", "src/components/Card/Card.tsx"]
        assert generate_message(analyze_file_patterns(files), files, "feat") == "update Card component"

    def test_components_without_directory(self):
        files = ["src/App.tsx", "src/Main.jsx"]
        assert generate_message(analyze_file_patterns(files), files, "feat") == "update components"

    def test_single_file_keeps_unknown_extension(self):
        assert generate_message(analyze_file_patterns(["theme.less"]), ["theme.less"], "feat") == "update theme.less"

    def test_chore_single_file(self):
        files = ["package-lock.json"]
        assert generate_message(analyze_file_patterns(files), files, "chore") == "update package-lock configuration"

    def test_fallback_counts_files(self):
        files = ["src/a.ts", "src/b.ts", "src/c.ts", "src/d.ts"]
        assert generate_message(analyze_file_patterns(files), files, "feat") == "update 4 files"


@pytest.mark.parametrize(
    "files, expected",
    [
        (["src/circle.ts"], "ci(circle): update circle workflow"),
        ([".github/workflows/release.yml"], "ci(config): update release workflow"),
        (["package-lock.json"], "chore(config): update package-lock configuration"),
        (["App.csproj"], "chore: update App.csproj configuration"),
        (["src/App.tsx", "src/Main.jsx"], "feat(ui): update components"),
        (["docs/guide.rst", "src/x.py"], "feat: update documentation"),
        (["theme.less"], "feat: update theme.less"),
        (["src/a.ts", "src/b.ts", "src/c.ts", "src/d.ts"], "feat: update 4 files"),
        (
            ["src/components/Button/Button.tsx", "src/components/Button/Button.css"],
            "feat(ui): update Button component",
        ),
    ],
)
def test_classify_end_to_end(files, expected):
    assert classify(files).full_message == expected
