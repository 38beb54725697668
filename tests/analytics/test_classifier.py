"""Tests for commit classification and message hygiene."""

import pytest

from git_moar.analytics.classifier import (
    Category,
    classify,
    commit_patterns,
    extract_issue_references,
    message_quality,
    referenced_issues,
    type_breakdown,
    type_stats,
)


class TestClassify:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("feat: add login", Category.FEATURE),
            ("fix(parser): handle tabs", Category.BUGFIX),
            ("DOCS: typo", Category.DOCS),
            ("revert: feat: add login", Category.REVERT),
            ("ci: cache deps", Category.CI),
        ],
    )
    def test_conventional_prefixes(self, message, expected):
        assert classify(message) == expected

    def test_prefix_beats_keywords(self):
        assert classify("feat: fix bug") == Category.FEATURE

    def test_bug_keywords_outrank_others(self):
        assert classify("Add guard for crash bug") == Category.BUGFIX

    @pytest.mark.parametrize(
        "message,expected",
        [
            ("Add config loader", Category.FEATURE),
            ("Update dependencies", Category.REFACTOR),
            ("More testing around edge cases", Category.TEST),
            ("Tweak README wording", Category.DOCS),
            ("Run prettier", Category.STYLE),
            ("Merge branch 'dev'", Category.MERGE),
            ("Bump to 2.0", Category.RELEASE),
        ],
    )
    def test_keyword_groups(self, message, expected):
        assert classify(message) == expected

    def test_keywords_match_whole_words(self):
        # "prefix" contains "fix" but is not the word
        assert classify("prefix tweaks") == Category.OTHER

    def test_empty_message(self):
        assert classify("") == Category.OTHER
        assert classify(None) == Category.OTHER


class TestTypeStats:
    def test_counts_and_percentages(self, commit_factory):
        commits = [
            commit_factory(id=str(i), summary=s)
            for i, s in enumerate(["feat: a", "fix: b", "feat: c", "wip"])
        ]

        stats = type_stats(commits)

        assert [(s.category, s.count, s.percentage) for s in stats] == [
            (Category.FEATURE, 2, 50.0),
            (Category.BUGFIX, 1, 25.0),
            (Category.OTHER, 1, 25.0),
        ]

    def test_breakdown_sums_to_commit_count(self, alice_bob_commits):
        assert sum(type_breakdown(alice_bob_commits).values()) == len(alice_bob_commits)

    def test_empty(self):
        assert type_stats([]) == []

    def test_to_dict_uses_category_value(self, commit_factory):
        (stat,) = type_stats([commit_factory(summary="feat: x")])
        assert stat.to_dict() == {"type": "feature", "count": 1, "percentage": 100.0}


class TestIssueReferences:
    def test_jira_then_issue_numbers(self):
        refs = extract_issue_references("PROJ-12 fixes #34", jira_base_url="https://jira.example.com/")

        assert [(r.kind, r.ref) for r in refs] == [("jira", "PROJ-12"), ("issue", "#34")]
        assert refs[0].url == "https://jira.example.com/browse/PROJ-12"
        assert refs[1].number == 34

    def test_no_jira_url_without_base(self):
        (ref,) = extract_issue_references("ABC-1 tidy")
        assert ref.url is None

    def test_none_found(self):
        assert extract_issue_references("plain message") == []

    def test_referenced_issues_dedupe_across_commits(self, commit_factory):
        commits = [
            commit_factory(id="c3", summary="#5 again"),
            commit_factory(id="c2", summary="ABC-1 and XYZ-2, #5"),
            commit_factory(id="c1", summary="ABC-1 start, ABC-1 again"),
        ]

        issues = referenced_issues(commits, jira_project_key="ABC")

        assert [(i.reference.ref, i.commit_ids) for i in issues] == [
            ("#5", ("c3", "c2")),
            ("ABC-1", ("c2", "c1")),
        ]


class TestMessageQuality:
    def test_all_good_messages(self, commit_factory):
        commits = [
            commit_factory(id="1", summary="feat: add login flow"),
            commit_factory(id="2", summary="fix: handle empty input"),
        ]
        quality = message_quality(commits)

        assert quality.conventional_commits_percent == 100.0
        assert quality.good_length_percent == 100.0
        assert quality.has_description_percent == 0.0
        assert quality.no_punctuation_percent == 100.0
        assert quality.overall_score == 75

    def test_sloppy_messages(self, commit_factory):
        commits = [
            commit_factory(id="1", summary="feat: add login flow"),
            commit_factory(id="2", summary="Fixed."),
        ]
        quality = message_quality(commits)

        assert quality.conventional_commits_percent == 50.0
        assert quality.good_length_percent == 50.0
        assert quality.no_punctuation_percent == 50.0
        assert quality.overall_score < 75

    def test_empty(self):
        assert message_quality([]).overall_score == 0


def test_commit_patterns(commit_factory):
    summaries = ["Add login", "Merge branch 'dev'", "wip", "fix #12"]
    commits = [commit_factory(id=str(i), summary=s) for i, s in enumerate(summaries)]

    patterns = {p.pattern: (p.count, p.percentage) for p in commit_patterns(commits)}

    assert patterns == {
        "starts_with_verb": (2, 50.0),
        "has_issue_reference": (1, 25.0),
        "is_one_word": (1, 25.0),
        "is_merge_commit": (1, 25.0),
        "is_verbose": (0, 0.0),
    }
