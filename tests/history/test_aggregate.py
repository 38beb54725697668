"""Tests for per-author and per-project aggregation."""

from datetime import timedelta

from git_moar.history.aggregate import aggregate_by_author, aggregate_project, timing_stats
from git_moar.history.models import TimingStats


class TestAggregateByAuthor:
    def test_groups_in_first_seen_order(self, alice_bob_commits):
        authors = aggregate_by_author(alice_bob_commits)
        assert [a.email for a in authors] == ["bob@x.com", "alice@x.com"]

    def test_alice_totals_and_averages(self, alice_bob_commits):
        alice = aggregate_by_author(alice_bob_commits)[1]

        assert alice.total_commits == 2
        assert alice.total_additions == 70
        assert alice.total_deletions == 15
        assert alice.avg_additions == 35
        assert alice.avg_deletions == 8  # 7.5 rounds half up
        assert alice.avg_time_between_commits == TimingStats(avg_hours=12, avg_days=0.5)

    def test_commits_most_recent_first(self, alice_bob_commits):
        alice = aggregate_by_author(list(reversed(alice_bob_commits)))[0]
        assert [c.id for c in alice.commits] == ["c2" * 20, "c1" * 20]

    def test_single_commit_author_has_zero_timing(self, alice_bob_commits):
        bob = aggregate_by_author(alice_bob_commits)[0]
        assert bob.total_commits == 1
        assert bob.avg_time_between_commits == TimingStats()
        assert bob.avg_deletions == 0

    def test_display_name_from_latest_commit(self, commit_factory, base_time):
        commits = [
            commit_factory(id="old", name="alice", when=base_time),
            commit_factory(id="new", name="Alice Smith", when=base_time + timedelta(days=1)),
        ]
        (alice,) = aggregate_by_author(commits)
        assert alice.display_name == "Alice Smith"

    def test_empty(self):
        assert aggregate_by_author([]) == []


class TestAggregateProject:
    def test_totals(self, alice_bob_commits):
        project = aggregate_project(alice_bob_commits)

        assert project.total_commits == 3
        assert project.total_authors == 2
        assert project.total_additions == 75
        assert project.total_deletions == 15
        assert project.avg_additions == 25
        assert project.avg_deletions == 5

    def test_timing_over_all_commits(self, alice_bob_commits):
        # gaps of 12h and 18h
        timing = aggregate_project(alice_bob_commits).avg_time_between_commits
        assert timing.avg_hours == 15
        assert timing.avg_days == 0.6

    def test_empty_input_is_all_zero(self):
        project = aggregate_project([])
        assert project.total_commits == 0
        assert project.avg_additions == 0
        assert project.avg_time_between_commits == TimingStats()


class TestTimingStats:
    def test_order_independent(self, alice_bob_commits):
        assert timing_stats(alice_bob_commits) == timing_stats(list(reversed(alice_bob_commits)))

    def test_days_derive_from_rounded_hours(self, commit_factory, base_time):
        commits = [
            commit_factory(id="a", when=base_time),
            commit_factory(id="b", when=base_time + timedelta(hours=35, minutes=40)),
        ]
        timing = timing_stats(commits)
        assert timing.avg_hours == 36
        assert timing.avg_days == 1.5
