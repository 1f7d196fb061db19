"""Unit tests for core/roster.py."""

from core.roster import TargetRoster


class TestTargetRoster:
    """Tests for the target allow-set."""

    def test_empty_roster_allows_everyone(self):
        """An empty roster means 'monitor all', not 'monitor none'."""
        roster = TargetRoster()

        assert roster.allows("42") is True
        assert roster.allows("7") is True
        assert len(roster) == 0

    def test_non_empty_roster_filters(self):
        roster = TargetRoster(["42"])

        assert roster.allows("42") is True
        assert roster.allows("7") is False

    def test_ids_are_normalized_to_strings(self):
        roster = TargetRoster([42, " 7 ", ""])

        assert roster.ids() == ["42", "7"]
        assert 42 in roster

    def test_add_is_idempotent(self):
        roster = TargetRoster()

        assert roster.add("42") is True
        assert roster.add("42") is False
        assert roster.ids() == ["42"]

    def test_remove_is_idempotent(self):
        roster = TargetRoster(["42", "7"])

        assert roster.remove("7") is True
        assert roster.remove("7") is False
        assert roster.ids() == ["42"]

    def test_removing_last_target_reopens_to_everyone(self):
        roster = TargetRoster(["42"])

        roster.remove("42")

        assert roster.allows("7") is True

    def test_replace_swaps_whole_set(self):
        roster = TargetRoster(["1", "2"])

        roster.replace(["3"])

        assert roster.ids() == ["3"]
        assert roster.allows("1") is False

        roster.replace(None)
        assert len(roster) == 0
        assert roster.allows("1") is True

    def test_describe(self):
        assert TargetRoster().describe() == "all friends"
        assert TargetRoster(["2", "1"]).describe() == "1, 2"

    def test_mutations_are_logged(self, capsys):
        roster = TargetRoster()

        roster.add("42")
        roster.remove("42")

        out = capsys.readouterr().out
        assert "[Roster] Added 42" in out
        assert "[Roster] Removed 42" in out
