import pytest

from matchday.constants import CATEGORY_DRAW_HISTORY
from matchday.models.team import DrawRecord
from matchday.teams import teammate_history
from matchday.teams.teammate_history import TeammateHistory


def _record(date, *teams):
    return DrawRecord(
        date=date,
        method="seeded",
        teams={f"T{i + 1}": list(team) for i, team in enumerate(teams)},
    )


class _MemoryStore:
    def __init__(self, documents):
        self.documents = documents
        self.reads = []

    def get(self, category, date, league=None, default=None):
        self.reads.append((category, date, league))
        return self.documents.get(date, default)

    def set(self, category, date, value, default=None, merge=False, league=None):
        self.documents[date] = value
        return True


class _BrokenStore:
    def get(self, category, date, league=None, default=None):
        raise OSError("disk unavailable")

    def set(self, category, date, value, default=None, merge=False, league=None):
        return False


def test_build_counts_pairs_across_records():
    history = teammate_history.build(
        [
            _record("2025-01-01", ["A", "B", "C"], ["D", "E"]),
            _record("2025-01-08", ["A", "B"], ["C", "D", "E"]),
        ]
    )
    assert history.count("A", "B") == 2
    assert history.count("B", "A") == 2
    assert history.count("D", "E") == 2
    assert history.count("A", "C") == 1
    assert history.count("A", "D") == 0
    assert history.session_count == 2
    assert history.max_count == 2


def test_window_drops_older_records_entirely():
    records = [_record(f"2025-01-{day:02d}", ["A", "B"], ["C", "D"]) for day in range(1, 4)]
    records.append(_record("2024-12-01", ["A", "C"], ["B", "D"]))

    history = teammate_history.build(records, window=3)
    assert history.count("A", "B") == 3
    assert history.count("A", "C") == 0
    assert history.dates == ["2025-01-03", "2025-01-02", "2025-01-01"]


def test_build_accepts_stored_dictionaries():
    stored = _record("2025-02-01", ["A", "B"], ["C", "D"]).to_dict()
    history = teammate_history.build([stored])
    assert history.count("C", "D") == 1


def test_build_rejects_non_positive_window():
    with pytest.raises(ValueError):
        teammate_history.build([], window=0)


def test_pair_weight_sums_past_co_occurrences():
    history = teammate_history.build(
        [
            _record("2025-01-01", ["A", "B", "C"]),
            _record("2025-01-08", ["A", "B"], ["C"]),
        ]
    )
    assert history.pair_weight(["A", "B", "C"]) == 2 + 1 + 1
    assert history.pair_weight(["A", "D"]) == 0


def test_matrix_form_is_symmetric():
    history = teammate_history.build([_record("2025-01-01", ["A", "B"], ["C", "D"])])
    document = history.to_dict()

    assert document["players"] == ["A", "B", "C", "D"]
    assert document["matrix"]["A"]["B"] == document["matrix"]["B"]["A"] == 1
    assert document["metadata"] == {"totalPairs": 2, "maxPairingCount": 1}
    assert TeammateHistory.from_dict(document).pairs == history.pairs


def test_load_reads_most_recent_dates_through_store():
    store = _MemoryStore(
        {
            "2025-01-01": _record("2025-01-01", ["A", "B"]).to_dict(),
            "2025-01-08": _record("2025-01-08", ["A", "B"]).to_dict(),
            "2025-01-15": _record("2025-01-15", ["A", "C"]).to_dict(),
        }
    )
    history = teammate_history.load(
        store, "tuesday", ["2025-01-01", "2025-01-08", "2025-01-15"], window=2
    )
    assert history.count("A", "B") == 1
    assert history.count("A", "C") == 1
    assert store.reads[0] == (CATEGORY_DRAW_HISTORY, "2025-01-15", "tuesday")


def test_load_degrades_to_none_when_store_fails():
    assert teammate_history.load(_BrokenStore(), "tuesday", ["2025-01-01"]) is None
