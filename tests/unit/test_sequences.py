import pytest

from pgdiagnose.domain import Plan, Severity
from pgdiagnose.probes import SequenceExhaustionProbe, sequence_severity
from pgdiagnose.probes.queries import INT4_SEQUENCES_SQL
from pgdiagnose.probes.sequences import quote_sequence


def _discovered(*names: str) -> dict:
    return {
        INT4_SEQUENCES_SQL: [
            {"col": f"public.{name}(id)", "seq": f"public.{name}_id_seq"} for name in names
        ]
    }


class TestQuoteSequence:
    def test_quotes_both_parts(self) -> None:
        assert quote_sequence("public.users_id_seq") == '"public"."users_id_seq"'

    @pytest.mark.parametrize(
        "name",
        ["users_id_seq", "public.users id seq", "public.x; DROP TABLE y", "a.b.c", ""],
    )
    def test_rejects_non_identifiers(self, name: str) -> None:
        assert quote_sequence(name) is None


class TestSequenceSeverity:
    def test_empty_is_green(self) -> None:
        assert sequence_severity([]) == Severity.GREEN

    def test_yellow_band(self) -> None:
        assert sequence_severity([75.0, 80.0]) == Severity.YELLOW

    def test_red_at_ninety(self) -> None:
        assert sequence_severity([90.0]) == Severity.RED

    def test_max_decides(self) -> None:
        assert sequence_severity([76.0, 92.3]) == Severity.RED


class TestSequenceExhaustionProbe:
    async def test_no_sequences_is_green(self, make_connection) -> None:
        outcome = await SequenceExhaustionProbe().run(make_connection(), Plan())

        assert outcome.name == "Sequence Exhaustion"
        assert outcome.severity == Severity.GREEN
        assert outcome.findings == []

    async def test_exactly_cutoff_is_included(self, make_connection) -> None:
        conn = make_connection(_discovered("users"), {'"users_id_seq"': 75.0})

        outcome = await SequenceExhaustionProbe().run(conn, Plan())

        assert outcome.severity == Severity.YELLOW
        assert outcome.findings == [
            {"column": "public.users(id)", "sequence": "public.users_id_seq", "percent_used": 75.0}
        ]

    async def test_below_cutoff_is_excluded(self, make_connection) -> None:
        conn = make_connection(_discovered("users"), {'"users_id_seq"': 74.99})

        outcome = await SequenceExhaustionProbe().run(conn, Plan())

        assert outcome.severity == Severity.GREEN
        assert outcome.findings == []

    async def test_only_candidates_over_cutoff_are_reported(self, make_connection) -> None:
        conn = make_connection(
            _discovered("users", "orders", "events"),
            {'"users_id_seq"': 12.5, '"orders_id_seq"': 92.3, '"events_id_seq"': 80.0},
        )

        outcome = await SequenceExhaustionProbe().run(conn, Plan())

        assert outcome.severity == Severity.RED
        assert [f["sequence"] for f in outcome.findings] == [
            "public.orders_id_seq",
            "public.events_id_seq",
        ]

    async def test_failed_measurement_drops_candidate(self, make_connection) -> None:
        conn = make_connection(
            _discovered("users", "orders"),
            {'"users_id_seq"': OSError("permission denied"), '"orders_id_seq"': 81.0},
        )

        outcome = await SequenceExhaustionProbe().run(conn, Plan())

        assert outcome.severity == Severity.YELLOW
        assert [f["sequence"] for f in outcome.findings] == ["public.orders_id_seq"]

    async def test_unparsable_sequence_name_is_ignored(self, make_connection) -> None:
        conn = make_connection(
            {INT4_SEQUENCES_SQL: [{"col": "public.t(id)", "seq": "public.weird name"}]},
            {"weird": 99.0},
        )

        outcome = await SequenceExhaustionProbe().run(conn, Plan())

        assert outcome.severity == Severity.GREEN
        assert outcome.findings == []
        assert conn.queries == [INT4_SEQUENCES_SQL]

    async def test_discovery_failure_propagates(self, make_connection) -> None:
        conn = make_connection({INT4_SEQUENCES_SQL: OSError("connection reset")})

        with pytest.raises(OSError):
            await SequenceExhaustionProbe().run(conn, Plan())

    async def test_sequence_outside_table_schema_is_measured(self, make_connection) -> None:
        conn = make_connection(
            {INT4_SEQUENCES_SQL: [{"col": "public.orders(id)", "seq": "ids.Orders_id_seq"}]},
            {'"ids"."Orders_id_seq"': 91.0},
        )

        outcome = await SequenceExhaustionProbe().run(conn, Plan())

        assert outcome.severity == Severity.RED
        assert outcome.findings == [
            {"column": "public.orders(id)", "sequence": "ids.Orders_id_seq", "percent_used": 91.0}
        ]
        assert 'FROM "ids"."Orders_id_seq"' in conn.queries[-1]


class TestDiscoveryQuery:
    def test_resolves_sequence_through_default_dependency(self) -> None:
        assert "JOIN pg_depend" in INT4_SEQUENCES_SQL
        assert "s.oid = dep.refobjid" in INT4_SEQUENCES_SQL

    def test_reports_sequence_in_its_own_schema(self) -> None:
        assert "sns.nspname || '.' || s.relname AS seq" in INT4_SEQUENCES_SQL
        assert "s.relnamespace = c.relnamespace" not in INT4_SEQUENCES_SQL
