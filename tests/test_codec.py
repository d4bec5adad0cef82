"""Tests for the persisted text format."""

import pytest

from daylog.core.codec import ParserState, StateParser, parse, serialize
from daylog.core.tasks import CarryStub, Store, Task, TaskStatus


@pytest.fixture
def store():
    store = Store()
    day = store.bucket("2024-06-03")
    day.tasks = [
        Task(title="Report", detail="first draft", status=TaskStatus.CARRY),
        Task(title="Email", detail="", status=TaskStatus.DONE),
    ]
    day.next = [CarryStub(title="Report", detail="first draft")]
    store.bucket("2024-06-04").tasks = [Task(title="Report", detail="first draft")]
    store.bucket("2024-06-05")
    return store


EXPECTED = """\
2024-06-03:
  tasks:
    - task: Report
      detail: "first draft"
      status: carry
    - task: Email
      detail: ""
      status: done
  next:
    - task: Report
      detail: "first draft"
2024-06-04:
  tasks:
    - task: Report
      detail: "first draft"
      status: todo
  next:
    []
"""


class TestSerialize:
    def test_exact_layout(self, store):
        assert serialize(store) == EXPECTED

    def test_dates_sorted(self):
        store = Store()
        for day in ["2024-06-05", "2024-06-03"]:
            store.bucket(day).tasks.append(Task(title=day))
        text = serialize(store)
        assert text.index("2024-06-03:") < text.index("2024-06-05:")

    def test_empty_bucket_omitted(self):
        store = Store()
        store.bucket("2024-06-03")
        assert serialize(store) == ""

    def test_empty_tasks_rendered_as_marker(self):
        store = Store()
        store.bucket("2024-06-03").next.append(CarryStub(title="A", detail="x"))
        assert serialize(store) == (
            "2024-06-03:\n"
            "  tasks:\n"
            "    []\n"
            "  next:\n"
            "    - task: A\n"
            '      detail: "x"\n'
        )

    def test_quotes_not_escaped(self):
        store = Store()
        store.bucket("2024-06-03").tasks.append(Task(title="A", detail='say "hi"'))
        assert 'detail: "say "hi""' in serialize(store)

    def test_unknown_status_written_verbatim(self):
        store = Store()
        store.bucket("2024-06-03").tasks.append(Task(title="A", status="blocked"))
        assert "      status: blocked\n" in serialize(store)


class TestParse:
    def test_round_trip(self, store):
        assert parse(serialize(store)) == store.non_empty()

    def test_round_trip_unicode(self):
        store = Store()
        store.bucket("2026-01-09").tasks.append(
            Task(title="テストタスク", detail="テスト詳細", status=TaskStatus.DOING)
        )
        assert parse(serialize(store)) == store

    def test_statuses_become_enum_members(self, store):
        parsed = parse(serialize(store))
        assert parsed.bucket("2024-06-03").tasks[0].status is TaskStatus.CARRY

    def test_quoted_title_kept_verbatim(self):
        text = (
            "2026-01-09:\n"
            "  tasks:\n"
            '    - task: "テストタスク"\n'
            '      detail: "テスト詳細"\n'
            "      status: doing\n"
            "  next: []"
        )
        parsed = parse(text)
        assert parsed.bucket("2026-01-09").tasks == [
            Task(title='"テストタスク"', detail="テスト詳細", status=TaskStatus.DOING)
        ]
        assert parsed.bucket("2026-01-09").next == []

    @pytest.mark.parametrize("title", ['"quoted"', '"', '"a" and "b"'])
    def test_round_trip_title_with_quotes(self, title):
        store = Store()
        store.bucket("2024-06-03").tasks.append(Task(title=title))
        assert parse(serialize(store)) == store

    @pytest.mark.parametrize("title", ["  A ", " leading", "trailing  ", "a  b"])
    def test_round_trip_title_whitespace(self, title):
        store = Store()
        store.bucket("2024-06-03").tasks.append(Task(title=title))
        bucket = parse(serialize(store)).bucket("2024-06-03")
        assert bucket.tasks[0].title == title

    def test_title_without_separator_space(self):
        text = "2024-06-03:\n  tasks:\n    - task:A\n"
        assert parse(text).bucket("2024-06-03").tasks == [Task(title="A")]

    def test_carry_stub_title_whitespace_kept(self):
        store = Store()
        store.bucket("2024-06-03").next.append(CarryStub(title=" B ", detail="d"))
        assert parse(serialize(store)) == store

    def test_skips_comments_and_blank_lines(self):
        text = "# saved by hand\n\n2024-06-03:\n  # note\n  tasks:\n\n    - task: A\n"
        assert parse(text).bucket("2024-06-03").tasks == [Task(title="A")]

    def test_unknown_status_kept(self):
        text = "2024-06-03:\n  tasks:\n    - task: A\n      status: blocked\n"
        assert parse(text).bucket("2024-06-03").tasks[0].status == "blocked"

    def test_detail_without_closing_quote(self):
        text = '2024-06-03:\n  tasks:\n    - task: A\n      detail: "  unfinished  \n'
        assert parse(text).bucket("2024-06-03").tasks[0].detail == "unfinished"

    def test_detail_without_opening_quote_ignored(self):
        text = "2024-06-03:\n  tasks:\n    - task: A\n      detail: bare\n"
        assert parse(text).bucket("2024-06-03").tasks[0].detail == ""

    def test_next_items_have_no_status(self):
        text = "2024-06-03:\n  next:\n    - task: A\n      detail: \"x\"\n      status: done\n"
        assert parse(text).bucket("2024-06-03").next == [CarryStub(title="A", detail="x")]

    def test_lines_before_first_date_ignored(self):
        text = "tasks:\n- task: Orphan\nstatus: done\n2024-06-03:\n  tasks:\n    - task: A\n"
        parsed = parse(text)
        assert parsed.dates() == ["2024-06-03"]
        assert parsed.bucket("2024-06-03").tasks == [Task(title="A")]

    def test_new_date_resets_section(self):
        text = "2024-06-03:\n  tasks:\n    - task: A\n2024-06-04:\n    - task: B\n"
        parsed = parse(text)
        assert parsed.bucket("2024-06-03").tasks == [Task(title="A")]
        assert parsed.bucket("2024-06-04").tasks == []

    def test_repeated_date_appends(self):
        text = "2024-06-03:\n  tasks:\n    - task: A\n2024-06-03:\n  tasks:\n    - task: B\n"
        assert [t.title for t in parse(text).bucket("2024-06-03").tasks] == ["A", "B"]

    def test_empty_marker_is_noop(self):
        text = "2024-06-03:\n  tasks:\n    []\n  next:\n    []\n"
        parsed = parse(text)
        assert parsed.bucket("2024-06-03").tasks == []
        assert parsed.bucket("2024-06-03").next == []

    def test_crlf_line_endings(self):
        text = "2024-06-03:\r\n  tasks:\r\n    - task: A\r\n      status: done\r\n"
        assert parse(text).bucket("2024-06-03").tasks == [Task(title="A", status=TaskStatus.DONE)]

    @pytest.mark.parametrize("text", [
        "",
        "\x00\x01\x02",
        "- task:\ndetail: \"\nstatus:",
        "2024-06-03:\n- task:\n  detail: \"\n  status:\n",
        "{not: [valid, yaml",
        "2024-06-03:\n  tasks:\n    - task:\n      detail: \"\"\"\"\n",
        "9999-99-99:\n  tasks:\n    - task: x\n",
    ])
    def test_never_raises(self, text):
        assert isinstance(parse(text), Store)


class TestStateParser:
    def test_state_transitions(self):
        parser = StateParser()
        assert parser.state == ParserState.AWAITING_DATE

        parser.feed("2024-06-03:")
        assert parser.state == ParserState.IN_BUCKET

        parser.feed("  tasks:")
        assert parser.state == ParserState.IN_TASKS

        parser.feed("    - task: A")
        assert parser.item == Task(title="A")

        parser.feed("  next:")
        assert parser.state == ParserState.IN_NEXT
        assert parser.item is None

    def test_item_outside_section_dropped(self):
        parser = StateParser()
        parser.feed("2024-06-03:")
        parser.feed("- task: A")
        parser.feed('detail: "x"')
        assert parser.item is None
        assert parser.store.bucket("2024-06-03").tasks == []
