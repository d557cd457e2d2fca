"""Unit tests for field resolution and parsing helpers."""

from datetime import datetime, timedelta, timezone

from contract_feed.normalization.fields import (
    as_list,
    description_text,
    first_date,
    first_present,
    first_text,
    parse_bool,
    parse_date,
    resolve_path,
)


class TestResolvePath:
    """Tests for dotted path lookup."""

    def test_nested_dict(self) -> None:
        data = {"award": {"awardee": {"name": "Acme"}}}
        assert resolve_path(data, "award.awardee.name") == "Acme"

    def test_list_index(self) -> None:
        data = {"naicsCodes": ["561720", "561210"]}
        assert resolve_path(data, "naicsCodes.0") == "561720"
        assert resolve_path(data, "naicsCodes.5") is None

    def test_missing_segment(self) -> None:
        """Missing or non-container segments resolve to None."""
        data = {"award": None, "title": "x"}
        assert resolve_path(data, "award.amount") is None
        assert resolve_path(data, "title.text") is None
        assert resolve_path(data, "nope") is None


class TestFirstPresent:
    """Tests for ordered alias resolution."""

    def test_first_match_wins(self) -> None:
        data = {"a": "first", "b": "second"}
        assert first_present(data, ("a", "b")) == "first"

    def test_skips_blank_values(self) -> None:
        data = {"a": "  ", "b": [], "c": "value"}
        assert first_present(data, ("a", "b", "c")) == "value"

    def test_none_when_nothing_matches(self) -> None:
        assert first_present({}, ("a", "b")) is None


class TestFirstText:
    """Tests for scalar text resolution."""

    def test_numbers_become_strings(self) -> None:
        assert first_text({"naics": 561720}, ("naics",)) == "561720"

    def test_skips_containers_and_bools(self) -> None:
        data = {"a": {"code": "x"}, "b": True, "c": " text "}
        assert first_text(data, ("a", "b", "c")) == "text"


class TestParseDate:
    """Tests for lenient date parsing."""

    def test_iso_date_is_utc(self) -> None:
        assert parse_date("2024-03-01") == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_zulu_suffix(self) -> None:
        assert parse_date("2024-03-01T12:30:00Z") == datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)

    def test_offset_preserved(self) -> None:
        parsed = parse_date("2024-04-01T17:00:00-04:00")
        assert parsed is not None
        assert parsed.utcoffset() == timedelta(hours=-4)

    def test_us_format(self) -> None:
        assert parse_date("03/01/2024") == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_unparseable_is_none(self) -> None:
        """Garbage and non-strings yield None instead of raising."""
        assert parse_date("TBD") is None
        assert parse_date("") is None
        assert parse_date(None) is None
        assert parse_date(20240301) is None

    def test_first_date_skips_unparseable(self) -> None:
        data = {"postedDate": "soon", "publishDate": "2024-03-02"}
        assert first_date(data, ("postedDate", "publishDate")) == datetime(2024, 3, 2, tzinfo=timezone.utc)


class TestParseBool:
    """Tests for yes/no flags."""

    def test_values(self) -> None:
        assert parse_bool("Yes") is True
        assert parse_bool("no") is False
        assert parse_bool(True) is True
        assert parse_bool("maybe") is None
        assert parse_bool(None) is None


class TestDescriptionText:
    """Tests for description flattening."""

    def test_string(self) -> None:
        assert description_text("  Scope of work ") == "Scope of work"

    def test_object_body(self) -> None:
        assert description_text({"body": "Body text"}) == "Body text"

    def test_list_joined(self) -> None:
        assert description_text([{"text": "Part one"}, "Part two", None]) == "Part one\n\nPart two"

    def test_empty_values(self) -> None:
        assert description_text(None) is None
        assert description_text("") is None
        assert description_text([]) is None
        assert description_text({"other": "x"}) is None


class TestAsList:
    """Tests for list wrapping."""

    def test_values(self) -> None:
        assert as_list(None) == []
        assert as_list("") == []
        assert as_list("https://x") == ["https://x"]
        assert as_list([1, 2]) == [1, 2]
