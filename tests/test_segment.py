"""Unit tests for the Segment model."""

import pytest

from hl7codec.catalog import DEFAULT_REGISTRY, NTE, OBR, OBX, PID
from hl7codec.exceptions import (
    InvalidAppendError,
    InvalidDataError,
    ParseError,
    RangeError,
    UnknownFieldError,
)
from hl7codec.layout import Layout
from hl7codec.registry import GENERIC_LAYOUT
from hl7codec.segment import Segment
from hl7codec.tokenizer import Delimiters

PID_TEXT = "PID|1||P12345^^^HOSP||Doe^John^M||19850210|M"


# Tests for construction
class TestSegmentConstruction:
    """Tests for building segments from text or field lists."""

    def test_from_text(self):
        """Test delimited text is split into fields."""
        segment = Segment(PID_TEXT, layout=PID)

        assert segment.fields[0] == "PID"
        assert segment.fields[3] == "P12345^^^HOSP"
        assert len(segment) == 9

    def test_trailing_delimiter_keeps_empty_field(self):
        """Test trailing empty fields are not collapsed."""
        segment = Segment("PID|1||", layout=PID)

        assert segment.fields == ["PID", "1", "", ""]

    def test_from_field_list(self):
        """Test a literal field sequence is used as is."""
        segment = Segment(["NTE", "1", "", "hello"], layout=NTE)

        assert segment.comment == "hello"

    def test_empty_text_carries_layout_name(self):
        """Test an empty segment holds its name and one blank field."""
        segment = Segment("", layout=OBX)

        assert segment.fields == ["OBX", ""]
        assert segment.to_hl7() == "OBX|"

    def test_empty_generic_segment_has_no_fields(self):
        """Test the generic layout has no name to fill in."""
        segment = Segment()

        assert segment.layout is GENERIC_LAYOUT
        assert segment.fields == []
        assert segment.name == ""

    def test_invalid_raw_type(self):
        """Test unsupported raw data raises ParseError."""
        with pytest.raises(ParseError):
            Segment(42, layout=PID)

    def test_name(self):
        """Test name comes from the layout or, for generic, field 0."""
        assert Segment(PID_TEXT, layout=PID).name == "PID"
        assert Segment("ZXY|a|b").name == "ZXY"


# Tests for reading fields
class TestSegmentRead:
    """Tests for field reads."""

    def test_read_by_alias(self):
        """Test aliases resolve through the layout."""
        segment = Segment(PID_TEXT, layout=PID)

        assert segment.read("set_id") == "1"
        assert segment.read("patient_name") == "Doe^John^M"
        assert segment.read("admin_sex") == "M"

    def test_read_by_index(self):
        """Test integer indices read positions directly."""
        segment = Segment(PID_TEXT, layout=PID)

        assert segment.read(0) == "PID"
        assert segment.read(7) == "19850210"

    def test_read_past_end_returns_none(self):
        """Test a field not yet present reads as None."""
        segment = Segment(PID_TEXT, layout=PID)

        assert segment.read(50) is None
        assert segment.read("death_date") is None

    def test_read_negative_index(self):
        """Test negative indices raise RangeError."""
        segment = Segment(PID_TEXT, layout=PID)

        with pytest.raises(RangeError) as exc:
            segment.read(-1)

        assert "-1" in str(exc.value)

    def test_positional_accessor(self):
        """Test e<N> addresses field N on any segment."""
        segment = Segment(PID_TEXT, layout=PID)

        assert segment.read("e3") == "P12345^^^HOSP"
        assert segment.e5 == "Doe^John^M"
        assert segment["e8"] == "M"

    def test_positional_accessor_on_generic_segment(self):
        """Test generic segments are reachable by position only."""
        segment = Segment("ZXY|a|b")

        assert segment.e1 == "a"
        assert segment.e2 == "b"
        assert segment.e9 is None

    def test_attribute_access(self):
        """Test aliases are available as attributes."""
        segment = Segment(PID_TEXT, layout=PID)

        assert segment.set_id == "1"
        assert segment.patient_dob == "19850210"

    def test_unknown_attribute(self):
        """Test undeclared names raise AttributeError."""
        segment = Segment(PID_TEXT, layout=PID)

        with pytest.raises(AttributeError):
            segment.not_a_field
        assert not hasattr(segment, "observation_value")

    def test_unknown_alias(self):
        """Test read of an undeclared alias raises UnknownFieldError."""
        segment = Segment(PID_TEXT, layout=PID)

        with pytest.raises(UnknownFieldError) as exc:
            segment.read("observation_value")

        assert "observation_value" in str(exc.value)

    def test_single_item_sequence_reads_as_scalar(self):
        """Test a one-element sub-field list reads as its element."""
        segment = Segment(["NTE", ["1"], ["a", "b"]], layout=NTE)

        assert segment.read(1) == "1"
        assert segment.read(2) == ["a", "b"]


# Tests for writing fields
class TestSegmentWrite:
    """Tests for field writes."""

    def test_write_by_alias(self):
        """Test writes through an alias."""
        segment = Segment(PID_TEXT, layout=PID)

        segment.write("patient_name", "Roe^Jane")

        assert segment.fields[5] == "Roe^Jane"

    def test_write_extends_with_empty_fields(self):
        """Test writing past the end pads with empty strings."""
        segment = Segment("PID|1", layout=PID)

        segment.write(5, "X")

        assert segment.fields == ["PID", "1", "", "", "", "X"]
        assert len(segment) == 6

    def test_write_alias_past_end(self):
        """Test alias writes past the end also extend the segment."""
        segment = Segment("", layout=NTE)

        segment.comment = "note"

        assert segment.fields == ["NTE", "", "", "note"]

    def test_write_stores_strings(self):
        """Test values are stored in string form."""
        segment = Segment("", layout=OBX)

        segment.set_id = 3
        segment.e4 = None

        assert segment.fields[1] == "3"
        assert segment.fields[4] == ""

    def test_subscript_write(self):
        """Test subscript assignment by alias and index."""
        segment = Segment("ZXY|a")

        segment[3] = "c"
        segment["e2"] = "b"

        assert segment.to_hl7() == "ZXY|a|b|c"

    def test_write_negative_index(self):
        """Test negative writes raise RangeError."""
        segment = Segment("ZXY|a")

        with pytest.raises(RangeError):
            segment.write(-2, "x")

    def test_validator_rejects_value(self):
        """Test alias validators can reject a write."""
        segment = Segment(PID_TEXT, layout=PID)

        with pytest.raises(InvalidDataError) as exc:
            segment.admin_sex = "Q"

        assert "admin_sex" in str(exc.value)
        assert segment.admin_sex == "M"

    def test_validator_accepts_value(self):
        """Test valid values pass the validator."""
        segment = Segment(PID_TEXT, layout=PID)

        segment.admin_sex = "F"

        assert segment.admin_sex == "F"

    def test_validator_skipped_for_positional_write(self):
        """Test only alias writes are validated."""
        segment = Segment(PID_TEXT, layout=PID)

        segment.e8 = "Q"

        assert segment.fields[8] == "Q"

    def test_custom_validator(self):
        """Test a validator declared on a custom layout."""
        layout = Layout("ZAD").add_field("code", validator=str.isdigit)
        segment = Segment("", layout=layout)

        segment.code = "42"
        with pytest.raises(InvalidDataError):
            segment.code = "abc"

    def test_regular_attributes_still_work(self):
        """Test non-field attributes are set normally."""
        segment = Segment("ZXY|a")

        segment.note = "kept"

        assert segment.note == "kept"
        assert segment.fields == ["ZXY", "a"]


# Tests for weights and ordering
class TestSegmentOrdering:
    """Tests for sort weights."""

    def test_weight(self):
        """Test weight comes from the layout."""
        assert Segment("", layout=PID).weight == 1
        assert Segment("ZXY|a").weight == 999

    def test_compare(self):
        """Test compare returns 1 when this segment is lighter."""
        msh = DEFAULT_REGISTRY.create("MSH")
        pid = DEFAULT_REGISTRY.create("PID")

        assert msh.compare(pid) == 1
        assert pid.compare(msh) == -1
        assert pid.compare(DEFAULT_REGISTRY.create("PID")) == 0

    def test_compare_non_segment(self):
        """Test comparing with a non-segment gives None."""
        assert Segment("ZXY|a").compare("ZXY|a") is None

    def test_sorted_by_weight(self):
        """Test sorted() puts lower weights first."""
        segments = [
            DEFAULT_REGISTRY.create("OBX"),
            DEFAULT_REGISTRY.create("ZZZ"),
            DEFAULT_REGISTRY.create("PID"),
            DEFAULT_REGISTRY.create("MSH"),
        ]

        names = [segment.name for segment in sorted(segments)]

        assert names == ["MSH", "PID", "OBX", "ZZZ"]


# Tests for children
class TestSegmentChildren:
    """Tests for parent/child segments."""

    def test_children_only_on_parent_layouts(self):
        """Test only layouts declaring children have a child list."""
        assert Segment("", layout=OBR).has_children
        assert Segment("", layout=OBR).children == []
        assert Segment("", layout=PID).children is None
        assert not Segment("", layout=PID).has_children

    def test_append_non_segment_rejected(self):
        """Test child lists only take segments."""
        obr = Segment("", layout=OBR)

        with pytest.raises(InvalidAppendError):
            obr.children.append("OBX|1")
        with pytest.raises(InvalidAppendError):
            obr.children.extend([Segment("", layout=OBX), 5])
        with pytest.raises(InvalidAppendError):
            obr.children.insert(0, None)

    def test_serialize_with_children(self):
        """Test children follow the parent in wire form."""
        obr = Segment("OBR|1|ORD1", layout=OBR)
        obr.children.append(Segment("OBX|1|ST|GLU||95", layout=OBX))
        obr.children.append(Segment("NTE|1||fasting", layout=NTE))

        assert obr.to_hl7() == "OBR|1|ORD1\rOBX|1|ST|GLU||95\rNTE|1||fasting"
        assert str(obr) == obr.to_hl7()

    def test_children_share_parent_delimiters(self):
        """Test a child takes the parent's delimiter set."""
        delimiters = Delimiters(segment="\n")
        obr = Segment("OBR|1", layout=OBR, delimiters=delimiters)
        obx = Segment("OBX|1", layout=OBX)

        obr.children.append(obx)

        assert obx.delimiters is delimiters
        assert obr.to_hl7() == "OBR|1\nOBX|1"


# Tests for equality and serialization
class TestSegmentSerialization:
    """Tests for wire form and equality."""

    def test_unknown_segment_round_trip(self):
        """Test generic segments serialize byte-identically."""
        text = "ZXY|a||b^c|||"

        assert Segment(text).to_hl7() == text

    def test_list_field_joined_with_item_delimiter(self):
        """Test a list-valued field is joined with the item delimiter."""
        segment = Segment(["PID", "1", ["Doe", "John"]], layout=PID)

        assert segment.to_hl7() == "PID|1|Doe^John"

    def test_custom_field_delimiter(self):
        """Test serialization uses the segment's field delimiter."""
        delimiters = Delimiters(field="#")
        segment = Segment("ZXY#a#b", delimiters=delimiters)

        assert segment.fields == ["ZXY", "a", "b"]
        assert segment.to_hl7() == "ZXY#a#b"

    def test_equality(self):
        """Test segments compare field by field."""
        assert Segment(PID_TEXT, layout=PID) == Segment(PID_TEXT, layout=PID)
        assert Segment(PID_TEXT, layout=PID) != Segment("PID|2", layout=PID)
        assert Segment("ZXY|a") != "ZXY|a"

    def test_to_info(self):
        """Test the debug description mentions the layout and fields."""
        info = Segment("ZXY|a").to_info()

        assert "ZXY" in info
        assert "Default" in info
        assert "'a'" in info
