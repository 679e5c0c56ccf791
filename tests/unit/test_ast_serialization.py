#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for block model and (de)serialization."""

import pytest

from block2html.ast import (
    Block,
    BlockList,
    block_to_dict,
    blocks_to_json,
    dict_to_block,
    dict_to_blocks,
    json_to_blocks,
)
from block2html.exceptions import MalformedBlockError


@pytest.mark.unit
class TestBlock:
    """Tests for the Block dataclass."""

    def test_raw_markup_skips_placeholders(self):
        """Test that child placeholders contribute nothing to raw markup."""
        block = Block("core/group", raw_segments=["<div>", None, "</div>"])

        assert block.raw_markup == "<div></div>"

    def test_content_prefers_rendered_markup(self):
        """Test that content returns rendered markup when present."""
        block = Block("core/paragraph", raw_segments=["<p>raw</p>"], rendered_markup="<p>rendered</p>")

        assert block.content == "<p>rendered</p>"
        assert Block("core/paragraph", raw_segments=["<p>raw</p>"]).content == "<p>raw</p>"

    def test_is_empty(self):
        """Test empty block detection."""
        assert Block("core/paragraph").is_empty
        assert not Block("core/paragraph", raw_segments=["<p>x</p>"]).is_empty
        assert not Block("core/group", children=[Block("core/paragraph")]).is_empty

    def test_walk_is_document_order(self):
        """Test walking a nested tree yields blocks depth-first."""
        inner = Block("core/paragraph")
        middle = Block("core/group", children=[inner])
        outer = Block("core/group", children=[middle, Block("core/separator")])

        assert [block.block_type for block in outer.walk()] == [
            "core/group",
            "core/group",
            "core/paragraph",
            "core/separator",
        ]

    def test_get_attribute(self):
        """Test attribute access with defaults."""
        block = Block("core/heading", attributes={"level": 3})

        assert block.get("level") == 3
        assert block.get("align") is None
        assert block.get("align", "left") == "left"


@pytest.mark.unit
class TestDictToBlock:
    """Tests for reading block dictionaries."""

    def test_canonical_keys(self):
        """Test the canonical spelling."""
        block = dict_to_block(
            {
                "blockType": "core/paragraph",
                "attributes": {"align": "center"},
                "children": [],
                "rawSegments": ["<p>Hi</p>"],
                "renderedMarkup": "<p class=\"x\">Hi</p>",
            }
        )

        assert block.block_type == "core/paragraph"
        assert block.attributes == {"align": "center"}
        assert block.raw_segments == ["<p>Hi</p>"]
        assert block.rendered_markup == '<p class="x">Hi</p>'

    def test_wordpress_keys(self):
        """Test the parse_blocks() spelling, including placeholders."""
        block = dict_to_block(
            {
                "blockName": "core/group",
                "attrs": {"tagName": "section"},
                "innerBlocks": [{"blockName": "core/paragraph", "innerContent": ["<p>a</p>"]}],
                "innerHTML": "<section></section>",
                "innerContent": ["<section>", None, "</section>"],
            }
        )

        assert block.block_type == "core/group"
        assert block.get("tagName") == "section"
        assert block.raw_segments == ["<section>", None, "</section>"]
        assert block.children[0].raw_markup == "<p>a</p>"

    def test_inner_html_fallback(self):
        """Test innerHTML is used when no segment list is given."""
        block = dict_to_block({"blockName": "core/paragraph", "innerHTML": "<p>x</p>"})

        assert block.raw_segments == ["<p>x</p>"]

    def test_null_block_name_is_raw_chunk(self):
        """Test freeform chunks (null block name) get an empty type."""
        block = dict_to_block({"blockName": None, "innerHTML": "\n\n"})

        assert block.block_type == ""

    def test_php_empty_attribute_array(self):
        """Test an empty list for attrs is read as no attributes."""
        assert dict_to_block({"blockName": "core/group", "attrs": []}).attributes == {}

    def test_rest_rendered_wrapper(self):
        """Test a REST {"rendered": ...} wrapper is unwrapped."""
        block = dict_to_block({"blockType": "core/paragraph", "rendered": {"rendered": "<p>r</p>", "protected": False}})

        assert block.rendered_markup == "<p>r</p>"

    @pytest.mark.parametrize(
        "data,fragment",
        [
            ({"blockType": 3}, "Block type"),
            ({"blockType": "core/p", "attributes": "x"}, "attributes"),
            ({"blockType": "core/p", "children": {"a": 1}}, "children"),
            ({"blockType": "core/p", "rawSegments": [1]}, "Raw segment"),
            ({"blockType": "core/p", "renderedMarkup": 5}, "Rendered markup"),
        ],
    )
    def test_malformed_fields(self, data, fragment):
        """Test malformed fields raise MalformedBlockError."""
        with pytest.raises(MalformedBlockError, match=fragment):
            dict_to_block(data)

    def test_error_path_points_at_child(self):
        """Test the error message carries the location of the bad child."""
        data = {"blockType": "core/group", "children": [{"blockType": "core/p"}, "oops"]}

        with pytest.raises(MalformedBlockError) as exc_info:
            dict_to_block(data)

        assert exc_info.value.path == "block.children[1]"
        assert "block.children[1]" in str(exc_info.value)


@pytest.mark.unit
class TestDictToBlocks:
    """Tests for reading whole documents."""

    def test_list(self):
        """Test a bare list of blocks."""
        document = dict_to_blocks([{"blockType": "core/paragraph"}, {"blockType": "core/separator"}])

        assert len(document) == 2
        assert document.rendered_markup is None

    def test_wrapper_with_rendered(self):
        """Test a wrapper dict with whole-document markup."""
        document = dict_to_blocks({"blocks": [], "rendered": "<p>all</p>"})

        assert list(document) == []
        assert document.rendered_markup == "<p>all</p>"

    def test_single_block(self):
        """Test one block dict becomes a one-block document."""
        document = dict_to_blocks({"blockType": "core/paragraph"})

        assert [block.block_type for block in document] == ["core/paragraph"]

    def test_wrong_shape(self):
        """Test unsupported document types are rejected."""
        with pytest.raises(MalformedBlockError):
            dict_to_blocks("not blocks")
        with pytest.raises(MalformedBlockError):
            dict_to_blocks({"blocks": "nope"})


@pytest.mark.unit
class TestJson:
    """Tests for JSON helpers."""

    def test_invalid_json(self):
        """Test invalid JSON raises MalformedBlockError with the cause."""
        with pytest.raises(MalformedBlockError) as exc_info:
            json_to_blocks("{not json")

        assert exc_info.value.original_error is not None

    def test_output_uses_canonical_keys(self):
        """Test serialization writes canonical key names."""
        block = Block("core/paragraph", {"align": "left"}, raw_segments=["<p>x</p>"])

        assert block_to_dict(block) == {
            "blockType": "core/paragraph",
            "attributes": {"align": "left"},
            "children": [],
            "rawSegments": ["<p>x</p>"],
        }

    def test_written_document_reads_back(self):
        """Test a document written to JSON reads back equal."""
        document = BlockList(
            blocks=[Block("core/group", children=[Block("core/paragraph", raw_segments=["<p>x</p>"])],
                          raw_segments=["<div>", None, "</div>"])],
            rendered_markup="<div><p>x</p></div>",
        )

        assert json_to_blocks(blocks_to_json(document)) == document
