#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the block converter."""

import logging

import pytest

from block2html.ast import Block, BlockList
from block2html.converter import (
    BlockConverter,
    ConversionContext,
    RenderedBlock,
    convert_blocks,
    prune_to_depth,
    render_block,
)
from block2html.exceptions import MalformedBlockError, RenderingError, ValidationError
from block2html.options import ConversionOptions
from block2html.registry import BlockHandler


def render_marker(block, context):
    """Handler that renders the block type and depth."""
    tag = "x-" + block.block_type.split("/")[-1]
    return f'<{tag} depth="{context.depth}">{context.render_inner(block)}</{tag}>'


def failing_handler(block, context):
    """Handler that always raises."""
    raise RuntimeError("handler broke")


@pytest.fixture
def paragraph():
    """Create a centered paragraph."""
    return Block("core/paragraph", {"align": "center"}, raw_segments=["<p>Hello</p>"])


@pytest.mark.unit
class TestSpecScenarios:
    """End-to-end scenarios for single paragraphs."""

    def test_paragraph_no_framework_raw(self, paragraph, builtin_registry):
        """Test the editor classes are applied to a rebuilt paragraph."""
        result = convert_blocks([paragraph], registry=builtin_registry)

        assert result == '<p class="wp-block-paragraph has-text-align-center">Hello</p>'

    def test_paragraph_tailwind(self, paragraph, builtin_registry):
        """Test the Tailwind alignment class is applied."""
        result = convert_blocks([paragraph], registry=builtin_registry, css_framework="tailwind")

        assert 'class="text-center"' in result
        assert result.endswith(">Hello</p>")

    def test_default_registry(self, paragraph):
        """Test the default registry is used when none is given."""
        assert convert_blocks([paragraph]) == '<p class="wp-block-paragraph has-text-align-center">Hello</p>'


@pytest.mark.unit
class TestDispatch:
    """Tests for handler resolution and fallbacks."""

    def test_unknown_type_uses_raw_segments(self, empty_registry):
        """Test blocks without a handler emit their raw segments."""
        block = Block("acme/unknown", raw_segments=["<div>", None, "</div>"])

        assert convert_blocks([block], registry=empty_registry) == "<div></div>"

    def test_empty_type_uses_raw_markup(self, builtin_registry):
        """Test raw chunks pass through."""
        assert convert_blocks([Block("", raw_segments=["\n<hr>\n"])], registry=builtin_registry) == "\n<hr>\n"

    def test_override_wins_over_registry(self, paragraph, builtin_registry):
        """Test per-call overrides take precedence."""
        result = convert_blocks(
            [paragraph], registry=builtin_registry, block_handlers={"core/paragraph": lambda b, c: "<p>custom</p>"}
        )

        assert result == "<p>custom</p>"

    def test_override_does_not_touch_registry(self, paragraph, builtin_registry):
        """Test overrides are scoped to the call."""
        convert_blocks([paragraph], registry=builtin_registry, block_handlers={"core/paragraph": lambda b, c: "x"})

        assert builtin_registry.lookup("core/paragraph").name == "core/paragraph"
        assert convert_blocks([paragraph], registry=builtin_registry) != "x"

    def test_handler_failure_falls_back(self, empty_registry, caplog):
        """Test a failing handler degrades to the raw markup."""
        empty_registry.register("acme/card", failing_handler)
        block = Block("acme/card", raw_segments=["<div>fallback</div>"])

        with caplog.at_level(logging.WARNING, logger="block2html.converter"):
            assert convert_blocks([block], registry=empty_registry) == "<div>fallback</div>"

        assert "handler broke" in caplog.text

    def test_handler_failure_strict(self, empty_registry):
        """Test strict mode raises RenderingError."""
        empty_registry.register("acme/card", failing_handler)

        with pytest.raises(RenderingError) as exc_info:
            convert_blocks([Block("acme/card")], registry=empty_registry, strict=True)

        assert exc_info.value.block_type == "acme/card"

    def test_non_string_result_falls_back(self, empty_registry):
        """Test a handler returning a non-string degrades to raw markup."""
        empty_registry.register("acme/card", lambda b, c: None)

        assert convert_blocks([Block("acme/card", raw_segments=["raw"])], registry=empty_registry) == "raw"

    def test_mapping_override_with_tables(self, empty_registry):
        """Test an override given as a mapping supplies its own class tables."""
        override = {
            "transform": lambda block, context: f'<div class="{context.classes_for(block)}"></div>',
            "cssMapping": {"tailwind": {"block": "card"}},
        }
        result = convert_blocks(
            [Block("acme/card")],
            registry=empty_registry,
            css_framework="tailwind",
            block_handlers={"acme/card": override},
        )

        assert result == '<div class="card"></div>'


@pytest.mark.unit
class TestNesting:
    """Tests for nested blocks."""

    def test_children_interleaved_at_placeholders(self, empty_registry):
        """Test rendered children replace placeholders in order, extras appended."""
        empty_registry.register("acme/box", render_marker)
        empty_registry.register("acme/item", lambda b, c: f"[{b.get('n')}]")
        block = Block(
            "acme/box",
            children=[Block("acme/item", {"n": 1}), Block("acme/item", {"n": 2}), Block("acme/item", {"n": 3})],
            raw_segments=["<ul>", None, "|", None, "</ul>"],
        )

        assert convert_blocks([block], registry=empty_registry) == '<x-box depth="0"><ul>[1]|[2]</ul>[3]</x-box>'

    def test_children_without_placeholders(self, empty_registry):
        """Test children are rendered alone when segments hold no placeholders."""
        empty_registry.register("acme/box", render_marker)
        block = Block("acme/box", children=[Block("acme/box")], raw_segments=["ignored"])

        assert convert_blocks([block], registry=empty_registry) == (
            '<x-box depth="0"><x-box depth="1"></x-box></x-box>'
        )

    def test_unknown_parent_known_child(self, builtin_registry):
        """Test an unknown container falls back to its raw segments, dropping children."""
        block = Block(
            "acme/unknown",
            children=[Block("core/paragraph", raw_segments=["<p>child</p>"])],
            raw_segments=["<section>", None, "</section>"],
        )

        assert convert_blocks([block], registry=builtin_registry) == "<section></section>"


@pytest.mark.unit
class TestOutputModes:
    """Tests for html and nodes output and the whole-document shortcut."""

    def test_nodes_mode(self, paragraph, builtin_registry):
        """Test one RenderedBlock per top-level block."""
        result = convert_blocks(
            [paragraph, Block("", raw_segments=["\n"])], registry=builtin_registry, output_mode="nodes"
        )

        assert result == [
            RenderedBlock(
                "core/paragraph", {"align": "center"}, '<p class="wp-block-paragraph has-text-align-center">Hello</p>'
            ),
            RenderedBlock("", {}, "\n"),
        ]

    def test_nodes_attributes_are_copies(self, paragraph, builtin_registry):
        """Test node attributes do not alias the source block."""
        result = convert_blocks([paragraph], registry=builtin_registry, output_mode="nodes")
        result[0].attributes["align"] = "left"

        assert paragraph.get("align") == "center"

    def test_document_shortcut(self, paragraph, builtin_registry):
        """Test whole-document rendered markup is returned without walking blocks."""
        document = BlockList([paragraph], rendered_markup="<article>whole</article>")

        assert convert_blocks(document, registry=builtin_registry, content_mode="trust-rendered") == (
            "<article>whole</article>"
        )
        assert convert_blocks(document, registry=builtin_registry, content_mode="blended") == (
            "<article>whole</article>"
        )

    def test_document_shortcut_nodes(self, paragraph, builtin_registry):
        """Test the shortcut in nodes mode yields a single raw chunk."""
        document = BlockList([paragraph], rendered_markup="<article>whole</article>")

        assert convert_blocks(document, registry=builtin_registry, content_mode="blended", output_mode="nodes") == [
            RenderedBlock("", {}, "<article>whole</article>")
        ]

    def test_raw_mode_ignores_document_markup(self, paragraph, builtin_registry):
        """Test raw mode always walks the blocks."""
        document = BlockList([paragraph], rendered_markup="<article>whole</article>")

        assert convert_blocks(document, registry=builtin_registry) == (
            '<p class="wp-block-paragraph has-text-align-center">Hello</p>'
        )

    def test_document_shortcut_runs_ssr(self, builtin_registry):
        """Test the shortcut output goes through the SSR optimizer."""
        document = BlockList([], rendered_markup="<div><!-- c --><p>x</p></div>")
        result = convert_blocks(
            document, registry=builtin_registry, content_mode="blended", ssr={"level": "minimal"}
        )

        assert result == "<div><p>x</p></div>"


@pytest.mark.unit
class TestNormalize:
    """Tests for input normalization."""

    def test_accepted_shapes(self, paragraph):
        """Test blocks, lists, dicts and documents are accepted."""
        converter = BlockConverter()

        assert converter.normalize(paragraph) == ([paragraph], None)
        assert converter.normalize([paragraph]) == ([paragraph], None)
        assert converter.normalize(BlockList([paragraph], "r")) == ([paragraph], "r")
        blocks, markup = converter.normalize({"blocks": [{"blockType": "core/paragraph"}], "rendered": "r"})
        assert [block.block_type for block in blocks] == ["core/paragraph"]
        assert markup == "r"

    def test_rejects_other_types(self):
        """Test unsupported input raises ValidationError."""
        with pytest.raises(ValidationError):
            BlockConverter().normalize("<p>not blocks</p>")
        with pytest.raises(ValidationError):
            BlockConverter().normalize([1, 2])

    def test_malformed_dict(self):
        """Test malformed block dicts raise MalformedBlockError."""
        with pytest.raises(MalformedBlockError):
            BlockConverter().normalize([{"blockType": "core/p", "attributes": 5}])

    def test_options_mapping(self, paragraph, builtin_registry):
        """Test options given as a mapping are read with from_dict."""
        result = convert_blocks([paragraph], {"cssFramework": "tailwind"}, registry=builtin_registry)

        assert 'class="text-center"' in result


@pytest.mark.unit
class TestOptimizationDepth:
    """Tests for nesting-depth pruning."""

    @pytest.fixture
    def tree(self):
        """Create a three-level tree."""
        leaf = Block("acme/leaf")
        middle = Block("acme/middle", children=[leaf])
        return [Block("acme/top", children=[middle])]

    def test_full_keeps_everything(self, tree):
        """Test full depth keeps the tree unchanged."""
        assert prune_to_depth(tree, "full") == tree

    def test_shallow_drops_children(self, tree, caplog):
        """Test shallow keeps only top-level blocks and warns."""
        with caplog.at_level(logging.WARNING, logger="block2html.converter"):
            pruned = prune_to_depth(tree, "shallow")

        assert pruned[0].children == []
        assert "dropped 2 nested block(s)" in caplog.text
        assert len(tree[0].children) == 1

    def test_medium_keeps_one_level(self, tree):
        """Test medium keeps direct children only."""
        pruned = prune_to_depth(tree, "medium")

        assert [child.block_type for child in pruned[0].children] == ["acme/middle"]
        assert pruned[0].children[0].children == []

    def test_pruning_applies_only_with_ssr(self, empty_registry, tree):
        """Test pruning is part of SSR optimization."""
        empty_registry.register("acme/top", render_marker)
        empty_registry.register("acme/middle", render_marker)
        empty_registry.register("acme/leaf", render_marker)

        full = convert_blocks(tree, registry=empty_registry)
        assert "x-leaf" in full

        disabled = convert_blocks(
            tree, registry=empty_registry, ssr={"enabled": False, "optimization_depth": "shallow"}
        )
        assert "x-leaf" in disabled

        shallow = convert_blocks(
            tree, registry=empty_registry, ssr={"level": "minimal", "optimization_depth": "shallow"}
        )
        assert "x-middle" not in shallow


@pytest.mark.unit
class TestConversionContext:
    """Tests for ConversionContext helpers."""

    def test_source_markup(self, builtin_registry):
        """Test rendered markup is preferred outside raw mode."""
        block = Block("core/paragraph", raw_segments=["<p>raw</p>"], rendered_markup="<p>rendered</p>")
        raw = ConversionContext(ConversionOptions(), builtin_registry)
        blended = ConversionContext(ConversionOptions(content_mode="blended"), builtin_registry)

        assert raw.source_markup(block) == "<p>raw</p>"
        assert blended.source_markup(block) == "<p>rendered</p>"

    def test_with_depth(self, builtin_registry):
        """Test depth increases without mutating the context."""
        context = ConversionContext(ConversionOptions(), builtin_registry)

        assert context.with_depth().depth == 1
        assert context.depth == 0

    def test_classes_for_explicit_handler(self, builtin_registry):
        """Test class tables of an explicit handler are used."""
        context = ConversionContext(ConversionOptions(css_framework="tailwind"), builtin_registry)
        handler = BlockHandler(render_marker, {"tailwind": {"block": "explicit"}})

        assert context.classes_for(Block("core/paragraph"), handler) == "explicit"

    def test_render_block_strict_passes_rendering_errors(self, empty_registry):
        """Test RenderingError from nested conversion is not re-wrapped."""

        def raise_rendering(block, context):
            raise RenderingError("inner", block_type="acme/inner")

        empty_registry.register("acme/card", raise_rendering)
        context = ConversionContext(ConversionOptions(), empty_registry)

        with pytest.raises(RenderingError) as exc_info:
            render_block(Block("acme/card"), context)

        assert exc_info.value.block_type == "acme/inner"


@pytest.mark.unit
class TestConvertBlocksKeywords:
    """Tests for option keywords passed to convert_blocks."""

    def test_configuration_spellings_accepted(self, paragraph, builtin_registry):
        """Test camelCase keys and aliases work as keywords."""
        result = convert_blocks(
            [paragraph], registry=builtin_registry, framework="tailwind", contentHandling="respect"
        )

        assert result == "<p>Hello</p>"

    def test_keywords_override_options(self, paragraph, builtin_registry):
        """Test keywords take precedence over the options argument."""
        options = ConversionOptions(css_framework="bootstrap")

        assert convert_blocks([paragraph], options, registry=builtin_registry, cssFramework="tailwind") == (
            '<p class="text-center">Hello</p>'
        )

    def test_unknown_keyword_rejected(self, paragraph):
        """Test an unknown keyword raises ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            convert_blocks([paragraph], colour="blue")

        assert exc_info.value.parameter_name == "colour"
