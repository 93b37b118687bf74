"""Tests for vue_type_check.services.regions module."""

from __future__ import annotations

from vue_type_check.document import TextDocument
from vue_type_check.services.regions import (
    get_vue_document_regions,
    parse_attributes,
    parse_vue_regions,
)

COMPONENT = """<template>
  <div>
    <template v-if="ok"><span>{{ a }}</span></template>
  </div>
</template>

<script setup lang="ts">
const a = 1
</script>

<style scoped>
div { color: red; }
</style>
"""


class TestParseAttributes:
    """Tests for parse_attributes."""

    def test_quoted_and_bare(self) -> None:
        """Test quoted, single-quoted and bare attributes."""
        assert parse_attributes(' setup lang="ts" src=\'./a.ts\' scoped') == {
            "setup": "",
            "lang": "ts",
            "src": "./a.ts",
            "scoped": "",
        }


class TestParseVueRegions:
    """Tests for parse_vue_regions."""

    def test_blocks_in_order(self) -> None:
        """Test template, script and style blocks are found with languages."""
        regions = parse_vue_regions(COMPONENT)
        assert [r.kind for r in regions] == ["template", "script", "style"]
        assert [r.language_id for r in regions] == ["html", "ts", "css"]

    def test_nested_template_stays_in_outer_block(self) -> None:
        """Test a nested <template> does not end the template block early."""
        template = parse_vue_regions(COMPONENT)[0]
        content = COMPONENT[template.start : template.end]
        assert "v-if" in content
        assert content.rstrip().endswith("</div>")

    def test_script_content(self) -> None:
        """Test script content excludes the tags."""
        script = parse_vue_regions(COMPONENT)[1]
        assert COMPONENT[script.start : script.end].strip() == "const a = 1"
        assert script.attributes["setup"] == ""

    def test_external_script(self) -> None:
        """Test a src attribute is exposed on the region."""
        regions = parse_vue_regions('<template><p/></template>\n<script src="./other.ts"></script>')
        script = regions[1]
        assert script.src == "./other.ts"
        assert script.start == script.end

    def test_self_closing_script(self) -> None:
        """Test a self-closing script tag is an empty region."""
        regions = parse_vue_regions('<script src="./a.ts" />\n<template><p/></template>')
        assert [r.kind for r in regions] == ["script", "template"]
        assert regions[0].start == regions[0].end

    def test_unclosed_block_runs_to_end(self) -> None:
        """Test an unclosed block extends to the end of the text."""
        text = "<script>\nconst a = 1\n"
        (script,) = parse_vue_regions(text)
        assert script.end == len(text)


class TestGetVueDocumentRegions:
    """Tests for get_vue_document_regions."""

    def test_component(self) -> None:
        """Test region lookup by offset."""
        doc = TextDocument.create("file:///a.vue", "vue", 0, COMPONENT)
        regions = get_vue_document_regions(doc)
        assert regions.kind_at(COMPONENT.index("<span>")) == "template"
        assert regions.kind_at(COMPONENT.index("const a")) == "script"
        assert regions.kind_at(COMPONENT.index("color")) == "style"
        assert regions.kind_at(0) is None

    def test_script_file_is_one_region(self) -> None:
        """Test .ts documents are a single script region."""
        doc = TextDocument.create("file:///a.ts", "ts", 0, "export const a = 1\n")
        regions = get_vue_document_regions(doc)
        assert len(regions.regions) == 1
        assert regions.get_regions("script")[0].language_id == "ts"
        assert regions.kind_at(0) == "script"
        assert regions.get_regions("template") == []
