"""Top-level block regions of Vue single file components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

from vue_type_check.document import TextDocument

RegionKind = Literal["template", "script", "style"]

DEFAULT_LANGUAGES: dict[str, str] = {
    "template": "html",
    "script": "javascript",
    "style": "css",
}

_BLOCK_OPEN = re.compile(r"<(template|script|style)\b([^>]*)>", re.IGNORECASE)
_TEMPLATE_TAG = re.compile(r"<(/?)template\b[^>]*?(/?)>", re.IGNORECASE)
_ATTRIBUTE = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?"""
)


@dataclass(frozen=True)
class Region:
    """One top-level block of a component.

    Attributes:
        kind: Block tag name.
        language_id: Value of the ``lang`` attribute, or the block default.
        start: Offset of the first character of the block content.
        end: Offset just past the block content.
        attributes: All attributes on the opening tag.
    """

    kind: RegionKind
    language_id: str
    start: int
    end: int
    attributes: dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def src(self) -> str | None:
        return self.attributes.get("src")

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end


@dataclass(frozen=True)
class VueDocumentRegions:
    """Regions found in one document, in source order."""

    regions: tuple[Region, ...]

    def get_regions(self, kind: RegionKind) -> list[Region]:
        return [region for region in self.regions if region.kind == kind]

    def region_at(self, offset: int) -> Region | None:
        for region in self.regions:
            if region.contains(offset):
                return region
        return None

    def kind_at(self, offset: int) -> RegionKind | None:
        region = self.region_at(offset)
        return region.kind if region else None


def parse_attributes(raw: str) -> dict[str, str]:
    """Parse the attribute part of an opening tag. Bare attributes map to ""."""
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE.finditer(raw):
        name, double, single, bare = match.groups()
        attributes[name.lower()] = next((v for v in (double, single, bare) if v is not None), "")
    return attributes


def _find_template_end(text: str, start: int) -> tuple[int, int]:
    """Find the close of a template block, allowing nested <template> tags.

    Returns:
        (content end, offset after the closing tag). Unclosed blocks run to
        the end of the text.
    """
    depth = 1
    for match in _TEMPLATE_TAG.finditer(text, start):
        closing, self_closing = match.groups()
        if closing:
            depth -= 1
            if depth == 0:
                return match.start(), match.end()
        elif not self_closing:
            depth += 1
    return len(text), len(text)


def _find_raw_end(text: str, start: int, kind: str) -> tuple[int, int]:
    match = re.compile(rf"</{kind}\s*>", re.IGNORECASE).search(text, start)
    if match is None:
        return len(text), len(text)
    return match.start(), match.end()


def parse_vue_regions(text: str) -> tuple[Region, ...]:
    regions: list[Region] = []
    pos = 0
    while True:
        match = _BLOCK_OPEN.search(text, pos)
        if match is None:
            break
        kind = match.group(1).lower()
        raw_attributes = match.group(2)
        attributes = parse_attributes(raw_attributes.rstrip("/"))
        language_id = attributes.get("lang") or DEFAULT_LANGUAGES[kind]

        if raw_attributes.rstrip().endswith("/"):
            content_end = after = match.end()
        elif kind == "template":
            content_end, after = _find_template_end(text, match.end())
        else:
            content_end, after = _find_raw_end(text, match.end(), kind)

        regions.append(
            Region(
                kind=kind,  # type: ignore[arg-type]
                language_id=language_id,
                start=match.end(),
                end=content_end,
                attributes=attributes,
            )
        )
        pos = after
    return tuple(regions)


def get_vue_document_regions(document: TextDocument) -> VueDocumentRegions:
    """Split a document into regions.

    Script files (.ts/.tsx/.js) are a single script region spanning the
    whole document.
    """
    if document.language_id != "vue":
        return VueDocumentRegions(
            regions=(
                Region(
                    kind="script",
                    language_id=document.language_id,
                    start=0,
                    end=len(document.text),
                ),
            )
        )
    return VueDocumentRegions(regions=parse_vue_regions(document.text))
