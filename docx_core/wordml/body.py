"""
Document Body Generator
=======================

Emits the WordprocessingML for ``word/document.xml``: one paragraph per
page, each holding an inline picture. The PNG rendition is the picture's
primary blip; the SVG rendition is attached through the Office 2016 SVG
extension, so readers that understand SVG draw the vector and all others
fall back to the raster.
"""

import copy
from dataclasses import dataclass
from typing import Any, Optional, Sequence
import logging

from lxml import etree

from docx_core.config.settings import LayoutConfig
from docx_core.packaging.base import Page
from docx_core.units import px_to_emu, px_to_twips
from docx_core.xml.utils import DOCUMENT_NSMAP, create_element, qn, serialize_xml, sub_element

logger = logging.getLogger(__name__)

SVG_BLIP_EXT_URI = "{96DAC541-7B7A-43D3-8B79-37D633B846F1}"
PICTURE_URI = "http://schemas.openxmlformats.org/drawingml/2006/picture"


@dataclass(frozen=True)
class PageFragment:
    """Body markup for one page, plus what ``finalize`` needs to size its section."""

    page_index: int
    width: int
    height: int
    element: Any


class DocumentBodyGenerator:
    """
    Builds ``word/document.xml`` one page at a time.

    Example:
        generator = DocumentBodyGenerator()
        fragments = [generator.emit_page(page, svg_rid, png_rid)]
        xml_bytes = generator.finalize(fragments)
    """

    def __init__(self, layout: Optional[LayoutConfig] = None):
        self.layout = layout or LayoutConfig()

    def emit_page(self, page: Page, vector_rel_id: str, raster_rel_id: str) -> PageFragment:
        """
        Build the paragraph holding one page's drawing.

        Args:
            page: Page to embed; its pixel dimensions size the drawing
            vector_rel_id: Relationship id of the SVG media part
            raster_rel_id: Relationship id of the PNG media part

        Returns:
            PageFragment wrapping a self-contained ``w:p`` element
        """
        cx = px_to_emu(page.width)
        cy = px_to_emu(page.height)
        picture_name = f"Page {page.number}"

        paragraph = create_element('w:p', nsmap=DOCUMENT_NSMAP)
        ppr = sub_element(paragraph, 'w:pPr')
        sub_element(ppr, 'w:widowControl')
        sub_element(ppr, 'w:spacing', {'w:before': 0, 'w:after': 0, 'w:line': 240, 'w:lineRule': 'auto'})
        sub_element(ppr, 'w:jc', {'w:val': self.layout.alignment})

        run = sub_element(paragraph, 'w:r')
        rpr = sub_element(run, 'w:rPr')
        sub_element(rpr, 'w:noProof')
        drawing = sub_element(run, 'w:drawing')

        inline = sub_element(drawing, 'wp:inline', {'distT': 0, 'distB': 0, 'distL': 0, 'distR': 0})
        sub_element(inline, 'wp:extent', {'cx': cx, 'cy': cy})
        sub_element(inline, 'wp:effectExtent', {'l': 0, 't': 0, 'r': 0, 'b': 0})
        sub_element(inline, 'wp:docPr', {'id': page.number, 'name': picture_name})
        frame_pr = sub_element(inline, 'wp:cNvGraphicFramePr')
        sub_element(frame_pr, 'a:graphicFrameLocks', {'noChangeAspect': 1})

        graphic = sub_element(inline, 'a:graphic')
        graphic_data = sub_element(graphic, 'a:graphicData', {'uri': PICTURE_URI})
        pic = sub_element(graphic_data, 'pic:pic')

        nv_pic_pr = sub_element(pic, 'pic:nvPicPr')
        sub_element(nv_pic_pr, 'pic:cNvPr', {'id': 0, 'name': picture_name})
        sub_element(nv_pic_pr, 'pic:cNvPicPr')

        blip_fill = sub_element(pic, 'pic:blipFill')
        blip = sub_element(blip_fill, 'a:blip', {'r:embed': raster_rel_id})
        ext_lst = sub_element(blip, 'a:extLst')
        ext = sub_element(ext_lst, 'a:ext', {'uri': SVG_BLIP_EXT_URI})
        sub_element(ext, 'asvg:svgBlip', {'r:embed': vector_rel_id})
        stretch = sub_element(blip_fill, 'a:stretch')
        sub_element(stretch, 'a:fillRect')

        sp_pr = sub_element(pic, 'pic:spPr')
        xfrm = sub_element(sp_pr, 'a:xfrm')
        sub_element(xfrm, 'a:off', {'x': 0, 'y': 0})
        sub_element(xfrm, 'a:ext', {'cx': cx, 'cy': cy})
        geometry = sub_element(sp_pr, 'a:prstGeom', {'prst': 'rect'})
        sub_element(geometry, 'a:avLst')

        logger.debug(f"Emitted page {page.index}: {page.width}x{page.height}px "
                     f"(raster {raster_rel_id}, vector {vector_rel_id})")
        return PageFragment(page.index, page.width, page.height, paragraph)

    def finalize(self, fragments: Sequence[PageFragment]) -> bytes:
        """
        Wrap the fragments, in the given order, into a complete document.

        When ``fit_page_to_image`` is set every page becomes its own section
        sized to the image; the last section's properties close the body.

        Args:
            fragments: Page fragments in page order

        Returns:
            Serialized ``word/document.xml``
        """
        root = create_element('w:document', nsmap=DOCUMENT_NSMAP)
        body = sub_element(root, 'w:body')

        last = len(fragments) - 1
        for position, fragment in enumerate(fragments):
            element = copy.deepcopy(fragment.element)
            body.append(element)
            if self.layout.fit_page_to_image and position != last:
                ppr = element.find(qn("w:pPr"))
                ppr.append(self._section_properties(fragment.width, fragment.height))

        if self.layout.fit_page_to_image and fragments:
            body.append(self._section_properties(fragments[-1].width, fragments[-1].height))
        else:
            body.append(self._default_section_properties())

        etree.cleanup_namespaces(root, top_nsmap=DOCUMENT_NSMAP)
        return serialize_xml(root)

    def _section_properties(self, width: int, height: int) -> Any:
        margin = px_to_twips(self.layout.margin_px)
        sect_pr = create_element('w:sectPr')
        size = {'w:w': px_to_twips(width + 2 * self.layout.margin_px),
                'w:h': px_to_twips(height + 2 * self.layout.margin_px)}
        if width > height:
            size['w:orient'] = 'landscape'
        sub_element(sect_pr, 'w:pgSz', size)
        sub_element(sect_pr, 'w:pgMar', {
            'w:top': margin, 'w:right': margin, 'w:bottom': margin, 'w:left': margin,
            'w:header': 0, 'w:footer': 0, 'w:gutter': 0,
        })
        return sect_pr

    def _default_section_properties(self) -> Any:
        margin = px_to_twips(self.layout.margin_px)
        sect_pr = create_element('w:sectPr')
        sub_element(sect_pr, 'w:pgMar', {
            'w:top': margin, 'w:right': margin, 'w:bottom': margin, 'w:left': margin,
            'w:header': 0, 'w:footer': 0, 'w:gutter': 0,
        })
        return sect_pr
