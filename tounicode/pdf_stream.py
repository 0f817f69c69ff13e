# tounicode - ToUnicode CMap writer
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PDF Stream Module

Wraps a ToUnicode CMap in a pypdf stream object so it can be added to a
PdfWriter and referenced from a font dictionary's /ToUnicode entry.
"""

import logging
import zlib

from .writer import ToUnicodeWriter

# pypdf is optional - gracefully handle if not installed
try:
    from pypdf.generic import NameObject, NumberObject, StreamObject
    PYPDF_AVAILABLE = True
except ImportError:
    PYPDF_AVAILABLE = False

logger = logging.getLogger(__name__)


def _require_pypdf():
    if not PYPDF_AVAILABLE:
        raise ImportError(
            "pypdf is required for PDF stream output. "
            "Install with: pip install pypdf"
        )


def _as_writer(source):
    if isinstance(source, ToUnicodeWriter):
        return source
    writer = ToUnicodeWriter()
    writer.update(source)
    return writer


def make_tounicode_stream(source, compress=False):
    """
    Build a /ToUnicode stream object.

    Args:
        source: ToUnicodeWriter, or dict mapping cid (int) -> unicode_string (str)
        compress: FlateDecode the stream data

    Returns:
        pypdf StreamObject holding the CMap
    """
    _require_pypdf()
    cmap_data = _as_writer(source).to_bytes()

    cmap_stream = StreamObject()
    if compress:
        compressed = zlib.compress(cmap_data)
        cmap_stream._data = compressed
        cmap_stream[NameObject('/Length')] = NumberObject(len(compressed))
        cmap_stream[NameObject('/Filter')] = NameObject('/FlateDecode')
    else:
        cmap_stream._data = cmap_data
        cmap_stream[NameObject('/Length')] = NumberObject(len(cmap_data))
    return cmap_stream


def attach_tounicode(pdf_writer, font_obj, source, compress=False):
    """
    Add a ToUnicode CMap to a PdfWriter and point the font at it.

    Args:
        pdf_writer: pypdf PdfWriter the stream is added to
        font_obj: font DictionaryObject that receives the /ToUnicode entry
        source: ToUnicodeWriter, or dict mapping cid (int) -> unicode_string (str)
        compress: FlateDecode the stream data

    Returns:
        Indirect reference to the stream, or None if there were no mappings
    """
    _require_pypdf()
    writer = _as_writer(source)
    if not len(writer):
        logger.debug("No ToUnicode mappings, /ToUnicode not written")
        return None

    tounicode_ref = pdf_writer._add_object(make_tounicode_stream(writer, compress))
    font_obj[NameObject('/ToUnicode')] = tounicode_ref
    return tounicode_ref
