# tounicode - ToUnicode CMap writer
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

"""
ToUnicode CMap Writer

Collects CID -> Unicode mappings and writes them as a ToUnicode CMap, the
resource a PDF font carries so text extraction can recover Unicode text from
glyph codes.

Adjacent CIDs that map to consecutive single code points are merged into one
bfrange record, and records are emitted in blocks of at most 100 (the CMap
operator argument limit). CIDs are always written with the full 16-bit
codespace <0000>-<FFFF>.
"""

import io
import logging
from typing import BinaryIO, Iterable, Iterator, Mapping, NamedTuple

from .error import InvalidArgument

logger = logging.getLogger(__name__)

CMAP_NAME = 'Adobe-Identity-UCS'
CID_SYSTEM_INFO = {
    'Registry': 'Adobe',
    'Ordering': 'UCS',
    'Supplement': 0,
}
MAX_CID = 0xFFFF
# Limit of entries per beginbfrange/endbfrange block
MAX_BATCH_SIZE = 100
# Documented limit for a destination string. Not checked on add().
MAX_TEXT_BYTES = 512


class CMapRange(NamedTuple):
    """One bfrange record: src_from..src_to -> dst, dst+1, ..."""
    src_from: int
    src_to: int
    dst: str


def compress_ranges(entries: Iterable[tuple[int, str]]) -> list[CMapRange]:
    """
    Merge ascending (cid, text) pairs into bfrange records.

    A record is extended only when the next CID follows the previous one and
    both texts are single code points with the second exactly one above the
    first. Everything else, including every multi-code-point text, starts a
    new record.

    Args:
        entries: (cid, text) pairs in strictly ascending CID order

    Returns:
        list of CMapRange in CID order
    """
    ranges: list[CMapRange] = []
    src_prev = -1
    dst_prev = None

    for cid, text in entries:
        if (dst_prev is not None
                and cid == src_prev + 1
                and len(dst_prev) == 1
                and len(text) == 1
                and ord(text) == ord(dst_prev) + 1):
            ranges[-1] = ranges[-1]._replace(src_to=cid)
        else:
            ranges.append(CMapRange(cid, cid, text))
        src_prev = cid
        dst_prev = text

    return ranges


def _to_hex(num: int) -> str:
    return f'{num:04X}'


def _string_to_hex(text: str) -> str:
    # Non-BMP code points come out as surrogate pairs (PDF 1.5+)
    return text.encode('utf-16-be').hex().upper()


def _check_entry(cid: object, text: object) -> None:
    if isinstance(cid, bool) or not isinstance(cid, int):
        raise InvalidArgument(f"CID is not an integer: {cid!r}")
    if cid < 0 or cid > MAX_CID:
        raise InvalidArgument(f"CID is not valid: {cid}")
    if text is None or not isinstance(text, str) or not text:
        raise InvalidArgument(f"Text is null or empty for CID {cid}")
    if any(0xD800 <= ord(c) <= 0xDFFF for c in text):
        raise InvalidArgument(f"Text for CID {cid} contains a surrogate code point")


class ToUnicodeWriter:
    """
    Accumulates CID -> Unicode mappings and writes a ToUnicode CMap.

    Not thread safe: callers sharing a writer between threads must lock
    around add() and write_to().
    """

    def __init__(self) -> None:
        self._cid_to_unicode: dict[int, str] = {}
        self._wmode = 0

    @property
    def wmode(self) -> int:
        return self._wmode

    def set_wmode(self, wmode: int) -> None:
        """Set the writing mode: 0 for horizontal (default), 1 for vertical."""
        self._wmode = wmode

    def add(self, cid: int, text: str) -> None:
        """
        Add a CID -> Unicode mapping, replacing any earlier text for the CID.

        Args:
            cid: CID in the range 0-0xFFFF
            text: Unicode text, up to MAX_TEXT_BYTES bytes

        Raises:
            InvalidArgument: if the CID is out of range or the text is empty
        """
        _check_entry(cid, text)
        self._cid_to_unicode[cid] = text

    def update(self, mapping: Mapping[int, str] | Iterable[tuple[int, str]]) -> None:
        """
        Add every (cid, text) pair from a mapping or iterable of pairs.

        All pairs are validated before any is stored, so a bad pair leaves
        the writer unchanged.
        """
        pairs = list(mapping.items() if isinstance(mapping, Mapping) else mapping)
        for cid, text in pairs:
            _check_entry(cid, text)
        for cid, text in pairs:
            self._cid_to_unicode[cid] = text

    def get(self, cid: int, default: str | None = None) -> str | None:
        return self._cid_to_unicode.get(cid, default)

    def __len__(self) -> int:
        return len(self._cid_to_unicode)

    def __contains__(self, cid: object) -> bool:
        return cid in self._cid_to_unicode

    def ranges(self) -> list[CMapRange]:
        """Return the compressed bfrange records for the current mappings."""
        return compress_ranges(sorted(self._cid_to_unicode.items()))

    def write_to(self, out: BinaryIO) -> None:
        """
        Write the CMap as ASCII to the given binary stream.

        Lines are written as they are produced, so if the stream fails part
        way through it may be left holding a truncated CMap. The stream is
        flushed but not closed.

        Args:
            out: binary output stream

        Raises:
            OSError: if the stream could not be written
        """
        ranges = self.ranges()
        logger.debug("Writing ToUnicode CMap: %d mappings, %d ranges, %d blocks",
                     len(self._cid_to_unicode), len(ranges),
                     -(-len(ranges) // MAX_BATCH_SIZE))

        for line in self._iter_lines(ranges):
            out.write(line.encode('ascii'))
            out.write(b'\n')

        flush = getattr(out, 'flush', None)
        if flush is not None:
            flush()

    def to_bytes(self) -> bytes:
        """Return the CMap document as bytes."""
        buf = io.BytesIO()
        self.write_to(buf)
        return buf.getvalue()

    def _iter_lines(self, ranges: list[CMapRange]) -> Iterator[str]:
        yield '/CIDInit /ProcSet findresource begin'
        yield '12 dict begin'
        yield ''

        yield 'begincmap'
        yield '/CIDSystemInfo'
        yield f"<< /Registry ({CID_SYSTEM_INFO['Registry']})"
        yield f"/Ordering ({CID_SYSTEM_INFO['Ordering']})"
        yield f"/Supplement {CID_SYSTEM_INFO['Supplement']}"
        yield '>> def'
        yield ''

        yield f'/CMapName /{CMAP_NAME} def'
        yield '/CMapType 2 def'  # 2 = ToUnicode
        yield ''

        if self._wmode != 0:
            yield f'/WMode /{self._wmode} def'

        # ToUnicode always uses 16-bit CIDs
        yield '1 begincodespacerange'
        yield f'<{_to_hex(0)}> <{_to_hex(MAX_CID)}>'
        yield 'endcodespacerange'
        yield ''

        for i in range(0, len(ranges), MAX_BATCH_SIZE):
            batch = ranges[i:i + MAX_BATCH_SIZE]
            yield f'{len(batch)} beginbfrange'
            for r in batch:
                yield f'<{_to_hex(r.src_from)}> <{_to_hex(r.src_to)}> <{_string_to_hex(r.dst)}>'
            yield 'endbfrange'
            yield ''

        yield 'endcmap'
        yield 'CMapName currentdict /CMap defineresource pop'
        yield 'end'
        yield 'end'


def generate_tounicode_cmap(tounicode_map: Mapping[int, str],
                            wmode: int = 0) -> bytes:
    """
    Generate a ToUnicode CMap stream for PDF embedding.

    Args:
        tounicode_map: dict mapping cid (int) -> unicode_string (str)
        wmode: writing mode, 0 horizontal or 1 vertical

    Returns:
        bytes: ToUnicode CMap stream content
    """
    writer = ToUnicodeWriter()
    writer.set_wmode(wmode)
    writer.update(tounicode_map)
    return writer.to_bytes()
