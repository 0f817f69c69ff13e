# tounicode - ToUnicode CMap writer
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from .error import ToUnicodeError, InvalidArgument
from .writer import (
    CMapRange,
    ToUnicodeWriter,
    compress_ranges,
    generate_tounicode_cmap,
)
from .pdf_stream import make_tounicode_stream, attach_tounicode

__version__ = "0.1.0"
