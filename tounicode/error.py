# tounicode - ToUnicode CMap writer
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later
from __future__ import annotations


class ToUnicodeError(Exception):
    """Base class for errors raised by the ToUnicode writer."""


class InvalidArgument(ToUnicodeError, ValueError):
    """A CID or text value passed to ``ToUnicodeWriter.add`` was rejected."""
