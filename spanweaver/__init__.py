#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SpanWeaver v0.1.0

Package initialization and version metadata.

SpanWeaver places paired short reads onto assembled contigs by expanding
exact k-mer hits into substitution-only alignment spans.

Author: SpanWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .version import __version__

__all__ = ["__version__"]

# SpanWeaver v0.1.0
# Any usage is subject to this software's license.
