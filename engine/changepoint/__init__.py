"""
Change point subpackage for the Tally engine.

This module re-exports :func:`detect_shift` from
:mod:`engine.changepoint.shift`, giving consumers a clean import path of
``engine.changepoint`` for trend shift analysis.  The implementation itself
lives in ``shift.py``.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.changepoint.shift import detect_shift

__all__ = ["detect_shift"]
