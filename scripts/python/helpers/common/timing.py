"""
Tagged start/finish console lines for pool-rate scripts.

@author: Max Stoddard
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

START_TAG = "[SCRIPT-START]"
END_TAG = "[SCRIPT-END]"


@contextmanager
def timed_script(script_name: str, script_type: str) -> Iterator[None]:
    """Wrap a script body with tagged start and elapsed-time lines.

    The finish line is only printed when the body completes; a failure
    propagates with the start tag left as the last marker.
    """
    print(f"{START_TAG} Running {script_name} {script_type} script")
    started = time.perf_counter()
    yield
    print(f"{END_TAG} Finished execution in {time.perf_counter() - started:.2f}s")
