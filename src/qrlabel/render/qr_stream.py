#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import collections
import concurrent.futures
import os
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Literal

from ..qr.codec import QrEncodeError

RENDER_JOBS_ENV = "QRLABEL_RENDER_JOBS"
_DEFAULT_QR_WORKERS_CAP = 8
_MIN_QR_TASKS_PER_WORKER = 4
_LOOKAHEAD_PER_WORKER = 2


@dataclass(frozen=True)
class QrImage:
    index: int
    content: str
    data: bytes | None = None
    error: QrEncodeError | None = None


def _encode(index: int, content: str, encode: Callable[[str], bytes]) -> QrImage:
    try:
        return QrImage(index=index, content=content, data=encode(content))
    except QrEncodeError as exc:
        return QrImage(index=index, content=content, error=exc)


class QrImageStream:
    """Ordered hand-off of encoded QR images from worker threads to the render loop.

    Encodes run ahead of the consumer, at most ``lookahead`` at a time. Iteration
    blocks until the image for the next label is complete, so images come out in
    input order no matter which worker finishes first. Encoding failures are
    delivered in place of the image instead of being raised.
    """

    def __init__(
        self,
        contents: Sequence[str],
        encode: Callable[[str], bytes],
        *,
        workers: int = 1,
        lookahead: int | None = None,
    ) -> None:
        self._contents = list(contents)
        self._encode = encode
        self._workers = max(1, workers)
        self._lookahead = max(1, lookahead or self._workers * _LOOKAHEAD_PER_WORKER)
        self._executor: concurrent.futures.ThreadPoolExecutor | None = None

    def __enter__(self) -> QrImageStream:
        if self._workers > 1:
            self._executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=self._workers, thread_name_prefix="qrlabel-qr"
            )
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None

    def __len__(self) -> int:
        return len(self._contents)

    def __iter__(self) -> Iterator[QrImage]:
        if self._executor is None:
            for index, content in enumerate(self._contents):
                yield _encode(index, content, self._encode)
            return

        pending: collections.deque[concurrent.futures.Future[QrImage]] = collections.deque()
        submitted = 0
        total = len(self._contents)
        while submitted < total or pending:
            while submitted < total and len(pending) < self._lookahead:
                pending.append(
                    self._executor.submit(
                        _encode, submitted, self._contents[submitted], self._encode
                    )
                )
                submitted += 1
            yield pending.popleft().result()


def resolve_qr_workers(task_count: int, configured: int | Literal["auto"] | None = None) -> int:
    raw = os.environ.get(RENDER_JOBS_ENV, "").strip().lower()
    explicit = False
    requested: int | None = None
    if raw and raw != "auto":
        try:
            parsed = int(raw)
        except ValueError:
            raise ValueError(f"{RENDER_JOBS_ENV} must be a positive integer or 'auto'") from None
        if parsed > 0:
            requested = parsed
            explicit = True
    elif not raw and isinstance(configured, int):
        requested = configured
        explicit = True

    cpu = os.cpu_count() or 1
    if requested is None:
        requested = min(cpu, _DEFAULT_QR_WORKERS_CAP)

    workers = max(1, min(requested, cpu, task_count))
    if not explicit:
        workers = min(workers, max(1, task_count // _MIN_QR_TASKS_PER_WORKER))

    return max(1, workers)
