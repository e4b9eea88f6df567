"""Per-run memoization of annotation responses."""

import asyncio
from collections.abc import Awaitable, Callable

from docvision.concurrency.gate import ConcurrencyGate
from docvision.logging.logger import Log
from docvision.vision.exceptions import AnnotationError
from docvision.vision.models import AnnotationKind, AnnotationResult

_CacheKey = tuple[str, AnnotationKind]


class AnnotationCache:
    """Memoizes annotation results by (content hash, kind).

    Only the first caller for a key issues the request, through the shared gate;
    concurrent callers await the same in-flight entry. Failures are remembered
    too, so a failing service is asked once per image and kind per run.
    """

    def __init__(self, gate: ConcurrencyGate) -> None:
        self._gate = gate
        self._entries: dict[_CacheKey, asyncio.Future[AnnotationResult]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._lock = asyncio.Lock()

    async def get_or_compute(
        self,
        content_hash: str,
        kind: AnnotationKind,
        compute: Callable[[], Awaitable[AnnotationResult]],
    ) -> AnnotationResult:
        """Return the cached result for the key, computing it on first use.

        Raises:
            AnnotationError: if the (possibly cached) computation failed.
        """
        key = (content_hash, kind)
        async with self._lock:
            entry = self._entries.get(key)
            is_owner = entry is None
            if entry is None:
                entry = asyncio.get_running_loop().create_future()
                self._entries[key] = entry

        if is_owner:
            await self._fill(key, entry, compute)
        else:
            Log.debug(f"Annotation cache hit for {kind.value} {content_hash[:12]}")
        return await entry

    async def _fill(
        self,
        key: _CacheKey,
        entry: "asyncio.Future[AnnotationResult]",
        compute: Callable[[], Awaitable[AnnotationResult]],
    ) -> None:
        try:
            result = await self._gate.run(compute)
        except AnnotationError as exc:
            entry.set_exception(exc)
        except asyncio.CancelledError:
            entry.cancel()
            async with self._lock:
                if self._entries.get(key) is entry:
                    del self._entries[key]
            raise
        except Exception as exc:
            entry.set_exception(AnnotationError(f"Annotation request failed: {exc}"))
        else:
            entry.set_result(result)
