import asyncio
from unittest.mock import AsyncMock

import pytest

from docvision.concurrency.gate import ConcurrencyGate
from docvision.vision.cache import AnnotationCache
from docvision.vision.exceptions import AnnotationError
from docvision.vision.models import AnnotationKind, LogoAnnotation, LogoResult


def _result() -> LogoResult:
    return LogoResult(annotations=[LogoAnnotation(description="Acme", score=0.9)])


class TestAnnotationCache:
    @pytest.mark.asyncio
    async def test_second_lookup_is_served_from_cache(self) -> None:
        cache = AnnotationCache(ConcurrencyGate(2))
        compute = AsyncMock(return_value=_result())
        first = await cache.get_or_compute("abc", AnnotationKind.LOGO, compute)
        second = await cache.get_or_compute("abc", AnnotationKind.LOGO, compute)
        assert first is second
        assert compute.await_count == 1
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_kind_is_part_of_key(self) -> None:
        cache = AnnotationCache(ConcurrencyGate(2))
        compute = AsyncMock(return_value=_result())
        await cache.get_or_compute("abc", AnnotationKind.LOGO, compute)
        await cache.get_or_compute("abc", AnnotationKind.OBJECT, compute)
        assert compute.await_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_request(self) -> None:
        cache = AnnotationCache(ConcurrencyGate(2))
        calls = 0

        async def compute() -> LogoResult:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return _result()

        results = await asyncio.gather(
            *(cache.get_or_compute("abc", AnnotationKind.LOGO, compute) for _ in range(5))
        )
        assert calls == 1
        assert all(r is results[0] for r in results)

    @pytest.mark.asyncio
    async def test_failure_is_cached(self) -> None:
        cache = AnnotationCache(ConcurrencyGate(1))
        compute = AsyncMock(side_effect=AnnotationError("quota"))
        with pytest.raises(AnnotationError, match="quota"):
            await cache.get_or_compute("abc", AnnotationKind.LABEL, compute)
        with pytest.raises(AnnotationError, match="quota"):
            await cache.get_or_compute("abc", AnnotationKind.LABEL, compute)
        assert compute.await_count == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self) -> None:
        cache = AnnotationCache(ConcurrencyGate(1))
        compute = AsyncMock(side_effect=RuntimeError("socket closed"))
        with pytest.raises(AnnotationError, match="socket closed"):
            await cache.get_or_compute("abc", AnnotationKind.LABEL, compute)

    @pytest.mark.asyncio
    async def test_clear_forgets_entries(self) -> None:
        cache = AnnotationCache(ConcurrencyGate(1))
        compute = AsyncMock(return_value=_result())
        await cache.get_or_compute("abc", AnnotationKind.LOGO, compute)
        cache.clear()
        assert len(cache) == 0
        await cache.get_or_compute("abc", AnnotationKind.LOGO, compute)
        assert compute.await_count == 2
