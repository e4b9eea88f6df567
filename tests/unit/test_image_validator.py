from pathlib import Path
from unittest.mock import patch

import pytest

from docvision.hashing.content_hasher import ContentHasher
from docvision.imaging.validator import ImageValidator
from tests.helpers import make_flat_image, make_textured_image


class TestCheck:
    def test_textured_image_passes(self, textured_image: Path) -> None:
        assert ImageValidator.check(textured_image) is True

    def test_uniform_gray_fails(self, tmp_path: Path) -> None:
        assert ImageValidator.check(make_flat_image(tmp_path / "gray.png")) is False

    def test_near_black_fails(self, tmp_path: Path) -> None:
        assert ImageValidator.check(make_flat_image(tmp_path / "black.png", value=3)) is False

    def test_too_small_fails(self, tmp_path: Path) -> None:
        path = make_textured_image(tmp_path / "tiny.png", size=(40, 40), cell=4)
        assert ImageValidator.check(path) is False

    def test_extreme_aspect_fails(self, tmp_path: Path) -> None:
        path = make_textured_image(tmp_path / "strip.png", size=(600, 60))
        assert ImageValidator.check(path) is False

    def test_large_textured_image_passes(self, tmp_path: Path) -> None:
        path = make_textured_image(tmp_path / "large.png", size=(1600, 1200), cell=100)
        assert ImageValidator.check(path) is True

    def test_undecodable_file_fails(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not an image")
        assert ImageValidator.check(path) is False


class TestIsValid:
    @pytest.mark.asyncio
    async def test_verdict_is_cached_by_content(self, tmp_path: Path) -> None:
        a = make_textured_image(tmp_path / "a.png")
        b = tmp_path / "b.png"
        b.write_bytes(a.read_bytes())
        verdicts: dict[str, bool] = {}
        validator = ImageValidator(ContentHasher(), verdicts)
        with patch.object(ImageValidator, "check", return_value=True) as check:
            assert await validator.is_valid(a) is True
            assert await validator.is_valid(b) is True
        assert check.call_count == 1
        assert list(verdicts.values()) == [True]

    @pytest.mark.asyncio
    async def test_missing_file_is_invalid(self, tmp_path: Path) -> None:
        validator = ImageValidator(ContentHasher(), {})
        assert await validator.is_valid(tmp_path / "missing.png") is False

    @pytest.mark.asyncio
    async def test_real_check(self, textured_image: Path, tmp_path: Path) -> None:
        validator = ImageValidator(ContentHasher(), {})
        assert await validator.is_valid(textured_image) is True
        assert await validator.is_valid(make_flat_image(tmp_path / "flat.png")) is False
