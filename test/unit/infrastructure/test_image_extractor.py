"""
ImageExtractor 测试：提取层级顺序
"""

import base64
from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError

from imgproxy.retrieval.infrastructure.image_extractor import ImageExtractor, IN_PAGE_FETCH_SCRIPT
from imgproxy.retrieval.domain.value_objects.extraction_result import ExtractionTier

IMAGE_BYTES = b"\x89PNG\r\n\x1a\nreal-image"
SCREENSHOT_BYTES = b"\x89PNG\r\n\x1a\nscreenshot"


@pytest.fixture
def page():
    page = MagicMock(name="page")
    page.screenshot.return_value = SCREENSHOT_BYTES
    return page


class TestInPageFetch:

    def test_image_source_bytes_win_over_screenshot(self, page):
        page.evaluate.return_value = base64.b64encode(IMAGE_BYTES).decode("ascii")

        result = ImageExtractor().extract(page)

        assert result.tier is ExtractionTier.IN_PAGE_FETCH
        assert result.content == IMAGE_BYTES
        page.evaluate.assert_called_once_with(IN_PAGE_FETCH_SCRIPT)
        page.screenshot.assert_not_called()

    def test_script_targets_first_img_resolved_source(self):
        assert 'document.querySelector("img")' in IN_PAGE_FETCH_SCRIPT
        assert "img.currentSrc || img.src" in IN_PAGE_FETCH_SCRIPT


class TestScreenshotFallback:

    @pytest.mark.parametrize("evaluate_result", [None, "", "!!!not-base64!!!"])
    def test_no_usable_image_falls_back_to_screenshot(self, page, evaluate_result):
        page.evaluate.return_value = evaluate_result

        result = ImageExtractor().extract(page)

        assert result.tier is ExtractionTier.SCREENSHOT
        assert result.content == SCREENSHOT_BYTES
        page.screenshot.assert_called_once_with(type="png", full_page=True)

    def test_in_page_fetch_error_is_swallowed(self, page):
        page.evaluate.side_effect = PlaywrightError("TypeError: Failed to fetch")

        result = ImageExtractor().extract(page)

        assert result.tier is ExtractionTier.SCREENSHOT
        assert not result.is_empty

    def test_empty_screenshot_yields_empty_result(self, page):
        page.evaluate.return_value = None
        page.screenshot.return_value = b""

        result = ImageExtractor().extract(page)

        assert result.is_empty

    def test_crashed_page_screenshot_error_propagates(self, page):
        page.evaluate.return_value = None
        page.screenshot.side_effect = PlaywrightError("Target crashed")

        with pytest.raises(PlaywrightError):
            ImageExtractor().extract(page)
