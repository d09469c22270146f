"""Tests for media/display coordinate mapping."""
import pytest

from clip_editor.editing.geometry import GeometryMapper
from clip_editor.models.edit_state import MediaDimensions, DisplayViewport, CropRegion


def mapper(media=(1920, 1080), viewport=(960, 540)):
    return GeometryMapper(MediaDimensions(*media), DisplayViewport(*viewport))


class TestScale:
    def test_fit_scale(self):
        assert mapper().scale == 0.5

    def test_scale_limited_by_tighter_axis(self):
        assert mapper((1000, 1000), (800, 400)).scale == 0.4

    def test_unknown_media_scale_is_one(self):
        assert mapper((0, 0), (800, 400)).scale == 1.0

    def test_empty_viewport_does_not_divide_by_zero(self):
        m = mapper((1920, 1080), (0, 0))
        assert m.scale == 0.0
        assert m.delta_to_media(4, 6) == (4, 6)


class TestLetterbox:
    def test_offset_centers_pillarboxed_video(self):
        m = mapper((1000, 1000), (800, 400))
        assert m.offset == (200.0, 0.0)
        assert m.media_rect() == pytest.approx((200.0, 0.0, 400.0, 400.0))

    def test_no_offset_when_aspect_matches(self):
        assert mapper().offset == (0.0, 0.0)

    def test_round_trip_through_offset(self):
        m = mapper((1000, 1000), (800, 400))
        x, y = m.to_display(500, 250)
        assert (x, y) == (400.0, 100.0)
        assert m.to_media(x, y) == pytest.approx((500, 250))


class TestRegions:
    def test_crop_rect_projection(self):
        rect = mapper().to_display_rect(CropRegion(100, 200, 400, 300))
        assert rect == (50.0, 100.0, 200.0, 150.0)

    def test_delta_ignores_offset(self):
        m = mapper((1000, 1000), (800, 400))
        assert m.delta_to_media(40, -20) == pytest.approx((100.0, -50.0))
