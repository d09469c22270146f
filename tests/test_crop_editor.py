"""Tests for crop hit-testing and the crop drag state machine."""
import pytest

from clip_editor.editing.crop_editor import CropHandle, hit_test, apply_crop_delta
from clip_editor.models.edit_state import CropRegion, MediaDimensions

MEDIA = MediaDimensions(1920, 1080)


def assert_crop_invariant(crop, media, min_width=50, min_height=50):
    assert crop.fits(media, min_width, min_height), crop


@pytest.fixture
def crop_events(loaded_session):
    events = []
    loaded_session.crop_changed.connect(events.append)
    return events


class TestHitTest:
    RECT = (100.0, 100.0, 200.0, 100.0)

    @pytest.mark.parametrize("point, expected", [
        ((100, 100), CropHandle.NW),
        ((300, 100), CropHandle.NE),
        ((100, 200), CropHandle.SW),
        ((300, 200), CropHandle.SE),
        ((110, 90), CropHandle.NW),
        ((200, 150), CropHandle.MOVE),
        ((50, 50), CropHandle.NONE),
        ((400, 150), CropHandle.NONE),
    ])
    def test_handles(self, point, expected):
        assert hit_test(point[0], point[1], self.RECT, 12) is expected

    def test_border_outside_corners_is_not_interior(self):
        assert hit_test(200, 100, self.RECT, 12) is CropHandle.NONE

    def test_corners_checked_before_interior(self):
        """A point inside the box but within reach of a corner grabs the corner."""
        assert hit_test(105, 105, self.RECT, 12) is CropHandle.NW

    def test_tiny_box_prefers_nw(self):
        assert hit_test(101, 101, (100, 100, 4, 4), 12) is CropHandle.NW


class TestApplyCropDelta:
    def test_zero_delta_is_identity(self):
        crop = CropRegion(100.25, 33.5, 640.125, 360.75)
        for handle in (CropHandle.MOVE, CropHandle.NW, CropHandle.NE, CropHandle.SW, CropHandle.SE):
            assert apply_crop_delta(crop, handle, 0, 0, MEDIA, 50, 50) == crop

    def test_move_clamped_per_axis(self):
        crop = CropRegion(100, 100, 800, 400)
        moved = apply_crop_delta(crop, CropHandle.MOVE, 5000, -5000, MEDIA, 50, 50)
        assert moved == CropRegion(1120, 0, 800, 400)

    def test_nw_keeps_opposite_corner(self):
        crop = CropRegion(100, 100, 800, 400)
        resized = apply_crop_delta(crop, CropHandle.NW, 100, 50, MEDIA, 50, 50)
        assert resized == CropRegion(200, 150, 700, 350)
        assert resized.right == crop.right and resized.bottom == crop.bottom

    def test_ne_respects_min_size(self):
        crop = CropRegion(100, 100, 800, 400)
        resized = apply_crop_delta(crop, CropHandle.NE, -2000, 2000, MEDIA, 50, 50)
        assert resized == CropRegion(100, 450, 50, 50)

    def test_sw_clamped_at_frame(self):
        crop = CropRegion(100, 100, 800, 400)
        resized = apply_crop_delta(crop, CropHandle.SW, -500, 2000, MEDIA, 50, 50)
        assert resized == CropRegion(0, 100, 900, 980)

    def test_se_clamped_at_frame(self):
        crop = CropRegion(100, 100, 800, 400)
        resized = apply_crop_delta(crop, CropHandle.SE, 5000, 5000, MEDIA, 50, 50)
        assert resized == CropRegion(100, 100, 1820, 980)

    @pytest.mark.parametrize("handle, delta", [
        (CropHandle.NW, (5000, 5000)),
        (CropHandle.NE, (-5000, 5000)),
        (CropHandle.SW, (5000, -5000)),
    ])
    @pytest.mark.parametrize("origin", [0.1, 33.3, 129.5, 179.5, 1017.7])
    def test_fractional_origin_clamped_at_min_size(self, handle, delta, origin):
        crop = CropRegion(origin, origin / 2, 300.2, 230.7)
        resized = apply_crop_delta(crop, handle, delta[0], delta[1], MEDIA, 50, 50)

        assert resized.width >= 50 and resized.height >= 50
        assert_crop_invariant(resized, MEDIA)


class TestCropDrag:
    def test_se_drag_at_max_bound_changes_nothing(self, loaded_session, surface, crop_events):
        """Full-frame crop, SE dragged outward by (+100, +50) display px."""
        editor = loaded_session.crop_editor
        assert editor.begin_drag(960, 540) is CropHandle.SE

        surface.move(1060, 590)
        surface.release()

        assert loaded_session.crop == CropRegion(0, 0, 1920, 1080)
        assert crop_events == []

    def test_move_uses_delta_since_previous_event(self, loaded_session, surface):
        loaded_session.update_crop(CropRegion(100, 100, 800, 400))
        editor = loaded_session.crop_editor

        assert editor.begin_drag(200, 150) is CropHandle.MOVE
        surface.move(250, 170)
        assert loaded_session.crop == CropRegion(200, 140, 800, 400)

        surface.move(260, 170)
        assert loaded_session.crop == CropRegion(220, 140, 800, 400)

        surface.move(5000, 5000)
        assert loaded_session.crop == CropRegion(1120, 680, 800, 400)

    def test_nw_drag_stops_at_min_crop(self, loaded_session, surface):
        loaded_session.update_crop(CropRegion(100, 100, 800, 400))
        editor = loaded_session.crop_editor

        assert editor.begin_drag(50, 50) is CropHandle.NW
        surface.move(100, 100)
        assert loaded_session.crop == CropRegion(200, 200, 700, 300)

        surface.move(1000, 1000)
        assert loaded_session.crop == CropRegion(850, 450, 50, 50)

    def test_min_size_crop_from_fractional_origin_is_exportable(self, loaded_session, surface):
        loaded_session.update_crop(CropRegion(0.1, 0.1, 300.2, 300.2))
        editor = loaded_session.crop_editor

        assert editor.begin_drag(0.05, 0.05) is CropHandle.NW
        surface.move(1000, 1000)
        surface.release()

        crop = loaded_session.crop
        assert crop.width >= 50 and crop.height >= 50
        assert loaded_session.request_export("out.mp4") is not None

    def test_invariant_holds_through_a_gesture_sequence(self, loaded_session, surface):
        editor = loaded_session.crop_editor
        path = [(700, 400), (-300, -200), (1200, 900), (480, 270), (481, 268), (-50, 600)]

        for start in [(960, 540), (0, 0), (480, 270), (0, 540), (960, 0)]:
            display = loaded_session.mapper().to_display_rect(loaded_session.crop)
            if editor.begin_drag(*start) is CropHandle.NONE:
                # Previous gestures moved the corner; grab the current SE instead
                editor.begin_drag(display[0] + display[2], display[1] + display[3])
            for point in path:
                surface.move(*point)
                assert_crop_invariant(loaded_session.crop, MEDIA)
            surface.release()

    def test_zero_net_drag_is_bit_identical(self, loaded_session, surface, crop_events):
        loaded_session.update_crop(CropRegion(100.3, 100.7, 800.1, 400.9))
        crop_events.clear()
        before = loaded_session.crop

        display = loaded_session.mapper().to_display_rect(before)
        editor = loaded_session.crop_editor
        editor.begin_drag(display[0] + display[2], display[1] + display[3])
        surface.move(display[0] + display[2], display[1] + display[3])
        surface.release()

        assert loaded_session.crop == before
        assert crop_events == []

    def test_press_outside_crop_is_ignored(self, loaded_session, surface):
        loaded_session.update_crop(CropRegion(100, 100, 200, 200))
        editor = loaded_session.crop_editor

        assert editor.begin_drag(900, 500) is CropHandle.NONE
        assert not editor.is_dragging
        assert surface.active_count == 0

    def test_small_media_uses_frame_as_minimum(self, session, media, surface):
        session.load_media("tiny.mp4")
        media.metadata_loaded.emit(40, 30, 5.0)
        session.set_viewport(40, 30)

        assert session.min_crop_size() == (40, 30)
        session.crop_editor.begin_drag(40, 30)
        surface.move(20, 10)
        assert session.crop == CropRegion(0, 0, 40, 30)

    def test_no_drag_before_media(self, session):
        assert session.crop_editor.begin_drag(10, 10) is CropHandle.NONE


class TestCropDragLifecycle:
    def test_release_detaches_listeners(self, loaded_session, surface):
        editor = loaded_session.crop_editor
        for _ in range(5):
            editor.begin_drag(480, 270)
            assert surface.active_count == 1
            surface.move(490, 280)
            surface.release()
            assert surface.active_count == 0
            assert not editor.is_dragging

    def test_new_press_replaces_stale_gesture(self, loaded_session, surface):
        editor = loaded_session.crop_editor
        editor.begin_drag(480, 270)
        editor.begin_drag(960, 540)

        assert surface.active_count == 1
        assert editor.active_handle is CropHandle.SE

    def test_cancel_keeps_applied_updates(self, loaded_session, surface):
        loaded_session.update_crop(CropRegion(100, 100, 800, 400))
        editor = loaded_session.crop_editor
        editor.begin_drag(200, 150)
        surface.move(210, 150)
        editor.cancel_drag()

        assert surface.active_count == 0
        assert loaded_session.crop == CropRegion(120, 100, 800, 400)

        surface.move(400, 400)
        assert loaded_session.crop == CropRegion(120, 100, 800, 400)

    def test_release_without_drag_is_noop(self, loaded_session):
        loaded_session.crop_editor.end_drag()
        loaded_session.crop_editor.cancel_drag()
        assert not loaded_session.crop_editor.is_dragging

    def test_teardown_mid_drag(self, loaded_session, surface):
        loaded_session.crop_editor.begin_drag(480, 270)
        loaded_session.dispose()
        assert surface.active_count == 0

    def test_media_failure_mid_drag(self, loaded_session, media, surface):
        loaded_session.crop_editor.begin_drag(480, 270)
        media.load_failed.emit("decoder error")

        assert surface.active_count == 0
        assert loaded_session.crop is None
