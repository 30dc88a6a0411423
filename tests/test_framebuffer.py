"""Tests for the packed-RGB frame buffer."""

from framebuffer import FrameBuffer, pack_rgb, unpack_rgb


class TestPacking:
    def test_pack_tuple(self):
        assert pack_rgb((0x12, 0x34, 0x56)) == 0x123456

    def test_pack_int_passthrough(self):
        assert pack_rgb(0x001020) == 0x001020

    def test_unpack(self):
        assert unpack_rgb(0xFF8000) == (255, 128, 0)


class TestFrameBuffer:
    def test_new_is_zeroed(self):
        fb = FrameBuffer(8, 4)
        assert len(fb.pixels) == 32
        assert fb.count(0) == 32

    def test_clear(self):
        fb = FrameBuffer(8, 4)
        fb.clear((0, 16, 32))
        assert fb.count(0x001020) == 32

    def test_set_and_get_pixel(self):
        fb = FrameBuffer(8, 4)
        fb.set_pixel(3, 2, (255, 0, 0))
        assert fb.get_pixel(3, 2) == 0xFF0000
        assert fb.pixels[2 * 8 + 3] == 0xFF0000

    def test_out_of_bounds_writes_are_dropped(self):
        fb = FrameBuffer(8, 4)
        for x, y in [(-1, 0), (0, -1), (8, 0), (0, 4), (100, 100), (-50, -50)]:
            fb.set_pixel(x, y, 0xFFFFFF)
        assert fb.count(0) == 32
        assert fb.get_pixel(8, 0) is None

    def test_fill_rect_clips(self):
        fb = FrameBuffer(8, 4)
        fb.fill_rect(6, 2, 5, 5, 0x00FF00)
        assert fb.count(0x00FF00) == 4  # 2x2 visible corner
        assert fb.get_pixel(7, 3) == 0x00FF00

    def test_fill_rect_fully_off_surface(self):
        fb = FrameBuffer(8, 4)
        fb.fill_rect(-10, -10, 5, 5, 0xFFFFFF)
        fb.fill_rect(20, 0, 5, 5, 0xFFFFFF)
        assert fb.count(0) == 32

    def test_to_rgb_bytes(self):
        fb = FrameBuffer(2, 1)
        fb.set_pixel(0, 0, (1, 2, 3))
        fb.set_pixel(1, 0, (4, 5, 6))
        assert fb.to_rgb_bytes() == bytes([1, 2, 3, 4, 5, 6])
