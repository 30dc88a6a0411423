"""Tests for icon classification and blitting."""

import pytest
from PIL import Image

import icons
from framebuffer import FrameBuffer, pack_rgb
from icons import (
    ICON_COLORS, ICONS, IconAssetError, IconBitmap, IconCategory,
    classify, draw_icon, load_icon_dir,
)


class TestClassify:
    def test_clear_day_and_night(self):
        assert classify(1000, True) == IconCategory.SUN
        assert classify(1000, False) == IconCategory.MOON

    @pytest.mark.parametrize("is_day", [True, False])
    def test_thunder(self, is_day):
        assert classify(1087, is_day) == IconCategory.THUNDER

    def test_unknown_defaults_to_cloud(self):
        assert classify(9999, True) == IconCategory.CLOUD
        assert classify(0, False) == IconCategory.CLOUD
        assert classify(None, True) == IconCategory.CLOUD

    def test_groups(self):
        assert classify(1030, True) == IconCategory.CLOUD
        assert classify(1183, True) == IconCategory.RAIN
        assert classify(1171, True) == IconCategory.HEAVY_RAIN
        assert classify(1195, False) == IconCategory.HEAVY_RAIN
        assert classify(1213, True) == IconCategory.SNOW
        assert classify(1282, True) == IconCategory.THUNDER

    def test_total_over_code_range(self):
        for code in range(0, 2000):
            assert isinstance(classify(code, code % 2 == 0), IconCategory)


class TestBitmaps:
    def test_every_category_has_an_icon(self):
        assert set(ICONS) == set(IconCategory)

    def test_from_rows_rejects_bad_row_count(self):
        with pytest.raises(IconAssetError):
            IconBitmap.from_rows([0] * 15, (1, 2, 3))

    def test_from_rows_rejects_wide_row(self):
        with pytest.raises(IconAssetError):
            IconBitmap.from_rows([0] * 15 + [1 << 16], (1, 2, 3))

    def test_leftmost_bit_is_column_zero(self):
        icon = IconBitmap.from_rows([1 << 15] + [0] * 15, (9, 9, 9))
        assert icon.cells == ((0, 0, 0x090909),)

    def test_draw_icon_scaled(self):
        fb = FrameBuffer(100, 100)
        draw_icon(fb, IconCategory.SUN, 10, 20, 2)
        color = pack_rgb(ICON_COLORS[IconCategory.SUN])
        assert fb.count(color) == len(ICONS[IconCategory.SUN].cells) * 4
        for dx, dy, _ in ICONS[IconCategory.SUN].cells:
            assert fb.get_pixel(10 + dx * 2 + 1, 20 + dy * 2 + 1) == color

    def test_draw_icon_clips_at_edge(self):
        fb = FrameBuffer(20, 20)
        draw_icon(fb, IconCategory.CLOUD, 10, 10, 2)
        assert fb.count(0) < 400


class TestImageEncoding:
    def _image_for(self, category):
        """RGBA image with the same footprint as the built-in bitmap, plus faint pixels."""
        img = Image.new("RGBA", (16, 16), (0, 0, 0, 0))
        r, g, b = ICON_COLORS[category]
        for dx, dy, _ in ICONS[category].cells:
            img.putpixel((dx, dy), (r, g, b, 255))
        img.putpixel((15, 15), (255, 0, 0, 128))  # at the threshold: skipped
        return img

    def test_image_matches_bitmap(self):
        icon = IconBitmap.from_image(self._image_for(IconCategory.RAIN))
        assert icon.footprint() == ICONS[IconCategory.RAIN].footprint()
        a = FrameBuffer(40, 40); b = FrameBuffer(40, 40)
        draw_icon(a, IconCategory.RAIN, 0, 0, 2)
        draw_icon(b, IconCategory.RAIN, 0, 0, 2, icon_set={IconCategory.RAIN: icon})
        assert a.tobytes() == b.tobytes()

    def test_wrong_size_image(self):
        with pytest.raises(IconAssetError):
            IconBitmap.from_image(Image.new("RGBA", (32, 32)))

    def test_load_icon_dir(self, tmp_path):
        self._image_for(IconCategory.SNOW).save(tmp_path / "snow.png")
        icon_set = load_icon_dir(str(tmp_path))
        assert icon_set[IconCategory.SNOW].footprint() == ICONS[IconCategory.SNOW].footprint()
        assert icon_set[IconCategory.SUN].cells == ICONS[IconCategory.SUN].cells

    def test_load_icon_dir_bad_file(self, tmp_path):
        (tmp_path / "moon.png").write_bytes(b"not a png")
        with pytest.raises(IconAssetError):
            load_icon_dir(str(tmp_path))

    def test_load_icon_dir_missing(self, tmp_path):
        with pytest.raises(IconAssetError):
            load_icon_dir(str(tmp_path / "nope"))

    def test_set_icon_set(self, monkeypatch):
        monkeypatch.setattr(icons, "ICONS", dict(icons.ICONS))
        blank = IconBitmap([])
        icons.set_icon_set({**icons.ICONS, IconCategory.SUN: blank})
        fb = FrameBuffer(40, 40)
        draw_icon(fb, IconCategory.SUN, 0, 0, 1)
        assert fb.count(0) == 1600
