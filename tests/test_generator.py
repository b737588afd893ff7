"""End-to-end tests for Generator: font resolution, caching and captions."""

import threading

import pytest
from PIL import Image

from conftest import same_pixels
from demotivator import generator as generator_module
from demotivator.config import DemotivatorConfig
from demotivator.errors import FontFileEmpty, FontFileMissing, FontLoadError, FontParseError
from demotivator.font_cache import RenderFace
from demotivator.generator import (
    EMBEDDED_FONT_KEY, RAW_FONT_KEY, Generator, generate_with_custom_font, generate_with_text,
)

# Small outline keeps the suite fast; pass counts are covered in test_text.
FAST = dict(text_outline_width=1, padding=20, border=4)


@pytest.fixture
def parse_calls(monkeypatch):
    keys = []
    original = generator_module.parse_font

    def recording_parse(data, key):
        keys.append(key)
        return original(data, key)

    monkeypatch.setattr(generator_module, "parse_font", recording_parse)
    return keys


class TestGenerate:

    def test_returns_rgba_canvas_of_layout_size(self, sample_image):
        gen = Generator(DemotivatorConfig(top_text="top", bottom_text="bottom", **FAST))
        poster = gen.generate(sample_image)
        assert poster.mode == "RGBA"
        assert poster.size == (440, 340 + 2 * 36)

    def test_no_captions(self, sample_image):
        poster = Generator(DemotivatorConfig(**FAST)).generate(sample_image)
        assert poster.size == (440, 340)

    def test_caption_area_has_text(self, sample_image):
        poster = Generator(DemotivatorConfig(top_text="WORDS", **FAST)).generate(sample_image)
        # below the border band; text sits on baseline 20 + 300 + 19
        below_band = poster.crop((0, 324, poster.width, poster.height))
        assert below_band.convert("L").getbbox() is not None

        blank = Generator(DemotivatorConfig(**FAST)).generate(sample_image)
        assert blank.crop((0, 324, blank.width, blank.height)).convert("L").getbbox() is None

    def test_source_image_untouched(self, sample_image):
        before = sample_image.copy()
        Generator(DemotivatorConfig(top_text="X", **FAST)).generate(sample_image)
        assert same_pixels(sample_image, before)

    def test_uppercase_transform(self, sample_image):
        upper = Generator(DemotivatorConfig(top_text="hello", text_uppercase=True, **FAST))
        plain = Generator(DemotivatorConfig(top_text="HELLO", text_uppercase=False, **FAST))
        assert same_pixels(upper.generate(sample_image), plain.generate(sample_image))

    def test_case_preserved_without_transform(self, sample_image):
        lower = Generator(DemotivatorConfig(top_text="hello", text_uppercase=False, **FAST))
        upper = Generator(DemotivatorConfig(top_text="HELLO", text_uppercase=False, **FAST))
        assert not same_pixels(lower.generate(sample_image), upper.generate(sample_image))

    def test_captions_drawn_top_then_bottom(self, sample_image, monkeypatch):
        drawn = []
        original = RenderFace.draw

        def recording_draw(self, draw, xy, text, fill):
            drawn.append((text, xy[1]))
            original(self, draw, xy, text, fill)

        monkeypatch.setattr(RenderFace, "draw", recording_draw)
        cfg = DemotivatorConfig(top_text="one", bottom_text="two", text_outline_width=0)
        Generator(cfg).generate(sample_image)
        # 400px wide -> 24pt; first baseline 80 + 300 + 19, next +28
        assert drawn == [("ONE", 399), ("TWO", 427)]

    def test_face_released_after_call(self, sample_image, monkeypatch):
        faces = []
        original_init = RenderFace.__init__

        def tracking_init(self, resource, size):
            original_init(self, resource, size)
            faces.append(self)

        monkeypatch.setattr(RenderFace, "__init__", tracking_init)
        Generator(DemotivatorConfig(top_text="x", **FAST)).generate(sample_image)
        assert len(faces) == 1
        assert faces[0].closed
        assert faces[0].size == 24.0

    def test_face_released_when_drawing_fails(self, sample_image, monkeypatch):
        faces = []
        original_init = RenderFace.__init__

        def tracking_init(self, resource, size):
            original_init(self, resource, size)
            faces.append(self)

        def failing_draw(self, draw, xy, text, fill):
            raise RuntimeError("render failed")

        monkeypatch.setattr(RenderFace, "__init__", tracking_init)
        monkeypatch.setattr(RenderFace, "draw", failing_draw)
        with pytest.raises(RuntimeError):
            Generator(DemotivatorConfig(top_text="x", **FAST)).generate(sample_image)
        assert faces[0].closed

    def test_concurrent_calls_share_generator(self, sample_image, font_file, counting_reader):
        gen = Generator(
            DemotivatorConfig(top_text="threads", font_path=font_file, **FAST),
            font_reader=counting_reader,
        )
        expected = gen.generate(sample_image)
        results, errors = [], []

        def worker():
            try:
                results.append(gen.generate(sample_image))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert errors == []
        assert len(results) == 6
        assert all(same_pixels(r, expected) for r in results)
        assert counting_reader.count == 1


class TestFontResolution:

    def test_file_font_read_once(self, sample_image, font_file, counting_reader):
        gen = Generator(
            DemotivatorConfig(top_text="cached", font_path=font_file, **FAST),
            font_reader=counting_reader,
        )
        posters = [gen.generate(sample_image) for _ in range(4)]
        assert counting_reader.count == 1
        assert all(same_pixels(p, posters[0]) for p in posters[1:])
        assert str(font_file) in gen.font_cache

    def test_clear_cache_forces_one_reread(self, sample_image, font_file, counting_reader):
        gen = Generator(
            DemotivatorConfig(top_text="cached", font_path=font_file, **FAST),
            font_reader=counting_reader,
        )
        gen.generate(sample_image)
        gen.clear_font_cache()
        assert len(gen.font_cache) == 0
        gen.generate(sample_image)
        gen.generate(sample_image)
        assert counting_reader.count == 2

    def test_raw_bytes_reparsed_every_call(self, sample_image, font_bytes, parse_calls):
        gen = Generator(DemotivatorConfig(top_text="raw", font_data=font_bytes, **FAST))
        for _ in range(3):
            gen.generate(sample_image)
        assert parse_calls == [RAW_FONT_KEY] * 3
        assert len(gen.font_cache) == 0

    def test_embedded_default_reparsed_every_call(self, sample_image, parse_calls):
        gen = Generator(DemotivatorConfig(top_text="default", **FAST))
        gen.generate(sample_image)
        gen.generate(sample_image)
        assert parse_calls == [EMBEDDED_FONT_KEY] * 2
        assert len(gen.font_cache) == 0

    def test_raw_bytes_win_over_path(self, sample_image, font_bytes, tmp_path, counting_reader):
        missing = tmp_path / "missing.ttf"
        gen = Generator(
            DemotivatorConfig(top_text="x", font_data=font_bytes, font_path=missing, **FAST),
            font_reader=counting_reader,
        )
        gen.generate(sample_image)
        assert counting_reader.count == 0

    def test_file_font_matches_same_raw_bytes(self, sample_image, font_file, font_bytes):
        by_path = Generator(DemotivatorConfig(top_text="same", font_path=font_file, **FAST))
        by_bytes = Generator(DemotivatorConfig(top_text="same", font_data=font_bytes, **FAST))
        assert same_pixels(by_path.generate(sample_image), by_bytes.generate(sample_image))

    def test_regular_face_differs_from_default_bold(self, sample_image):
        from demotivator.fonts import embedded_font

        bold = Generator(DemotivatorConfig(top_text="face", **FAST))
        regular = Generator(DemotivatorConfig(
            top_text="face", font_data=embedded_font("regular"), **FAST))
        assert not same_pixels(bold.generate(sample_image), regular.generate(sample_image))

    def test_preload_skips_file_read_in_generate(self, sample_image, font_file, counting_reader):
        gen = Generator(
            DemotivatorConfig(top_text="pre", font_path=font_file, **FAST),
            font_reader=counting_reader,
        )
        resource = gen.preload_font(font_file)
        assert gen.font_cache.get(str(font_file)) is resource
        gen.generate(sample_image)
        assert counting_reader.count == 1

    def test_load_font_file_installs_bytes_and_path(self, font_file, font_bytes):
        gen = Generator()
        cfg = gen.load_font_file(font_file)
        assert cfg is gen.config
        assert gen.config.font_data == font_bytes
        assert gen.config.font_path == font_file


class TestErrors:

    def test_empty_font_file(self, sample_image, tmp_path):
        path = tmp_path / "empty.ttf"
        path.write_bytes(b"")
        gen = Generator(DemotivatorConfig(top_text="x", font_path=path, **FAST))
        with pytest.raises(FontFileEmpty):
            gen.generate(sample_image)
        assert len(gen.font_cache) == 0

    def test_missing_font_file(self, sample_image, tmp_path):
        gen = Generator(DemotivatorConfig(font_path=tmp_path / "gone.ttf"))
        with pytest.raises(FontFileMissing):
            gen.generate(sample_image)

    def test_bad_raw_bytes_do_not_fall_back(self, sample_image):
        gen = Generator(DemotivatorConfig(top_text="x", font_data=b"not a font at all"))
        with pytest.raises(FontParseError) as exc_info:
            gen.generate(sample_image)
        assert exc_info.value.key == RAW_FONT_KEY
        assert exc_info.value.__cause__ is not None

    def test_unparseable_file_is_not_cached(self, sample_image, tmp_path):
        path = tmp_path / "bad.ttf"
        path.write_bytes(b"OTTO" + b"\x00" * 32)
        gen = Generator(DemotivatorConfig(font_path=path))
        with pytest.raises(FontLoadError):
            gen.generate(sample_image)
        assert str(path) not in gen.font_cache


class TestConfigure:

    def test_configure_replaces_fields(self):
        gen = Generator()
        cfg = gen.configure(top_text="new", padding=5)
        assert gen.config is cfg
        assert cfg.top_text == "new"
        assert cfg.padding == 5
        assert cfg.border == 10

    def test_configure_validates(self):
        gen = Generator()
        with pytest.raises(ValueError):
            gen.configure(padding=-1)
        assert gen.config.padding == 80

    def test_config_setter(self):
        gen = Generator()
        gen.config = DemotivatorConfig(top_text="set")
        assert gen.config.top_text == "set"


class TestConvenience:

    def test_generate_with_text(self):
        image = Image.new("RGB", (800, 200), (0, 90, 0))
        poster = generate_with_text(image, "top", "bottom")
        assert poster.size == (960, 360 + 2 * 72)

    def test_generate_with_custom_font(self, font_file):
        image = Image.new("RGB", (800, 200), (0, 90, 0))
        poster = generate_with_custom_font(image, "top", "", font_file)
        assert poster.size == (960, 360 + 72)

    def test_generate_with_custom_font_missing(self, tmp_path):
        image = Image.new("RGB", (10, 10))
        with pytest.raises(FontFileMissing):
            generate_with_custom_font(image, "top", "", tmp_path / "nope.ttf")
