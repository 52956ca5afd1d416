"""Tests for disc sampling around face landmarks."""

import numpy as np
import pytest

from beauty_engine import landmarks as lm
from beauty_engine.config import SamplingConfig
from beauty_engine.sampler import RegionSampler, RegionStats, disc_stats

from conftest import make_face


@pytest.fixture
def skin_frame():
    return np.full((540, 720, 3), 120, dtype=np.uint8)


class TestDiscStats:
    def test_pixel_count(self):
        frame = np.zeros((20, 20, 3), dtype=np.uint8)
        assert disc_stats(frame, 10, 10, 2).pixels == 11

    def test_uniform_region(self):
        frame = np.zeros((50, 50, 3), dtype=np.uint8)
        frame[...] = (200, 100, 30)
        s = disc_stats(frame, 25, 25, 5)
        assert (s.r, s.g, s.b) == (200.0, 100.0, 30.0)
        assert s.mean == pytest.approx(110.0)
        assert s.std == pytest.approx(0.0, abs=1e-9)

    def test_std_of_two_levels(self):
        frame = np.zeros((40, 40, 3), dtype=np.uint8)
        frame[:, 20:] = 100
        s = disc_stats(frame, 20, 20, 3)
        # Box is [17, 23): 11 pixels at 0, 16 at 100
        assert 0 < s.mean < 100
        assert s.std > 40

    def test_black_frame(self):
        frame = np.zeros((30, 30, 3), dtype=np.uint8)
        s = disc_stats(frame, 15, 15, 5)
        assert s.pixels > 0
        assert s.mean == 0.0 and s.std == 0.0

    def test_partially_outside(self):
        frame = np.full((30, 30, 3), 50, dtype=np.uint8)
        s = disc_stats(frame, 0, 0, 4)
        assert 0 < s.pixels < 49
        assert s.mean == pytest.approx(50.0)

    def test_fully_outside(self):
        frame = np.full((30, 30, 3), 50, dtype=np.uint8)
        assert disc_stats(frame, 100, 100, 4) == RegionStats.zero()
        assert disc_stats(frame, -20, 5, 4) == RegionStats.zero()

    def test_zero_radius(self):
        frame = np.full((30, 30, 3), 50, dtype=np.uint8)
        assert disc_stats(frame, 10, 10, 0) == RegionStats.zero()


class TestRadius:
    def test_face_scale(self, face):
        assert RegionSampler.face_scale(face, 720, 540) == pytest.approx(172.8, abs=1e-3)

    def test_face_scale_requires_face(self):
        with pytest.raises(ValueError):
            RegionSampler.face_scale(None, 720, 540)

    def test_sampling_radius_rounds_half_up(self):
        sampler = RegionSampler()
        assert sampler.sampling_radius(172.8) == 14
        assert sampler.sampling_radius(100.0) == 8
        assert sampler.under_eye_radius(14) == 11  # 10.5 -> 11

    def test_minimum_radius(self):
        sampler = RegionSampler()
        assert sampler.sampling_radius(0.0) == 4
        assert sampler.sampling_radius(20.0) == 4

    def test_custom_fraction(self):
        sampler = RegionSampler(SamplingConfig(radius_fraction=0.1))
        assert sampler.sampling_radius(200.0) == 20


class TestSampleRegions:
    def test_seven_regions(self, face, skin_frame):
        regions = RegionSampler().sample_regions(skin_frame, face)
        assert regions.forehead.mean == pytest.approx(120.0)
        assert regions.cheeks_mean == pytest.approx(120.0)
        assert regions.under_eyes_mean == pytest.approx(120.0)

    def test_under_eye_disc_is_smaller(self, face, skin_frame):
        regions = RegionSampler().sample_regions(skin_frame, face)
        assert regions.under_left_eye.pixels < regions.forehead.pixels

    def test_reads_the_right_spot(self, face, skin_frame):
        cx, cy = lm.to_pixel_int(face, lm.NOSE_TIP, 720, 540)
        skin_frame[cy - 20:cy + 20, cx - 20:cx + 20] = (220, 60, 40)
        regions = RegionSampler().sample_regions(skin_frame, face)
        assert regions.nose.r == pytest.approx(220.0)
        assert regions.forehead.r == pytest.approx(120.0)

    def test_requires_face(self, skin_frame):
        with pytest.raises(ValueError):
            RegionSampler().sample_regions(skin_frame, None)

    def test_sample_without_face_is_zero(self, skin_frame):
        assert RegionSampler().sample(skin_frame, None, lm.NOSE_TIP, 10) == RegionStats.zero()

    def test_deterministic(self, skin_frame):
        rng = np.random.default_rng(0)
        frame = rng.integers(0, 256, size=skin_frame.shape, dtype=np.uint8)
        face = make_face()
        sampler = RegionSampler()
        assert sampler.sample_regions(frame, face) == sampler.sample_regions(frame, face)

    def test_landmark_off_frame(self, face, skin_frame):
        face[lm.CHIN, :2] = [0.5, 1.5]
        regions = RegionSampler().sample_regions(skin_frame, face)
        assert regions.chin == RegionStats.zero()
