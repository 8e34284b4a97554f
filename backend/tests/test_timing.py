from fractions import Fraction

import pytest

from autoslideshow.services import FrameRateInfo
from autoslideshow.utils.run_log import RunLog
from autoslideshow.utils.timing import (
    DEFAULT_TICKS_PER_SECOND,
    InvalidInputError,
    frames_to_ticks,
    round_half_up,
    ticks_to_frames,
    ticks_to_seconds,
)


@pytest.mark.parametrize(
    "value, expected",
    [(211.5, 212), (211.49, 211), (0.5, 1), (-0.5, 0), (-1.5, -1), (Fraction(3, 2), 2), (7, 7)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_tick_conversions():
    assert frames_to_ticks(30, 8467200000) == DEFAULT_TICKS_PER_SECOND
    assert ticks_to_frames(8467200000 * 3 - 1, 8467200000) == 2
    assert ticks_to_seconds(DEFAULT_TICKS_PER_SECOND * 2) == 2.0


class TestFrameRateInfo:
    def test_ntsc_from_timebase(self):
        rate = FrameRateInfo.from_ticks_per_frame(8475667200)
        assert (rate.numerator, rate.denominator) == (30000, 1001)
        assert rate.ntsc

    def test_integer_rate_from_timebase(self):
        assert FrameRateInfo.from_ticks_per_frame(8467200000) == FrameRateInfo(30, 1)

    @pytest.mark.parametrize(
        "fps, expected",
        [(29.97, (30000, 1001)), (23.976, (24000, 1001)), (59.94, (60000, 1001)), (25, (25, 1))],
    )
    def test_from_fps(self, fps, expected):
        rate = FrameRateInfo.from_fps(fps)
        assert (rate.numerator, rate.denominator) == expected

    def test_ticks_per_frame_round_trips(self):
        for fps in (23.976, 24, 25, 29.97, 30, 50, 59.94, 60):
            rate = FrameRateInfo.from_fps(fps)
            assert FrameRateInfo.from_ticks_per_frame(rate.ticks_per_frame()) == rate

    def test_coerce_keeps_floats_exact(self):
        assert FrameRateInfo.coerce(30.0) == FrameRateInfo(30, 1)
        assert FrameRateInfo.coerce(Fraction(30000, 1001)) == FrameRateInfo(30000, 1001)
        assert FrameRateInfo.coerce(29.97).rate == Fraction(29.97)

    @pytest.mark.parametrize("bad", [0, -30, "fast"])
    def test_coerce_rejects(self, bad):
        with pytest.raises(InvalidInputError):
            FrameRateInfo.coerce(bad)

    def test_frames_and_seconds(self):
        rate = FrameRateInfo(30, 1)
        assert rate.frames_from_seconds(7.05) == 212
        assert rate.seconds_from_frames(75) == pytest.approx(2.5)

    def test_label(self):
        assert FrameRateInfo(30, 1).label() == "30fps"
        assert FrameRateInfo(30000, 1001).label() == "29.970fps"


class TestRunLog:
    def test_lines_are_kept_per_instance(self):
        first, second = RunLog("one"), RunLog("two")
        first.log("hello")
        second.warning("careful")

        assert len(first) == 1 and len(second) == 1
        assert first.lines[0].endswith("INFO hello")
        assert second.lines[0].endswith("WARN careful")

    def test_mirrors_to_server_logger(self, caplog):
        caplog.set_level("INFO", logger="uvicorn.error")
        RunLog("trip").log("placed")
        assert "[trip] placed" in caplog.text

    def test_write(self, tmp_path):
        run_log = RunLog()
        run_log.log("a")
        run_log.log("b")
        path = run_log.write(tmp_path / "nested" / "log.txt")
        assert path.read_text(encoding="utf-8").count("\n") == 2

    def test_empty_text(self):
        assert RunLog().text() == ""
