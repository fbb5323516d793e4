"""
Tests: NFR → TLA+ temporal rewrite templates.

Run with:
    pytest tla_requirements/tests/test_temporal_rewrite.py -v
"""

import pytest
from tla_requirements.services.temporal_rewrite import STEP_MS, rewrite_nfr_to_temporal


class TestLatencyTemplate:
    def test_mode_change_latency(self):
        result = rewrite_nfr_to_temporal("Mode change latency should be under 100 ms.")
        assert STEP_MS == 50
        assert "100 ms" in result.title
        assert "~2 steps" in result.title
        assert "LatencyBound == [] (lat_req => lat_t <= 2)" in result.tla
        assert "THEOREM Spec => LatencyBound" in result.tla
        assert result.assumptions == ["Assume ~50 ms per step; set event/goal predicates."]

    def test_seconds_normalized_to_ms(self):
        result = rewrite_nfr_to_temporal("Recovery within 2 s after a fault")
        assert result.title == "Bounded response within 2000 ms (~40 steps)"

    def test_milliseconds_spelled_out(self):
        result = rewrite_nfr_to_temporal("Response under 120 milliseconds")
        assert result.title == "Bounded response within 120 ms (~3 steps)"

    @pytest.mark.parametrize("text", ["Response under 10 ms", "Response under 0 ms"])
    def test_at_least_one_step(self, text):
        assert "(~1 steps)" in rewrite_nfr_to_temporal(text).title

    def test_custom_step(self):
        result = rewrite_nfr_to_temporal("latency under 100 ms", step_ms=20)
        assert "~5 steps" in result.title
        assert result.assumptions == ["Assume ~20 ms per step; set event/goal predicates."]


class TestAvailabilityTemplate:
    def test_permille_bound(self):
        result = rewrite_nfr_to_temporal("Availability >= 99.9% during cruise.")
        assert "AvailBound == [] (1000 * upTicks >= 999 * ticks)" in result.tla
        assert result.title == "Availability ≥ 99.9% (long-run)"
        assert result.assumptions == ["Define Up predicate; long-run average."]

    def test_whole_percentage(self):
        result = rewrite_nfr_to_temporal("uptime at least 95%")
        assert "(1000 * upTicks >= 950 * ticks)" in result.tla
        assert result.title == "Availability ≥ 95% (long-run)"

    def test_percentage_printed_exactly(self):
        result = rewrite_nfr_to_temporal("availability >= 99.12345678%")
        assert result.title == "Availability ≥ 99.12345678% (long-run)"
        assert "(1000 * upTicks >= 991 * ticks)" in result.tla


class TestThroughputTemplate:
    def test_window_in_steps(self):
        result = rewrite_nfr_to_temporal("throughput >= 50 per 10 s")
        assert result.title == "Throughput ≥ 50 per 10s (~200 steps)"
        assert "TPCheck == [] (win = 200 - 1 => count >= 50)" in result.tla
        assert result.assumptions == ["Define Event action once per occurrence; tumbling window."]

    def test_slash_form(self):
        result = rewrite_nfr_to_temporal("requests at least 5 / 1 second")
        assert "(~20 steps)" in result.title


class TestMTBFTemplate:
    def test_mtbf(self):
        result = rewrite_nfr_to_temporal("MTBF >= 300 s")
        assert result.title == "MTBF ≥ 300s (~6000 steps between failures)"
        assert "MTBFBound == [] (sinceFail >= 6000)" in result.tla
        assert "InitMTBF == sinceFail = 6000" in result.tla
        assert result.assumptions == ["Define Failure boundary action."]

    def test_spelled_out(self):
        result = rewrite_nfr_to_temporal("mean time between failures at least 5 seconds")
        assert "(~100 steps between failures)" in result.title


class TestTemplateOrder:
    def test_first_template_wins(self):
        result = rewrite_nfr_to_temporal("Recovery latency under 200 ms and availability >= 99%")
        assert result.title.startswith("Bounded response")

    @pytest.mark.parametrize("text", [
        "Average waiting time should be under 40s at peak.",
        "",
        "(* ]]] <<>> *)",
    ])
    def test_no_rewrite_placeholder(self, text):
        result = rewrite_nfr_to_temporal(text)
        assert result.title == "No rewrite available"
        assert result.assumptions == []
        assert result.tla.startswith("\\*")
        assert "'within 100 ms'" in result.tla

    def test_unrepresentable_availability_gives_placeholder(self):
        result = rewrite_nfr_to_temporal("availability >= " + "9" * 400 + "%")
        assert result.title == "No rewrite available"

    @pytest.mark.parametrize("text, prefix", [
        ("throughput >= 5 per 1" + "0" * 400 + " s", "Throughput ≥ 5 per 1" + "0" * 400 + "s"),
        ("MTBF >= 1" + "0" * 400 + " s", "MTBF ≥ 1" + "0" * 400 + "s"),
    ])
    def test_huge_windows_use_exact_steps(self, text, prefix):
        result = rewrite_nfr_to_temporal(text)
        assert result.title.startswith(prefix)
        assert "(~2" + "0" * 401 + " steps" in result.title
