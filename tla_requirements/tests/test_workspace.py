"""
Tests: working-set operations, export, session storage and the CLI.

Run with:
    pytest tla_requirements/tests/test_workspace.py -v
"""

import json

import pytest
from tla_requirements.main import main
from tla_requirements.models.enums import Kind, Priority, ProofStatus
from tla_requirements.models.schemas import Requirement
from tla_requirements.samples import DEMO_MODULE
from tla_requirements.services import workspace_service as ws
from tla_requirements.services.export_service import CSV_HEADERS, UTF8_BOM, to_csv, to_json
from tla_requirements.services.extraction_service import extract_candidates
from tla_requirements.services.linguistics import NullLinguisticTool
from tla_requirements.services.storage_service import StorageService, load_source


@pytest.fixture
def demo():
    return extract_candidates(DEMO_MODULE, NullLinguisticTool())


def _by_text(requirements, prefix):
    return next(r for r in requirements if r.text.startswith(prefix))


class TestWorkspaceOperations:
    def test_add_blank_goes_first(self, demo):
        out = ws.add_blank(demo)
        assert len(out) == len(demo) + 1
        assert out[0].rationale == "User-added"
        assert out[1:] == demo

    def test_remove(self, demo):
        out = ws.remove(demo, demo[0].id)
        assert len(out) == len(demo) - 1
        assert demo[0].id not in {r.id for r in out}

    def test_unknown_id(self, demo):
        with pytest.raises(KeyError):
            ws.remove(demo, "nope")
        with pytest.raises(KeyError):
            ws.formalize(demo, "nope")

    def test_update_text_keeps_classification(self, demo):
        target = demo[1]
        out = ws.update_text(demo, target.id, "Something else entirely")
        assert out[1].text == "Something else entirely"
        assert out[1].kind == target.kind
        assert out[1].id == target.id
        assert demo[1].text != "Something else entirely"

    def test_refresh_suggestions(self):
        req = Requirement(text="The light turns green", kind=Kind.FUNCTIONAL)
        (out,) = ws.refresh_suggestions([req], req.id, NullLinguisticTool())
        assert out.suggestions[0] == "Use a normative modal like 'shall' or 'must'."

    def test_formalize_attaches_rewrite(self, demo):
        target = _by_text(demo, "NFR: Mode change latency")
        out = ws.formalize(demo, target.id, step_ms=50)
        updated = next(r for r in out if r.id == target.id)
        assert updated.formalization.title == "Bounded response within 100 ms (~2 steps)"
        assert target.formalization is None

    def test_formalize_overwrites(self, demo):
        target = _by_text(demo, "NFR: Mode change latency")
        once = ws.formalize(demo, target.id, step_ms=50)
        twice = ws.formalize(once, target.id, step_ms=25)
        updated = next(r for r in twice if r.id == target.id)
        assert updated.formalization.title == "Bounded response within 100 ms (~4 steps)"

    def test_prove_one_selects_and_proves(self, demo):
        target = _by_text(demo, "THEOREM")
        out = ws.prove_one(demo, target.id, DEMO_MODULE)
        updated = next(r for r in out if r.id == target.id)
        assert updated.selected is True
        assert updated.status == ProofStatus.PROVED

    def test_select_all(self, demo):
        assert all(r.selected for r in ws.select_all(demo, True))
        assert not any(r.selected for r in ws.select_all(demo, False))

    def test_filter(self, demo):
        assert len(ws.filter_requirements(demo)) == len(demo)
        nfrs = ws.filter_requirements(demo, kind=Kind.NON_FUNCTIONAL)
        assert all(r.kind == Kind.NON_FUNCTIONAL for r in nfrs)
        assert [r.text for r in ws.filter_requirements(demo, query="  LATENCY ")] == [
            "NFR: Mode change latency should be under 100 ms",
        ]
        high = ws.filter_requirements(demo, priority="High")
        assert all(r.priority == Priority.HIGH for r in high)

    def test_stats(self, demo):
        stats = ws.compute_stats(demo)
        assert stats.total == 8
        assert stats.functional == 4
        assert stats.non_functional == 4
        assert stats.high + stats.medium + stats.low == 8
        assert stats.proved == 0

    def test_stats_after_proof(self, demo):
        proved = ws.prove_one(demo, demo[0].id, DEMO_MODULE)
        assert ws.compute_stats(proved).proved == 2


class TestExport:
    def test_csv_layout(self):
        req = Requirement(text='Say "hi", then stop', rationale="line one\nline two")
        rendered = to_csv([req])
        assert rendered.startswith(UTF8_BOM)
        lines = rendered[len(UTF8_BOM):].split("\n")
        assert lines[0] == ",".join(CSV_HEADERS)
        assert len(lines) == 2
        assert '"Say ""hi"", then stop"' in lines[1]
        assert "line one line two" in lines[1]
        assert lines[1].startswith(f"{req.id},Functional,Medium,Unproven,")
        assert lines[1].endswith(",")

    def test_csv_empty(self):
        assert to_csv([]) == UTF8_BOM + ",".join(CSV_HEADERS)

    def test_json_round_trip_fields(self, demo):
        data = json.loads(to_json(demo))
        assert len(data) == 8
        assert data[0]["kind"] == "Functional"
        assert data[0]["evidence"] is None
        assert data[0]["id"] == demo[0].id


class TestStorage:
    def test_save_and_load(self, tmp_path, demo):
        store = StorageService(base_path=str(tmp_path))
        path = store.save_session(DEMO_MODULE, demo)
        assert path.endswith(".json")
        assert "tla-session-v" in path

        session = store.load_session()
        assert session.source == DEMO_MODULE
        assert [r.id for r in session.requirements] == [r.id for r in demo]

    def test_missing_session(self, tmp_path):
        assert StorageService(base_path=str(tmp_path)).load_session() is None

    def test_corrupt_session(self, tmp_path):
        store = StorageService(base_path=str(tmp_path))
        store.session_path.write_text("{broken", encoding="utf-8")
        assert store.load_session() is None

    def test_clear(self, tmp_path, demo):
        store = StorageService(base_path=str(tmp_path))
        store.save_session(DEMO_MODULE, demo)
        store.clear_session()
        assert store.load_session() is None
        store.clear_session()


class TestLoadSource:
    def test_reads_tla_and_txt(self, tmp_path):
        for name in ("Module.tla", "notes.TXT"):
            path = tmp_path / name
            path.write_text("Init == TRUE", encoding="utf-8")
            assert load_source(str(path)) == "Init == TRUE"

    def test_rejects_other_extensions(self, tmp_path):
        path = tmp_path / "Module.md"
        path.write_text("Init == TRUE", encoding="utf-8")
        with pytest.raises(ValueError, match="Please upload a .tla or .txt file"):
            load_source(str(path))

    def test_unreadable(self, tmp_path):
        path = tmp_path / "Binary.tla"
        path.write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(ValueError, match="Failed to read file"):
            load_source(str(path))
        with pytest.raises(ValueError, match="Failed to read file"):
            load_source(str(tmp_path / "Absent.tla"))


class TestCli:
    def test_export_demo_json(self, tmp_path):
        out = tmp_path / "reqs.json"
        assert main(["--export", "json", "--out", str(out)]) == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert len(data) == 8

    def test_formalize_and_export_csv(self, tmp_path):
        source = tmp_path / "Module.tla"
        source.write_text("(* NFR: Mode change latency should be under 100 ms. *)\n", encoding="utf-8")
        out = tmp_path / "reqs.csv"
        assert main([str(source), "--formalize", "--export", "csv", "--out", str(out)]) == 0
        lines = out.read_text(encoding="utf-8").lstrip(UTF8_BOM).split("\n")
        assert len(lines) == 2
        assert "Non-functional" in lines[1]

    def test_bad_extension(self, tmp_path):
        source = tmp_path / "Module.md"
        source.write_text("Init == TRUE", encoding="utf-8")
        assert main([str(source)]) == 2
