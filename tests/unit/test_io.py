"""Unit tests for the preset and output I/O layer.

Tests for PresetReader, PathWriter, and the document helpers.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from plotweave.domain import Bounds, Circle, GenerationResult, Point, Polygon, Polyline
from plotweave.exceptions import OutputWriteError, PresetLoadError
from plotweave.io import PathWriter, PresetReader, read_result, result_document


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def sample_result() -> GenerationResult:
    return GenerationResult(
        paths=[
            Polyline([Point(0, 0), Point(10, 5)], group="petal"),
            Circle(5, 5, 2),
            Polygon(1, 2, 3, 6, rotation=0.5),
        ],
        helpers=[Polyline([Point(1, 1), Point(2, 2)])],
    )


class TestPresetReader:
    """Tests for PresetReader class."""

    def test_init(self):
        """Test PresetReader initialization."""
        path = Path("presets.json")
        reader = PresetReader(path)
        assert reader._preset_path == path
        assert reader._presets is None

    def test_load_nonexistent_file(self, tmp_path: Path):
        """Test loading a nonexistent file raises PresetLoadError."""
        reader = PresetReader(tmp_path / "missing.json")
        with pytest.raises(PresetLoadError, match="file not found"):
            reader.load()

    def test_presets_before_load(self):
        """Test accessing presets before loading raises RuntimeError."""
        reader = PresetReader(Path("presets.json"))
        with pytest.raises(RuntimeError, match="Presets not loaded"):
            _ = reader.presets

    def test_invalid_json(self, tmp_path: Path):
        """Test malformed JSON raises PresetLoadError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PresetLoadError) as exc_info:
            PresetReader(path).load()
        assert exc_info.value.path == str(path)

    def test_scalar_document(self, tmp_path: Path):
        """Test a bare number is rejected."""
        with pytest.raises(PresetLoadError, match="expected a JSON object or array"):
            PresetReader(write_json(tmp_path / "n.json", 5)).load()

    def test_record_without_params(self, tmp_path: Path):
        """Test a library entry without params is rejected."""
        path = write_json(tmp_path / "lib.json", [{"id": "a", "params": 3}])
        with pytest.raises(PresetLoadError, match="no params mapping"):
            PresetReader(path).load()

    def test_flat_mapping(self, tmp_path: Path):
        """Test a flat parameter mapping becomes one preset named after the file."""
        path = write_json(tmp_path / "lissa.json", {"freqX": 3, "freqY": 2})
        with PresetReader(path) as reader:
            presets = reader.presets
        assert len(presets) == 1
        assert presets[0].id == "lissa"
        assert presets[0].system is None
        assert presets[0].params == {"freqX": 3, "freqY": 2}

    def test_single_record(self, tmp_path: Path):
        """Test a single preset record."""
        record = {"id": "rose", "name": "Rose", "preset_system": "petalis", "params": {"count": 40}}
        with PresetReader(write_json(tmp_path / "rose.json", record)) as reader:
            preset = reader.get_preset("rose")
        assert preset is not None
        assert preset.name == "Rose"
        assert preset.system == "petalis"
        assert preset.params == {"count": 40}

    def test_library_filtering(self, tmp_path: Path):
        """Test iterating a library by algorithm id."""
        library = {
            "presets": [
                {"id": "a", "preset_system": "grid", "params": {"rows": 4}},
                {"id": "b", "system": "petalis", "params": {"count": 10}},
                {"params": {"seed": 9}},
            ]
        }
        reader = PresetReader(write_json(tmp_path / "lib.json", library))
        reader.load()
        assert [p.id for p in reader.iter_presets()] == ["a", "b", "lib-2"]
        assert [p.id for p in reader.iter_presets("petalis")] == ["b", "lib-2"]
        assert reader.first_params("grid") == {"rows": 4}
        assert reader.get_preset("zzz") is None

    def test_first_params_without_match(self, tmp_path: Path):
        """Test asking for an algorithm no preset covers."""
        reader = PresetReader(write_json(tmp_path / "lib.json", [{"system": "grid", "params": {}}]))
        reader.load()
        with pytest.raises(PresetLoadError, match="no preset for 'boids'"):
            reader.first_params("boids")

    def test_first_params_is_a_copy(self, tmp_path: Path):
        """Test callers cannot mutate the loaded preset."""
        reader = PresetReader(write_json(tmp_path / "p.json", {"rows": 4}))
        reader.load()
        reader.first_params()["rows"] = 99
        assert reader.first_params() == {"rows": 4}

    def test_context_manager_unloads(self, tmp_path: Path):
        """Test exiting the context drops the loaded presets."""
        reader = PresetReader(write_json(tmp_path / "p.json", {"rows": 4}))
        with reader:
            assert reader.presets
        with pytest.raises(RuntimeError):
            _ = reader.presets


class TestResultDocument:
    """Tests for result_document."""

    def test_minimal(self, sample_result: GenerationResult):
        """Test a document without metadata has only paths and helpers."""
        document = result_document(sample_result)
        assert list(document) == ["paths", "helpers"]
        assert len(document["paths"]) == 3

    def test_metadata(self, sample_result: GenerationResult):
        """Test metadata keys come first."""
        document = result_document(sample_result, "grid", 7, Bounds(300, 200))
        assert list(document)[:3] == ["algorithm", "seed", "bounds"]
        assert document["bounds"]["innerWidth"] == 260
        assert document["paths"][1]["kind"] == "circle"


class TestPathWriter:
    """Tests for PathWriter class."""

    def test_init(self):
        """Test PathWriter initialization."""
        writer = PathWriter(Path("out.json"))
        assert writer.output_path == Path("out.json")

    def test_write_and_read_back(self, tmp_path: Path, sample_result: GenerationResult):
        """Test a written document loads back into an equal result."""
        out = tmp_path / "nested" / "dir" / "result.json"
        size = PathWriter(out, indent=2).write(sample_result, "grid", 3)
        assert out.exists()
        assert size == len(out.read_bytes())
        loaded = read_result(out)
        assert loaded.to_dict() == sample_result.to_dict()

    def test_dumps_is_compact_by_default(self, sample_result: GenerationResult):
        """Test default serialization has no newlines."""
        assert "\n" not in PathWriter(Path("x.json")).dumps(sample_result)

    def test_write_failure(self, tmp_path: Path, sample_result: GenerationResult):
        """Test OS errors are wrapped in OutputWriteError."""
        writer = PathWriter(tmp_path / "result.json")
        with patch.object(Path, "write_text", side_effect=OSError("disk full")):
            with pytest.raises(OutputWriteError, match="disk full"):
                writer.write(sample_result)

    def test_get_output_path(self):
        """Test default output naming."""
        assert PathWriter.get_output_path("lissajous", 7) == Path("lissajous-7.json")
        assert PathWriter.get_output_path("grid", 1, Path("out")) == Path("out/grid-1.json")
