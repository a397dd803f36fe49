"""Tests for S03: Export step."""

from pathlib import Path

from xyzview.steps.s03_export.config import ExportConfig
from xyzview.steps.s03_export.contracts import ExportInput
from xyzview.steps.s03_export.step import ExportStep
from xyzview.utils.io import read_xyz


class TestExportStep:
    def test_default_export(self, sample_xyz_file: Path, data_root: Path):
        step = ExportStep(config=ExportConfig(), data_root=data_root)
        result = step.execute(ExportInput(points_path=sample_xyz_file))

        assert result.output_path == data_root / "processed" / "output.xyz"
        assert result.num_points == 18
        first = result.output_path.read_text().splitlines()[0]
        assert first == "0.000000 0.000000 0.000000 0 255 128"

    def test_invert_and_precision(self, sample_xyz_file: Path, data_root: Path):
        config = ExportConfig(invert_elevation=True, decimal_places=2, output_name="inv.xyz")
        step = ExportStep(config=config, data_root=data_root)
        result = step.execute(ExportInput(points_path=sample_xyz_file))

        lines = result.output_path.read_text().splitlines()
        assert lines[4] == "0.00 0.00 -10.00 40 215 128"
        exported = read_xyz(result.output_path)
        original = read_xyz(sample_xyz_file)
        assert [p.z for p in exported] == [-p.z for p in original]

    def test_validate_missing_file(self, data_root: Path):
        step = ExportStep(config=ExportConfig(), data_root=data_root)
        assert step.validate_inputs(ExportInput(points_path=data_root / "nope.xyz")) is False
