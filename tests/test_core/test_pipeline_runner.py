"""Tests for core pipeline runner and contracts."""

import logging
from pathlib import Path

import numpy as np
import pytest
import yaml

from wallseg.core import setup_logging
from wallseg.core.contracts import (
    PipelineConfig,
    StepEntry,
    StepMeta,
    SMOOTHED_ANGLES_LAYER,
    WALL_INDEX_LAYER,
)
from wallseg.core.errors import CancelledByUserError, InvalidInputError, MissingLayerError
from wallseg.core.point_cloud import PointCloud
from wallseg.core.pipeline_runner import (
    DEFAULT_STEPS,
    build_step_config,
    default_pipeline_config,
    import_step_class,
    load_pipeline_config,
    load_step_config,
    run_pipeline,
    segment_walls,
)

REPO_ROOT = Path(__file__).parents[2]


class TestContracts:
    def test_step_meta(self):
        meta = StepMeta(step_name="test", elapsed_seconds=1.5, params={"a": 1})
        assert meta.step_name == "test"
        assert meta.elapsed_seconds == 1.5

    def test_pipeline_config(self):
        cfg = PipelineConfig(
            project_name="test",
            steps=[StepEntry(name="s1", module="wallseg.steps.s01_smooth_cloud", config_file="c.yaml")],
        )
        assert len(cfg.steps) == 1
        assert cfg.steps[0].enabled is True
        assert cfg.steps[0].params == {}


class TestPipelineConfigLoading:
    def test_load_pipeline_config(self, tmp_path: Path):
        config = {
            "project_name": "test_project",
            "steps": [
                {"name": "smooth_cloud", "module": "wallseg.steps.s01_smooth_cloud",
                 "config_file": "configs/steps/s01_smooth_cloud.yaml", "depends_on": [], "enabled": True},
            ],
        }
        config_file = tmp_path / "pipeline.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config, f)

        cfg = load_pipeline_config(config_file)
        assert cfg.project_name == "test_project"
        assert len(cfg.steps) == 1

    def test_load_step_config(self, tmp_path: Path):
        from wallseg.steps.s06_merge_segments.config import MergeSegmentsConfig

        config_file = tmp_path / "s06.yaml"
        with open(config_file, "w") as f:
            yaml.dump({"neighborhood_radius": 2.5, "iterations": 3}, f)

        cfg = load_step_config(config_file, MergeSegmentsConfig)
        assert cfg.neighborhood_radius == 2.5
        assert cfg.iterations == 3

    def test_params_override_config_file(self, tmp_path: Path):
        from wallseg.steps.s05_initial_segments.config import InitialSegmentsConfig

        config_file = tmp_path / "s05.yaml"
        with open(config_file, "w") as f:
            yaml.dump({"angle_threshold": 20.0, "output_layer": "Labels"}, f)

        entry = StepEntry(
            name="initial_segments",
            module="wallseg.steps.s05_initial_segments",
            config_file=str(config_file),
            params={"angle_threshold": 25.0},
        )
        cfg = build_step_config(entry, InitialSegmentsConfig)
        assert cfg.angle_threshold == 25.0
        assert cfg.output_layer == "Labels"

    def test_invalid_param_rejected(self):
        from wallseg.steps.s06_merge_segments.config import MergeSegmentsConfig

        entry = StepEntry(name="merge", module="wallseg.steps.s06_merge_segments",
                          params={"neighborhood_radius": 0.0})
        with pytest.raises(ValueError):
            build_step_config(entry, MergeSegmentsConfig)

    def test_shipped_configs_match_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(REPO_ROOT)
        cfg = load_pipeline_config(Path("configs/pipeline.yaml"))

        assert [s.name for s in cfg.steps] == [name for name, _, _ in DEFAULT_STEPS]
        for entry in cfg.steps:
            cls = import_step_class(entry.module)
            assert build_step_config(entry, cls.config_type) == cls.config_type()

    def test_default_pipeline_radius(self):
        cfg = default_pipeline_config(neighborhood_radius=3.0)
        assert cfg.steps[-1].name == "merge_segments"
        assert cfg.steps[-1].params == {"neighborhood_radius": 3.0}
        assert all(not s.params for s in cfg.steps[:-1])


class TestStepImport:
    def test_import_step_class(self):
        cls = import_step_class("wallseg.steps.s01_smooth_cloud")
        assert cls.__name__ == "SmoothCloudStep"
        assert hasattr(cls, "input_type")
        assert hasattr(cls, "output_type")

    def test_import_all_steps(self):
        for name, module, _ in DEFAULT_STEPS:
            cls = import_step_class(module)
            assert cls.name == name
            schema = cls.get_config_schema()
            assert "properties" in schema

    def test_module_without_step(self):
        with pytest.raises(ImportError):
            import_step_class("wallseg.core")


class TestRunPipeline:
    def test_rejects_non_cloud(self):
        with pytest.raises(InvalidInputError):
            run_pipeline(np.zeros((10, 3)))

    def test_records_every_step(self, wall_cloud: PointCloud):
        result = run_pipeline(wall_cloud)

        assert [m.step_name for m in result.steps] == [name for name, _, _ in DEFAULT_STEPS]
        assert result.outputs["merge_segments"]["labels_layer"] == WALL_INDEX_LAYER
        assert result.steps[-1].params["neighborhood_radius"] == 7.0

    def test_single_wall_gets_one_label(self, wall_cloud: PointCloud):
        labels = segment_walls(wall_cloud)
        assert labels.dtype == np.int64
        assert np.all(labels == 1)

    def test_disabled_step_breaks_chain(self, wall_cloud: PointCloud):
        cfg = default_pipeline_config()
        cfg.steps[3].enabled = False
        with pytest.raises(MissingLayerError) as exc_info:
            run_pipeline(wall_cloud, cfg)
        assert exc_info.value.layer_name == SMOOTHED_ANGLES_LAYER
        # finished steps keep their writes
        assert wall_cloud.has_normals

    def test_cancel_during_merge(self, wall_cloud: PointCloud):
        calls = []

        def cancel_on_sixth_report(fraction: float) -> bool:
            calls.append(fraction)
            return len(calls) < 6

        # one report each for steps 1-5 on a cloud smaller than a chunk
        with pytest.raises(CancelledByUserError) as exc_info:
            segment_walls(wall_cloud, progress=cancel_on_sixth_report)

        assert exc_info.value.stage == "merge_segments"
        assert exc_info.value.fraction == pytest.approx(0.1)
        assert len(wall_cloud.find_layers(SMOOTHED_ANGLES_LAYER)) == 1
        assert len(wall_cloud.find_layers(WALL_INDEX_LAYER)) == 1

    def test_progress_reaches_one(self, wall_cloud: PointCloud, recording_progress):
        segment_walls(wall_cloud, progress=recording_progress)
        assert len(recording_progress.calls) == 5 + 10
        assert recording_progress.calls[-1] == 1.0
        assert all(0.0 < f <= 1.0 for f in recording_progress.calls)


class TestLogging:
    def test_setup_logging(self):
        setup_logging("DEBUG")
        logging.getLogger("wallseg.test").debug("configured")

    def test_step_logs(self, wall_cloud: PointCloud, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.INFO, logger="wallseg"):
            segment_walls(wall_cloud)
        assert "--- Step 6/6: merge_segments ---" in caplog.text
        assert "Pipeline complete." in caplog.text
