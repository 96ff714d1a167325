import json
from pathlib import Path

import numpy as np
import pytest

from ffbpnet.core import persistence
from ffbpnet.training import pipelines


def _config(run_dir, **train):
    config = pipelines.load_preset("and")
    config["train"].update({"epochs": 40, "run_dir": str(run_dir), "target_error": None})
    config["train"].update(train)
    return config


def test_pipeline_produces_artifacts(tmp_path):
    config = _config(tmp_path / "run", checkpoint_every=20)
    result = pipelines.run_pipeline(config)

    run_dir = tmp_path / "run"
    assert result.epochs == 40
    assert np.isfinite(result.final_error)
    assert Path(result.metrics_path) == run_dir / "metrics.jsonl"
    assert (run_dir / "config.json").exists()
    assert (run_dir / "checkpoints" / "last.npz").exists()
    assert (run_dir / "checkpoints" / "epoch-00020.npz").exists()

    records = [json.loads(line) for line in Path(result.metrics_path).read_text().splitlines()]
    assert len(records) == 40
    assert all({"epoch", "seed", "sha", "error", "rmse"} <= set(r) for r in records)
    assert records[-1]["error"] == pytest.approx(result.final_error)

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["network"]["input_count"] == 2
    assert manifest["config"]["network"]["seed"] == 7
    assert manifest["dataset"]["gate"] == "and"
    assert manifest["network"]["epochs_run"] == 40

    summary = json.loads(Path(result.summary_path).read_text())
    assert summary["epochs"] == 40
    assert summary["final_error"] == pytest.approx(result.final_error)
    assert set(summary["final_metrics"]) == {"rmse", "mae", "accuracy"}

    restored = persistence.load(result.checkpoint_path)
    assert restored.weight_count == 2 * 2 + 2 * 1


def test_pipeline_determinism(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "run1", shuffle=True))
    second = pipelines.run_pipeline(_config(tmp_path / "run2", shuffle=True))
    assert Path(first.metrics_path).read_text() == Path(second.metrics_path).read_text()
    assert first.final_error == second.final_error


def test_pipeline_stops_at_target_error(tmp_path, capsys):
    config = _config(tmp_path / "run", epochs=5000, target_error=0.2, verbose=True)
    result = pipelines.run_pipeline(config)
    assert result.epochs < 5000
    assert result.final_error < 0.2
    assert "ffbpnet run" in capsys.readouterr().out


def test_pipeline_rejects_bad_configs(tmp_path):
    config = _config(tmp_path / "run")
    config["network"]["input_count"] = 3
    with pytest.raises(ValueError):
        pipelines.run_pipeline(config)

    config = _config(tmp_path / "run")
    del config["network"]
    with pytest.raises(KeyError):
        pipelines.run_pipeline(config)

    with pytest.raises(KeyError):
        pipelines.load_preset("missing")


def test_presets_are_copies():
    available = pipelines.presets()
    assert {"xor", "and", "or-shuffled"} <= set(available)
    available["xor"]["train"]["epochs"] = 1
    assert pipelines.load_preset("xor")["train"]["epochs"] == 5000


def test_config_files_and_merge(tmp_path):
    path = tmp_path / "override.json"
    path.write_text(json.dumps({"train": {"epochs": 3}, "network": {"hidden_count": 4}}))
    override = pipelines.load_config(path)
    merged = pipelines.merge_config(pipelines.load_preset("xor"), override)
    assert merged["train"]["epochs"] == 3
    assert merged["train"]["seed"] == 42
    assert merged["network"]["hidden_count"] == 4
    assert merged["network"]["momentum"] == 0.9

    bad = tmp_path / "config.toml"
    bad.write_text("")
    with pytest.raises(ValueError):
        pipelines.load_config(bad)

    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")
    with pytest.raises(TypeError):
        pipelines.load_config(listing)


def test_yaml_config(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "run.yaml"
    path.write_text("train:\n  epochs: 2\n")
    assert pipelines.load_config(path) == {"train": {"epochs": 2}}


def test_pipeline_integer_options(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path / "run", seed=None, epochs=None, summary_window="5"))
    assert result.epochs == 1000
    records = [json.loads(line) for line in Path(result.metrics_path).read_text().splitlines()]
    assert records[0]["seed"] == 0
    assert json.loads(Path(result.summary_path).read_text())["window"] == 5

    with pytest.raises(ValueError, match="train.seed"):
        pipelines.run_pipeline(_config(tmp_path / "bad", seed="abc"))
    with pytest.raises(ValueError, match="train.epochs"):
        pipelines.run_pipeline(_config(tmp_path / "bad", epochs=[3]))
