import json

import pytest

from cli.main import main
from ffnet.storage import load_model


def test_cli_init_inspect_and_check(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FFNET_JSON_INDENT", raising=False)
    main(["init", "--layers", "3", "4", "2", "--out", "model.json", "--output", "softmax", "--seed", "1"])
    written = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert written == {"parameters": 26, "path": "model.json"}

    main(["inspect", "model.json"])
    summary = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert summary["layerNodeCounts"] == [3, 4, 2]
    assert summary["hiddenActivation"] == "sigmoid"
    assert summary["outputActivation"] == "softmax"
    assert summary["diagnostics"] == []

    main(["check", "model.json"])
    assert capsys.readouterr().out.startswith("ok: model.json")
    assert load_model("model.json").network.parameter_count() == 26


def test_cli_inspect_reports_custom_diagnostics(tmp_path, capsys):
    path = tmp_path / "model.json"
    path.write_text(
        json.dumps(
            {
                "layerNodeCounts": [2, 1],
                "momentum": 0.0,
                "learningRate": 0.1,
                "batchSize": 1,
                "hiddenActivation": "sigmoid",
                "outputActivation": "custom",
                "weights": [[0.0, 0.0, 0.0]],
            }
        )
    )
    config = tmp_path / "quiet.json"
    config.write_text(json.dumps({"warn_on_custom": False}))
    main(["--config", str(config), "inspect", str(path)])
    summary = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert summary["outputActivation"] == "sigmoid"
    assert [d["side"] for d in summary["diagnostics"]] == ["output"]


def test_cli_check_fails_on_bad_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{}")
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(path)])
    assert str(excinfo.value.code).startswith("error:")
    assert "layerNodeCounts" in str(excinfo.value.code)


def test_cli_check_fails_on_missing_file(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(tmp_path / "absent.json")])
    assert str(excinfo.value.code).startswith("error:")


def test_cli_init_rejects_invalid_structure(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["init", "--layers", "3", "--out", str(tmp_path / "m.json")])
    assert "at least 2 layers" in str(excinfo.value.code)


def test_cli_init_reports_unwritable_destination(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["init", "--layers", "2", "1", "--out", str(tmp_path / "missing" / "m.json")])
    assert str(excinfo.value.code).startswith("error:")
    assert not (tmp_path / "missing").exists()
