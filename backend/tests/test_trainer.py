"""
Trainer tests - subprocess task and the bundled bandit trainer
"""
import random
import sys

import pytest

from backend import train_model
from backend.config import get_settings
from backend.services import trainer


@pytest.fixture()
def trainer_settings(tmp_path, monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "PYTHON_CMD", sys.executable)
    monkeypatch.setattr(settings, "SERVER_ROOT", tmp_path)
    return settings


def _script(tmp_path, name, body):
    path = tmp_path / name
    path.write_text(body, encoding="utf-8")
    return name


# ===================== SUBPROCESS =====================


class TestRunTrainer:

    def test_command(self, trainer_settings, monkeypatch):
        monkeypatch.setattr(trainer_settings, "TRAINER_SCRIPT", "train_model.py")
        assert trainer.trainer_command()[1:] == ["train_model.py", "--episodes=200"]

    async def test_success(self, trainer_settings, tmp_path, monkeypatch):
        script = _script(tmp_path, "ok.py", (
            "import sys, pathlib\n"
            "pathlib.Path('args.txt').write_text(' '.join(sys.argv[1:]))\n"
        ))
        monkeypatch.setattr(trainer_settings, "TRAINER_SCRIPT", script)

        result = await trainer.run_trainer()

        assert result.success
        assert result.returncode == 0
        # runs with the server root as working directory
        assert (tmp_path / "args.txt").read_text() == "--episodes=200"

    async def test_failure_truncates_stderr(self, trainer_settings, tmp_path, monkeypatch):
        script = _script(tmp_path, "fail.py", (
            "import sys\n"
            "sys.stderr.write('E' * 1000)\n"
            "sys.exit(3)\n"
        ))
        monkeypatch.setattr(trainer_settings, "TRAINER_SCRIPT", script)

        result = await trainer.run_trainer()

        assert not result.success
        assert result.returncode == 3
        assert result.diagnostic == "E" * 200

    async def test_spawn_error_is_a_failure(self, trainer_settings, monkeypatch):
        monkeypatch.setattr(trainer_settings, "PYTHON_CMD", "/nonexistent/python-smartmeal")

        result = await trainer.run_trainer()

        assert not result.success
        assert result.returncode is None
        assert len(result.diagnostic) <= 200

    async def test_launch_does_not_raise_on_failure(self, trainer_settings, tmp_path, monkeypatch):
        script = _script(tmp_path, "fail.py", "import sys\nsys.exit(1)\n")
        monkeypatch.setattr(trainer_settings, "TRAINER_SCRIPT", script)

        task = trainer.launch_trainer()
        result = await task

        assert not result.success


# ===================== BUNDLED TRAINER =====================


ARCHIVE = [
    {"date": "2024-01-01", "items": [
        {"name": "Dal", "totalPlates": 10, "totalEarning": 50},
        {"name": "Biryani", "totalPlates": 5, "totalEarning": 100},
    ]},
    {"date": "2024-01-02", "items": [
        {"name": "Dal", "totalPlates": 4, "totalEarning": 20},
        {"name": "Biryani", "totalPlates": 2, "totalEarning": 40},
        {"name": "Water", "totalPlates": 0, "totalEarning": 0},
    ]},
]


class TestBundledTrainer:

    def test_dish_rewards(self):
        rewards = train_model.dish_rewards(ARCHIVE)
        assert rewards == {"Dal": [5.0, 5.0], "Biryani": [20.0, 20.0]}

    def test_bandit_finds_best_dish(self):
        summary = train_model.train_bandit(
            train_model.dish_rewards(ARCHIVE), 200, random.Random(7)
        )
        assert summary["dishes"] == ["Biryani", "Dal"]
        assert summary["best"] == "Biryani"
        assert sum(summary["counts"]) == 200
        assert summary["epsilon"] == pytest.approx(train_model.EPSILON_MIN)

    def test_period_metrics(self):
        metrics = train_model.period_metrics(ARCHIVE, "weekly")
        assert metrics["days"] == 2
        assert metrics["totalPlates"] == 21
        assert metrics["totalEarning"] == 210.0
        assert metrics["avgPlates"] == 10.5

    def test_train_writes_documents(self, store, monkeypatch):
        monkeypatch.setattr(train_model, "get_document_store", lambda: store)
        store.write("modelData", ARCHIVE)
        store.write("predicted", {"lastCalibrated": "2024-01-01T00:00:00+00:00"})

        summary = train_model.train(50, seed=1)

        assert store.read("predicted", {}) == summary
        assert summary["episodes"] == 50
        assert summary["lastCalibrated"] == "2024-01-01T00:00:00+00:00"
        assert len(store.read("predictedWeekly", {})["series"]) == 7
        assert store.read("metricsMonthly", {})["period"] == "monthly"

    def test_main_fails_without_history(self, store, monkeypatch, capsys):
        monkeypatch.setattr(train_model, "get_document_store", lambda: store)

        assert train_model.main(["--episodes=10"]) == 1
        assert "Training failed" in capsys.readouterr().err


def test_default_interpreter_is_the_servers_own(monkeypatch):
    from backend.config import Settings

    monkeypatch.delenv("PYTHON_CMD", raising=False)
    assert Settings(_env_file=None).PYTHON_CMD == sys.executable
