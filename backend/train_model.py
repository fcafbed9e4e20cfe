"""
Model trainer - run by the server as `python train_model.py --episodes=N`.

Learns which dish earns the most per plate with an epsilon-greedy bandit
over the archived servings, then rewrites:
    predicted.json         dishes, q_values, counts, best, epsilon
    predicted_weekly.json  7-day plates/earnings forecast (trailing average)
    metrics_weekly.json    totals/averages over the last 7 archived days
    metrics_monthly.json   totals/averages over the last 30 archived days

Exits non-zero with a message on stderr when training fails.
"""
import argparse
import random
import sys
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from backend.services.document_store import get_document_store
from backend.services.timeseries import build_series
from backend.utils.helpers import as_number

EPSILON_START = 1.0
EPSILON_MIN = 0.05
EPSILON_DECAY = 0.98


def dish_rewards(archive: List[Dict[str, Any]]) -> Dict[str, List[float]]:
    """Observed earning-per-plate samples for each dish name"""
    rewards: Dict[str, List[float]] = defaultdict(list)
    for day in archive:
        if not isinstance(day, dict):
            continue
        for item in day.get("items") or []:
            if not isinstance(item, dict):
                continue
            name = item.get("name") or item.get("dishName")
            plates = as_number(item.get("totalPlates"))
            if not name or plates <= 0:
                continue
            rewards[str(name)].append(float(as_number(item.get("totalEarning"))) / plates)
    return dict(rewards)


def train_bandit(
    rewards: Dict[str, List[float]],
    episodes: int,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """Epsilon-greedy value estimates; each pull replays a random observed sample."""
    rng = rng or random.Random()
    dishes = sorted(rewards)
    q_values = [0.0] * len(dishes)
    counts = [0] * len(dishes)
    epsilon = EPSILON_START

    for _ in range(episodes):
        if rng.random() < epsilon:
            arm = rng.randrange(len(dishes))
        else:
            arm = max(range(len(dishes)), key=lambda i: q_values[i])
        reward = rng.choice(rewards[dishes[arm]])
        counts[arm] += 1
        q_values[arm] += (reward - q_values[arm]) / counts[arm]
        epsilon = max(EPSILON_MIN, epsilon * EPSILON_DECAY)

    best = dishes[max(range(len(dishes)), key=lambda i: q_values[i])] if dishes else None
    return {
        "dishes": dishes,
        "q_values": [round(q, 4) for q in q_values],
        "counts": counts,
        "best": best,
        "epsilon": round(epsilon, 4),
    }


def weekly_forecast(archive: List[Dict[str, Any]], start: date) -> List[Dict[str, Any]]:
    """Flat forecast for the next 7 days from the trailing weekly average"""
    recent = build_series(archive, "weekly")
    if recent:
        plates = sum(d["actual"] for d in recent) / len(recent)
        earning = sum(d["actualEarning"] for d in recent) / len(recent)
    else:
        plates = earning = 0
    return [
        {
            "date": (start + timedelta(days=offset)).isoformat(),
            "predicted": round(plates),
            "predictedEarning": round(earning, 2),
        }
        for offset in range(7)
    ]


def period_metrics(archive: List[Dict[str, Any]], period: str) -> Dict[str, Any]:
    series = build_series(archive, period)
    days = len(series)
    total_plates = sum(d["actual"] for d in series)
    total_earning = round(sum(d["actualEarning"] for d in series), 2)
    return {
        "period": period,
        "days": days,
        "totalPlates": total_plates,
        "totalEarning": total_earning,
        "avgPlates": round(total_plates / days, 2) if days else 0,
        "avgEarning": round(total_earning / days, 2) if days else 0,
    }


def train(episodes: int, seed: Optional[int] = None) -> Dict[str, Any]:
    store = get_document_store()
    archive = store.read("modelData", [])
    if not isinstance(archive, list):
        raise ValueError("model data is not a list of daily entries")

    rewards = dish_rewards(archive)
    if not rewards:
        raise ValueError("no archived servings with totalPlates to train on")

    summary = train_bandit(rewards, episodes, random.Random(seed))
    summary["episodes"] = episodes
    summary["trainedAt"] = datetime.now(timezone.utc).isoformat()

    previous = store.read("predicted", {})
    if isinstance(previous, dict) and previous.get("lastCalibrated"):
        summary["lastCalibrated"] = previous["lastCalibrated"]

    store.write_and_mirror("predicted", summary)
    store.write_and_mirror(
        "predictedWeekly",
        {"series": weekly_forecast(archive, date.today() + timedelta(days=1))},
    )
    store.write_and_mirror("metricsWeekly", period_metrics(archive, "weekly"))
    store.write_and_mirror("metricsMonthly", period_metrics(archive, "monthly"))
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Train the SmartMeal dish model")
    parser.add_argument("--episodes", type=int, default=200)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    if args.episodes <= 0:
        print("episodes must be positive", file=sys.stderr)
        return 1

    try:
        summary = train(args.episodes, args.seed)
    except Exception as e:
        print(f"Training failed: {e}", file=sys.stderr)
        return 1

    print(f"Trained on {len(summary['dishes'])} dishes, best: {summary['best']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
