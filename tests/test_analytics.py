from datetime import date

import pandas as pd

from core.analytics import build_dashboard, build_heatmap, study_streak, word_difficulty_band, word_freshness
from core.analytics.metrics import daily_accuracy, goal_progress_percent, intensity_for, status_counts
from core.srs.constants import DAY_MS

from tests.conftest import NOW, make_word


TODAY = date(2023, 11, 14)  # NOW in UTC


def test_study_streak_counts_consecutive_days():
    history = {"2023-11-12": 4, "2023-11-13": 1, "2023-11-14": 2, "2023-11-10": 9}
    assert study_streak(history, TODAY) == 3


def test_study_streak_survives_unstudied_today():
    history = {"2023-11-12": 4, "2023-11-13": 1}
    assert study_streak(history, TODAY) == 2
    assert study_streak({}, TODAY) == 0


def test_intensity_thresholds():
    assert intensity_for(0, 50) == 0
    assert intensity_for(1, 50) == 1
    assert intensity_for(25, 50) == 2
    assert intensity_for(50, 50) == 3
    assert intensity_for(75, 50) == 4


def test_heatmap_starts_on_sunday_and_ends_today():
    heatmap = build_heatmap({"2023-11-14": 60, "2023-11-13": 10}, 50, TODAY)

    first = date.fromisoformat(heatmap["date"].iloc[0])
    assert first.weekday() == 6
    assert heatmap["date"].iloc[-1] == "2023-11-14"
    assert len(heatmap) >= 105
    assert heatmap["count"].iloc[-1] == 60
    assert heatmap["intensity"].iloc[-1] == 3
    assert heatmap["intensity"].iloc[-2] == 1


def test_goal_progress_is_capped():
    assert goal_progress_percent(25, 50) == 50.0
    assert goal_progress_percent(80, 50) == 100.0


def test_difficulty_band_and_freshness():
    assert word_difficulty_band(1.3) == "hard"
    assert word_difficulty_band(2.5) == "normal"
    assert word_difficulty_band(2.9) == "easy"

    word = make_word("w1", interval=2, last_reviewed=NOW, next_review=NOW + 2 * DAY_MS)
    assert word_freshness(word, NOW + DAY_MS) == 50.0
    assert word_freshness(make_word("w2"), NOW) == 0.0


def test_status_counts_include_zeros():
    counts = status_counts([make_word("a"), make_word("b", status="learning")])
    assert counts.to_dict() == {"new": 1, "learning": 1, "mastered": 0}


def test_daily_accuracy():
    df = pd.DataFrame({
        "judgment": [3, 1, 3, 3],
        "day_utc": pd.to_datetime(["2023-11-13", "2023-11-13", "2023-11-14", "2023-11-14"], utc=True),
    })
    accuracy = daily_accuracy(df, 3)
    assert accuracy.tolist() == [0.5, 1.0]


def test_build_dashboard():
    words = [make_word("a"), make_word("b", next_review=NOW + DAY_MS, interval=1)]
    data = build_dashboard(words, {"2023-11-14": 10}, 20, NOW)

    assert data.today_count == 10
    assert data.goal_progress_percent == 50.0
    assert data.streak_days == 1
    assert data.total_words == 2
    assert data.due_count == 1
