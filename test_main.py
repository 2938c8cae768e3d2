import json
from unittest.mock import MagicMock

from bs4 import BeautifulSoup

import main
from main import (build_schedule_document, extract_all_schedules, pool_file_name,
                  render_calendar, save_schedule_files)

RESULTS = [
    {
        "poolName": "Balboa Pool",
        "sessions": [
            {"pool": "Balboa Pool", "day": 0, "startTime": "09:00", "endTime": "11:00",
             "sessionType": "Family Swim"},
            {"pool": "Balboa Pool", "day": 2, "startTime": "13:30", "endTime": "15:30",
             "sessionType": "Family Swim"},
        ],
        "lastUpdated": "2025-10-01T08:00:00Z",
        "source": "SF Rec & Park schedule PDF"
    },
    {
        "poolName": "Rossi Pool",
        "sessions": [],
        "lastUpdated": "2025-10-01T08:00:00Z",
        "source": "SF Rec & Park schedule PDF",
        "error": "Failed to download schedule PDF"
    },
]


def test_pool_file_name():
    assert pool_file_name("Balboa Pool") == "balboa-pool-schedule.json"
    assert pool_file_name("King  Pool") == "king-pool-schedule.json"


def test_build_schedule_document_counts_errored_pools():
    document = build_schedule_document(RESULTS)
    assert document["totalPools"] == 2
    assert document["totalSessions"] == 2
    assert [pool["poolName"] for pool in document["pools"]] == ["Balboa Pool", "Rossi Pool"]
    assert document["lastUpdated"]


def test_extract_all_schedules_processes_every_pool(monkeypatch):
    process_pool = MagicMock(side_effect=lambda pool, client, pdf_cache_dir: {"poolName": pool["name"]})
    sleep = MagicMock()
    monkeypatch.setattr(main, "process_pool", process_pool)
    monkeypatch.setattr(main.time, "sleep", sleep)

    pools = [{"name": "A", "url": "a"}, {"name": "B", "url": "b"}, {"name": "C", "url": "c"}]
    results = extract_all_schedules(pools, client=MagicMock(), delay=2)

    assert [result["poolName"] for result in results] == ["A", "B", "C"]
    assert sleep.call_count == 2


def test_save_and_render(tmp_path):
    data_dir = tmp_path / "data"
    document = build_schedule_document(RESULTS)
    combined_path = save_schedule_files(RESULTS, document, str(data_dir))

    assert json.loads((data_dir / "balboa-pool-schedule.json").read_text())["poolName"] == "Balboa Pool"
    assert json.loads((data_dir / "rossi-pool-schedule.json").read_text())["error"]
    assert json.loads((data_dir / "all-schedules.json").read_text())["totalSessions"] == 2

    output = tmp_path / "site" / "index.html"
    render_calendar(source=combined_path, output_path=str(output))
    soup = BeautifulSoup(output.read_text(), "html.parser")
    monday_nine = soup.find(attrs={"data-cell": "0-09:00"})
    assert monday_nine.find(class_="pool-session").get_text() == "Balboa"
    assert soup.find(attrs={"data-cell": "0-11:00"}).find(class_="pool-session") is None


def test_render_with_missing_data_still_writes_page(tmp_path):
    output = tmp_path / "index.html"
    render_calendar(source=str(tmp_path / "missing.json"), output_path=str(output))
    soup = BeautifulSoup(output.read_text(), "html.parser")
    assert soup.find(class_="calendar-grid") is not None
    assert soup.find_all(class_="pool-session") == []
    assert soup.find_all(class_="legend-item")


def test_main_skip_extract(monkeypatch):
    render = MagicMock()
    extract = MagicMock()
    monkeypatch.setattr(main, "render_calendar", render)
    monkeypatch.setattr(main, "extract_all_schedules", extract)
    assert main.main(["--skip-extract"]) == 0
    render.assert_called_once_with()
    extract.assert_not_called()
