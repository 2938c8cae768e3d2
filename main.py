import json
import os
import sys
import time
import traceback

from anthropic import Anthropic

from constants import (ANTHROPIC_API_KEY, CALENDAR_OUTPUT_FILE, DATA_DIR, PDF_CACHE_DIR,
                       POOL_DISPLAY_FILE, POOL_URLS, REQUEST_DELAY, SCHEDULE_DATA_SOURCE,
                       SCHEDULE_FILE)
from data_loader import DataLoader
from pdf_parser import now_iso, process_pool
from weekly_calendar import PoolDisplay, WeeklyCalendar, load_pool_display, render_page


def extract_all_schedules(pools=POOL_URLS, client=None, delay=REQUEST_DELAY):
    """Run the PDF extraction for every pool, one at a time."""
    if client is None:
        client = Anthropic(api_key=ANTHROPIC_API_KEY)
    results = []
    for index, pool in enumerate(pools):
        results.append(process_pool(pool, client, pdf_cache_dir=PDF_CACHE_DIR))
        if delay and index < len(pools) - 1:
            time.sleep(delay)
    return results


def build_schedule_document(results):
    return {
        "lastUpdated": now_iso(),
        "totalPools": len(results),
        "totalSessions": sum(len(result["sessions"]) for result in results),
        "pools": results
    }


def pool_file_name(pool_name):
    # "Balboa Pool" -> "balboa-pool-schedule.json"
    return "-".join(pool_name.lower().split()) + "-schedule.json"


def save_schedule_files(results, document, data_dir=DATA_DIR):
    os.makedirs(data_dir, exist_ok=True)

    for result in results:
        file_path = os.path.join(data_dir, pool_file_name(result["poolName"]))
        with open(file_path, "w") as pool_file:
            json.dump(result, pool_file, indent=2)
        print(f"Saved {file_path}")

    combined_path = os.path.join(data_dir, SCHEDULE_FILE)
    with open(combined_path, "w") as combined_file:
        json.dump(document, combined_file, indent=2)
    print(f"Saved {combined_path}")
    return combined_path


def render_calendar(source=SCHEDULE_DATA_SOURCE, output_path=CALENDAR_OUTPUT_FILE):
    if POOL_DISPLAY_FILE:
        pool_display = load_pool_display(POOL_DISPLAY_FILE)
    else:
        pool_display = PoolDisplay()

    calendar = WeeklyCalendar(DataLoader(source), pool_display)
    calendar.load_data()

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output_path, "w") as html_file:
        html_file.write(render_page(calendar))
    print(f"Wrote calendar with {len(calendar.sessions)} sessions to {output_path}")
    return output_path


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    if "--skip-extract" not in argv:
        print("Starting pool schedule extraction...")
        try:
            results = extract_all_schedules()
        except Exception as e:
            print(f"Fatal error during extraction: {e}")
            traceback.print_exc()
            return 1
        document = build_schedule_document(results)
        combined_path = save_schedule_files(results, document)
        print(f"Processed {document['totalPools']} pools with {document['totalSessions']} total family swim sessions")
        render_calendar(source=combined_path)
    else:
        render_calendar()
    return 0


if __name__ == "__main__":
    sys.exit(main())
