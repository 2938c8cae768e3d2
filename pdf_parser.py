"""
PDF parsing utilities for extracting family swim sessions from pool schedules

Strategy:
1. Download the pool's schedule PDF from the SF Rec & Park document center
2. Render the first page to a high-resolution PNG (pypdfium2)
3. Ask Claude (vision) for the family swim sessions as JSON, retrying on unparsable answers
4. Normalize the answer into the schedule file format (day 0-6 from Monday, 24h HH:MM times)

Every failure ends up as a pool result with an empty sessions list and an "error"
field, so one bad PDF never stops the rest of the run.
"""

import base64
import datetime
import json
import re
import traceback

import pypdfium2 as pdfium
import requests
from anthropic import Anthropic

from constants import ANTHROPIC_API_KEY, EXTRACTION_ATTEMPTS, PDF_CACHE_DIR, SOURCE_LABEL, VISION_MODEL
from pool_types import ALL_DAYS

SYSTEM_PROMPT = """You are an expert at reading San Francisco Parks pool schedules. Analyze this schedule image and extract family swim hours.

Look for terms like:
- "Family Swim"
- "Open Swim"
- "Recreation Swim"
- "Public Swim"
- "General Swim"
- "Parent Child Swim"
- Any sessions open to families with children

Do NOT include lessons, classes, lap swim, swim team or water exercise.

Return ONLY a JSON object with this structure:
{
  "poolName": "Name of the pool",
  "operatingDays": [0-6, ...] (days the pool is open at all, 0=Monday, 6=Sunday),
  "sessions": [
    {
      "day": 0-6 (0=Monday, 1=Tuesday, ..., 6=Sunday),
      "startTime": "HH:MM" (24-hour format),
      "endTime": "HH:MM" (24-hour format),
      "sessionType": "Family Swim"
    }
  ]
}

If no family swim sessions are found, return an empty sessions array."""


def now_iso():
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def error_result(pool_name, message):
    return {
        "poolName": pool_name,
        "sessions": [],
        "lastUpdated": now_iso(),
        "source": SOURCE_LABEL,
        "error": message
    }


def download_pdf(pdf_url, output_path):
    """Download a PDF from the given URL"""
    try:
        response = requests.get(pdf_url)
        response.raise_for_status()

        with open(output_path, 'wb') as f:
            f.write(response.content)

        return True
    except Exception as e:
        print(f"Error downloading PDF: {e}")
        traceback.print_exc()
        return False


def convert_pdf_to_image(pdf_path, output_path=None, dpi=200):
    """
    Convert first page of PDF to PNG image.

    Args:
        pdf_path: Path to PDF file
        output_path: Optional output path for PNG. If None, uses pdf_path with .png extension
        dpi: Resolution for rendering (PDF default is 72)

    Returns:
        Path to the generated PNG file, or None if failed
    """
    try:
        if output_path is None:
            output_path = pdf_path.rsplit('.', 1)[0] + '_page1.png'

        pdf = pdfium.PdfDocument(pdf_path)
        page = pdf[0]

        bitmap = page.render(scale=dpi/72)
        pil_image = bitmap.to_pil()
        pil_image.save(output_path)

        print(f"Converted PDF to image: {output_path} (size: {pil_image.size})")
        return output_path
    except Exception as e:
        print(f"Error converting PDF to image: {e}")
        traceback.print_exc()
        return None


def parse_json_response(response_text):
    """Helper function to extract JSON from API response text."""
    if '```json' in response_text:
        start = response_text.find('```json') + 7
        end = response_text.find('```', start)
        if end != -1:
            return response_text[start:end].strip()
    elif '```' in response_text:
        start = response_text.find('```') + 3
        end = response_text.rfind('```')
        if end != -1 and end > start:
            return response_text[start:end].strip()
    elif '{' in response_text and '}' in response_text:
        start = response_text.find('{')
        end = response_text.rfind('}') + 1
        return response_text[start:end].strip()
    return response_text


def normalize_time(time_str):
    """
    Convert '9:00AM', '9:00 am', 'NOON', '9:00' or '09:00' to zero-padded 24h '09:00'.
    Returns None if the value isn't a recognizable time of day.
    """
    if not isinstance(time_str, str):
        return None
    value = time_str.upper().replace(' ', '').strip()
    if value == "NOON":
        return "12:00"

    match = re.match(r'^(\d{1,2})(?::(\d{2}))?(AM|PM)?$', value)
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    period = match.group(3)

    if period == 'PM' and hours != 12:
        hours += 12
    elif period == 'AM' and hours == 12:
        hours = 0

    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def normalize_sessions(raw_sessions, pool_name):
    """
    Turn the model's session list into schedule file sessions for pool_name.
    Entries with an unusable day or time range are skipped.
    """
    sessions = []
    seen = set()
    skipped = 0
    for raw in raw_sessions or []:
        if not isinstance(raw, dict):
            skipped += 1
            continue
        day = raw.get("day")
        start = normalize_time(raw.get("startTime"))
        end = normalize_time(raw.get("endTime"))
        if not isinstance(day, int) or isinstance(day, bool) or day not in ALL_DAYS:
            skipped += 1
            continue
        if not start or not end or start >= end:
            skipped += 1
            continue
        session = {
            "pool": pool_name,
            "day": day,
            "startTime": start,
            "endTime": end,
            "sessionType": raw.get("sessionType") or "Family Swim"
        }
        key = (day, start, end, session["sessionType"])
        if key in seen:
            continue
        seen.add(key)
        sessions.append(session)

    if skipped:
        print(f"  Skipped {skipped} unusable session(s) for {pool_name}")
    return sessions


def analyze_schedule_image(image_data, pool_name, client):
    """
    Ask the vision model for the family swim sessions in a schedule image.

    image_data is the base64-encoded PNG. Returns a pool result dict; if no
    attempt produces parsable JSON the result carries an "error" instead.
    """
    print(f"  Analyzing {pool_name} schedule with {VISION_MODEL}...")

    for attempt in range(EXTRACTION_ATTEMPTS):
        try:
            message = client.messages.create(
                model=VISION_MODEL,
                max_tokens=2000,
                system=SYSTEM_PROMPT,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": "image/png",
                                    "data": image_data
                                }
                            },
                            {
                                "type": "text",
                                "text": f"Please analyze this {pool_name} pool schedule and extract all family swim hours. Look carefully at the schedule grid and identify when families can swim."
                            }
                        ]
                    }
                ]
            )
        except Exception as e:
            print(f"Error calling vision API for {pool_name}: {e}")
            return error_result(pool_name, str(e))

        response_text = parse_json_response(message.content[0].text.strip())
        try:
            parsed = json.loads(response_text)
        except json.JSONDecodeError:
            print(f"  Attempt {attempt + 1}: Could not parse JSON response, retrying...")
            continue
        if not isinstance(parsed, dict):
            print(f"  Attempt {attempt + 1}: Response was not a JSON object, retrying...")
            continue

        result = {
            "poolName": pool_name,
            "sessions": normalize_sessions(parsed.get("sessions"), pool_name),
            "lastUpdated": now_iso(),
            "source": SOURCE_LABEL
        }
        operating_days = parsed.get("operatingDays")
        if isinstance(operating_days, list) and operating_days and all(day in ALL_DAYS for day in operating_days):
            result["operatingDays"] = sorted(set(operating_days))
        return result

    return error_result(pool_name, "Failed to parse AI response")


def process_pool(pool, client=None, pdf_cache_dir=PDF_CACHE_DIR):
    """
    Complete workflow for one pool: download the PDF, render it, extract sessions.

    pool is {"name": ..., "url": ...}. Always returns a pool result dict.
    """
    pool_name = pool["name"]
    try:
        print(f"\n{'='*60}")
        print(f"Processing {pool_name}: {pool['url']}")
        print(f"{'='*60}")

        pdf_path = f"{pdf_cache_dir}/{pool_name.replace(' ', '_')}_schedule.pdf"
        if not download_pdf(pool["url"], pdf_path):
            return error_result(pool_name, "Failed to download schedule PDF")

        image_path = convert_pdf_to_image(pdf_path)
        if not image_path:
            return error_result(pool_name, "Failed to convert schedule PDF to image")

        with open(image_path, 'rb') as f:
            image_data = base64.standard_b64encode(f.read()).decode('utf-8')

        if client is None:
            client = Anthropic(api_key=ANTHROPIC_API_KEY)

        result = analyze_schedule_image(image_data, pool_name, client)
        if "error" in result:
            print(f"✗ {pool_name}: {result['error']}")
        else:
            print(f"✓ {pool_name}: Found {len(result['sessions'])} family swim sessions")
        return result

    except Exception as e:
        print(f"Error processing {pool_name}: {e}")
        traceback.print_exc()
        return error_result(pool_name, str(e))
