"""
Smoke Flow: Layout -> Validate -> Generate -> Download
Exercises the API endpoints and DOCX file handling in-process.
"""
from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from fastapi.testclient import TestClient

from papergen.main import app, get_runtime_output_dir

DEFAULT_ORIGIN = "http://localhost:3000"
DEFAULT_TOPICS_BY_SECTION = {1: "Process Management", 2: "Memory Management", 3: "File Systems"}


def load_bank(path: str | None) -> Dict[str, Any] | None:
    if not path:
        return None
    bank_path = Path(path)
    if not bank_path.exists():
        raise SystemExit(f"Question bank not found: {bank_path}")
    return json.loads(bank_path.read_text(encoding="utf-8"))


def parse_filename(content_disposition: str) -> str:
    match = re.search(r"filename=([^;]+)", content_disposition)
    if not match:
        raise SystemExit("Could not parse filename from content-disposition")
    return match.group(1).strip().strip('"')


def assert_json_response(response, label: str) -> Dict[str, Any]:
    if response.status_code != 200:
        raise SystemExit(f"{label} failed: {response.status_code} {response.text}")
    if "application/json" not in response.headers.get("content-type", ""):
        raise SystemExit(f"{label} did not return JSON")
    return response.json()


def with_topics(slots: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    for slot in slots:
        section = int(slot["slot_id"][:-1])
        slot["topic_filter"] = DEFAULT_TOPICS_BY_SECTION[section]
    return slots


def main() -> None:
    load_dotenv()

    bank = load_bank(os.getenv("PAPERGEN_BANK_PATH"))
    origin = os.getenv("PAPERGEN_ORIGIN", DEFAULT_ORIGIN)

    client = TestClient(app)

    # Connectivity Check: /health
    health_body = assert_json_response(client.get("/health", headers={"Origin": origin}), "/health")
    if health_body.get("status") != "healthy":
        raise SystemExit("/health did not report healthy")

    # Layout defaults
    layout_body = assert_json_response(client.get("/api/layouts/CIE"), "/api/layouts/CIE")
    config = {
        "exam_type": "CIE",
        "semester": "5",
        "course_code": "OS",
        "slots": with_topics(layout_body["slots"]),
    }

    # Validation
    validate_body = assert_json_response(client.post("/api/validate", json=config), "/api/validate")
    if not validate_body["valid"]:
        raise SystemExit(f"/api/validate rejected defaults: {validate_body['violations']}")

    # Generation (simulate serverless temp output)
    os.environ["VERCEL"] = "1"
    generate_body = assert_json_response(
        client.post(
            "/api/generate-paper",
            json={"config": config, "question_bank": bank, "deterministic_fallback": True},
        ),
        "/api/generate-paper",
    )
    paper = generate_body["paper"]

    download_response = client.get(generate_body["download_url"])
    if download_response.status_code != 200:
        raise SystemExit(f"{generate_body['download_url']} failed: {download_response.status_code}")

    # Re-render DOCX from the returned payload
    render_response = client.post("/api/render-docx", json={"paper": paper})
    if render_response.status_code != 200:
        raise SystemExit(f"/api/render-docx failed: {render_response.status_code}")

    output_dir = get_runtime_output_dir()
    rendered = output_dir / parse_filename(render_response.headers.get("content-disposition", ""))
    if not rendered.exists():
        raise SystemExit(f"DOCX file not found on disk: {rendered}")

    # Clean up created files to keep /tmp tidy
    rendered.unlink(missing_ok=True)
    (output_dir / generate_body["filename"]).unlink(missing_ok=True)

    report = {
        "health": "ok",
        "validate": "ok",
        "generate_paper": "ok",
        "render_docx": "ok",
        "stats": paper["stats"],
        "output_dir": str(output_dir),
    }
    print(json.dumps(report, ensure_ascii=False, indent=2))
    print(paper["rendered_text"])


if __name__ == "__main__":
    main()
