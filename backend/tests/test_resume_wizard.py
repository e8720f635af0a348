"""Resume wizard sessions, sections, AI analysis and file text extraction."""
import pytest

import talencor.services.llm.resume_analyzer as analyzer_module
from talencor.services.resume_parser import FileValidationError, detect_format, extract_text

SESSION = "wizard-session-123"


@pytest.fixture
def llm_reply(monkeypatch):
    """Set ``llm_reply["data"]`` to control what the analyzer's model call returns."""
    state = {"data": {}, "calls": []}

    async def fake_chat_completion_json(client, system_prompt, user_content, **kwargs):
        state["calls"].append(user_content)
        return state["data"]

    monkeypatch.setattr(analyzer_module, "get_openai_client", lambda: object())
    monkeypatch.setattr(analyzer_module, "chat_completion_json", fake_chat_completion_json)
    return state


@pytest.fixture
def wizard(client):
    client.post(
        "/api/resume/session",
        json={"session_id": SESSION, "target_role": "Warehouse Lead", "industry": "Logistics"},
    )
    client.post(
        "/api/resume/section",
        json={"session_id": SESSION, "section_type": "summary", "content": "Reliable warehouse worker."},
    )
    client.post(
        "/api/resume/section",
        json={"session_id": SESSION, "section_type": "experience", "content": "Picked orders at Acme."},
    )
    return client


def test_create_session_is_idempotent(client):
    first = client.post("/api/resume/session", json={"session_id": SESSION, "target_role": "Picker"})
    assert first.status_code == 200
    second = client.post("/api/resume/session", json={"session_id": SESSION, "target_role": "Other"})
    assert second.json()["session"]["id"] == first.json()["session"]["id"]
    assert second.json()["session"]["target_role"] == "Picker"


def test_get_session(wizard):
    body = wizard.get(f"/api/resume/session/{SESSION}").json()
    assert [s["section_type"] for s in body["session"]["sections"]] == ["summary", "experience"]

    by_query = wizard.get("/api/resume/session", params={"session_id": SESSION}).json()
    assert by_query["session"]["session_id"] == SESSION


def test_missing_session(client):
    assert client.get("/api/resume/session", params={"session_id": "nope"}).json() == {
        "success": True,
        "session": None,
    }
    assert client.get("/api/resume/session/nope").status_code == 404
    resp = client.post(
        "/api/resume/section", json={"session_id": "nope", "section_type": "skills", "content": "Forklift"}
    )
    assert resp.status_code == 404


def test_section_type_validated(wizard):
    resp = wizard.post(
        "/api/resume/section", json={"session_id": SESSION, "section_type": "hobbies", "content": "Chess"}
    )
    assert resp.status_code == 400


def test_section_content_is_cleaned(wizard):
    resp = wizard.post(
        "/api/resume/section",
        json={"session_id": SESSION, "section_type": "skills", "content": "  Forklift certified\x01  "},
    )
    assert resp.status_code == 200
    assert resp.json()["section"]["original_content"] == "Forklift certified"


@pytest.mark.parametrize("content", ["   ", "  \x01\x02  ", "\n\t"])
def test_blank_section_content_rejected(wizard, content):
    resp = wizard.post(
        "/api/resume/section", json={"session_id": SESSION, "section_type": "skills", "content": content}
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"].endswith("content")


def test_analyze_stores_scores(wizard, llm_reply):
    llm_reply["data"] = {
        "overallScore": 72,
        "sections": {
            "summary": {"score": 80, "feedback": "Clear", "suggestions": ["Add years"]},
            "Experience": {"score": "65", "feedback": "Add metrics"},
        },
        "keywordOptimization": {"missing": ["WMS"]},
    }
    resp = wizard.post(f"/api/resume/analyze/{SESSION}")
    assert resp.status_code == 200
    analysis = resp.json()["analysis"]
    assert analysis["overall_score"] == 72
    assert analysis["sections"]["experience"]["score"] == 65
    assert analysis["keyword_optimization"] == {"missing": ["WMS"]}
    assert "Warehouse Lead" in llm_reply["calls"][0]

    session = wizard.get(f"/api/resume/session/{SESSION}").json()["session"]
    assert session["overall_score"] == 72
    scores = {s["section_type"]: (s["score"], s["feedback"]) for s in session["sections"]}
    assert scores == {"summary": (80, "Clear"), "experience": (65, "Add metrics")}


def test_analyze_requires_sections(client, llm_reply):
    client.post("/api/resume/session", json={"session_id": SESSION})
    resp = client.post(f"/api/resume/analyze/{SESSION}")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No sections found to analyze"
    assert client.post("/api/resume/analyze/unknown").status_code == 404


def test_analyze_without_api_key_is_503(wizard):
    assert wizard.post(f"/api/resume/analyze/{SESSION}").status_code == 503


def test_enhance_section(wizard, llm_reply):
    llm_reply["data"] = {
        "enhanced": "Dependable warehouse associate with 3 years of experience.",
        "improvements": ["Added tenure"],
        "reasoning": "Specifics stand out",
    }
    resp = wizard.post(f"/api/resume/enhance/{SESSION}/summary")
    assert resp.status_code == 200
    body = resp.json()
    assert body["section"]["enhanced_content"].startswith("Dependable")
    assert body["section"]["improvements"] == ["Added tenure"]
    assert body["enhancement"]["original"] == "Reliable warehouse worker."

    assert wizard.post(f"/api/resume/enhance/{SESSION}/skills").status_code == 404
    assert wizard.post("/api/resume/enhance/unknown/summary").status_code == 404


def test_new_content_clears_enhancement(wizard, llm_reply):
    llm_reply["data"] = {"enhanced": "Better summary", "improvements": ["x"]}
    wizard.post(f"/api/resume/enhance/{SESSION}/summary")

    resp = wizard.post(
        "/api/resume/section",
        json={"session_id": SESSION, "section_type": "summary", "content": "Rewritten by hand."},
    )
    section = resp.json()["section"]
    assert section["original_content"] == "Rewritten by hand."
    assert section["enhanced_content"] is None
    assert section["improvements"] is None

    sections = wizard.get(f"/api/resume/session/{SESSION}").json()["session"]["sections"]
    assert len(sections) == 2


def test_keyword_suggestions(wizard, llm_reply):
    llm_reply["data"] = {"keywords": ["WMS", "RF scanner"], "explanation": "Common in logistics"}
    resp = wizard.post(
        f"/api/resume/keywords/{SESSION}", json={"target_role": "Warehouse Lead", "industry": "Logistics"}
    )
    assert resp.status_code == 200
    assert resp.json()["keywords"] == {"keywords": ["WMS", "RF scanner"], "explanation": "Common in logistics"}
    assert "Picked orders at Acme." in llm_reply["calls"][0]


def test_keyword_suggestions_need_role_and_content(client, llm_reply):
    resp = client.post(f"/api/resume/keywords/{SESSION}", json={"target_role": "Lead"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Target role and industry are required for keyword suggestions"

    resp = client.post(f"/api/resume/keywords/{SESSION}", json={"target_role": "Lead", "industry": "Retail"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No resume content found for keyword analysis"


def test_extract_text_from_upload(client):
    resp = client.post(
        "/api/resume/extract-text",
        files={"file": ("resume.txt", b"Jane Doe\nForklift operator", "text/plain")},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "text": "Jane Doe\nForklift operator", "filename": "resume.txt"}


def test_extract_text_rejects_unknown_type(client):
    resp = client.post(
        "/api/resume/extract-text",
        files={"file": ("photo.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 64, "image/png")},
    )
    assert resp.status_code == 400
    assert "Invalid file type" in resp.json()["detail"]


def test_detect_format():
    assert detect_format(b"%PDF-1.7 rest of file", "application/pdf", "cv.pdf") == "pdf"
    assert detect_format(b"plain resume text", None, "cv.md") == "text"
    with pytest.raises(FileValidationError):
        detect_format(b"tiny", "text/plain", "cv.txt")
    with pytest.raises(FileValidationError):
        detect_format(b"binary\x00\x00data here", "text/plain", "cv.txt")


def test_extract_text_rejects_oversized(monkeypatch):
    from talencor.config import get_settings

    monkeypatch.setattr(get_settings(), "resume_max_size_mb", 1)
    with pytest.raises(FileValidationError, match="too large"):
        extract_text(b"a" * (1024 * 1024 + 1), "text/plain", "cv.txt")


def test_extract_text_rejects_blank_text():
    with pytest.raises(FileValidationError, match="No readable text"):
        extract_text(b"            \n\n   ", "text/plain", "cv.txt")


def test_extract_text_rejects_corrupt_docx(client):
    corrupt = b"PK\x03\x04word/document.xml" + b"not really a zip archive" * 8
    resp = client.post(
        "/api/resume/extract-text",
        files={"file": ("resume.docx", corrupt, "application/octet-stream")},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Could not read the uploaded file."
