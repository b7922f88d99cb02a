"""
Unit tests for app/services/job_extractor.py
"""

import pytest

from app.core.exceptions import ExtractionError
from app.services.job_extractor import (
    detect_international,
    detect_job_type,
    extract_job_fields,
    extract_job_fields_from_text,
    guess_title,
    normalize_lines,
    parse_date_iso,
    parse_duration_minutes,
    parse_integer,
)

SAMPLE_JOB = """
Senior Backend Engineer | Acme Robotics

Company: Acme Robotics
Location: Berlin (hybrid)
Employment Type: Full-time
Salary: EUR 85,000 per year
Start Date: 2030/03/01
Interview Duration: 1 hour 30 mins
Closing Date: 2030-01-31

About the role
We build the control plane for warehouse robots.
You will own services end to end.

Responsibilities:
- Design and operate REST APIs
- Mentor two junior engineers

Requirements:
• 5+ years of Python
• Production PostgreSQL experience

Technical Skills:
Python, FastAPI; SQL
Docker

Soft Skills:
- Communication

Benefits:
- Free lunch
"""


class TestParsers:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2030/03/01", "2030-03-01"),
            ("Starts on 2030-12-24 sharp", "2030-12-24"),
            ("2030-02-30", None),
            ("next month", None),
        ],
    )
    def test_parse_date_iso(self, value, expected):
        assert parse_date_iso(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [("85,000 per year", 85000), ("80k", 80000), ("up to 120 000", 120000), ("negotiable", None)],
    )
    def test_parse_integer(self, value, expected):
        assert parse_integer(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1 hour", 60),
            ("45 minutes", 45),
            ("1.5 hrs", 90),
            ("1 hour 30 mins", 90),
            ("an afternoon", None),
        ],
    )
    def test_parse_duration_minutes(self, value, expected):
        assert parse_duration_minutes(value) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Full Time position", "FULL_TIME"),
            ("part-time", "PART_TIME"),
            ("Summer internship", "INTERNSHIP"),
            ("6 month contract", "CONTRACT"),
            ("Permanent", None),
        ],
    )
    def test_detect_job_type(self, text, expected):
        assert detect_job_type(text) == expected

    def test_detect_international(self):
        assert detect_international("International applicants are welcome") is True
        assert detect_international("No visa sponsorship available") is False
        assert detect_international("Local role") is None

    def test_normalize_lines(self):
        assert normalize_lines("  a b \r\n\r\n c\r") == ["a b", "c"]

    def test_guess_title_skips_headers(self):
        assert guess_title(["Location: Remote", "Staff Engineer | Initech"]) == "Staff Engineer"


class TestExtractFromText:
    def test_minimal_document(self):
        suggested = extract_job_fields_from_text("Job Title: Backend Engineer\nLocation: Remote\n")

        assert suggested["title"] == "Backend Engineer"
        assert suggested["location"] == "Remote"
        assert suggested["remote_flexible"] is True
        assert "salary" not in suggested
        assert "description" not in suggested

    def test_full_document(self):
        suggested = extract_job_fields_from_text(SAMPLE_JOB)

        assert suggested["title"] == "Senior Backend Engineer"
        assert suggested["company_name"] == "Acme Robotics"
        assert suggested["location"] == "Berlin (hybrid)"
        assert suggested["job_type"] == "FULL_TIME"
        assert suggested["salary"] == 85000
        assert suggested["commencement_date"] == "2030-03-01"
        assert suggested["interview_duration"] == 90
        assert suggested["position_close_date"] == "2030-01-31"
        assert suggested["remote_flexible"] is True

        assert suggested["description"].startswith("We build the control plane")
        assert suggested["intro"] == suggested["description"][:300]
        assert suggested["responsibilities"] == ["Design and operate REST APIs", "Mentor two junior engineers"]
        assert suggested["requirements"] == ["5+ years of Python", "Production PostgreSQL experience"]
        assert suggested["skills_technical"] == [
            {"name": "Python", "weight": 50},
            {"name": "FastAPI", "weight": 50},
            {"name": "SQL", "weight": 50},
            {"name": "Docker", "weight": 50},
        ]
        assert suggested["skills_soft"] == [{"name": "Communication", "weight": 50}]
        assert "Free lunch" not in suggested["skills_soft"][0]["name"]
        assert suggested["other_details"]["raw_text_preview"].startswith("Senior Backend Engineer")

    def test_currency_amount_without_header(self):
        suggested = extract_job_fields_from_text("Data Analyst\nWe pay $95k plus bonus.\nTeam of 12 people.")
        assert suggested["salary"] == 95000

    def test_plain_numbers_are_not_a_salary(self):
        suggested = extract_job_fields_from_text("Data Analyst\nTeam of 12 people in 3 offices.")
        assert "salary" not in suggested

    def test_spaced_dash_separates_header(self):
        suggested = extract_job_fields_from_text("Salary - 90,000\nLocation – Berlin")
        assert suggested["salary"] == 90000
        assert suggested["location"] == "Berlin"

    def test_hyphenated_word_is_not_a_header(self):
        suggested = extract_job_fields_from_text(
            "Job Title\nBackend Engineer\nCompany-sponsored lunch every Friday."
        )
        assert suggested["title"] == "Backend Engineer"
        assert "company_name" not in suggested

    def test_hyphenated_word_does_not_end_a_section(self):
        suggested = extract_job_fields_from_text(
            "Description:\nWe build robots.\nCompany-sponsored lunch every Friday.\nRequirements:\n- Python"
        )
        assert suggested["description"] == "We build robots.\nCompany-sponsored lunch every Friday."
        assert suggested["requirements"] == ["Python"]

    def test_raw_preview_is_truncated(self):
        suggested = extract_job_fields_from_text("Data Analyst\n" + "x" * 5000)
        assert len(suggested["other_details"]["raw_text_preview"]) == 2000


class TestExtractFromPdf:
    def test_garbage_bytes(self):
        with pytest.raises(ExtractionError):
            extract_job_fields(b"\x00\x01 not a pdf at all")

    def test_empty_text_is_an_error(self, monkeypatch):
        monkeypatch.setattr("app.services.job_extractor.extract_text_from_pdf", lambda document: "   \n")
        with pytest.raises(ExtractionError):
            extract_job_fields(b"%PDF-1.4")

    def test_text_is_parsed(self, monkeypatch):
        monkeypatch.setattr(
            "app.services.job_extractor.extract_text_from_pdf",
            lambda document: "Job Title: Backend Engineer\nLocation: Remote",
        )
        assert extract_job_fields(b"%PDF-1.4")["title"] == "Backend Engineer"
