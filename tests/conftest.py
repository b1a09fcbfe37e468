"""Shared pytest fixtures for all tests."""

import json

import pytest

SAMPLE_STUDENT = {
    "username": "28764",
    "career": "sistemas",
    "currentYear": 4,
    "technicalSkills": {"react": "Básico"},
    "softSkills": {},
    "languages": {},
}

SAMPLE_POSTINGS = [
    {
        "id": "p-1",
        "title": "Desarrollador Frontend Jr.",
        "company": "Tech Solutions Inc.",
        "location": "Remoto",
        "area": "dev-web",
        "duration": "6 meses",
        "careers": ["sistemas"],
        "minYear": 3,
        "requiredTechnicalSkills": {"react": True, "nodejs": True},
    },
    {
        "id": "p-2",
        "title": "Analista de Procesos Químicos",
        "company": "ChemCorp",
        "location": "Resistencia, Chaco",
        "area": "procesos",
        "duration": "3 meses",
        "careers": ["quimica"],
        "minYear": 5,
    },
    {
        "id": "p-3",
        "title": "Soporte Técnico",
        "company": "Redes SA",
        "location": "Corrientes",
        "area": "infra",
        "careers": ["sistemas"],
        "minYear": 2,
    },
]


@pytest.fixture
def student_file(tmp_path):
    """Write the sample student profile to a temporary JSON file."""
    file_path = tmp_path / "student.json"
    file_path.write_text(json.dumps(SAMPLE_STUDENT), encoding="utf-8")
    return file_path


@pytest.fixture
def postings_file(tmp_path):
    """Write the sample postings to a temporary JSON file."""
    file_path = tmp_path / "internships.json"
    file_path.write_text(json.dumps(SAMPLE_POSTINGS), encoding="utf-8")
    return file_path


@pytest.fixture
def snapshot_files(student_file, postings_file):
    """Both snapshot files for pipeline and CLI tests."""
    yield {"student": student_file, "postings": postings_file}
