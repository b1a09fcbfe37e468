import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from internmatch.schemas.internship import InternshipPosting, SkippedPosting
from internmatch.schemas.student import StudentProfile

logger = logging.getLogger(__name__)

# Portal (Spanish) keys -> schema aliases
STUDENT_KEYS = {
    "legajo": "username",
    "nombre": "name",
    "carrera": "career",
    "anioCursado": "currentYear",
    "anio": "currentYear",
    "habilidadesBlandas": "softSkills",
    "habilidadesTecnicas": "technicalSkills",
    "idiomas": "languages",
}

POSTING_KEYS = {
    "titulo": "title",
    "empresa": "company",
    "ubicacion": "location",
    "modalidad": "modality",
    "duracion": "duration",
    "descripcion": "description",
    "carreras": "careers",
    "career": "careers",
    "anioCursado": "minYear",
    "requiredYear": "minYear",
    "habilidadesBlandas": "requiredSoftSkills",
    "habilidadesTecnicas": "requiredTechnicalSkills",
    "idiomas": "requiredLanguages",
}

REQUIREMENT_KEYS = {
    "softSkills": "requiredSoftSkills",
    "technicalSkills": "requiredTechnicalSkills",
    "languages": "requiredLanguages",
}


class LoaderError(Exception):
    """Raised when a snapshot file cannot be read as expected."""

    pass


def _normalize_keys(record: dict, aliases: dict[str, str]) -> dict:
    """Rename portal keys to schema aliases.

    Keys already in schema form win over their portal equivalents.
    """
    normalized = {key: value for key, value in record.items() if key not in aliases}
    for key, target in aliases.items():
        if key in record:
            normalized.setdefault(target, record[key])
    return normalized


def normalize_student(record: dict) -> dict:
    """Normalize a stored student record to StudentProfile aliases."""
    return _normalize_keys(record, STUDENT_KEYS)


def normalize_posting(record: dict) -> dict:
    """Normalize a stored posting to InternshipPosting aliases.

    Handles both the flat posting form and the nested `requirements` shape.
    """
    normalized = _normalize_keys(record, POSTING_KEYS)

    requirements = normalized.pop("requirements", None)
    if isinstance(requirements, dict):
        for key, target in REQUIREMENT_KEYS.items():
            if key in requirements:
                normalized.setdefault(target, requirements[key])

    return normalized


def _read_json(file_path: Path) -> Any:
    try:
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise LoaderError(f"File not found: {file_path}") from e
    except json.JSONDecodeError as e:
        raise LoaderError(f"Invalid JSON in {file_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise LoaderError(f"File is not valid UTF-8: {file_path}") from e
    except OSError as e:
        raise LoaderError(f"Cannot read {file_path}: {e.strerror or e}") from e


def _describe_errors(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
        for err in error.errors()
    )


def load_student(file_path: Path) -> StudentProfile:
    """Load the current student's profile from a JSON file.

    Args:
        file_path: Path to a JSON object with the student record.

    Returns:
        Validated StudentProfile.

    Raises:
        LoaderError: If the file is missing, not JSON, or not an object.
        ValidationError: If required fields are missing or malformed.
    """
    data = _read_json(file_path)
    if not isinstance(data, dict):
        raise LoaderError(f"Expected a JSON object in {file_path}")

    student = StudentProfile.model_validate(normalize_student(data))
    logger.info(f"Loaded student profile from {file_path} (career: {student.career})")
    return student


def parse_postings(
    records: list[Any],
) -> tuple[list[InternshipPosting], list[SkippedPosting]]:
    """Build postings from raw records, skipping the malformed ones.

    Args:
        records: Raw posting dicts.

    Returns:
        Tuple of (valid postings in source order, skipped records).
    """
    postings: list[InternshipPosting] = []
    skipped: list[SkippedPosting] = []

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            skipped.append(SkippedPosting(index=index, reason="record is not an object"))
            logger.warning(f"Skipping posting #{index}: record is not an object")
            continue

        posting_id = record.get("id")
        try:
            postings.append(InternshipPosting.model_validate(normalize_posting(record)))
        except ValidationError as e:
            reason = _describe_errors(e)
            skipped.append(
                SkippedPosting(
                    index=index,
                    posting_id=str(posting_id) if posting_id is not None else None,
                    reason=reason,
                )
            )
            logger.warning(f"Skipping posting #{index} (id: {posting_id}): {reason}")

    return postings, skipped


def load_postings(file_path: Path) -> tuple[list[InternshipPosting], list[SkippedPosting]]:
    """Load stored postings from a JSON file.

    Malformed postings are reported as skipped instead of failing the listing.

    Args:
        file_path: Path to a JSON array of posting records.

    Returns:
        Tuple of (valid postings, skipped records).

    Raises:
        LoaderError: If the file is missing, not JSON, or not an array.
    """
    data = _read_json(file_path)
    if not isinstance(data, list):
        raise LoaderError(f"Expected a JSON array of postings in {file_path}")

    postings, skipped = parse_postings(data)
    logger.info(
        f"Loaded {len(postings)} postings from {file_path} ({len(skipped)} skipped)"
    )
    return postings, skipped
