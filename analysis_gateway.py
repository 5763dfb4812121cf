# analysis_gateway.py
"""
Editorial performance analysis using Google Gemini.

Rows are packed into a compact pipe-delimited block, sent in a single request
together with a strict JSON response schema, and the reply is validated into
an AnalysisResult. All grouping and aggregation happens on the model side.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from constants import (
    DEFAULT_GEMINI_MODEL,
    EMPTY_RESPONSE_MESSAGE,
    ENTITY_NOT_FOUND_MESSAGE,
    GEMINI_TEMPERATURE,
    INVALID_API_KEY_MARKERS,
    TRACKED_KEYWORDS,
)
from errors import AnalysisError, ErrorKind
from models import AnalysisResult, ContentRow

logger = logging.getLogger(__name__)


# ============================================================================
# RESPONSE SCHEMA
# ============================================================================

def _aggregate_schema(key_field: str) -> Dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {
            key_field: {"type": "STRING"},
            "storyCount": {"type": "INTEGER"},
            "totalUsers": {"type": "INTEGER"},
            "usersPerStory": {"type": "NUMBER"},
        },
        "required": [key_field, "storyCount", "totalUsers", "usersPerStory"],
    }


def _string_list_schema() -> Dict[str, Any]:
    return {"type": "ARRAY", "items": {"type": "STRING"}}


def _extreme_schema() -> Dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {
            "theme": {"type": "STRING"},
            "metric": {"type": "STRING"},
            "value": {"type": "NUMBER"},
            "explanation": {"type": "STRING"},
            "count": {"type": "INTEGER"},
            "totalReach": {"type": "INTEGER"},
        },
        "required": ["theme", "metric", "value", "explanation", "count", "totalReach"],
    }


ANALYSIS_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "totalRecordsAnalyzed": {"type": "INTEGER"},
        "themes": {"type": "ARRAY", "items": _aggregate_schema("theme")},
        "keywords": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "theme": {"type": "STRING"},
                    "topKeywords": _string_list_schema(),
                    "topEntities": _string_list_schema(),
                },
                "required": ["theme", "topKeywords", "topEntities"],
            },
        },
        "keywordPerformance": {"type": "ARRAY", "items": _aggregate_schema("keyword")},
        "styles": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "style": {"type": "STRING"},
                    "avgUsersPerStory": {"type": "NUMBER"},
                    "notes": {"type": "STRING"},
                },
                "required": ["style", "avgUsersPerStory", "notes"],
            },
        },
        "recommendations": {
            "type": "OBJECT",
            "properties": {
                "increase": _string_list_schema(),
                "optimize": _string_list_schema(),
                "decrease": _string_list_schema(),
                "experiment": _string_list_schema(),
            },
            "required": ["increase", "optimize", "decrease", "experiment"],
        },
        "insights": _string_list_schema(),
        "topPerformer": _extreme_schema(),
        "bottomPerformer": _extreme_schema(),
    },
    "required": [
        "totalRecordsAnalyzed", "themes", "keywords", "keywordPerformance", "styles",
        "recommendations", "insights", "topPerformer", "bottomPerformer",
    ],
}


# ============================================================================
# REQUEST CONSTRUCTION
# ============================================================================

def serialize_rows(rows: List[ContentRow]) -> str:
    """
    Packs rows as 'index|headline|users' lines.

    Pipes inside headlines become spaces so every line keeps three columns.
    Indexes are 1-based.
    """
    return "\n".join(
        f"{index}|{row.headline.replace('|', ' ')}|{row.total_users}"
        for index, row in enumerate(rows, start=1)
    )


def build_analysis_prompt(rows: List[ContentRow]) -> str:
    record_count = len(rows)
    tracked = ", ".join(f'"{keyword}"' for keyword in TRACKED_KEYWORDS)

    return f"""
You are an Editorial Performance Analyst. I am providing you with a dataset of {record_count} content records.

CRITICAL: You MUST process and aggregate every single one of the {record_count} records. DO NOT sample. DO NOT truncate.

DATA (Index | Headline | Users):
{serialize_rows(rows)}

ANALYSIS REQUIREMENTS:
1. THEMES: Group ALL records into high-level themes. Calculate Count, Total Users, and Users Per Story.
2. KEYWORD PERFORMANCE: Analyze performance for keywords: {tracked}, and other top entities.
3. EXTREMES: Identify the single Top Performer and Bottom Performer by "Users Per Story".
4. VERIFICATION: Set "totalRecordsAnalyzed" to the exact number of unique records (rows) you processed.

Output a valid JSON object strictly following the schema. No markdown fences, no commentary.
"""


def create_gemini_client(api_key: str) -> genai.Client:
    """
    Build a Gemini client bound to one session's key.

    One client per analysis; the key is never stored in module state.
    """
    if not api_key:
        raise AnalysisError("No Gemini API key selected.", ErrorKind.UNAUTHORIZED)
    return genai.Client(api_key=api_key)


def build_generation_config(temperature: float = GEMINI_TEMPERATURE) -> types.GenerateContentConfig:
    """JSON-mode config bound to ANALYSIS_RESPONSE_SCHEMA."""
    return types.GenerateContentConfig(
        temperature=temperature,
        response_mime_type="application/json",
        response_schema=ANALYSIS_RESPONSE_SCHEMA,
    )


# ============================================================================
# RESPONSE HANDLING
# ============================================================================

def _response_text(response) -> str:
    # .text can raise ValueError when the reply carries no usable parts (e.g. blocked)
    try:
        return response.text or ""
    except ValueError:
        return ""


def parse_analysis_response(response_text: Optional[str]) -> AnalysisResult:
    """
    Parse Gemini's JSON reply into an AnalysisResult.

    Raises:
        AnalysisError: (kind INVALID) when the reply is empty, is not JSON,
            or does not match the response contract.
    """
    if not response_text or not response_text.strip():
        raise AnalysisError(EMPTY_RESPONSE_MESSAGE, ErrorKind.INVALID)

    try:
        payload = json.loads(response_text)
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Gemini returned invalid JSON: {e}", ErrorKind.INVALID) from e

    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as e:
        raise AnalysisError(
            f"Gemini response did not match the analysis schema: {e.error_count()} error(s)",
            ErrorKind.INVALID
        ) from e


def analyze_editorial_data(
    rows: List[ContentRow],
    api_key: str,
    client=None,
    model_name: str = DEFAULT_GEMINI_MODEL
) -> AnalysisResult:
    """
    Run one analysis request over every row.

    Args:
        rows: Validated content rows
        api_key: Key selected for this session
        client: Optional pre-built client (anything exposing models.generate_content)
        model_name: Gemini model identifier

    Returns:
        Fully populated AnalysisResult

    Not reentrant; callers must not overlap requests.
    """
    if not rows:
        raise AnalysisError("No rows to analyze.", ErrorKind.INVALID)

    if client is None:
        client = create_gemini_client(api_key)

    prompt = build_analysis_prompt(rows)
    logger.info("Requesting editorial analysis for %d records (%d prompt chars)", len(rows), len(prompt))

    response = client.models.generate_content(
        model=model_name,
        contents=prompt,
        config=build_generation_config(),
    )
    result = parse_analysis_response(_response_text(response))

    if result.total_records_analyzed != len(rows):
        logger.warning(
            "Gemini reported %d records analyzed, %d were sent",
            result.total_records_analyzed, len(rows)
        )
    return result


# ============================================================================
# ERROR CLASSIFICATION
# ============================================================================

UNAUTHORIZED_STATUS_CODES = {401, 403, 404}
TRANSIENT_STATUS_CODES = {408, 429}


def classify_error(error: BaseException) -> ErrorKind:
    """
    Map a failure from the analysis call onto an ErrorKind.

    SDK error codes are checked first. The upstream "Requested entity was not
    found" text is still honoured for errors that arrive untyped; if that
    wording changes, such errors fall through to TRANSIENT.
    """
    if isinstance(error, AnalysisError):
        return error.kind

    message = str(error)
    if ENTITY_NOT_FOUND_MESSAGE in message:
        return ErrorKind.UNAUTHORIZED

    if isinstance(error, genai_errors.ClientError):
        if error.code in UNAUTHORIZED_STATUS_CODES:
            return ErrorKind.UNAUTHORIZED
        if error.code in TRANSIENT_STATUS_CODES:
            return ErrorKind.TRANSIENT
        lowered = message.lower()
        if any(marker in lowered for marker in INVALID_API_KEY_MARKERS):
            return ErrorKind.UNAUTHORIZED
        return ErrorKind.INVALID

    return ErrorKind.TRANSIENT


def is_authorization_error(error: BaseException) -> bool:
    return classify_error(error) is ErrorKind.UNAUTHORIZED
