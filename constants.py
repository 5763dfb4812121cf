# constants.py

# --- Gemini Configuration ---
DEFAULT_GEMINI_MODEL = "gemini-3-pro-preview"
GEMINI_TEMPERATURE = 0.2
GEMINI_API_KEY_NAME = "GEMINI_API_KEY"
GEMINI_MODEL_KEY_NAME = "GEMINI_MODEL"
BILLING_DOCS_URL = "https://ai.google.dev/gemini-api/docs/billing"

# --- Keywords the analysis always drills into ---
TRACKED_KEYWORDS = ["Cancer", "Heart Attack"]

# --- Upstream phrasing that signals a bad or missing key ---
ENTITY_NOT_FOUND_MESSAGE = "Requested entity was not found"
INVALID_API_KEY_MARKERS = ["api key not valid", "api_key_invalid", "invalid api key"]

# --- User-Facing Messages ---
NO_VALID_DATA_MESSAGE = "No valid data found"
PARSE_ERROR_MESSAGE = "Parsing error. Check format: URL, Headline, Users."
EMPTY_RESPONSE_MESSAGE = "Gemini returned an empty response."
AUTH_ERROR_MESSAGE = "API Key issue. Please re-select your API key."
GENERIC_ANALYSIS_ERROR_MESSAGE = (
    "Analysis failed. Try checking your dataset for special characters or reducing row count slightly."
)

# --- Recommendation sections, in display order ---
RECOMMENDATION_SECTIONS = [
    ("Scale Up", "increase"),
    ("Optimize", "optimize"),
    ("De-prioritize", "decrease"),
    ("Experiments", "experiment"),
]
