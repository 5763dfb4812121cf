# session.py
"""
Application controller state for the analyzer.

Works against any mutable mapping: st.session_state in the running app,
a plain dict in tests.
"""

import logging
from typing import Callable, List, MutableMapping

from analysis_gateway import classify_error
from constants import AUTH_ERROR_MESSAGE, GENERIC_ANALYSIS_ERROR_MESSAGE
from errors import ErrorKind
from key_gate import KeyGate
from models import AnalysisResult, ContentRow

logger = logging.getLogger(__name__)

# Keys holding ingested data and the analysis outcome; cleared on reset
APP_DATA_KEYS = ['content_rows', 'input_text', 'analysis_result']

# Keys for transient UI state
APP_UI_KEYS = ['is_analyzing', 'error_message']

default_values = {
    'content_rows': [],
    'input_text': '',
    'analysis_result': None,
    'is_analyzing': False,
    'error_message': None,
}

AnalyzeFn = Callable[[List[ContentRow], str], AnalysisResult]


def init_session_state(state: MutableMapping, key_gate: KeyGate) -> None:
    """Fill in defaults and check for an API key once per session."""
    for key in APP_DATA_KEYS + APP_UI_KEYS:
        if key not in state:
            default = default_values.get(key)
            state[key] = list(default) if isinstance(default, list) else default

    if 'has_key' not in state:
        state['has_key'] = key_gate.has_selected_api_key()


def run_analysis(state: MutableMapping, key_gate: KeyGate, analyze_fn: AnalyzeFn) -> bool:
    """
    Send the held rows for analysis once.

    Returns True when a new result replaced the old one. Calls made while a
    request is already in flight, or with no rows, are ignored.
    """
    rows = state.get('content_rows') or []
    if state.get('is_analyzing') or not rows:
        return False

    state['is_analyzing'] = True
    state['error_message'] = None
    try:
        result = analyze_fn(rows, key_gate.current_api_key())
    except Exception as e:
        logger.exception("Editorial analysis failed for %d rows", len(rows))
        if classify_error(e) is ErrorKind.UNAUTHORIZED:
            key_gate.revoke()
            state['error_message'] = AUTH_ERROR_MESSAGE
        else:
            state['error_message'] = GENERIC_ANALYSIS_ERROR_MESSAGE
        return False
    finally:
        state['is_analyzing'] = False

    state['analysis_result'] = result
    return True


def reset_analysis(state: MutableMapping) -> None:
    """Drop the result, the input text and the ingested rows."""
    state['analysis_result'] = None
    state['input_text'] = ''
    state['content_rows'] = []
