# key_gate.py
import logging
import os
from typing import Callable, MutableMapping, Optional

from constants import GEMINI_API_KEY_NAME

logger = logging.getLogger(__name__)


def streamlit_secret_lookup(name: str) -> Optional[str]:
    """Reads a value from st.secrets, returning None when no secrets file exists."""
    import streamlit as st
    try:
        return st.secrets.get(name)
    except FileNotFoundError:
        return None


class KeyGate:
    """
    Session-scoped API key state.

    Exposes the two host operations the app relies on: checking whether a key
    is selected and letting the user select one. The key lives in the session
    mapping handed in by the app controller, not in a process-wide global.
    """

    def __init__(
        self,
        state: MutableMapping,
        secret_lookup: Callable[[str], Optional[str]] = streamlit_secret_lookup,
        environ: Optional[MutableMapping] = None
    ):
        self._state = state
        self._secret_lookup = secret_lookup
        self._environ = os.environ if environ is None else environ

    def _configured_key(self) -> Optional[str]:
        return self._secret_lookup(GEMINI_API_KEY_NAME) or self._environ.get(GEMINI_API_KEY_NAME)

    def has_selected_api_key(self) -> bool:
        if self._state.get('api_key'):
            return True
        configured = self._configured_key()
        if configured:
            self._state['api_key'] = configured
            return True
        return False

    def open_select_key(self, key: str) -> None:
        # Optimistic: the key is not verified until the first analysis call
        self._state['api_key'] = (key or "").strip()
        self._state['has_key'] = True
        logger.info("API key selected for this session")

    def current_api_key(self) -> Optional[str]:
        return self._state.get('api_key')

    def revoke(self) -> None:
        self._state['api_key'] = None
        self._state['has_key'] = False
        logger.info("API key rejected; returning to key selection")
