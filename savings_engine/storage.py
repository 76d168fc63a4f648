import streamlit as st


class StorageError(Exception):
    """Raised when the underlying key-value store cannot be read or written."""
    pass


class InMemoryStorage:
    """
    localStorage-style string store kept in a plain dict.
    Every backend exposes the same four calls: get / set / delete / keys.
    """

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = str(value)

    def delete(self, key):
        self._data.pop(key, None)

    def keys(self):
        return list(self._data.keys())


class SessionStateStorage(InMemoryStorage):
    """
    Lives for one browser session: the dict is parked in st.session_state,
    so drafts, keys and rate windows are never shared between visitors.
    """

    SESSION_KEY = "local_storage"

    def __init__(self):
        if self.SESSION_KEY not in st.session_state:
            st.session_state[self.SESSION_KEY] = {}
        self._data = st.session_state[self.SESSION_KEY]
