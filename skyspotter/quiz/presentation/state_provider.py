from abc import ABC, abstractmethod
from typing import Any

import streamlit as st


class IStateProvider(ABC):
    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def pop(self, key: str) -> Any:
        pass

    def setdefault(self, key: str, value: Any) -> Any:
        current = self.get(key)
        if current is None:
            self.set(key, value)
            return value
        return current


class StreamlitStateProvider(IStateProvider):
    """Per-browser-tab state, survives Streamlit reruns."""

    def get(self, key: str, default: Any = None) -> Any:
        return st.session_state.get(key, default)

    def set(self, key: str, value: Any) -> None:
        st.session_state[key] = value

    def pop(self, key: str) -> Any:
        return st.session_state.pop(key, None)


class DictStateProvider(IStateProvider):
    """Plain dict backend for scripts and tests."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def pop(self, key: str) -> Any:
        return self._data.pop(key, None)
