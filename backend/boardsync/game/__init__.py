"""Shared board document: state layout, action parsing and the reducer."""

from .actions import parse_action
from .reducer import apply_action
from .state import GameState, initial_state

__all__ = ['GameState', 'apply_action', 'initial_state', 'parse_action']
