from abc import ABC, abstractmethod
from typing import Sequence
from ignoretree.session import IgnoreSession


class Picker(ABC):
    """
    Abstract base class for front ends that edit the marks of an IgnoreSession.
    Concrete strategies implement `pick`, which mutates the session in place.
    """
    @abstractmethod
    def pick(self, session: IgnoreSession) -> bool:
        """
        Edit the session's tree and return True when the result should be saved.
        """

class ScriptedPicker(Picker):
    """
    Non-interactive picker: applies a fixed sequence of toggles in order,
    then always asks for a save.
    Unknown paths raise KeyError before anything is saved.
    """
    def __init__(self, toggles: Sequence[str]):
        self.toggles = list(toggles)

    def pick(self, session: IgnoreSession) -> bool:
        for path in self.toggles:
            session.toggle(path)
        return True
