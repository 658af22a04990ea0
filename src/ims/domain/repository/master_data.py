"""Master-data resolver — an opaque name -> id lookup.

Colors and size labels are normalized to master records when catalog
entries are created.  The core only needs an id back; how the master
records are stored, slugged or searched is not its concern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class MasterDataResolver(ABC):

    @abstractmethod
    def resolve(self, kind: str, name: str) -> str:
        """Return the id of the *kind* record named *name*, creating it if needed."""
