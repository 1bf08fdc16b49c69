from __future__ import annotations
from typing import Optional
from vocabdeck.data.state_repo import StateRepo
from vocabdeck.data.vocab_repo import VocabRepo
from vocabdeck.service.selection_store import SelectionStore
from vocabdeck.service.study_session import StudyQueueSession
from vocabdeck.service.table_view import TableView
from vocabdeck.service.vocab_service import VocabService

class Workspace:
    """Everything one user has open: the table and, once started, a study session.

    Routes that use it are ``async def`` so their state changes and selection
    writes run one at a time on the event loop, in request order.
    """

    def __init__(self) -> None:
        self.vocab_service = VocabService(VocabRepo())
        self.selection_store = SelectionStore(StateRepo())
        self.table_view = TableView(self.vocab_service, self.selection_store)
        self.study_session: Optional[StudyQueueSession] = None

workspace = Workspace()

def get_workspace() -> Workspace:
    return workspace
