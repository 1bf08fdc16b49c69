from __future__ import annotations
from fastapi import FastAPI

from vocabdeck.config import settings
from vocabdeck.db.database import init_db
from vocabdeck.logging_config import setup_logging
from vocabdeck.web import dependencies
from vocabdeck.web.routers import columns, flashcards, vocabulary

app = FastAPI(title="Vocabdeck")

@app.on_event("startup")
def on_startup() -> None:
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    init_db()
    dependencies.get_workspace().table_view.mount()

@app.on_event("shutdown")
def on_shutdown() -> None:
    dependencies.get_workspace().table_view.close()

app.include_router(vocabulary.router)
app.include_router(columns.router)
app.include_router(flashcards.router)
