from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from repricing_tool import __version__
from repricing_tool.config.logging import configure_logging
from repricing_tool.api.products_api import router as products_router
from repricing_tool.api.batches_api import router as batches_router
from repricing_tool.api.state import get_state

configure_logging()

app = FastAPI(
    title="Repricing Tool API",
    description="Backend API for reviewing catalog prices and exporting approved batches",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(products_router)
app.include_router(batches_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "Repricing Tool API Active"}


@app.get("/system/status")
def get_status():
    state = get_state()
    return {
        "database": str(state.settings.database_path),
        "markup": state.settings.markup,
        "products": state.catalog.count_by_status(),
        "batches": len(state.exports.list_batches()),
        "backups": len(state.backups.list_backups()),
    }
