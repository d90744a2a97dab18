from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from geopap import config
from geopap.api.routers import imports
from geopap.logging_setup import setup_logging

setup_logging()

app = FastAPI(title="Geopaparazzi Import API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
def health():
    return {"ok": True}


app.include_router(imports.router, prefix="/imports", tags=["imports"])

# serve <data> so written datasets and copied media can be downloaded
config.DATA_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/data", StaticFiles(directory=str(config.DATA_DIR)), name="data")
