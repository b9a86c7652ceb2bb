from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Exchange Rate Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/rates_stub") if os.path.exists("/rates_stub") else Path(__file__).resolve().parents[1] / "rates_stub"

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/rates/latest")
def latest_rates(base: str = "USD"):
    file = DATA_DIR / f"latest_{base.upper()}.json"
    if not file.exists():
        raise HTTPException(status_code=404, detail="base currency not quoted")
    return JSONResponse(content=json.loads(file.read_text()))
