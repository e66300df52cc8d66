import logging
import threading
from pathlib import Path
from typing import Dict, Any, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from pod_sorter.sorter.config import load_config, role_names, save_json, validate_config
from pod_sorter.sorter.pipeline import PodSorter
from pod_sorter.sorter.scoring import RoleScorer
from pod_sorter.store import CandidateStore, SubmissionError, validate_submission

logger = logging.getLogger(__name__)

# Initialize FastAPI
app = FastAPI(title="Pod Sorter API")

# Setup CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for local dev
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
CONFIG_PATH = DATA_DIR / "sorter_config.json"
STORE_PATH = DATA_DIR / "raw" / "responses.csv"

# One recompute at a time; upsert and recompute must not interleave
run_lock = threading.Lock()

# --- Models ---
class RoleCap(BaseModel):
    name: str
    cap: int

class ConfigUpdate(BaseModel):
    roles: List[RoleCap]
    over_role: str
    pods: List[str]
    signals: Optional[Dict[str, List[Dict[str, Any]]]] = None

class Submission(BaseModel):
    email: str
    name: Optional[str] = ""
    trait: Optional[str] = ""
    preference: Optional[str] = ""
    tags: List[str] = []
    aspiration: Optional[str] = ""

# --- Helpers ---
def recompute(store: CandidateStore, config: Dict[str, Any]) -> Dict[str, Any]:
    """Full recompute over the current store contents, written back in place."""
    sorter = PodSorter(config)
    results = sorter.run(store.candidates())
    store.write_results(results, role_names(config))
    store.save()
    summary = sorter.summary(results)
    logger.info("Recomputed %d candidates, %d floaters", summary['candidates'], summary['floaters'])
    return {"results": results, "summary": summary}

# --- Endpoints ---

@app.get("/api/config")
def get_config():
    return load_config(CONFIG_PATH)

@app.post("/api/config")
def update_config(update: ConfigUpdate):
    config = load_config(CONFIG_PATH)
    config["roles"] = [r.model_dump() for r in update.roles]
    config["over_role"] = update.over_role
    config["pods"] = update.pods
    if update.signals is not None:
        config["signals"] = update.signals
    else:
        # Keep signals only for roles that survived the update
        names = role_names(config)
        config["signals"] = {role: s for role, s in config.get("signals", {}).items() if role in names}
    try:
        validate_config(config)
        RoleScorer(config["signals"], role_names(config))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    save_json(config, CONFIG_PATH)
    return {"status": "updated", "config": config}

@app.post("/api/submit")
def submit(submission: Submission):
    config = load_config(CONFIG_PATH)
    data = submission.model_dump()
    try:
        email = validate_submission(data, config.get("email_domain_pattern"), config.get("allow_list"))
    except SubmissionError as e:
        logger.warning("Rejected submission: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    with run_lock:
        store = CandidateStore(STORE_PATH)
        store.load()
        created = store.upsert(data)
        outcome = recompute(store, config)

    logger.info("%s submission for %s", "New" if created else "Updated", email)
    row = next(r for r in outcome["results"] if r["email"] == email)
    return {"status": "created" if created else "updated", "result": row, "summary": outcome["summary"]}

@app.post("/api/run/recompute")
def run_recompute():
    config = load_config(CONFIG_PATH)
    with run_lock:
        store = CandidateStore(STORE_PATH)
        store.load()
        outcome = recompute(store, config)
    return {"status": "success", "summary": outcome["summary"]}

@app.get("/api/results")
def get_results():
    config = load_config(CONFIG_PATH)
    with run_lock:
        store = CandidateStore(STORE_PATH)
        store.load()
        results = PodSorter(config).run(store.candidates())
    return {"results": results}

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
