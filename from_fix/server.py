from __future__ import annotations

"""
Stateless "to ENU" query over HTTP.

  POST /to_enu  {"llh": {"lat", "lon", "alt_m"}, "datum": {"lat", "lon", "alt_m"}}
             -> {"enu": {"x", "y", "z"}}

Run:
  python -m from_fix.server  (or: uvicorn from_fix.server:app)
"""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from common.types import Datum, GeodeticFix
from common.utils import iso_now_ms
from from_fix.enu import fix_to_point


class LLH(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)
    alt_m: float = 0.0


class ToENURequest(BaseModel):
    llh: LLH
    datum: LLH


class ENU(BaseModel):
    x: float
    y: float
    z: float


class ToENUResponse(BaseModel):
    enu: ENU


app = FastAPI(title="from_fix ENU API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/to_enu", response_model=ToENUResponse)
def to_enu(req: ToENURequest) -> ToENUResponse:
    fix = GeodeticFix(
        ts=iso_now_ms(),
        lat=req.llh.lat,
        lon=req.llh.lon,
        alt_m=req.llh.alt_m,
        position_covariance=[0.0, 0.0, 0.0],
    )
    datum = Datum(lat=req.datum.lat, lon=req.datum.lon, alt_m=req.datum.alt_m)
    p = fix_to_point(fix, datum)
    return ToENUResponse(enu=ENU(x=p.x, y=p.y, z=p.z))


# -------- local dev entrypoint --------
if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8001)
