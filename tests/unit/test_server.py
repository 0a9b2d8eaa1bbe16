"""
Unit tests for the HTTP to_enu query
"""

import os
import sys

import pytest
from fastapi.testclient import TestClient

project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from common.types import Datum
from from_fix.enu import fix_to_point
from from_fix.server import app

client = TestClient(app)


class TestToENU:
    """Test cases for POST /to_enu"""

    def test_health(self):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok"}

    def test_matches_fix_to_point(self, make_fix):
        body = {
            "llh": {"lat": 45.001, "lon": -74.999, "alt_m": 105.0},
            "datum": {"lat": 45.0, "lon": -75.0, "alt_m": 100.0},
        }
        r = client.post("/to_enu", json=body)
        assert r.status_code == 200
        enu = r.json()["enu"]
        p = fix_to_point(make_fix(lat=45.001, lon=-74.999, alt_m=105.0), Datum(45.0, -75.0, 100.0))
        assert (enu["x"], enu["y"], enu["z"]) == pytest.approx((p.x, p.y, p.z))

    def test_repeatable(self):
        body = {"llh": {"lat": 10.0, "lon": 10.0}, "datum": {"lat": 10.0, "lon": 10.0}}
        assert client.post("/to_enu", json=body).json() == client.post("/to_enu", json=body).json()

    def test_invalid_latitude(self):
        body = {"llh": {"lat": 120.0, "lon": 0.0}, "datum": {"lat": 0.0, "lon": 0.0}}
        assert client.post("/to_enu", json=body).status_code == 422
