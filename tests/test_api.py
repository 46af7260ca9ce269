"""
Tests API — projets, templates, bundles, aperçu CSV
"""
import sys, os, io, json, zipfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def client(tmp_path):
    """Client de test avec DB SQLite temporaire."""
    os.environ["LP_DB_PATH"] = str(tmp_path / "test.db")

    from lp_studio.api.main import app
    from lp_studio.database import init_db
    init_db(os.environ["LP_DB_PATH"])

    with TestClient(app) as c:
        yield c


def _project(name="API LP"):
    return {
        "meta": {"projectName": name},
        "sections": [
            {"id": "hero", "type": "heroImage", "data": {"imageUrl": "https://example.com/a.png"}},
            {"id": "hero", "type": "faq", "data": {}},
        ],
    }


CSV = (
    "店舗ID,店舗名,郵便番号,住所,都道府県,駐車場\n"
    "1,本店,100-0001,千代田,東京都,○\n"
    "1,支店,100-0002,中央,東京都,×\n"
    "2,,100-0003,港,東京都,\n"
)


# ── Santé / templates ─────────────────────────────────────────────────────

class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["service"] == "lp_studio"

    def test_templates(self, client):
        r = client.get("/api/templates")
        assert r.status_code == 200
        assert "campaign" in [t["id"] for t in r.json()]

    def test_from_template(self, client):
        r = client.post("/api/projects/from-template", json={"templateId": "point", "projectName": "Pts"})
        assert r.status_code == 200
        data = r.json()
        assert data["meta"]["projectName"] == "Pts"
        assert data["meta"]["templateType"] == "point"
        assert "couponFlow" not in [s["type"] for s in data["sections"]]

    def test_from_template_unknown(self, client):
        r = client.post("/api/projects/from-template", json={"templateId": "nope"})
        assert r.status_code == 404


# ── Normalisation ─────────────────────────────────────────────────────────

class TestNormalize:
    def test_normalize(self, client):
        r = client.post("/api/projects/normalize", json=_project())
        assert r.status_code == 200
        data = r.json()
        assert [s["id"] for s in data["sections"]] == ["hero", "hero_2"]
        assert data["settings"]["backgrounds"]["page"] == {"type": "solid", "color": "#ffffff"}

    def test_normalize_rejects_non_project(self, client):
        r = client.post("/api/projects/normalize", json=[1, 2])
        assert r.status_code == 400
        r = client.post("/api/projects/normalize", json={"sections": []})
        assert r.status_code == 400


# ── Persistance ───────────────────────────────────────────────────────────

class TestProjects:
    def test_get_missing(self, client):
        assert client.get("/api/projects/absent").status_code == 404

    def test_put_get_snapshots(self, client):
        r = client.put("/api/projects/p1", json=_project("v1"))
        assert r.status_code == 200
        assert r.json()["sectionCount"] == 2
        assert client.get("/api/projects/p1/snapshots").json() == []

        client.put("/api/projects/p1", json=_project("v2"))
        r = client.get("/api/projects/p1")
        assert r.status_code == 200
        assert r.json()["data"]["meta"]["projectName"] == "v2"
        assert r.json()["id"] == "p1"

        snapshots = client.get("/api/projects/p1/snapshots").json()
        assert len(snapshots) == 1
        assert snapshots[0]["projectId"] == "p1"

    def test_delete(self, client):
        client.put("/api/projects/p1", json=_project("v1"))
        client.put("/api/projects/p1", json=_project("v2"))
        r = client.delete("/api/projects/p1")
        assert r.status_code == 200
        assert r.json() == {"deleted": "p1"}
        assert client.get("/api/projects/p1").status_code == 404
        assert client.get("/api/projects/p1/snapshots").json() == []
        assert client.delete("/api/projects/p1").status_code == 404

    def test_put_invalid(self, client):
        r = client.put("/api/projects/p1", json={"meta": {}, "sections": "nope"})
        assert r.status_code == 400


# ── Bundles ───────────────────────────────────────────────────────────────

class TestBundles:
    def test_encode_then_decode(self, client):
        r = client.post("/api/bundles/encode", json=_project("Summer Sale!"))
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/zip"
        assert 'filename="summer-sale.zip"' in r.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(r.content)) as zf:
            assert zf.namelist()[0] == "project.json"

        r = client.post("/api/bundles/decode", files={"file": ("lp.zip", r.content, "application/zip")})
        assert r.status_code == 200
        data = r.json()
        assert data["missingAssets"] == []
        assert data["project"]["meta"]["projectName"] == "Summer Sale!"
        types = [s["type"] for s in data["project"]["sections"]]
        assert types[0] == "brandBar" and "faq" in types

    def test_encode_japanese_name_falls_back(self, client):
        r = client.post("/api/bundles/encode", json=_project("夏のキャンペーン"))
        assert 'filename="project.zip"' in r.headers["content-disposition"]

    def test_decode_not_a_zip(self, client):
        r = client.post("/api/bundles/decode", files={"file": ("x.zip", b"hello", "application/zip")})
        assert r.status_code == 400

    def test_decode_static_site(self, client):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("index.html", "<html></html>")
        r = client.post("/api/bundles/decode", files={"file": ("site.zip", buf.getvalue(), "application/zip")})
        assert r.status_code == 400
        assert "site statique" in r.json()["detail"]

    def test_decode_corrupt_entry(self, client):
        manifest = json.dumps({"meta": {}, "sections": []}).encode("utf-8")
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("project.json", manifest)
        data = buf.getvalue()
        index = data.index(manifest)
        data = data[:index] + bytes([data[index] ^ 0xFF]) + data[index + 1:]
        r = client.post("/api/bundles/decode", files={"file": ("lp.zip", data, "application/zip")})
        assert r.status_code == 400
        assert "illisible" in r.json()["detail"]

    def test_decode_empty_upload(self, client):
        r = client.post("/api/bundles/decode", files={"file": ("x.zip", b"", "application/zip")})
        assert r.status_code == 400

    def test_decode_missing_assets(self, client):
        manifest = {"meta": {}, "sections": [], "assets": [{"id": "a1", "filename": "a.png", "path": "assets/images/a.png"}]}
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("project.json", json.dumps(manifest))
        r = client.post("/api/bundles/decode", files={"file": ("lp.zip", buf.getvalue(), "application/zip")})
        assert r.status_code == 200
        assert r.json()["missingAssets"] == ["a1"]
        assert r.json()["warnings"][0]["path"] == "assets/images/a.png"


# ── Aperçu CSV ────────────────────────────────────────────────────────────

class TestStorePreview:
    def test_preview(self, client):
        r = client.post(
            "/api/stores/preview",
            files={"file": ("stores.csv", CSV.encode("utf-8"), "text/csv")},
            data={"previewSize": "2"},
        )
        assert r.status_code == 200
        data = r.json()
        summary = data["preview"]["summary"]
        assert summary["totalRows"] == 3
        assert summary["invalidRows"] == 1
        assert summary["duplicateIdCount"] == 1
        assert len(data["preview"]["previewRows"]) == 2
        assert data["storeTable"]["extraColumns"] == ["駐車場"]
        assert data["storeLabels"]["駐車場"]["displayName"] == "駐車場"

    def test_preview_shift_jis(self, client):
        r = client.post("/api/stores/preview", files={"file": ("s.csv", CSV.encode("cp932"), "text/csv")})
        assert r.status_code == 200
        assert r.json()["preview"]["summary"]["totalRows"] == 3
